#!/usr/bin/env python3
"""Validate catalog and vehicle YAML files against their schemas."""
import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import validate, ValidationError

SCHEMA_DIR = Path(__file__).parent / "autocare" / "schemas"
SCHEMA_KINDS = ("catalog", "vehicle")


def load_schema(kind: str) -> dict:
    """Load the JSON schema for a file kind ('catalog' or 'vehicle')."""
    if kind not in SCHEMA_KINDS:
        raise ValueError(f"Unknown schema kind '{kind}'")
    with open(SCHEMA_DIR / f"{kind}.yaml") as f:
        return yaml.safe_load(f)


def detect_kind(data) -> Optional[str]:
    """Guess the file kind from its top-level keys."""
    if not isinstance(data, dict):
        return None
    if "vehicle" in data:
        return "vehicle"
    if "items" in data or "overrides" in data:
        return "catalog"
    return None


def validate_file(filepath: Path, kind: Optional[str] = None) -> List[str]:
    """Validate a single YAML file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            data = yaml.safe_load(f)
        kind = kind or detect_kind(data)
        if kind is None:
            return ["Error: cannot tell whether this is a catalog or vehicle file"]
        validate(instance=data, schema=load_schema(kind))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv: Optional[List[str]] = None):
    """Validate each file given on the command line."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("files", type=Path, nargs="+", help="YAML files to check")
    parser.add_argument(
        "--kind",
        choices=SCHEMA_KINDS,
        help="File kind (default: detect from top-level keys)",
    )
    args = parser.parse_args(argv)

    all_valid = True
    for filepath in args.files:
        errors = validate_file(filepath, args.kind)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
