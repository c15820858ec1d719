"""Checks the request schemas and that the documented sample bodies satisfy them."""

import sys

from jsonschema import ValidationError

from bidding_platform.validation.validator import get_schema_registry

SAMPLE_BODIES = {
    "item_create": {"name": "Vintage Watch", "starting_price": 100.0, "duration_hours": 24},
    "bid": {"bidder_id": "john_doe", "amount": 150.0},
    "user_registration": {"bidder_id": "john_doe"},
}


def validate() -> int:
    registry = get_schema_registry()
    failures = 0
    for name in registry.names():
        sample = SAMPLE_BODIES.get(name)
        if sample is None:
            print(f"{name}: no sample body")
            failures += 1
            continue
        try:
            registry.validate(name, sample)
        except ValidationError as exc:
            print(f"{name}: {exc.message}")
            failures += 1
    return failures


if __name__ == "__main__":
    sys.exit(1 if validate() else 0)
