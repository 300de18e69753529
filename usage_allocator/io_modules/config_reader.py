import yaml
from pathlib import Path

REQUIRED_KEYS = ["base_path", "allocation", "schemas"]
REQUIRED_ALLOCATION_KEYS = ["type", "input_source", "output_path", "csv_inputs"]


def read_config(config_path: Path) -> dict:
    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def validate_config(config: dict, known_types=None) -> dict:
    """
    Checks the keys the pipeline relies on.
    Raises ValueError naming the first problem found.
    """
    for key in REQUIRED_KEYS:
        if key not in config:
            raise ValueError(f"Invalid config: missing '{key}'")

    allocation = config["allocation"]
    for key in REQUIRED_ALLOCATION_KEYS:
        if key not in allocation:
            raise ValueError(f"Invalid config: missing 'allocation.{key}'")

    for src in ("purchase", "usage"):
        if src not in allocation["csv_inputs"]:
            raise ValueError(f"Invalid config: missing 'allocation.csv_inputs.{src}'")
        if src not in config["schemas"]:
            raise ValueError(f"Invalid config: missing 'schemas.{src}'")

    if known_types is not None and allocation["type"] not in known_types:
        raise ValueError(f"Unsupported Usage Allocation type: {allocation['type']}")

    return config
