from importlib import resources

import pytest
import yaml

from usage_allocator.io_modules.config_reader import read_config, validate_config
from usage_allocator.pipeline.strategy_registry import USAGE_ALLOCATORS


def test_bundled_config_is_valid():
    path = resources.files("usage_allocator") / "config" / "config.yaml"
    with resources.as_file(path) as config_path:
        config = read_config(config_path)

    assert validate_config(config, known_types=USAGE_ALLOCATORS) is config
    assert config["allocation"]["type"] == "fifo"


def test_read_config_round_trip(tmp_path, config):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config))

    assert read_config(path) == config


def test_empty_config_file_reads_as_empty_dict(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert read_config(path) == {}


@pytest.mark.parametrize("mutate, message", [
    (lambda c: c.pop("schemas"), "missing 'schemas'"),
    (lambda c: c["allocation"].pop("csv_inputs"), "missing 'allocation.csv_inputs'"),
    (lambda c: c["allocation"]["csv_inputs"].pop("usage"), "allocation.csv_inputs.usage"),
    (lambda c: c["schemas"].pop("purchase"), "schemas.purchase"),
    (lambda c: c["allocation"].update(type="lifo"), "Unsupported Usage Allocation type: lifo"),
])
def test_validate_config_errors(config, mutate, message):
    mutate(config)

    with pytest.raises(ValueError, match=message):
        validate_config(config, known_types=USAGE_ALLOCATORS)
