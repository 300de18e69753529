import argparse
import sys
from pathlib import Path

import polars as pl

from usage_allocator.io_modules.config_reader import read_config, validate_config
from usage_allocator.pipeline.allocation_pipeline import UsageAllocationPipeline
from usage_allocator.pipeline.strategy_registry import USAGE_ALLOCATORS
from usage_allocator.utils.logger import EngineLogger


def load_run_config(config_path: Path) -> dict:
    config = validate_config(read_config(config_path), known_types=USAGE_ALLOCATORS)
    # Relative base paths are taken from the config file's folder
    base_path = Path(config["base_path"])
    if not base_path.is_absolute():
        config["base_path"] = str((Path(config_path).parent / base_path).resolve())
    return config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Reconstruct consumed quantity per material purchase from usage exports."
    )
    parser.add_argument("--config", required=True, type=Path, help="Path to config.yaml")
    args = parser.parse_args(argv)

    # 1. Load config
    try:
        config = load_run_config(args.config)
    except (OSError, ValueError) as e:
        print(f"Invalid config {args.config}: {e}", file=sys.stderr)
        return 1

    # 2. Logger
    logger = EngineLogger(
        base_path=config["base_path"],
        client=config.get("client", "UNKNOWN"),
        level=config.get("log_level", "INFO")
    )

    # 3. Run pipeline
    try:
        UsageAllocationPipeline(config, logger).run()
    except (ValueError, OSError, pl.exceptions.PolarsError) as e:
        logger.error("Run failed: %s", str(e), exc_info=True)
        return 1
    finally:
        logger.write_run_footer()
        logger.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
