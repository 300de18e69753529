import polars as pl
from pathlib import Path

def read_csv(file_path: Path, logger=None):
    try:
        # ids stay text, quantities are coerced later
        return pl.read_csv(file_path, infer_schema_length=0)
    except Exception:
        if logger:
            logger.error("Failed to read CSV: %s", file_path, exc_info=True)
        raise
