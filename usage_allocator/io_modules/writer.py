import polars as pl
from pathlib import Path

def write_csv(df: pl.DataFrame, file_path: Path, logger=None) -> None:
    try:
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        df.write_csv(file_path)
    except Exception:
        if logger:
            logger.error("Failed to write CSV: %s", file_path, exc_info=True)
        raise
