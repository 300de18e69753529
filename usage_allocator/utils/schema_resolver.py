import polars as pl
import re

class SchemaResolver:

    @staticmethod
    def _normalize(col: str) -> str:
        """
        Canonical column representation for comparison:
        - strip leading/trailing spaces
        - lowercase
        - collapse multiple spaces
        """
        col = col.strip().lower()
        col = re.sub(r"\s+", " ", col)
        return col

    @staticmethod
    def resolve(
        df: pl.DataFrame,
        schema_cfg: dict,
        required_keys: list,
        df_name: str,
        logger,
        optional_keys: list = None
    ) -> pl.DataFrame:
        """
        - Validates required columns (case/space insensitive)
        - Renames to semantic names (clean, canonical)
        - Keeps optional columns when both configured and present
        - Drops extra columns
        """

        # Validate schema config
        missing = [k for k in required_keys if k not in schema_cfg]
        if missing:
            logger.error("Schema config missing keys for %s: %s", df_name, missing)
            raise ValueError("Invalid schema configuration")

        normalized_df_cols = {
            SchemaResolver._normalize(c): c for c in df.columns
        }

        rename_map = {}
        selected = []

        for key in required_keys:
            expected_col = schema_cfg[key]
            norm_expected = SchemaResolver._normalize(expected_col)

            if norm_expected not in normalized_df_cols:
                logger.error(
                    "Missing column '%s' in %s dataframe (after normalization)",
                    expected_col, df_name
                )
                raise ValueError("Input file schema mismatch")

            actual_col = normalized_df_cols[norm_expected]

            if df[actual_col].null_count() == df.height:
                logger.warning("Column '%s' in %s is completely empty", actual_col, df_name)

            rename_map[actual_col] = key
            selected.append(key)

        for key in optional_keys or []:
            if key not in schema_cfg or key in selected:
                continue
            norm_expected = SchemaResolver._normalize(schema_cfg[key])
            if norm_expected not in normalized_df_cols:
                logger.debug("Optional column '%s' not present in %s", schema_cfg[key], df_name)
                continue
            rename_map[normalized_df_cols[norm_expected]] = key
            selected.append(key)

        df = df.rename(rename_map)
        df = df.select(selected)
        logger.debug("%s schema resolved. Columns: %s", df_name, df.columns)

        return df
