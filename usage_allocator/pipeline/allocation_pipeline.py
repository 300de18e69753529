from pathlib import Path
import polars as pl

from usage_allocator.common.capacity_ledger import CapacityLedger
from usage_allocator.io_modules.reader import read_csv
from usage_allocator.io_modules.writer import write_csv
from usage_allocator.pipeline.strategy_registry import USAGE_ALLOCATORS
from usage_allocator.reports.consumption_summary import (
    summarize_materials,
    summarize_purchases,
    usage_map_to_frame,
)
from usage_allocator.utils.schema_resolver import SchemaResolver

OPTIONAL_PURCHASE_COLUMNS = ["consumed_quantity", "remaining_quantity"]

USAGE_MAP_FILE = "purchase_usage_map.csv"
PURCHASE_SUMMARY_FILE = "purchase_consumption.csv"
MATERIAL_SUMMARY_FILE = "material_consumption.csv"


class UsageAllocationPipeline:
    def __init__(self, config, logger):
        self.config = config
        self.logger = logger

    def run(self):
        alloc_cfg = self.config["allocation"]
        alloc_type = alloc_cfg["type"]
        allocator_cls = USAGE_ALLOCATORS.get(alloc_type)
        if not allocator_cls:
            self.logger.error("Unsupported Usage Allocation type: %s", alloc_type)
            raise ValueError(f"Unsupported Usage Allocation type: {alloc_type}")

        self.logger.info("Usage Allocation started for %s Allocation", alloc_type.upper())

        data = self._read_inputs(allocator_cls)
        data = self._clean_inputs(data)
        data = self._run_usage_allocation(allocator_cls, data)
        data = self._build_summaries(data)
        self._write_outputs(data)

        self.logger.info("Usage Allocation Completed.")
        return data

    def _read_inputs(self, allocator_cls) -> dict:
        self.logger.info("Reading Input Files...")
        alloc_cfg = self.config["allocation"]
        base_path = Path(self.config["base_path"])
        schemas = self.config["schemas"]

        input_root = base_path / alloc_cfg["input_source"]
        csv_cfg = alloc_cfg["csv_inputs"]
        sort_col = alloc_cfg.get("sort_purchases_by")

        data = {}
        for src, cols in allocator_cls.resolved_required_schemas().items():
            optional = []
            if src == "purchase":
                optional = OPTIONAL_PURCHASE_COLUMNS + ([sort_col] if sort_col else [])

            raw_df = read_csv(input_root / csv_cfg[src], logger=self.logger)
            data[f"{src}_df"] = SchemaResolver.resolve(
                df=raw_df,
                schema_cfg=schemas[src],
                required_keys=cols,
                df_name=f"{src.upper()} FILE",
                logger=self.logger,
                optional_keys=optional
            )
            self.logger.info("%s file read (rows=%d)", src.capitalize(), raw_df.height)

        self.logger.info("All Input Files Read Successfully")
        return data

    # -------- internal pipeline steps --------

    @staticmethod
    def _clean_id(col: str) -> pl.Expr:
        stripped = pl.col(col).cast(pl.Utf8).str.strip_chars()
        return (
            pl.when(stripped == "")
            .then(pl.lit(None, dtype=pl.Utf8))
            .otherwise(stripped)
            .alias(col)
        )

    def _clean_inputs(self, data):
        purchase_df = data["purchase_df"].with_columns([
            self._clean_id("id"),
            self._clean_id("material_id"),
        ])
        usage_df = data["usage_df"].with_columns([
            self._clean_id("purchase_id"),
            self._clean_id("material_id"),
        ])

        sort_col = self.config["allocation"].get("sort_purchases_by")
        if sort_col:
            if sort_col in purchase_df.columns:
                purchase_df = purchase_df.sort(sort_col, maintain_order=True, nulls_last=True)
                self.logger.info("Purchases sorted oldest-first by '%s'", sort_col)
            else:
                self.logger.warning(
                    "Sort column '%s' not found in purchases; using file order", sort_col
                )

        dropped = purchase_df.filter(pl.col("id").is_null()).height
        if dropped:
            self.logger.warning("Ignoring %d purchase rows without an id", dropped)
            purchase_df = purchase_df.filter(pl.col("id").is_not_null())

        self.logger.info("PURCHASE & USAGE Data Cleaned.")
        data["purchase_df"] = purchase_df
        data["usage_df"] = usage_df
        return data

    def _run_usage_allocation(self, allocator_cls, data):
        purchase_rows = list(data["purchase_df"].iter_rows(named=True))
        usage_rows = list(data["usage_df"].iter_rows(named=True))

        ledger = CapacityLedger(logger=self.logger)
        ledger.load_purchases(purchase_rows)
        self.logger.info(
            "Loaded %d purchases across %d materials in Capacity Ledger.",
            len(ledger.capacity_by_purchase), len(ledger.purchase_queue_by_material)
        )

        allocator = allocator_cls(
            usage_rows,
            ledger,
            config=self.config["allocation"],
            logger=self.logger
        )
        self.logger.info("Running Usage Allocation over %d usage rows...", len(usage_rows))
        data["usage_map"] = allocator.allocate()
        data["purchase_rows"] = purchase_rows
        return data

    def _build_summaries(self, data):
        usage_map = data["usage_map"]
        purchase_summary_df = summarize_purchases(data["purchase_rows"], usage_map)
        material_summary_df = summarize_materials(purchase_summary_df)

        over = purchase_summary_df.filter(pl.col("over_consumed")).height
        if over:
            self.logger.warning("%d purchases consumed beyond purchased quantity", over)

        data["usage_map_df"] = usage_map_to_frame(usage_map)
        data["purchase_consumption_df"] = purchase_summary_df
        data["material_consumption_df"] = material_summary_df
        return data

    def _round(self, df: pl.DataFrame) -> pl.DataFrame:
        decimals = self.config["allocation"].get("round_output")
        if decimals is None:
            return df
        float_cols = [c for c, dtype in df.schema.items() if dtype == pl.Float64]
        return df.with_columns([pl.col(c).round(int(decimals)) for c in float_cols])

    def _write_outputs(self, data):
        try:
            base_path = Path(self.config["base_path"])
            out_dir = base_path / self.config["allocation"]["output_path"]
            out_dir.mkdir(parents=True, exist_ok=True)
            self.logger.debug("Output directory ready: %s", out_dir)

            outputs = [
                ("usage_map_df", USAGE_MAP_FILE),
                ("purchase_consumption_df", PURCHASE_SUMMARY_FILE),
                ("material_consumption_df", MATERIAL_SUMMARY_FILE),
            ]
            for key, filename in outputs:
                out_file = out_dir / filename
                write_csv(self._round(data[key]), out_file, logger=self.logger)
                self.logger.info("Output written: %s (rows=%d)", out_file, data[key].height)

            self.logger.info("Output write phase completed.")

        except Exception as e:
            self.logger.critical("Failed to write output files: %s", str(e), exc_info=True)
            raise
