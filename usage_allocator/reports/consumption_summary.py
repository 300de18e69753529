import polars as pl

from usage_allocator.common.numeric import to_non_negative_number


PURCHASE_SUMMARY_SCHEMA = {
    "purchase_id": pl.Utf8,
    "material_id": pl.Utf8,
    "purchased_qty": pl.Float64,
    "consumed_qty": pl.Float64,
    "remaining_qty": pl.Float64,
    "over_consumed": pl.Boolean,
}


def summarize_purchases(purchase_rows, usage_map: dict) -> pl.DataFrame:
    """
    One row per purchase with purchased / consumed / remaining quantities.

    consumed_qty prefers the allocation map and falls back to the stored
    consumed_quantity; remaining_qty prefers the stored remaining_quantity.
    over_consumed flags purchases whose consumption exceeds what was bought.
    """
    output_columns = {col: [] for col in PURCHASE_SUMMARY_SCHEMA}

    for r in purchase_rows or []:
        purchase_id = r.get("id")
        purchased = to_non_negative_number(r.get("quantity"))

        if purchase_id in usage_map:
            consumed = usage_map[purchase_id]
        else:
            consumed = to_non_negative_number(r.get("consumed_quantity"))

        stored_remaining = r.get("remaining_quantity")
        if stored_remaining is not None:
            remaining = to_non_negative_number(stored_remaining)
        else:
            remaining = max(0.0, purchased - consumed)

        output_columns["purchase_id"].append(None if purchase_id is None else str(purchase_id))
        material_id = r.get("material_id") or None
        output_columns["material_id"].append(None if material_id is None else str(material_id))
        output_columns["purchased_qty"].append(purchased)
        output_columns["consumed_qty"].append(consumed)
        output_columns["remaining_qty"].append(remaining)
        output_columns["over_consumed"].append(consumed > purchased)

    return pl.DataFrame(output_columns, schema=PURCHASE_SUMMARY_SCHEMA)


def summarize_materials(purchase_summary_df: pl.DataFrame) -> pl.DataFrame:
    """Aggregate a purchase summary per material (purchases without a material are skipped)."""
    return (
        purchase_summary_df
        .filter(pl.col("material_id").is_not_null())
        .group_by("material_id", maintain_order=True)
        .agg([
            pl.len().cast(pl.Int64).alias("purchase_count"),
            pl.sum("purchased_qty").alias("purchased_qty"),
            pl.sum("consumed_qty").alias("consumed_qty"),
            pl.sum("remaining_qty").alias("remaining_qty"),
        ])
    )


def usage_map_to_frame(usage_map: dict) -> pl.DataFrame:
    return pl.DataFrame(
        {
            "purchase_id": [str(k) for k in usage_map.keys()],
            "allocated_qty": list(usage_map.values()),
        },
        schema={"purchase_id": pl.Utf8, "allocated_qty": pl.Float64},
    )
