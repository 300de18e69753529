import logging

import polars as pl
import pytest


@pytest.fixture
def logger():
    return logging.getLogger("usage_allocator.tests")


@pytest.fixture
def purchase_rows():
    return [
        {"id": "P1", "material_id": "M1", "quantity": 10},
        {"id": "P2", "material_id": "M1", "quantity": 5},
    ]


@pytest.fixture
def run_dir(tmp_path):
    """Input folder with purchase and usage exports as they come out of storage."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()

    pl.DataFrame({
        "Purchase ID": ["P2", "P1", "P3", "P4"],
        "material id": ["M1", "M1", "M2", ""],
        " Quantity ": ["5", "10", "3", "7"],
        "Created At": ["2024-02-01", "2024-01-01", "2024-01-15", "2024-03-01"],
        "Vendor": ["V1", "V2", "V1", "V3"],
    }).write_csv(input_dir / "material_purchases.csv")

    pl.DataFrame({
        "Purchase ID": ["P1", "", "", "P9", ""],
        "Material ID": ["", "M1", "M2", "M2", ""],
        "Quantity": ["4", "8", "abc", "5", "2"],
    }).write_csv(input_dir / "work_progress_materials.csv")

    return tmp_path


@pytest.fixture
def config(run_dir):
    return {
        "base_path": str(run_dir),
        "client": "TEST",
        "log_level": "DEBUG",
        "allocation": {
            "type": "fifo",
            "input_source": "input",
            "output_path": "output",
            "sort_purchases_by": "created_at",
            "csv_inputs": {
                "purchase": "material_purchases.csv",
                "usage": "work_progress_materials.csv",
            },
        },
        "schemas": {
            "purchase": {
                "id": "Purchase ID",
                "material_id": "Material ID",
                "quantity": "Quantity",
                "consumed_quantity": "Consumed Quantity",
                "created_at": "Created At",
            },
            "usage": {
                "purchase_id": "Purchase ID",
                "material_id": "Material ID",
                "quantity": "Quantity",
            },
        },
    }
