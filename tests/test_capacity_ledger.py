from usage_allocator.common.capacity_ledger import CapacityLedger


def test_load_builds_capacity_and_material_queues(purchase_rows, logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases(purchase_rows + [{"id": "P3", "material_id": "M2", "quantity": "4"}])

    assert ledger.capacity_by_purchase == {"P1": 10.0, "P2": 5.0, "P3": 4.0}
    assert ledger.get_queue("M1") == ["P1", "P2"]
    assert ledger.get_queue("M2") == ["P3"]


def test_purchase_without_material_is_not_queued(logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases([
        {"id": "P1", "material_id": None, "quantity": 3},
        {"id": "P2", "material_id": "", "quantity": 3},
    ])

    assert ledger.has_purchase("P1")
    assert ledger.has_purchase("P2")
    assert dict(ledger.purchase_queue_by_material) == {}


def test_duplicate_purchase_id_last_write_wins(logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases([
        {"id": "P1", "material_id": "M1", "quantity": 10},
        {"id": "P1", "material_id": "M1", "quantity": 2},
    ])

    assert ledger.get_capacity("P1") == 2.0
    assert ledger.get_queue("M1") == ["P1", "P1"]


def test_invalid_purchase_quantities_normalize_to_zero(logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases([
        {"id": "A", "material_id": "M1", "quantity": -3},
        {"id": "B", "material_id": "M1", "quantity": None},
        {"id": "C", "material_id": "M1"},
    ])

    assert ledger.remaining_capacity() == {"A": 0.0, "B": 0.0, "C": 0.0}


def test_consume_floors_at_zero(purchase_rows, logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases(purchase_rows)

    ledger.consume("P1", 4)
    assert ledger.get_capacity("P1") == 6.0

    ledger.consume("P1", 100)
    assert ledger.get_capacity("P1") == 0.0


def test_unknown_lookups_are_empty(logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases(None)

    assert ledger.get_capacity("missing") == 0.0
    assert ledger.get_queue("missing") == []
    assert not ledger.has_purchase("missing")


def test_remaining_capacity_is_a_copy(purchase_rows, logger):
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases(purchase_rows)

    snapshot = ledger.remaining_capacity()
    snapshot["P1"] = 0.0
    assert ledger.get_capacity("P1") == 10.0
