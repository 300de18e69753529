import logging

from usage_allocator.common.capacity_ledger import CapacityLedger
from usage_allocator.core.strategies.fifo import FifoUsageAllocator

logger = logging.getLogger(__name__)


def build_purchase_usage_map(purchase_rows, usage_rows, logger=logger) -> dict:
    """
    Map purchase_id -> quantity consumed, reconstructed from usage rows.

    Usage rows carrying a known purchase_id are booked to that purchase in full.
    Legacy rows without one are booked to purchases of the same material_id in
    the order given, never beyond each purchase's recorded quantity. Purchases
    must therefore be passed oldest-first.

    Never raises on malformed rows; bad quantities count as 0 and dangling
    references are dropped.
    """
    ledger = CapacityLedger(logger=logger)
    ledger.load_purchases(purchase_rows)

    allocator = FifoUsageAllocator(usage_rows, ledger, logger=logger)
    return allocator.allocate()
