from abc import ABC, abstractmethod
import logging

from usage_allocator.common.capacity_ledger import CapacityLedger


class BaseUsageAllocator(ABC):
    """
    Abstract base class for all Usage Allocation strategies.
    Defines the interface that every allocator must implement.
    """

    def __init__(self, usage_rows, ledger: CapacityLedger, config=None, logger=None) -> None:
        """
        :param usage_rows: Iterable of usage rows (purchase_id, material_id, quantity)
        :param ledger: CapacityLedger loaded with purchase capacities
        """
        self.usage_rows = usage_rows
        self.ledger = ledger
        self.config = config or {}
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def allocate(self) -> dict:
        """
        Perform allocation according to the strategy.
        Must return a dict of purchase_id -> allocated quantity,
        holding only purchases with a nonzero allocation.
        """
        pass

    @classmethod
    def base_required_schemas(cls):
        return {
            "purchase": ["id", "material_id", "quantity"],
            "usage": ["purchase_id", "material_id", "quantity"]
        }

    @classmethod
    def extra_required_schemas(cls):
        return {}

    @classmethod
    def resolved_required_schemas(cls):
        merged = {k: list(v) for k, v in cls.base_required_schemas().items()}
        for src, cols in cls.extra_required_schemas().items():
            merged.setdefault(src, [])
            merged[src].extend(cols)
        return merged
