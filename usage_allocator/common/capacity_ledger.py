import logging
from collections import defaultdict

from usage_allocator.common.numeric import to_non_negative_number


class CapacityLedger:
    """
    Remaining capacity per purchase plus a FIFO queue of purchases per material.
    Purchases are expected oldest-first; queue order is input order.
    """

    def __init__(self, logger=None):
        self.capacity_by_purchase = {}
        self.purchase_queue_by_material = defaultdict(list)
        self.logger = logger or logging.getLogger(__name__)

    def load_purchases(self, purchase_rows):
        for r in purchase_rows or []:
            purchase_id = r.get("id")
            material_id = r.get("material_id") or None
            capacity = to_non_negative_number(r.get("quantity"))

            # Duplicate ids: last row wins
            self.capacity_by_purchase[purchase_id] = capacity

            if material_id:
                self.purchase_queue_by_material[material_id].append(purchase_id)

        self.logger.debug(
            "Capacity ledger loaded | Purchases=%s | Materials=%s",
            len(self.capacity_by_purchase), len(self.purchase_queue_by_material)
        )

    def has_purchase(self, purchase_id):
        return purchase_id in self.capacity_by_purchase

    def get_capacity(self, purchase_id):
        return self.capacity_by_purchase.get(purchase_id, 0.0)

    def get_queue(self, material_id):
        return self.purchase_queue_by_material.get(material_id, [])

    def consume(self, purchase_id, qty):
        available = self.get_capacity(purchase_id)
        self.capacity_by_purchase[purchase_id] = max(0.0, available - qty)

    def remaining_capacity(self):
        return dict(self.capacity_by_purchase)
