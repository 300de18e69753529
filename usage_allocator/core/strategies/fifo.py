from usage_allocator.common.numeric import to_non_negative_number
from usage_allocator.core.base_usage_allocator import BaseUsageAllocator


class FifoUsageAllocator(BaseUsageAllocator):
    """
    Direct-then-FIFO usage allocation.
    Strategy:
    - Usage linked to a known purchase is booked to it in full (no capacity cap)
    - Unlinked usage is spread over the material's purchases, oldest first,
      never beyond remaining capacity; any excess is dropped
    """

    @classmethod
    def extra_required_schemas(cls):
        return {}

    def allocate(self) -> dict:
        usage_map: dict[str, float] = {}
        stats = {"direct": 0, "fallback": 0, "skipped": 0, "dropped": 0, "dropped_qty": 0.0}

        def book(purchase_id, qty: float) -> None:
            if qty <= 0:
                return
            usage_map[purchase_id] = usage_map.get(purchase_id, 0.0) + qty
            self.ledger.consume(purchase_id, qty)

        for r in self.usage_rows or []:
            usage_qty = to_non_negative_number(r.get("quantity"))
            if usage_qty <= 0:
                stats["skipped"] += 1
                continue

            purchase_id = r.get("purchase_id") or None
            if purchase_id and self.ledger.has_purchase(purchase_id):
                book(purchase_id, usage_qty)
                stats["direct"] += 1
                self.logger.debug("Direct usage | Purchase=%s | Qty=%s", purchase_id, usage_qty)
                continue

            material_id = r.get("material_id") or None
            if not material_id:
                stats["dropped"] += 1
                stats["dropped_qty"] += usage_qty
                self.logger.debug(
                    "Usage dropped, no known purchase and no material | Purchase=%s | Qty=%s",
                    purchase_id, usage_qty
                )
                continue

            queue = self.ledger.get_queue(material_id)
            if not queue:
                stats["dropped"] += 1
                stats["dropped_qty"] += usage_qty
                self.logger.debug("Usage dropped, no purchases for material | Material=%s | Qty=%s", material_id, usage_qty)
                continue

            remaining = usage_qty
            for candidate_id in queue:
                if remaining <= 0:
                    break
                available = self.ledger.get_capacity(candidate_id)
                if available <= 0:
                    continue

                allocated = min(available, remaining)
                book(candidate_id, allocated)
                remaining -= allocated

            stats["fallback"] += 1
            if remaining > 0:
                stats["dropped_qty"] += remaining
                self.logger.debug(
                    "FIFO exhausted | Material=%s | Usage=%s | Unallocated=%s",
                    material_id, usage_qty, remaining
                )

        self.logger.info(
            "Usage allocation done | Direct=%s | Fallback=%s | Skipped=%s | Dropped=%s | DroppedQty=%s | Purchases=%s",
            stats["direct"], stats["fallback"], stats["skipped"],
            stats["dropped"], stats["dropped_qty"], len(usage_map)
        )
        self.stats = stats
        return usage_map
