from usage_allocator.core.usage_map import build_purchase_usage_map

__all__ = ["build_purchase_usage_map"]
