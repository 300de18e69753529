# Usage Allocation strategies
from usage_allocator.core.strategies.fifo import FifoUsageAllocator


USAGE_ALLOCATORS = {
    "fifo": FifoUsageAllocator,
}
