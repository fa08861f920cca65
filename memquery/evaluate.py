"""
memquery.evaluate
AUTHOR: carter-vin

Caller-side combination of a MemoryReport

Unified-memory heuristic (CPU and GPU share RAM): RAM + swap + free huge
pages are all candidates for a large allocation. Not a general guarantee,
swap-backed memory is slow and huge pages are only usable by hugetlb users.
"""

from __future__ import annotations

from memquery.meminfo import MemoryReport


def unified_allocatable_kb(report: MemoryReport) -> int:
    return report.available_kb + report.free_swap_kb + (report.huge_pages_free_kb or 0)
