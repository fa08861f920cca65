"""memquery package exports."""

from memquery.meminfo import (
    MemInfoError,
    MemoryReport,
    RequiredFieldMissing,
    SourceUnavailable,
    read_memory_info,
    scan_meminfo,
)

__version__ = "0.1.0"

__all__ = [
    "MemInfoError",
    "MemoryReport",
    "RequiredFieldMissing",
    "SourceUnavailable",
    "read_memory_info",
    "scan_meminfo",
]
