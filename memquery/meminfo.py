"""
memquery.meminfo
AUTHOR: carter-vin

Memory availability reader
- Linux only via /proc/meminfo
- single forward pass, stops once the requested fields are found
- stdlib only

Fields (kB unless noted):
- MemAvailable, SwapFree: mandatory, read fails without them
- HugePages_Total, HugePages_Free (counts), Hugepagesize: optional
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional, Union


PROC_MEMINFO = Path("/proc/meminfo")

MEM_AVAILABLE = "MemAvailable"
SWAP_FREE = "SwapFree"
HUGE_PAGES_TOTAL = "HugePages_Total"
HUGE_PAGES_FREE = "HugePages_Free"
HUGE_PAGE_SIZE = "Hugepagesize"

# Match order matters: first hit wins
_LINE_PATTERNS = tuple(
    (label, re.compile(rf"^{label}:\s*(\d+)"))
    for label in (MEM_AVAILABLE, SWAP_FREE, HUGE_PAGES_TOTAL, HUGE_PAGES_FREE, HUGE_PAGE_SIZE)
)


class MemInfoError(RuntimeError):
    """Base for memory read failures."""


class SourceUnavailable(MemInfoError):
    """The meminfo source could not be opened or read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path


class RequiredFieldMissing(MemInfoError):
    """The source was read but lacked MemAvailable and/or SwapFree."""

    def __init__(self, missing: tuple[str, ...]) -> None:
        super().__init__(f"required field(s) missing in meminfo: {', '.join(missing)}")
        self.missing = missing


@dataclass(frozen=True)
class MemoryReport:
    """
    Allocatable memory right now, in kB
    - huge_pages_free_kb: None when huge pages were not requested
    """

    available_kb: int
    free_swap_kb: int
    huge_pages_free_kb: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "available_kb": self.available_kb,
            "free_swap_kb": self.free_swap_kb,
            "huge_pages_free_kb": self.huge_pages_free_kb,
        }


@dataclass
class HugePageStats:
    total_pages: Optional[int] = None
    free_pages: Optional[int] = None
    page_size_kb: Optional[int] = None

    @property
    def resolved(self) -> bool:
        return None not in (self.total_pages, self.free_pages, self.page_size_kb)

    def free_kb(self) -> int:
        """
        Free huge-page memory, 0 unless all fields seen and pages configured
        """
        if not self.resolved or self.total_pages <= 0:
            return 0
        return self.free_pages * self.page_size_kb


@dataclass
class _ScanState:
    """
    Per-call scan progress

    done = mandatory_resolved and optional_resolved
    """

    want_huge_pages: bool
    available_kb: Optional[int] = None
    free_swap_kb: Optional[int] = None
    huge: HugePageStats = field(default_factory=HugePageStats)

    @property
    def mandatory_resolved(self) -> bool:
        return self.available_kb is not None and self.free_swap_kb is not None

    @property
    def optional_resolved(self) -> bool:
        return not self.want_huge_pages or self.huge.resolved

    @property
    def done(self) -> bool:
        return self.mandatory_resolved and self.optional_resolved

    def feed(self, line: str) -> None:
        match = _match_line(line)
        if match is None:
            return
        label, value = match
        if label == MEM_AVAILABLE:
            self.available_kb = value
        elif label == SWAP_FREE:
            self.free_swap_kb = value
        elif label == HUGE_PAGES_TOTAL:
            self.huge.total_pages = value
        elif label == HUGE_PAGES_FREE:
            self.huge.free_pages = value
        else:
            self.huge.page_size_kb = value


def _match_line(line: str) -> Optional[tuple[str, int]]:
    """
    Return (label, value) for a recognized line, else None

    A recognized label with a malformed value counts as no match
    """
    for label, pattern in _LINE_PATTERNS:
        m = pattern.match(line)
        if m:
            return label, int(m.group(1))
    return None


def scan_meminfo(lines: Iterable[str], want_huge_pages: bool = False) -> MemoryReport:
    """
    Scan meminfo text lines and build a MemoryReport

    Consumes lines only until every requested field is resolved.

    Raises:
        RequiredFieldMissing: MemAvailable or SwapFree absent
    """
    state = _ScanState(want_huge_pages=want_huge_pages)

    for line in lines:
        state.feed(line)
        if state.done:
            break

    if not state.mandatory_resolved:
        missing = tuple(
            label
            for label, value in ((MEM_AVAILABLE, state.available_kb), (SWAP_FREE, state.free_swap_kb))
            if value is None
        )
        raise RequiredFieldMissing(missing)

    return MemoryReport(
        available_kb=state.available_kb,
        free_swap_kb=state.free_swap_kb,
        huge_pages_free_kb=state.huge.free_kb() if want_huge_pages else None,
    )


def read_memory_info(
    want_huge_pages: bool = False,
    path: Union[str, Path] = PROC_MEMINFO,
) -> MemoryReport:
    """
    Read allocatable memory, free swap and (optionally) free huge pages

    One open/scan/close cycle per call, nothing cached.

    Raises:
        SourceUnavailable: path cannot be opened or read
        RequiredFieldMissing: MemAvailable or SwapFree absent
    """
    path = Path(path)
    try:
        f = path.open("r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise SourceUnavailable(path, e.strerror or type(e).__name__) from e

    with f:
        try:
            return scan_meminfo(f, want_huge_pages)
        except OSError as e:
            # Opened but unreadable (EIO on some pseudo-files)
            raise SourceUnavailable(path, e.strerror or type(e).__name__) from e
