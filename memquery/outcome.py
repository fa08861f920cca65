"""
memquery.outcome
AUTHOR: carter-vin

Light result wrapper -> read failures become data for the caller
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from memquery.meminfo import MemInfoError, MemoryReport


@dataclass(frozen=True)
class ReadOutcome:
    """
    Normalized read result
    - ok: false=failure, error details in error fields, no value
    - value: MemoryReport only if ok=true
    """

    ok: bool
    value: Optional[MemoryReport] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


def run_reader(fn, *args, **kwargs) -> ReadOutcome:
    """
    Run reader & collect MemInfoError as failure

    Anything else is a bug and propagates
    """
    try:
        v = fn(*args, **kwargs)
        return ReadOutcome(ok=True, value=v)
    except MemInfoError as e:
        return ReadOutcome(
            ok=False,
            value=None,
            error_type=type(e).__name__,
            error_message=str(e),
        )
