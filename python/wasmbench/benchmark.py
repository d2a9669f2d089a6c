"""
Benchmarking utilities: compare compiled modules against a Python reference
"""

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, TextIO

from .api import invoke, time_call
from .core import DEFAULT_ARGUMENT, DEFAULT_EXPORT, BinarySource, load
from .errors import HarnessError
from .logging_utils import configure_logging
from .reference import fib

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """
    One entry in a comparison

    Exactly one of `source` (a module to load and call) or `reference`
    (a Python callable to call directly) must be given.
    """
    label: str
    source: Optional[BinarySource] = None
    reference: Optional[Callable[..., Any]] = None

    def __post_init__(self):
        if (self.source is None) == (self.reference is None):
            raise ValueError(
                f"Candidate {self.label!r} needs exactly one of source or reference"
            )

    @property
    def is_reference(self) -> bool:
        return self.reference is not None


class BenchmarkReport(list):
    """Results in the order they were measured"""

    @property
    def labels(self) -> List[str]:
        return [r.label for r in self]

    @property
    def values(self) -> List[Any]:
        return [r.value for r in self]

    def lines(self) -> List[str]:
        return [r.format() for r in self]


def default_candidates() -> List[Candidate]:
    """Unoptimized and optimized builds of fib plus the Python reference"""
    return [
        Candidate("Unoptimized", source=BinarySource.resolve("fib.wasm")),
        Candidate("Optimized", source=BinarySource.resolve("fib_opt.wasm")),
        Candidate("Reference", reference=fib),
    ]


async def compare(candidates: Sequence[Candidate],
                  export_name: str = DEFAULT_EXPORT,
                  args: Sequence[Any] = (DEFAULT_ARGUMENT,),
                  stream: Optional[TextIO] = None,
                  use_cache: bool = False) -> BenchmarkReport:
    """
    Measure each candidate in order and print one line per result

    Candidates run one after another, never concurrently, so each timed
    call has the CPU to itself. A line is written as soon as its
    measurement finishes; the first error aborts the rest.

    Args:
        candidates: What to measure, in display order
        export_name: Export to call on module candidates
        args: Arguments passed to every candidate
        stream: Where to write report lines (stdout by default)
        use_cache: Reuse compiled modules from the module cache

    Returns:
        BenchmarkReport with one result per candidate
    """
    if stream is None:
        stream = sys.stdout
    args = tuple(args)
    report = BenchmarkReport()

    for candidate in candidates:
        if candidate.is_reference:
            result = time_call(candidate.reference, args, label=candidate.label, name=export_name)
        else:
            handle = await load(candidate.source, use_cache=use_cache)
            result = invoke(handle, export_name, args, label=candidate.label)

        report.append(result)
        print(result.format(), file=stream, flush=True)

    return report


def compare_sync(candidates: Sequence[Candidate], **kwargs) -> BenchmarkReport:
    """Run compare() to completion in a fresh event loop"""
    return asyncio.run(compare(candidates, **kwargs))


def main(candidates: Optional[Sequence[Candidate]] = None,
         export_name: str = DEFAULT_EXPORT,
         args: Sequence[Any] = (DEFAULT_ARGUMENT,),
         stream: Optional[TextIO] = None) -> int:
    """
    Run one comparison and return a process exit status

    With no arguments this runs the bundled fib scenario.

    Returns:
        0 when every candidate was measured, 1 when one failed
    """
    configure_logging()

    if candidates is None:
        candidates = default_candidates()

    try:
        compare_sync(candidates, export_name=export_name, args=args, stream=stream)
    except HarnessError as exc:
        logger.error("%s", exc)
        return 1

    return 0
