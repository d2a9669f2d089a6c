"""
Timed invocation of module exports and host-native functions
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

import wasmtime

from .core import BinarySource, ExecutableHandle, load_sync
from .errors import InvocationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvocationResult:
    """Value returned by one timed call and how long the call took"""
    name: str
    args: Tuple[Any, ...]
    value: Any
    elapsed_ms: float
    label: Optional[str] = None

    def format(self) -> str:
        args = ", ".join(str(a) for a in self.args)
        line = f"{self.name}({args}) = {self.value} | Time: {self.elapsed_ms:.2f} ms"
        return f"{self.label} {line}" if self.label else line

    def __str__(self):
        return self.format()


def invoke(handle: ExecutableHandle,
           export_name: str,
           args: Sequence[Any],
           label: Optional[str] = None) -> InvocationResult:
    """
    Call one export of a loaded module and time the call

    Lookup and argument checks happen before the clock starts; only the
    call itself is measured.

    Args:
        handle: Loaded module
        export_name: Export to call
        args: Arguments for the export
        label: Optional label carried into the result

    Returns:
        InvocationResult

    Raises:
        ExportNotFoundError: no such export (nothing is timed)
        TypeError: arguments do not match the export's signature
        InvocationError: the export trapped
    """
    export = handle.lookup(export_name)
    args = export.signature.check_args(export_name, tuple(args))

    func, store = export.func, export.store

    start = time.perf_counter()
    try:
        value = func(store, *args)
    except (wasmtime.Trap, wasmtime.WasmtimeError) as exc:
        raise InvocationError(export_name, str(exc)) from exc
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.debug("%s %s%s -> %r in %.3f ms", handle.source.name, export_name, args, value, elapsed_ms)
    return InvocationResult(export_name, args, value, elapsed_ms, label)


def time_call(fn: Callable[..., Any],
              args: Sequence[Any],
              label: Optional[str] = None,
              name: Optional[str] = None) -> InvocationResult:
    """Time a host-native callable with the same boundary as invoke()"""
    name = name or getattr(fn, "__name__", "fn")
    args = tuple(args)

    start = time.perf_counter()
    value = fn(*args)
    elapsed_ms = (time.perf_counter() - start) * 1000

    logger.debug("host %s%s -> %r in %.3f ms", name, args, value, elapsed_ms)
    return InvocationResult(name, args, value, elapsed_ms, label)


def run_module(source: BinarySource,
               export_name: str,
               args: Sequence[Any],
               verbose: bool = False) -> Any:
    """
    Load a module and call one export, untimed

    Returns:
        The export's return value
    """
    handle = load_sync(source, verbose=verbose)
    export = handle.lookup(export_name)
    args = export.signature.check_args(export_name, tuple(args))

    try:
        value = export(*args)
    except (wasmtime.Trap, wasmtime.WasmtimeError) as exc:
        raise InvocationError(export_name, str(exc)) from exc

    if verbose:
        print(f"{export_name}({', '.join(str(a) for a in args)}) = {value}")
    return value
