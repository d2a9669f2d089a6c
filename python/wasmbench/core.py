"""
Core module: module loading (compile + instantiate)
"""

import asyncio
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import wasmtime

from .cache import get_cache
from .errors import CompileError, ExportNotFoundError, LoadError

logger = logging.getLogger(__name__)

#==============================================================================
# Configuration
#==============================================================================

PACKAGE_DIR = Path(__file__).parent
MODULES_DIR = PACKAGE_DIR / "modules"

DEFAULT_EXPORT = "fib"
DEFAULT_ARGUMENT = 30

LOG_LEVEL = os.getenv("WASMBENCH_LOG_LEVEL", "WARNING")

_default_engine: Optional[wasmtime.Engine] = None


def get_engine() -> wasmtime.Engine:
    """Engine shared by every load that does not bring its own"""
    global _default_engine
    if _default_engine is None:
        _default_engine = wasmtime.Engine()
    return _default_engine

# Value types a harness can pass across the module boundary
VALUE_DTYPES = {
    "i32": np.int32,
    "i64": np.int64,
    "f32": np.float32,
    "f64": np.float64,
}

#==============================================================================
# Sources and Signatures
#==============================================================================

@dataclass(frozen=True)
class BinarySource:
    """Locator for module bytes on disk"""
    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path))

    @classmethod
    def resolve(cls, name: Union[str, Path], base: Optional[Path] = None) -> "BinarySource":
        """Resolve a locator relative to `base` (the bundled modules by default)"""
        return cls((base or MODULES_DIR) / name)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_text(self) -> bool:
        """True for WebAssembly text format sources (.wat)"""
        return self.path.suffix == ".wat"

    def read_bytes(self) -> bytes:
        try:
            return self.path.read_bytes()
        except OSError as exc:
            raise LoadError(self.path, exc.strerror or str(exc)) from exc

    def __str__(self):
        return str(self.path)


@dataclass(frozen=True)
class ExportSignature:
    """Parameter and result value types of an exported function"""
    params: Tuple[str, ...]
    results: Tuple[str, ...]

    @classmethod
    def from_functype(cls, functype: wasmtime.FuncType) -> "ExportSignature":
        return cls(
            params=tuple(str(t) for t in functype.params),
            results=tuple(str(t) for t in functype.results),
        )

    def check_args(self, name: str, args: Sequence[Any]) -> Tuple[Any, ...]:
        """
        Validate arguments against this signature

        Returns:
            The arguments as plain Python scalars

        Raises:
            TypeError: wrong arity, wrong kind of value, or an integer that
                does not fit the parameter's width
        """
        if len(args) != len(self.params):
            raise TypeError(
                f"{name}{self} takes {len(self.params)} argument(s), got {len(args)}"
            )

        checked = []
        for index, (value, kind) in enumerate(zip(args, self.params)):
            dtype = VALUE_DTYPES.get(kind)
            if dtype is None:
                raise TypeError(f"{name}: unsupported parameter type {kind}")

            if np.issubdtype(dtype, np.integer):
                if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                    raise TypeError(f"{name}: argument {index} must be an integer for {kind}")
                bounds = np.iinfo(dtype)
                if not bounds.min <= int(value) <= bounds.max:
                    raise TypeError(
                        f"{name}: argument {index}={value} out of range for {kind}"
                    )
                checked.append(int(value))
            elif not isinstance(value, (int, float, np.number)) or isinstance(value, bool):
                raise TypeError(f"{name}: argument {index} must be a number for {kind}")
            else:
                checked.append(float(value))

        return tuple(checked)

    def __str__(self):
        params = ", ".join(self.params)
        results = ", ".join(self.results) or "()"
        return f"({params}) -> {results}"


@dataclass(frozen=True)
class ExportedFunction:
    """A resolved export bound to the store it runs in"""
    name: str
    signature: ExportSignature
    func: wasmtime.Func
    store: wasmtime.Store = field(repr=False)

    def __call__(self, *args):
        return self.func(self.store, *args)

#==============================================================================
# Executable Module and Handle
#==============================================================================

class ExecutableModule:
    """Compiled, validated module ready to be instantiated"""

    def __init__(self, source: BinarySource, engine: wasmtime.Engine, module: wasmtime.Module):
        self.source = source
        self.engine = engine
        self.module = module

    @property
    def export_names(self) -> Tuple[str, ...]:
        return tuple(export.name for export in self.module.exports)

    def __repr__(self):
        return f"ExecutableModule({self.source.name}, exports={list(self.export_names)})"


class ExecutableHandle:
    """Live instance of a module with a read-only export mapping"""

    def __init__(self, module: ExecutableModule, store: wasmtime.Store,
                 exports: Mapping[str, ExportedFunction]):
        self.module = module
        self.store = store
        self.exports = MappingProxyType(dict(exports))

    @property
    def source(self) -> BinarySource:
        return self.module.source

    def lookup(self, name: str) -> ExportedFunction:
        """Resolve an export by name or raise ExportNotFoundError"""
        try:
            return self.exports[name]
        except KeyError:
            raise ExportNotFoundError(name, self.exports.keys()) from None

    def __contains__(self, name):
        return name in self.exports

    def __repr__(self):
        return f"ExecutableHandle({self.source.name}, exports={list(self.exports)})"

#==============================================================================
# Loading
#==============================================================================

def compile_module(source: BinarySource,
                   engine: Optional[wasmtime.Engine] = None,
                   use_cache: bool = False,
                   verbose: bool = False) -> ExecutableModule:
    """
    Read and compile a module

    Args:
        source: Where the module bytes live
        engine: Engine to compile for (the shared engine by default)
        use_cache: Look up / store the compiled module in the module cache
        verbose: Print compilation details

    Returns:
        ExecutableModule ready for instantiation

    Raises:
        LoadError: bytes could not be read
        CompileError: bytes are not a valid module
    """
    engine = engine or get_engine()
    data = source.read_bytes()

    if source.is_text:
        try:
            data = bytes(wasmtime.wat2wasm(data.decode("utf-8")))
        except (UnicodeDecodeError, wasmtime.WasmtimeError) as exc:
            raise CompileError(source, str(exc)) from exc

    if use_cache:
        cached = get_cache().get(data, engine)
        if cached is not None:
            if verbose:
                print(f"✓ Using cached compilation for {source.name}")
            logger.debug("cache hit for %s", source)
            return ExecutableModule(source, engine, cached)

    if verbose:
        print(f"Compiling {source.name} ({len(data)} bytes)...")

    try:
        module = wasmtime.Module(engine, data)
    except wasmtime.WasmtimeError as exc:
        raise CompileError(source, str(exc)) from exc

    logger.debug("compiled %s (%d bytes)", source, len(data))

    if use_cache:
        get_cache().put(data, module, engine)

    return ExecutableModule(source, engine, module)


def instantiate(module: ExecutableModule) -> ExecutableHandle:
    """
    Bind a compiled module to a fresh store

    The harness links no host functions, so modules with imports are rejected.
    """
    imports = [f"{imp.module}.{imp.name}" for imp in module.module.imports]
    if imports:
        raise CompileError(module.source, f"unresolved imports: {', '.join(imports)}")

    store = wasmtime.Store(module.engine)
    try:
        instance = wasmtime.Instance(store, module.module, [])
    except (wasmtime.Trap, wasmtime.WasmtimeError) as exc:
        raise CompileError(module.source, f"instantiation failed: {exc}") from exc

    instance_exports = instance.exports(store)
    exports = {}
    for name in module.export_names:
        extern = instance_exports[name]
        if isinstance(extern, wasmtime.Func):
            signature = ExportSignature.from_functype(extern.type(store))
            exports[name] = ExportedFunction(name, signature, extern, store)

    logger.debug("instantiated %s with exports %s", module.source, sorted(exports))
    return ExecutableHandle(module, store, exports)


async def load(source: BinarySource,
               engine: Optional[wasmtime.Engine] = None,
               use_cache: bool = False,
               verbose: bool = False) -> ExecutableHandle:
    """
    Load a module: compile it off the event loop, then instantiate it

    Independent loads can be awaited concurrently; each runs its compile
    step in a worker thread.
    """
    module = await asyncio.to_thread(compile_module, source, engine, use_cache, verbose)
    return instantiate(module)


def load_sync(source: BinarySource, **kwargs) -> ExecutableHandle:
    """Blocking wrapper around load() for callers without an event loop"""
    return asyncio.run(load(source, **kwargs))
