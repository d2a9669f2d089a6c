"""
wasmbench - load, invoke and benchmark compiled WebAssembly modules
"""

__version__ = "0.1.0"

from .core import (
    BinarySource,
    ExecutableModule,
    ExecutableHandle,
    ExportSignature,
    ExportedFunction,
    compile_module,
    instantiate,
    load,
    load_sync,
)

from .api import (
    InvocationResult,
    invoke,
    time_call,
    run_module,
)

from .benchmark import (
    Candidate,
    BenchmarkReport,
    compare,
    compare_sync,
    default_candidates,
    main,
)

from .errors import (
    HarnessError,
    LoadError,
    CompileError,
    ExportNotFoundError,
    InvocationError,
    CacheError,
)

from .cache import get_cache

__all__ = [
    # Loading
    'BinarySource',
    'ExecutableModule',
    'ExecutableHandle',
    'ExportSignature',
    'ExportedFunction',
    'compile_module',
    'instantiate',
    'load',
    'load_sync',

    # Invocation
    'InvocationResult',
    'invoke',
    'time_call',
    'run_module',

    # Comparison
    'Candidate',
    'BenchmarkReport',
    'compare',
    'compare_sync',
    'default_candidates',
    'main',

    # Errors
    'HarnessError',
    'LoadError',
    'CompileError',
    'ExportNotFoundError',
    'InvocationError',
    'CacheError',

    # Cache
    'get_cache',
]
