"""
Error taxonomy for the load/invoke/benchmark harness

Every failure the harness can surface derives from HarnessError, so the
entry point can catch one type and turn it into a non-zero exit status.
"""


class HarnessError(Exception):
    """Base for all harness errors."""


class LoadError(HarnessError):
    """Raised when a module's bytes cannot be read from its source."""

    def __init__(self, source, reason):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot read module from {source}: {reason}")


class CompileError(HarnessError):
    """
    Raised when bytes were read but do not form a valid module for the runtime.

    This also covers modules that cannot be instantiated without imports and
    modules whose start function traps.
    """

    def __init__(self, source, reason):
        self.source = source
        self.reason = reason
        super().__init__(f"Cannot compile module {source}: {reason}")


class ExportNotFoundError(HarnessError, KeyError):
    """Raised when a handle has no function export with the requested name."""

    def __init__(self, export_name, available=()):
        self.export_name = export_name
        self.available = tuple(available)
        super().__init__(export_name)

    def __str__(self):
        known = ", ".join(self.available) if self.available else "none"
        return f"Export '{self.export_name}' not found (available: {known})"


class InvocationError(HarnessError):
    """Raised when an export traps or otherwise faults while running."""

    def __init__(self, export_name, reason):
        self.export_name = export_name
        self.reason = reason
        super().__init__(f"Invocation of '{self.export_name}' failed: {reason}")


class CacheError(HarnessError):
    """Raised when the module cache directory is not safe to load code from."""

    def __init__(self, cache_dir, reason):
        self.cache_dir = cache_dir
        self.reason = reason
        super().__init__(f"Refusing module cache at {cache_dir}: {reason}")
