"""
Module cache: compile once, instantiate many times
"""

import hashlib
import logging
import os
import stat
from pathlib import Path
from typing import Optional

import wasmtime

from .errors import CacheError

logger = logging.getLogger(__name__)

CACHE_DIR = Path(os.getenv(
    "WASMBENCH_CACHE_DIR",
    str(Path(os.getenv("XDG_CACHE_HOME", Path.home() / ".cache")) / "wasmbench"),
))


def check_cache_dir(cache_dir: Path):
    """
    Refuse a cache directory other users could write to

    Cached entries are native code, so the directory must belong to the
    current user and must not be group or world writable.

    Raises:
        CacheError: the directory is not private to this user
    """
    info = cache_dir.stat()
    if hasattr(os, "getuid") and info.st_uid != os.getuid():
        raise CacheError(cache_dir, f"owned by uid {info.st_uid}, not {os.getuid()}")
    if info.st_mode & (stat.S_IWGRP | stat.S_IWOTH):
        mode = stat.S_IMODE(info.st_mode)
        raise CacheError(cache_dir, f"writable by other users (mode {mode:o})")


class ModuleCache:
    """
    Cache for compiled modules

    Entries are keyed by a digest of the module bytes. Compiled artifacts
    are engine-specific, so the disk copy is only reused by an engine with
    a compatible configuration; wasmtime rejects anything else and the
    entry is dropped.
    """

    def __init__(self, cache_dir: Optional[Path] = None):
        if cache_dir is None:
            cache_dir = CACHE_DIR

        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True, mode=0o700)
        check_cache_dir(self.cache_dir)

        # In-memory cache for this session
        self._memory_cache = {}

    def _compute_key(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()

    def get(self, data: bytes, engine: wasmtime.Engine) -> Optional[wasmtime.Module]:
        """
        Get a compiled module for these bytes

        Returns:
            Compiled module if cached, None otherwise
        """
        key = self._compute_key(data)

        # Memory entries are tied to the engine that compiled them
        cached = self._memory_cache.get(key)
        if cached is not None and cached[0] is engine:
            return cached[1]

        cache_file = self.cache_dir / f"{key}.cwasm"
        if cache_file.exists():
            try:
                module = wasmtime.Module.deserialize(engine, cache_file.read_bytes())
            except (OSError, wasmtime.WasmtimeError) as exc:
                logger.debug("dropping unusable cache entry %s: %s", cache_file.name, exc)
                cache_file.unlink(missing_ok=True)
                return None

            self._memory_cache[key] = (engine, module)
            return module

        return None

    def put(self, data: bytes, module: wasmtime.Module, engine: Optional[wasmtime.Engine] = None):
        """
        Store a compiled module

        Args:
            data: Module bytes the module was compiled from
            module: Compiled module
            engine: Engine the module belongs to (for memory lookups)
        """
        key = self._compute_key(data)

        if engine is not None:
            self._memory_cache[key] = (engine, module)

        cache_file = self.cache_dir / f"{key}.cwasm"
        try:
            cache_file.write_bytes(bytes(module.serialize()))
        except (OSError, wasmtime.WasmtimeError) as exc:
            # Memory cache still serves this engine
            logger.debug("could not persist %s: %s", cache_file.name, exc)

    def clear(self):
        """Clear all caches"""
        self._memory_cache.clear()

        for cache_file in self.cache_dir.glob("*.cwasm"):
            cache_file.unlink(missing_ok=True)

    def info(self):
        """Print cache statistics"""
        memory_entries = len(self._memory_cache)
        disk_entries = len(list(self.cache_dir.glob("*.cwasm")))

        print(f"Cache Info:")
        print(f"  Memory entries: {memory_entries}")
        print(f"  Disk entries: {disk_entries}")
        print(f"  Cache directory: {self.cache_dir}")


_global_cache: Optional[ModuleCache] = None


def get_cache() -> ModuleCache:
    """Get global module cache"""
    global _global_cache
    if _global_cache is None:
        _global_cache = ModuleCache()
    return _global_cache
