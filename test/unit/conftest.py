"""
Shared pytest fixtures

Small modules are written in WebAssembly text (see wat_sources.py) and
assembled with wasmtime.wat2wasm, so every test works against real binaries.
"""

import logging
from pathlib import Path

import pytest
import wasmtime

from wasmbench.cache import ModuleCache
from wasmbench.core import BinarySource

from wat_sources import DIV_WAT, FIB_WAT, NOOP_WAT


@pytest.fixture()
def write_module(tmp_path: Path):
    """Assemble WAT text into a .wasm file and return its BinarySource"""

    def _write(wat: str, name: str = "module.wasm") -> BinarySource:
        path = tmp_path / name
        path.write_bytes(bytes(wasmtime.wat2wasm(wat)))
        return BinarySource(path)

    return _write


@pytest.fixture()
def fib_source(write_module) -> BinarySource:
    return write_module(FIB_WAT, "fib.wasm")


@pytest.fixture()
def noop_source(write_module) -> BinarySource:
    return write_module(NOOP_WAT, "noop.wasm")


@pytest.fixture()
def div_source(write_module) -> BinarySource:
    return write_module(DIV_WAT, "div.wasm")


@pytest.fixture()
def module_cache(tmp_path: Path, monkeypatch) -> ModuleCache:
    """A cache in a temp dir, installed as the loader's cache"""
    cache = ModuleCache(tmp_path / "cache")
    monkeypatch.setattr("wasmbench.core.get_cache", lambda: cache)
    return cache


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers main() installs so they don't outlive captured streams"""
    yield
    logging.getLogger("wasmbench").handlers.clear()
