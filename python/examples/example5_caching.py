#!/usr/bin/env python3
"""
Example 5: Demonstrate module caching
"""

import sys
import time
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import wasmtime
import wasmbench as wb

print("=" * 70)
print("  Module Caching Demo")
print("=" * 70)
print()

source = wb.BinarySource.resolve("fib_opt.wasm")
engine = wasmtime.Engine()

# Clear cache to start fresh
wb.get_cache().clear()

print("Test 1: First compile (cache miss)")
print("-" * 70)
start = time.perf_counter()
wb.compile_module(source, engine=engine, use_cache=True, verbose=True)
first_time = (time.perf_counter() - start) * 1000
print(f"Time: {first_time:.2f}ms")
print()

print("Test 2: Second compile (cache hit)")
print("-" * 70)
start = time.perf_counter()
wb.compile_module(source, engine=engine, use_cache=True, verbose=True)
second_time = (time.perf_counter() - start) * 1000
print(f"Time: {second_time:.2f}ms")
print()

print("Test 3: Fresh engine (disk hit)")
print("-" * 70)
start = time.perf_counter()
module = wb.compile_module(source, engine=wasmtime.Engine(), use_cache=True, verbose=True)
disk_time = (time.perf_counter() - start) * 1000
print(f"Time: {disk_time:.2f}ms")
print()

result = wb.invoke(wb.instantiate(module), "fib", [20])
print(f"Cached module still works: {result}")
print()

wb.get_cache().info()
