#!/usr/bin/env python3
"""
Example 3: Separate compile, instantiate and call costs
"""

import sys
import time
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import wasmbench as wb

print("=" * 70)
print("  Cold Start vs Warm Invocation")
print("=" * 70)
print()

print(f"{'Module':<15} {'Compile (ms)':<15} {'Instantiate (ms)':<18} {'Call (ms)':<12}")
print("-" * 70)

for name in ["fib.wasm", "fib_opt.wasm"]:
    source = wb.BinarySource.resolve(name)

    start = time.perf_counter()
    module = wb.compile_module(source)
    compile_time = (time.perf_counter() - start) * 1000

    start = time.perf_counter()
    handle = wb.instantiate(module)
    instantiate_time = (time.perf_counter() - start) * 1000

    result = wb.invoke(handle, "fib", [25])

    print(f"{name:<15} {compile_time:<15.2f} {instantiate_time:<18.2f} {result.elapsed_ms:<12.2f}")

print()
print("INTERPRETATION:")
print("- Compile: parse, validate and generate machine code (cacheable)")
print("- Instantiate: bind the compiled module to a fresh store (cheap)")
print("- Call: the only part the benchmark report measures")
