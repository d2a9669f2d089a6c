#!/usr/bin/env python3
"""
Example 4: Correctness validation against the Python reference
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import wasmbench as wb
from wasmbench.reference import fib

print("=" * 70)
print("  Correctness Validation: WASM vs Python")
print("=" * 70)
print()

for name in ["fib.wasm", "fib_opt.wasm"]:
    print(f"Testing {name}...")
    handle = wb.load_sync(wb.BinarySource.resolve(name))
    export = handle.lookup("fib")

    failures = 0
    for n in range(0, 25):
        expected = fib(n)
        actual = export(n)
        if actual != expected:
            failures += 1
            print(f"  ✗ fib({n}): got {actual}, expected {expected}")

    if failures == 0:
        print(f"  ✓ fib(0..24): PASS")
    print()

print("=" * 70)
print("  All correctness checks completed!")
print("=" * 70)
