#!/usr/bin/env python3
"""
Example 1: Run a compiled module once
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import wasmbench as wb

print("=" * 70)
print("  wasmbench - Run a Module")
print("=" * 70)
print()

n = 30
source = wb.BinarySource.resolve("fib.wasm")

print(f"Module: {source}")
print("-" * 70)

handle = wb.load_sync(source, verbose=True)
for name, export in handle.exports.items():
    print(f"  export {name}{export.signature}")
print()

result = wb.run_module(source, "fib", [n])
print(f"fib({n}) = {result}")
print()

print("✓ Module ran successfully!")
