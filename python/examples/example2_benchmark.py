#!/usr/bin/env python3
"""
Example 2: Compare unoptimized and optimized builds against Python
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import wasmbench as wb

report = wb.compare_sync(wb.default_candidates(), export_name="fib", args=[30])

reference = report[-1]
print()
for result in report[:-1]:
    speedup = reference.elapsed_ms / result.elapsed_ms if result.elapsed_ms > 0 else 0
    print(f"{result.label:<12} {speedup:>8.2f}x vs {reference.label}")
