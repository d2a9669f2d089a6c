"""
Reference implementations written directly in Python
"""


def fib(n: int) -> int:
    """Naive recursive Fibonacci; returns n unchanged for n < 2"""
    if n < 2:
        return n
    return fib(n - 1) + fib(n - 2)
