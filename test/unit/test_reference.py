"""Tests for the Python reference implementations."""

import pytest

from wasmbench.reference import fib


@pytest.mark.parametrize("n, expected", [(0, 0), (1, 1), (2, 1), (10, 55), (20, 6765)])
def test_fib_values(n, expected) -> None:
    assert fib(n) == expected


def test_fib_negative_input_is_returned_unchanged() -> None:
    assert fib(-3) == -3


def test_fib_recurrence() -> None:
    for n in range(2, 18):
        assert fib(n) == fib(n - 1) + fib(n - 2)
