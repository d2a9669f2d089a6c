"""
Tests for the comparison reporter and the process entry point.
"""

import io
import logging

import pytest

from wasmbench.benchmark import (
    BenchmarkReport,
    Candidate,
    compare_sync,
    default_candidates,
    main,
)
from wasmbench.core import BinarySource
from wasmbench.errors import CompileError, ExportNotFoundError, LoadError
from wasmbench.reference import fib


class TestCandidate:
    def test_needs_a_source_or_reference(self) -> None:
        with pytest.raises(ValueError):
            Candidate("Nothing")

    def test_cannot_have_both(self) -> None:
        with pytest.raises(ValueError):
            Candidate("Both", source=BinarySource.resolve("fib.wasm"), reference=fib)

    def test_kinds(self) -> None:
        assert Candidate("Reference", reference=fib).is_reference
        assert not Candidate("Module", source=BinarySource.resolve("fib.wasm")).is_reference


class TestScenario:
    def test_fib_30_across_all_candidates(self) -> None:
        stream = io.StringIO()
        report = compare_sync(default_candidates(), export_name="fib", args=[30], stream=stream)

        assert isinstance(report, BenchmarkReport)
        assert report.labels == ["Unoptimized", "Optimized", "Reference"]
        assert report.values == [832040, 832040, 832040]
        assert all(r.elapsed_ms >= 0 for r in report)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 3
        for line, label in zip(lines, report.labels):
            assert line.startswith(f"{label} fib(30) = 832040 | Time: ")
            assert line.endswith(" ms")
        assert lines == report.lines()

    def test_order_follows_input(self) -> None:
        candidates = list(reversed(default_candidates()))
        stream = io.StringIO()
        report = compare_sync(candidates, args=[10], stream=stream)
        assert report.labels == ["Reference", "Optimized", "Unoptimized"]

    @pytest.mark.parametrize("n", [0, 1, 2, 7, 19, 24])
    def test_reference_parity(self, n) -> None:
        report = compare_sync(default_candidates(), args=[n], stream=io.StringIO())
        assert len(set(report.values)) == 1
        assert report.values[0] == fib(n)

    def test_printed_call_uses_actual_argument(self) -> None:
        stream = io.StringIO()
        compare_sync(default_candidates(), args=[12], stream=stream)
        assert all("fib(12) = 144" in line for line in stream.getvalue().splitlines())

    def test_writes_to_stdout_by_default(self, capsys) -> None:
        compare_sync([Candidate("Reference", reference=fib)], args=[5])
        assert capsys.readouterr().out.startswith("Reference fib(5) = 5 | Time: ")


class TestFailures:
    def test_earlier_lines_survive_a_load_failure(self, tmp_path) -> None:
        stream = io.StringIO()
        candidates = [
            Candidate("Unoptimized", source=BinarySource.resolve("fib.wasm")),
            Candidate("Missing", source=BinarySource(tmp_path / "missing.wasm")),
            Candidate("Reference", reference=fib),
        ]

        with pytest.raises(LoadError):
            compare_sync(candidates, args=[15], stream=stream)

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert lines[0].startswith("Unoptimized fib(15) = 610")

    def test_invalid_module_aborts_the_run(self, tmp_path) -> None:
        bad = tmp_path / "bad.wasm"
        bad.write_bytes(b"\x00asm\x01\x00\x00\x00\xff")
        stream = io.StringIO()
        candidates = [
            Candidate("Reference", reference=fib),
            Candidate("Broken", source=BinarySource(bad)),
            Candidate("Optimized", source=BinarySource.resolve("fib_opt.wasm")),
        ]

        with pytest.raises(CompileError):
            compare_sync(candidates, args=[8], stream=stream)
        assert len(stream.getvalue().splitlines()) == 1
        assert stream.getvalue().startswith("Reference fib(8) = 21")

    def test_missing_export_aborts_the_run(self, noop_source) -> None:
        stream = io.StringIO()
        with pytest.raises(ExportNotFoundError):
            compare_sync([Candidate("Noop", source=noop_source)], args=[1], stream=stream)
        assert stream.getvalue() == ""


class TestMain:
    def test_default_scenario_exits_zero(self, capsys) -> None:
        assert main() == 0
        lines = capsys.readouterr().out.splitlines()
        assert [line.split()[0] for line in lines] == ["Unoptimized", "Optimized", "Reference"]
        assert all("fib(30) = 832040" in line for line in lines)

    def test_injected_candidates_and_args(self, fib_source) -> None:
        stream = io.StringIO()
        code = main([Candidate("Local", source=fib_source)], args=[11], stream=stream)
        assert code == 0
        assert stream.getvalue().startswith("Local fib(11) = 89 | Time: ")

    def test_failure_exits_non_zero_and_logs(self, tmp_path, caplog) -> None:
        stream = io.StringIO()
        candidates = [
            Candidate("Reference", reference=fib),
            Candidate("Missing", source=BinarySource(tmp_path / "gone.wasm")),
        ]

        with caplog.at_level(logging.ERROR, logger="wasmbench"):
            code = main(candidates, args=[6], stream=stream)

        assert code == 1
        assert stream.getvalue().startswith("Reference fib(6) = 8")
        assert any("gone.wasm" in record.getMessage() for record in caplog.records)
