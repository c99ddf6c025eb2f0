"""Tests for sequence reports and the fibext command line."""

from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

from fibext.config import FeatureDisabledError, FeatureFlags
from fibext.report import SequenceReport, main, sequence_report, write_sequence_report


def test_sequence_report_structure() -> None:
    report = sequence_report(10)
    assert isinstance(report, SequenceReport)
    assert report.element_type == "u64"
    assert report.policy == "checked"
    assert report.terms == [0, 1, 1, 2, 3, 5, 8, 13, 21, 34]
    assert not report.exhausted


def test_sequence_report_stops_at_overflow() -> None:
    report = sequence_report(50, "u8", "checked")
    assert len(report.terms) == 12
    assert report.requested == 50
    assert report.exhausted


def test_sequence_report_validates_count() -> None:
    with pytest.raises(ValueError):
        sequence_report(-1)
    with pytest.raises(TypeError):
        sequence_report(True)


def test_sequence_report_requires_iterator_feature() -> None:
    with pytest.raises(FeatureDisabledError):
        sequence_report(3, features=FeatureFlags(iterator=False))


def test_write_sequence_report(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "fibonacci.json"
    report = sequence_report(5, "u16", "wrapping")
    path = write_sequence_report(report, target, indent=0)
    assert path == target
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data == {
        "element_type": "u16",
        "policy": "wrapping",
        "requested": 5,
        "terms": [0, 1, 1, 2, 3],
        "exhausted": False,
    }


def test_cli_text_output_reports_exhaustion(capsys) -> None:
    assert main(["--count", "20", "--type", "u8"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[:12] == ["0", "1", "1", "2", "3", "5", "8", "13", "21", "34", "55", "89"]
    assert lines[12] == "-- u8 sequence exhausted after 12 terms"


def test_cli_json_output_with_wrapping_policy(capsys) -> None:
    assert main(["--count", "16", "--type", "u8", "--policy", "wrapping", "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["terms"][-2:] == [121, 98]
    assert payload["exhausted"] is False


def test_cli_biguint_needs_feature(capsys) -> None:
    assert main(["--type", "biguint"]) == 2
    assert main(["--type", "biguint", "--features", "large-numbers", "--count", "3"]) == 0
    assert capsys.readouterr().out.splitlines() == ["0", "1", "1"]


def test_cli_reads_feature_config(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "features.yaml"
    config_path.write_text("features: [large-numbers]\n", encoding="utf-8")
    output = tmp_path / "report.json"
    exit_code = main(
        [
            "--type",
            "biguint",
            "--count",
            "100",
            "--config",
            str(config_path),
            "--output",
            str(output),
            "--format",
            "json",
        ]
    )
    assert exit_code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["terms"][99] == 218922995834555169026
    assert json.loads(capsys.readouterr().out) == data


def test_cli_rejects_unknown_feature() -> None:
    assert main(["--features", "simd"]) == 2


def test_cli_rejects_config_with_no_default_features(tmp_path: Path, capsys) -> None:
    config_path = tmp_path / "features.yaml"
    config_path.write_text("features: [large-numbers]\n", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["--no-default-features", "--config", str(config_path)])
    assert excinfo.value.code == 2
    assert "not allowed with argument" in capsys.readouterr().err


def test_cli_no_default_features_selects_wrapping(capsys) -> None:
    argv = ["--no-default-features", "--features", "iterator", "--type", "u8", "--count", "15"]
    assert main(argv) == 0
    assert capsys.readouterr().out.splitlines()[-1] == "121"


@pytest.mark.integration
def test_module_execution() -> None:
    """Execute the package as a script to ensure CLI wiring functions."""

    completed = subprocess.run(  # noqa: S603  # trusted input
        [sys.executable, "-m", "fibext", "--count", "6", "--format", "json"],
        check=True,
        capture_output=True,
        text=True,
        cwd=Path(__file__).parents[2],
    )
    payload = json.loads(completed.stdout)
    assert payload["terms"] == [0, 1, 1, 2, 3, 5]
