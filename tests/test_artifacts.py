"""Tests for build artifact archiving."""

import json

import pytest

from deploygate.evaluator import evaluate
from deploygate.static_analysis import evaluate_pmd
from deploygate.tools.artifacts import (
    ArtifactWriter,
    archive_static_analysis_run,
    archive_validation_run,
)

FAILED_REPORT = (
    b'{"result": {"success": false, "details": '
    b'{"componentFailures": {"fileName": "Foo.cls", "problem": "Missing field"}}}}'
)


@pytest.mark.asyncio
async def test_archive_validation_run_writes_all_artifacts(tmp_path):
    """Raw report is kept byte-for-byte next to the verdict and summary."""
    verdict = evaluate(FAILED_REPORT)

    output_dir = await archive_validation_run(
        raw_report=FAILED_REPORT,
        verdict=verdict,
        archive_dir=str(tmp_path),
        build_id="42",
    )

    assert output_dir == tmp_path / "42"
    assert (output_dir / "validation_report.json").read_bytes() == FAILED_REPORT

    saved = json.loads((output_dir / "verdict.json").read_text())
    assert saved["outcome"] == "failed"
    assert saved["component_failure_count"] == 1
    assert saved["component_failures"][0]["file_name"] == "Foo.cls"

    summary = (output_dir / "validation_summary.txt").read_text()
    assert "Foo.cls: Missing field" in summary


@pytest.mark.asyncio
async def test_archive_static_analysis_run(tmp_path):
    raw = b'{"files": [], "processingErrors": []}'
    verdict = evaluate_pmd(raw)

    output_dir = await archive_static_analysis_run(
        raw_report=raw,
        verdict=verdict,
        archive_dir=str(tmp_path / "reports"),
        build_id="20261019-101500",
    )

    assert (output_dir / "pmd_report.json").read_bytes() == raw
    assert json.loads((output_dir / "pmd_verdict.json").read_text())["outcome"] == "passed"
    assert (output_dir / "pmd_summary.txt").read_text().startswith("Static analysis PASS")


@pytest.mark.asyncio
async def test_writer_creates_nested_directories(tmp_path):
    writer = ArtifactWriter(str(tmp_path / "a" / "b"), "7")

    path = await writer.write_json("data.json", {"ok": True})

    assert path.parent == tmp_path / "a" / "b" / "7"
    assert json.loads(path.read_text()) == {"ok": True}


@pytest.mark.parametrize("build_id", ["", ".", "..", "../escape", "a/b"])
def test_writer_rejects_path_like_build_ids(tmp_path, build_id):
    with pytest.raises(ValueError, match="build id"):
        ArtifactWriter(str(tmp_path), build_id)
