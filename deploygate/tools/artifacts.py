"""
Build Artifact Tools

Archives gate inputs and verdicts to the local filesystem so the CI host can
publish them alongside the build.

Layout:
    {archive_dir}/{build_id}/validation_report.json - raw report as received
    {archive_dir}/{build_id}/verdict.json - verdict as JSON
    {archive_dir}/{build_id}/validation_summary.txt - human-readable summary
    {archive_dir}/{build_id}/pmd_report.json - raw PMD report (pmd gate)
    {archive_dir}/{build_id}/pmd_verdict.json
    {archive_dir}/{build_id}/pmd_summary.txt
"""

import json
from pathlib import Path

import structlog

from deploygate.schemas import StaticAnalysisVerdict, Verdict

logger = structlog.get_logger()


class ArtifactWriter:
    """Writes artifacts for one build into its own directory."""

    def __init__(self, archive_dir: str, build_id: str):
        """
        Initialize artifact writer.

        Args:
            archive_dir: Root directory shared by all builds
            build_id: Build identifier, used as the folder name
        """
        if not build_id or Path(build_id).name != build_id or build_id in (".", ".."):
            raise ValueError(f"Invalid build id for an archive folder: {build_id!r}")

        self.build_id = build_id
        self.base_path = Path(archive_dir) / build_id

    async def write_bytes(self, filename: str, content: bytes) -> Path:
        """Write raw content unchanged."""
        self.base_path.mkdir(parents=True, exist_ok=True)
        path = self.base_path / filename
        path.write_bytes(content)
        logger.info("artifact_written", path=str(path), size=len(content))
        return path

    async def write_text(self, filename: str, content: str) -> Path:
        return await self.write_bytes(filename, content.encode("utf-8"))

    async def write_json(self, filename: str, data: dict) -> Path:
        content = json.dumps(data, indent=2)
        return await self.write_text(filename, content + "\n")


async def archive_validation_run(
    raw_report: bytes,
    verdict: Verdict,
    archive_dir: str,
    build_id: str,
) -> Path:
    """
    Save the raw validation report, its verdict and summary.

    Returns:
        Directory holding this build's artifacts
    """
    writer = ArtifactWriter(archive_dir, build_id)
    await writer.write_bytes("validation_report.json", raw_report)
    await writer.write_json("verdict.json", verdict.model_dump(mode="json"))
    await writer.write_text("validation_summary.txt", verdict.summary() + "\n")

    logger.info(
        "artifacts_saved_locally",
        output_dir=str(writer.base_path),
        outcome=verdict.outcome,
    )
    return writer.base_path


async def archive_static_analysis_run(
    raw_report: bytes,
    verdict: StaticAnalysisVerdict,
    archive_dir: str,
    build_id: str,
) -> Path:
    """Save the raw PMD report, its verdict and summary."""
    writer = ArtifactWriter(archive_dir, build_id)
    await writer.write_bytes("pmd_report.json", raw_report)
    await writer.write_json("pmd_verdict.json", verdict.model_dump(mode="json"))
    await writer.write_text("pmd_summary.txt", verdict.summary() + "\n")

    logger.info(
        "artifacts_saved_locally",
        output_dir=str(writer.base_path),
        outcome=verdict.outcome,
    )
    return writer.base_path
