"""PmdReport data model - output of PMD's JSON renderer."""

from typing import Iterator

from pydantic import BaseModel, Field


class PmdViolation(BaseModel):
    """A single rule violation."""

    beginline: int | None = Field(None, description="First line of the violation")
    endline: int | None = Field(None, description="Last line of the violation")
    rule: str = Field(..., description="Rule name (e.g., ApexCRUDViolation)")
    ruleset: str | None = Field(None, description="Ruleset the rule belongs to")
    priority: int = Field(..., ge=1, le=5, description="1 (most severe) to 5")
    description: str = Field("", description="Violation message")
    external_info_url: str | None = Field(None, alias="externalInfoUrl")

    class Config:
        populate_by_name = True
        frozen = True


class PmdFile(BaseModel):
    """Violations found in one source file."""

    filename: str = Field(..., description="Analysed file path")
    violations: list[PmdViolation] = Field(default_factory=list)

    class Config:
        frozen = True


class PmdProcessingError(BaseModel):
    """A file PMD failed to parse or analyse."""

    filename: str | None = Field(None, description="File that could not be processed")
    message: str = Field("", description="Error message")

    class Config:
        frozen = True


class PmdReport(BaseModel):
    """Complete PMD JSON report."""

    format_version: int | None = Field(None, alias="formatVersion")
    pmd_version: str | None = Field(None, alias="pmdVersion")
    files: list[PmdFile] = Field(default_factory=list)
    processing_errors: list[PmdProcessingError] = Field(
        default_factory=list, alias="processingErrors"
    )

    class Config:
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "formatVersion": 0,
                "pmdVersion": "7.0.0",
                "files": [
                    {
                        "filename": "force-app/main/default/classes/AccountService.cls",
                        "violations": [
                            {
                                "beginline": 14,
                                "endline": 14,
                                "rule": "ApexCRUDViolation",
                                "ruleset": "Security",
                                "priority": 3,
                                "description": "Validate CRUD permission before SOQL/DML operation",
                            }
                        ],
                    }
                ],
                "processingErrors": [],
            }
        }

    def iter_violations(self) -> Iterator[tuple[str, PmdViolation]]:
        for pmd_file in self.files:
            for violation in pmd_file.violations:
                yield pmd_file.filename, violation
