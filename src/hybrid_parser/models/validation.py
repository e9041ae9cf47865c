"""Validation report and capability models."""

from enum import Enum

from pydantic import BaseModel, Field


class ValidationSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ValidationIssue(BaseModel):
    """A single problem found while validating a ``ResponseNode``."""

    message: str
    severity: ValidationSeverity
    call_id: str | None = None

    model_config = {"frozen": True}


class ValidationResult(BaseModel):
    """Outcome of ``HybridParser.validate``.

    Attributes:
        is_valid: False if any issue has error severity.
        issues: Every issue found, in discovery order.
    """

    is_valid: bool = True
    issues: tuple[ValidationIssue, ...] = ()

    model_config = {"frozen": True}

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> "ValidationResult":
        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        return cls(is_valid=not has_errors, issues=tuple(issues))

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]


class ParserCapabilities(BaseModel):
    """Feature discovery for a parser."""

    supports_streaming: bool = False
    supports_tool_calls: bool = True
    supported_formats: list[str] = Field(default_factory=list)
