"""
checks/types.py - Verification result model

Every check returns VerificationResult entries; an all-OK list is a normal
outcome. Results are plain values so rendering stays in the CLI layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class Severity(Enum):
    """Finding severity, ordered by operator urgency"""

    OK = "ok"
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class VerificationResult:
    """A single graded finding

    Attributes:
        message: Human readable description
        severity: Severity grade
        check: Identifier of the finding class (e.g. "subnet_missing_cluster_tag")
    """

    message: str
    severity: Severity
    check: str = ""

    @classmethod
    def ok(cls, message: str, check: str = "") -> VerificationResult:
        return cls(message, Severity.OK, check)

    @classmethod
    def info(cls, message: str, check: str = "") -> VerificationResult:
        return cls(message, Severity.INFO, check)

    @classmethod
    def warning(cls, message: str, check: str = "") -> VerificationResult:
        return cls(message, Severity.WARNING, check)

    @classmethod
    def critical(cls, message: str, check: str = "") -> VerificationResult:
        return cls(message, Severity.CRITICAL, check)


class Verifier(Protocol):
    """Anything that produces an ordered list of findings"""

    def verify(self) -> list[VerificationResult]: ...
