"""Collection and reporting of problems found in an OpenAPI document."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found at a location in the spec."""

    location: str
    kind: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind}] {self.location}: {self.message}"


class SpecValidationError(ValueError):
    """Raised when an OpenAPI document has one or more validation issues."""

    def __init__(self, issues: Iterable[ValidationIssue]) -> None:
        self.issues: tuple[ValidationIssue, ...] = tuple(issues)
        super().__init__("\n".join(str(issue) for issue in self.issues))


def print_issues(issues: Iterable[ValidationIssue]) -> None:
    """Write a human-readable report of ``issues`` to standard error."""
    issues = list(issues)
    out = sys.stderr
    print(
        f"\n❌ OpenAPI spec validation failed. {len(issues)} issue(s) found:\n",
        file=out,
    )
    for issue in issues:
        print(issue, file=out)
    print(
        "\nPlease fix the issues in your OpenAPI spec before starting the server.\n",
        file=out,
    )


def fail_if_issues(issues: Iterable[ValidationIssue]) -> None:
    """Raise :class:`SpecValidationError` if any issues were collected."""
    issues = list(issues)
    if issues:
        raise SpecValidationError(issues)