"""Error types and load diagnostics for the journal store."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DreamlogError(Exception):
    """Base class for dreamlog errors."""


class EntryValidationError(DreamlogError):
    """Raised when a new entry is rejected at creation time."""


class LoadIssue(BaseModel):
    """A stored record that could not be turned into an entry."""

    index: int
    reason: str
    record_id: str = ""


class LoadReport(BaseModel):
    """Outcome of reading the entry store."""

    source: str = ""
    loaded: int = 0
    issues: list[LoadIssue] = Field(default_factory=list)

    def add_issue(self, index: int, reason: str, *, record_id: str = "") -> None:
        self.issues.append(LoadIssue(index=index, reason=reason, record_id=record_id))

    @property
    def skipped(self) -> int:
        return len(self.issues)

    @property
    def clean(self) -> bool:
        """True if every stored record was loaded."""
        return not self.issues

    def summary_text(self) -> str:
        """Human-readable summary of the load."""
        lines = [f"Loaded {self.loaded} entries" + (f" from {self.source}" if self.source else "")]
        if self.issues:
            lines.append(f"Skipped: {self.skipped}")
            for issue in self.issues[:5]:
                label = f" ({issue.record_id})" if issue.record_id else ""
                lines.append(f"  record {issue.index}{label}: {issue.reason}")
            if len(self.issues) > 5:
                lines.append(f"  ... and {len(self.issues) - 5} more")
        return "\n".join(lines)
