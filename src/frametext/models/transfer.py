"""Models for leaf assignments and transfer reports."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

TRANSFERRED = "transferred"


class SkipReason(StrEnum):
    """Why a source leaf's content was not transferred."""

    NO_CANDIDATE = "no-candidate"
    ALL_CANDIDATES_CLAIMED = "all-candidates-claimed"
    TARGET_LOCKED = "target-locked"
    WRITE_FAILED = "write-failed"


@dataclass(frozen=True)
class Candidate:
    """A (source, target) leaf pair with a nonzero match score."""

    source_index: int
    target_index: int
    score: float


@dataclass(frozen=True)
class Assignment:
    """Resolved source-to-target mapping.

    Every source index appears either in ``pairs`` or in ``unmapped``.
    No two pairs share a target index. ``breakdowns`` holds the nonzero
    per-signal contributions of each paired source, keyed like ``pairs``.
    """

    pairs: dict[int, Candidate] = field(default_factory=dict)
    unmapped: dict[int, SkipReason] = field(default_factory=dict)
    breakdowns: dict[int, dict[str, float]] = field(default_factory=dict)

    def target_for(self, source_index: int) -> int | None:
        candidate = self.pairs.get(source_index)
        return candidate.target_index if candidate else None


@dataclass(frozen=True)
class TransferDetail:
    """Outcome for one source leaf."""

    source_index: int
    outcome: str
    message: str
    target_index: int | None = None
    score: float | None = None
    error: str | None = None
    signals: dict[str, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "source_index": self.source_index,
            "outcome": self.outcome,
            "message": self.message,
        }
        if self.target_index is not None:
            data["target_index"] = self.target_index
        if self.score is not None:
            data["score"] = self.score
        if self.error is not None:
            data["error"] = self.error
        if self.signals:
            data["signals"] = dict(self.signals)
        return data


@dataclass
class TransferReport:
    """Accumulates per-leaf outcomes over one paste."""

    transferred: int = 0
    skipped: int = 0
    details: list[TransferDetail] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.transferred + self.skipped

    def record_transfer(
        self,
        source_index: int,
        target_index: int,
        score: float,
        message: str,
        *,
        signals: dict[str, float] | None = None,
    ) -> None:
        self.transferred += 1
        self.details.append(
            TransferDetail(
                source_index=source_index,
                outcome=TRANSFERRED,
                message=message,
                target_index=target_index,
                score=score,
                signals=signals,
            )
        )

    def record_skip(
        self,
        source_index: int,
        reason: SkipReason,
        message: str,
        *,
        target_index: int | None = None,
        error: str | None = None,
    ) -> None:
        self.skipped += 1
        self.details.append(
            TransferDetail(
                source_index=source_index,
                outcome=reason.value,
                message=message,
                target_index=target_index,
                error=error,
            )
        )

    def skipped_with(self, reason: SkipReason) -> list[TransferDetail]:
        """Return the details skipped for the given reason."""
        return [d for d in self.details if d.outcome == reason.value]

    def to_dict(self) -> dict[str, Any]:
        return {
            "mapped": self.transferred,
            "skipped": self.skipped,
            "total": self.total,
            "details": [d.to_dict() for d in self.details],
        }
