"""Run-level Data Transfer Objects (DTOs).

This module contains the statistics and result objects produced by one
cleanup run.
"""

from dataclasses import dataclass, asdict, field
from typing import List, Literal, Optional

from favorites_cleanup.models.favorites import OrphanedFavorite

RunStatus = Literal["clean", "dry_run", "cancelled", "completed"]


@dataclass
class RunStatistics:
    """Counters accumulated over the scan and delete phases."""

    total_users: int = 0
    users_with_favorites: int = 0
    total_favorites: int = 0
    orphaned_favorites: int = 0
    deleted_favorites: int = 0
    failed_deletions: int = 0

    def to_dict(self) -> dict:
        return asdict(self)

    def summary_rows(self) -> List[tuple]:
        return [
            ("Total users", self.total_users),
            ("Users with favorites", self.users_with_favorites),
            ("Total favorites", self.total_favorites),
            ("Orphaned favorites found", self.orphaned_favorites),
        ]


@dataclass
class FailedDeletion:
    orphan: OrphanedFavorite
    error: str

    def to_dict(self) -> dict:
        data = self.orphan.to_dict()
        data["error"] = self.error
        return data


@dataclass
class RunResult:
    """Outcome of a run that reached the ``Done`` state."""

    status: RunStatus
    statistics: RunStatistics
    orphans: List[OrphanedFavorite] = field(default_factory=list)
    failed: List[FailedDeletion] = field(default_factory=list)
    dry_run: bool = False
    message: Optional[str] = None

    @property
    def exit_code(self) -> int:
        # per-item failures are reported, never fatal
        return 0

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "dry_run": self.dry_run,
            "message": self.message,
            "exit_code": self.exit_code,
            "statistics": self.statistics.to_dict(),
            "orphans": [orphan.to_dict() for orphan in self.orphans],
            "failed": [failure.to_dict() for failure in self.failed],
        }
