"""Data Transfer Objects (DTOs) for the favorites cleanup job.

All DTOs can be imported directly from this package for convenience:
    from favorites_cleanup.models import OrphanedFavorite, RunResult
"""

# Favorite DTOs
from favorites_cleanup.models.favorites import OrphanedFavorite

# Run DTOs
from favorites_cleanup.models.runs import (
    FailedDeletion,
    RunResult,
    RunStatistics,
    RunStatus,
)

__all__ = [
    # Favorites
    "OrphanedFavorite",
    # Runs
    "FailedDeletion",
    "RunResult",
    "RunStatistics",
    "RunStatus",
]
