from .cleanup_favorites import CleanupConfig, FavoritesCleanup, JobState, run

__all__ = ["CleanupConfig", "FavoritesCleanup", "JobState", "run"]
