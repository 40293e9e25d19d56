"""
Orphaned favorites cleanup for the AI bots app.

Users favorite bots; each favorite lives at ``users/{uid}/favorites/{botId}``.
When a bot is deleted its favorites are left behind. This package finds those
orphans by diffing every user's favorites against the bots collection and
deletes them, with dry-run and confirmation gates.
"""

from .pipeline.cleanup_favorites import CleanupConfig, FavoritesCleanup, run

__all__ = ["CleanupConfig", "FavoritesCleanup", "run"]
