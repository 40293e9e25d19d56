"""Favorite-related Data Transfer Objects (DTOs).

This module contains DTOs for favorites found during a cleanup scan.
"""

from dataclasses import dataclass, field

from favorites_cleanup.env import FAVORITES_SUBCOLLECTION, USERS_COLLECTION
from favorites_cleanup.utils.paths import favorite_path


@dataclass(frozen=True, order=True)
class OrphanedFavorite:
    """A favorite whose bot no longer exists.

    Instances order by ``(user_id, favorite_id)``.
    """

    user_id: str
    favorite_id: str
    users_collection: str = field(default=USERS_COLLECTION, compare=False)
    favorites_subcollection: str = field(default=FAVORITES_SUBCOLLECTION, compare=False)

    @property
    def path(self) -> str:
        return favorite_path(
            self.user_id,
            self.favorite_id,
            users_collection=self.users_collection,
            favorites_subcollection=self.favorites_subcollection,
        )

    @property
    def segments(self) -> tuple:
        """Alternating collection / document segments for ``delete_document``."""
        return (self.users_collection, self.user_id, self.favorites_subcollection, self.favorite_id)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "favorite_id": self.favorite_id,
            "path": self.path,
        }

