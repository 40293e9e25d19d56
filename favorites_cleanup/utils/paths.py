"""Utility functions for constructing Firestore document paths."""

from favorites_cleanup.env import FAVORITES_SUBCOLLECTION, USERS_COLLECTION

__all__ = [
    "document_path",
    "favorite_path",
]


def document_path(*segments: str) -> str:
    """Join alternating collection / document segments into a path.

    Args:
        segments: Collection name, document ID, subcollection name, ...

    Returns:
        Slash-separated document path
    """
    if not segments:
        raise ValueError("document_path needs at least one segment")
    return "/".join(str(segment).strip("/") for segment in segments)


def favorite_path(
    user_id: str,
    favorite_id: str,
    users_collection: str = USERS_COLLECTION,
    favorites_subcollection: str = FAVORITES_SUBCOLLECTION,
) -> str:
    """Generate path for one of a user's favorites.

    Args:
        user_id: User document ID
        favorite_id: Favorite document ID (the bot ID it references)
        users_collection: Name of the top-level users collection
        favorites_subcollection: Name of the favorites subcollection

    Returns:
        Path like ``users/{user_id}/favorites/{favorite_id}``
    """
    return document_path(users_collection, user_id, favorites_subcollection, favorite_id)
