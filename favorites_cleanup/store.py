"""Document store access for the cleanup job.

``DocumentStore`` is the contract the job is written against. Paths are
passed as alternating collection / document segments, e.g.
``("users", "u1", "favorites", "b3")``.
"""

import abc
import logging
from typing import Any, Dict, List, Optional

from google.api_core import exceptions as api_exceptions
from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from google.cloud.firestore_v1.field_path import FieldPath

from favorites_cleanup.env import PAGE_SIZE
from favorites_cleanup.errors import (
    DeletionError,
    NotFoundError,
    StoreConnectionError,
    StoreError,
)
from favorites_cleanup.utils.clients import get_firestore
from favorites_cleanup.utils.paths import document_path

__all__ = ["DocumentStore", "FirestoreDocumentStore"]

LOGGER = logging.getLogger(__name__)

# Errors that mean the backend itself is unusable, not just one record
_BACKEND_ERRORS = (api_exceptions.GoogleAPIError, GoogleAuthError)


class DocumentStore(abc.ABC):
    """Minimal collection/document interface needed by the cleanup job."""

    @abc.abstractmethod
    def list_document_ids(self, collection: str) -> List[str]:
        """Return every document ID in a top-level collection.

        Raises:
            StoreConnectionError: the store is unreachable or rejects us
        """

    @abc.abstractmethod
    def list_subcollection_ids(self, parent_collection: str, parent_id: str, subcollection: str) -> List[str]:
        """Return every document ID in ``parent_collection/parent_id/subcollection``.

        Raises:
            NotFoundError: the subcollection does not exist
            StoreError: any other read failure
        """

    @abc.abstractmethod
    def delete_document(self, *segments: str) -> None:
        """Delete one document. Deleting a missing document is not an error.

        Raises:
            DeletionError: the delete failed
        """

    def close(self) -> None:
        pass

    def __enter__(self) -> "DocumentStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class FirestoreDocumentStore(DocumentStore):
    """``DocumentStore`` backed by a ``google.cloud.firestore.Client``."""

    def __init__(self, client: firestore.Client, page_size: int = PAGE_SIZE) -> None:
        self.client = client
        self.page_size = max(1, page_size)

    @classmethod
    def from_service_account(cls, info: Dict[str, Any], page_size: Optional[int] = None) -> "FirestoreDocumentStore":
        return cls(get_firestore(info), page_size=page_size or PAGE_SIZE)

    def list_document_ids(self, collection: str) -> List[str]:
        try:
            return self._paged_ids(self.client.collection(collection))
        except _BACKEND_ERRORS as e:
            raise StoreConnectionError(f"Failed to list '{collection}': {e}") from e

    def list_subcollection_ids(self, parent_collection: str, parent_id: str, subcollection: str) -> List[str]:
        ref = self.client.collection(parent_collection).document(parent_id).collection(subcollection)
        try:
            return [snap.id for snap in ref.stream()]
        except api_exceptions.NotFound as e:
            raise NotFoundError(str(e)) from e
        except _BACKEND_ERRORS as e:
            path = document_path(parent_collection, parent_id, subcollection)
            raise StoreError(f"Failed to list {path}: {e}") from e

    def delete_document(self, *segments: str) -> None:
        path = document_path(*segments)
        try:
            self.client.document(*segments).delete()
        except api_exceptions.NotFound:
            LOGGER.debug(f"{path} already gone")
        except _BACKEND_ERRORS as e:
            raise DeletionError(path, e) from e

    def close(self) -> None:
        self.client.close()

    def _paged_ids(self, collection_ref) -> List[str]:
        """Walk a collection in document-ID order, ``page_size`` docs per request."""
        base = collection_ref.order_by(FieldPath.document_id()).limit(self.page_size)
        ids: List[str] = []
        last_snap = None
        while True:
            query = base.start_after(last_snap) if last_snap is not None else base
            page = list(query.stream())
            ids.extend(snap.id for snap in page)
            if len(page) < self.page_size:
                break
            last_snap = page[-1]
        return ids
