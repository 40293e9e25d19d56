"""
Remove orphaned favorites that reference deleted AI bots.

Flow:
- Load and validate the service account file (no network yet)
- Open a document store connection scoped to this run
- Build the set of existing bot IDs, abort if it comes back empty
- Scan users/{uid}/favorites for IDs missing from that set
- Report, ask for confirmation, delete each orphan independently

Dry runs stop after the report. Per-user read failures and per-item delete
failures are counted and skipped, never retried.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence

from tabulate import tabulate

from favorites_cleanup import env
from favorites_cleanup.errors import EmptyAuthoritativeSetError, NotFoundError
from favorites_cleanup.models import FailedDeletion, OrphanedFavorite, RunResult, RunStatistics
from favorites_cleanup.store import DocumentStore, FirestoreDocumentStore
from favorites_cleanup.utils.clients import load_service_account
from favorites_cleanup.utils.logging import get_logger
from favorites_cleanup.utils.prompt import Confirm, console_confirm

LOGGER = logging.getLogger(__name__)

__all__ = [
    "CleanupConfig",
    "FavoritesCleanup",
    "JobState",
    "firestore_store_factory",
    "run",
]


class JobState(str, enum.Enum):
    INIT = "init"
    CREDENTIALS_LOADED = "credentials_loaded"
    CONNECTED = "connected"
    AUTHORITATIVE_SET_BUILT = "authoritative_set_built"
    SCANNING = "scanning"
    CLEAN = "clean"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    DRY_RUN_COMPLETE = "dry_run_complete"
    DELETING = "deleting"
    DONE = "done"


@dataclass
class CleanupConfig:
    credential_source: str
    auto_confirm: bool = False
    dry_run: bool = False
    verbose: bool = False
    bots_collection: str = env.BOTS_COLLECTION
    users_collection: str = env.USERS_COLLECTION
    favorites_subcollection: str = env.FAVORITES_SUBCOLLECTION
    user_ids: Optional[List[str]] = None
    scan_concurrency: int = env.SCAN_CONCURRENCY
    delete_concurrency: int = env.DELETE_CONCURRENCY
    page_size: int = env.PAGE_SIZE


StoreFactory = Callable[[Dict[str, Any], CleanupConfig], DocumentStore]
CredentialLoader = Callable[[str], Dict[str, Any]]


def firestore_store_factory(info: Dict[str, Any], config: CleanupConfig) -> DocumentStore:
    return FirestoreDocumentStore.from_service_account(info, page_size=config.page_size)


class FavoritesCleanup:
    """One orphaned-favorites reconciliation run.

    The store comes from ``store_factory`` and lives exactly as long as
    ``run()``; it is closed on every exit path, including fatal aborts.
    """

    def __init__(
        self,
        config: CleanupConfig,
        *,
        store_factory: StoreFactory = firestore_store_factory,
        confirm: Confirm = console_confirm,
        credential_loader: CredentialLoader = load_service_account,
    ) -> None:
        self.config = config
        self.store_factory = store_factory
        self.confirm = confirm
        self.credential_loader = credential_loader
        self.stats = RunStatistics()
        self.state = JobState.INIT
        self._lock: Optional[asyncio.Lock] = None
        get_logger(verbose=config.verbose)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def run(self) -> RunResult:
        cfg = self.config
        self._lock = asyncio.Lock()
        LOGGER.info("🔍 Starting cleanup of orphaned favorites...")
        LOGGER.info(f"Service Account: {cfg.credential_source}")
        LOGGER.info(f"Auto-confirm deletions: {cfg.auto_confirm}")
        LOGGER.info(f"Dry run: {cfg.dry_run}")
        LOGGER.info(f"Verbose: {cfg.verbose}")

        info = self.credential_loader(cfg.credential_source)
        self._transition(JobState.CREDENTIALS_LOADED)

        store = await asyncio.to_thread(self.store_factory, info, cfg)
        self._transition(JobState.CONNECTED)
        LOGGER.debug(f"Connected to project {info.get('project_id')}")
        try:
            return await self._run_with_store(store)
        finally:
            store.close()

    async def _run_with_store(self, store: DocumentStore) -> RunResult:
        cfg = self.config
        existing = await self.get_existing_bot_ids(store)
        self._transition(JobState.AUTHORITATIVE_SET_BUILT)

        users = await self.get_users(store)
        self._transition(JobState.SCANNING)
        orphans = await self.find_orphaned_favorites(store, existing, users)

        self.print_summary(orphans)

        if not orphans:
            self._transition(JobState.CLEAN)
            return self._finish("clean", orphans, message="No orphaned favorites found! Database is clean.")

        if cfg.dry_run:
            self._transition(JobState.DRY_RUN_COMPLETE)
            return self._finish("dry_run", orphans, message="Dry run completed - no changes made")

        if not cfg.auto_confirm:
            self._transition(JobState.AWAITING_CONFIRMATION)
            prompt = f"⚠️  This will permanently delete {len(orphans)} orphaned favorite(s). Do you want to proceed?"
            # Runs on the loop thread; nothing else is in flight at the gate
            confirmed = self.confirm(prompt)
            if not confirmed:
                return self._finish("cancelled", orphans, message="Cleanup cancelled by user")

        self._transition(JobState.DELETING)
        failed = await self.delete_orphans(store, orphans)
        self.print_final_stats(failed)
        if self.stats.deleted_favorites > 0:
            message = "Cleanup completed successfully!"
        else:
            message = "No favorites were deleted"
        return self._finish("completed", orphans, failed=failed, message=message)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_existing_bot_ids(self, store: DocumentStore) -> FrozenSet[str]:
        collection = self.config.bots_collection
        LOGGER.info(f"📋 Fetching existing bots from '{collection}'...")
        ids = await asyncio.to_thread(store.list_document_ids, collection)
        for bot_id in ids:
            LOGGER.debug(f"Found bot: {bot_id}")
        if not ids:
            raise EmptyAuthoritativeSetError(collection)
        existing = frozenset(ids)
        LOGGER.info(f"✓ Found {len(existing)} existing bots")
        return existing

    async def get_users(self, store: DocumentStore) -> List[str]:
        cfg = self.config
        if cfg.user_ids:
            users = list(dict.fromkeys(cfg.user_ids))
            LOGGER.info(f"👥 Restricting scan to {len(users)} user(s)")
        else:
            LOGGER.info(f"👥 Fetching users from '{cfg.users_collection}'...")
            users = await asyncio.to_thread(store.list_document_ids, cfg.users_collection)
            for user_id in users:
                LOGGER.debug(f"Found user: {user_id}")
        self.stats.total_users = len(users)
        LOGGER.info(f"✓ Found {len(users)} users")
        return users

    async def get_user_favorites(self, store: DocumentStore, user_id: str) -> List[str]:
        cfg = self.config
        try:
            favorites = await asyncio.to_thread(
                store.list_subcollection_ids,
                cfg.users_collection,
                user_id,
                cfg.favorites_subcollection,
            )
        except NotFoundError:
            LOGGER.debug(f"No favorites collection for {user_id}")
            return []
        except Exception as e:
            LOGGER.debug(f"Error fetching favorites for {user_id}: {e}")
            return []
        LOGGER.debug(f"Found {len(favorites)} favorites for {user_id}")
        return list(favorites)

    async def find_orphaned_favorites(
        self,
        store: DocumentStore,
        existing: FrozenSet[str],
        users: Sequence[str],
    ) -> List[OrphanedFavorite]:
        total = len(users)
        concurrency = max(1, self.config.scan_concurrency)
        sem = asyncio.Semaphore(concurrency)
        orphans: List[OrphanedFavorite] = []

        async def scan_user(idx: int, user_id: str) -> None:
            async with sem:
                LOGGER.info(f"🔍 Checking user {idx}/{total}: {user_id}")
                favorites = await self.get_user_favorites(store, user_id)
            found = []
            for favorite_id in favorites:
                if favorite_id in existing:
                    LOGGER.debug(f"   ✓ Valid favorite: {favorite_id}")
                else:
                    found.append(self._orphan(user_id, favorite_id))
            async with self._lock:
                if favorites:
                    self.stats.users_with_favorites += 1
                self.stats.total_favorites += len(favorites)
                self.stats.orphaned_favorites += len(found)
                orphans.extend(found)
            if not favorites:
                LOGGER.debug("No favorites found")
            for orphan in found:
                LOGGER.info(f"   ❌ Orphaned favorite found: {orphan.favorite_id}")

        if concurrency == 1:
            for idx, user_id in enumerate(users, start=1):
                await scan_user(idx, user_id)
        else:
            await asyncio.gather(*(scan_user(idx, user_id) for idx, user_id in enumerate(users, start=1)))
            orphans.sort()
        return orphans

    # ------------------------------------------------------------------
    # Deletes
    # ------------------------------------------------------------------

    async def delete_orphans(self, store: DocumentStore, orphans: Sequence[OrphanedFavorite]) -> List[FailedDeletion]:
        LOGGER.info("🗑️  Deleting orphaned favorites...")
        concurrency = max(1, self.config.delete_concurrency)
        sem = asyncio.Semaphore(concurrency)
        failed: List[FailedDeletion] = []

        async def delete_one(orphan: OrphanedFavorite) -> None:
            error: Optional[Exception] = None
            async with sem:
                try:
                    await asyncio.to_thread(store.delete_document, *orphan.segments)
                except Exception as e:
                    error = e
            async with self._lock:
                if error is None:
                    self.stats.deleted_favorites += 1
                    LOGGER.info(f"Deleting {orphan.path}... ✓ Success")
                else:
                    self.stats.failed_deletions += 1
                    failed.append(FailedDeletion(orphan=orphan, error=str(error)))
                    LOGGER.info(f"Deleting {orphan.path}... ✗ Failed: {error}")

        if concurrency == 1:
            for orphan in orphans:
                await delete_one(orphan)
        else:
            await asyncio.gather(*(delete_one(orphan) for orphan in orphans))
            failed.sort(key=lambda item: item.orphan)
        return failed

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def print_summary(self, orphans: Sequence[OrphanedFavorite]) -> None:
        print()
        print("📊 Cleanup Summary:")
        print(tabulate(self.stats.summary_rows(), headers=["metric", "count"], tablefmt="github"))
        if orphans:
            print()
            print("🗑️  Orphaned favorites to be deleted:")
            for idx, orphan in enumerate(orphans, start=1):
                print(f"  {idx}. {orphan.path}")

    def print_final_stats(self, failed: Sequence[FailedDeletion]) -> None:
        rows = [("Successfully deleted", self.stats.deleted_favorites)]
        if self.stats.failed_deletions:
            rows.append(("Failed to delete", self.stats.failed_deletions))
        print()
        print("📊 Operation Summary:")
        print(tabulate(rows, headers=["result", "count"], tablefmt="github"))
        for failure in failed:
            print(f"  ✗ {failure.orphan.path}: {failure.error}")

    # ------------------------------------------------------------------

    def _orphan(self, user_id: str, favorite_id: str) -> OrphanedFavorite:
        return OrphanedFavorite(
            user_id=user_id,
            favorite_id=favorite_id,
            users_collection=self.config.users_collection,
            favorites_subcollection=self.config.favorites_subcollection,
        )

    def _transition(self, state: JobState) -> None:
        LOGGER.debug(f"{self.state.value} → {state.value}")
        self.state = state

    def _finish(
        self,
        status: str,
        orphans: List[OrphanedFavorite],
        *,
        failed: Optional[List[FailedDeletion]] = None,
        message: str,
    ) -> RunResult:
        if status == "completed" and self.stats.deleted_favorites == 0:
            LOGGER.warning(f"⚠️  {message}")
        elif status in ("clean", "completed"):
            LOGGER.info(f"🎉 {message}")
        else:
            LOGGER.info(f"ℹ️  {message}")
        self._transition(JobState.DONE)
        return RunResult(
            status=status,
            statistics=self.stats,
            orphans=list(orphans),
            failed=list(failed or []),
            dry_run=self.config.dry_run,
            message=message,
        )


def run(config: CleanupConfig, **kwargs) -> RunResult:
    """Run one cleanup to completion. Fatal conditions raise ``CleanupError``."""
    return asyncio.run(FavoritesCleanup(config, **kwargs).run())
