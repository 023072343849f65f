"""
GoalsService - Goal Tracking and Gamification Business Logic

Owns one user's categories, goals and profile in memory, applies the
gamification rules on every change, and persists the full state after each
mutation.

Storage has two tiers: a remote blob store (when configured) and a local file
store. Reads and writes go to the remote store until it fails to load, after
which the session stays on local storage. A failed remote write falls back to
local storage for that save only.
"""

import logging
from pathlib import Path
from typing import List, Optional

from lifetrack.config import SEED_FILE_PATH
from lifetrack.exceptions import StorageError
from lifetrack.gamification import (
    check_balance_bonus,
    default_categories,
    default_user,
    load_seed_file,
    update_category_streak,
    update_user_level,
    update_user_streak,
)
from lifetrack.models import Category, CompletionResult, Difficulty, Goal, User
from lifetrack.storage import BlobStore, LocalBlobStore
from lifetrack.utils.datetime_helpers import Clock, day_of, is_same_day, now_local

logger = logging.getLogger(__name__)

CATEGORIES_FILENAME = "categories.json"
USER_FILENAME = "user.json"


def document_key(filename: str, namespace: str) -> str:
    """categories.json -> categories_{namespace}.json (unchanged without a namespace)"""
    if not namespace:
        return filename
    stem, _, suffix = filename.rpartition(".")
    return f"{stem}_{namespace}.{suffix}"


class GoalsService:
    """
    Gamification engine for a single session.

    Responsibilities:
    - Goal completion, reset and creation
    - Category streaks, consistency streak, balance bonus and levels
    - Loading, seeding and saving the session's documents

    Operations on unknown categories or goals are silent no-ops (return None).
    """

    def __init__(
        self,
        remote_store: Optional[BlobStore],
        local_store: Optional[BlobStore] = None,
        namespace: str = "",
        clock: Clock = now_local,
        seed_file_path: Optional[Path] = SEED_FILE_PATH
    ):
        """
        Initialize GoalsService. Call initialize() before use.

        Args:
            remote_store: Blob store, or None to run on local storage only
            local_store: Fallback store (defaults to LocalBlobStore under DATA_PATH)
            namespace: Identity the documents are stored under
            clock: Returns the current time; decides what "today" is
            seed_file_path: Optional seed text file for new namespaces
        """
        self._remote = remote_store
        self._local = local_store or LocalBlobStore()
        self._namespace = namespace
        self._clock = clock
        self._seed_file_path = seed_file_path

        self._categories: List[Category] = []
        self._current_user = User()
        self._initialized = False
        self.use_local_storage = remote_store is None

        if self.use_local_storage:
            logger.warning("No blob storage configured, using local storage fallback")

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def storage_mode(self) -> str:
        return "local" if self.use_local_storage else "remote"

    @property
    def categories_key(self) -> str:
        return document_key(CATEGORIES_FILENAME, self._namespace)

    @property
    def user_key(self) -> str:
        return document_key(USER_FILENAME, self._namespace)

    def get_categories(self) -> List[Category]:
        return self._categories

    def get_category(self, category_id: int) -> Optional[Category]:
        return next((c for c in self._categories if c.id == category_id), None)

    def get_current_user(self) -> User:
        return self._current_user

    # ------------------------------------------------------------------
    # Goal operations
    # ------------------------------------------------------------------

    async def complete_goal(self, category_id: int, goal_id: int) -> Optional[CompletionResult]:
        """
        Mark a goal completed and apply all gamification rules.

        Completing a goal that was already completed today does nothing.

        Returns:
            CompletionResult, or None if nothing changed
        """
        category = self.get_category(category_id)
        if category is None:
            return None

        goal = category.get_goal(goal_id)
        if goal is None:
            return None

        now = self._clock()
        if goal.is_completed and is_same_day(goal.completed_date, day_of(now)):
            return None

        user = self._current_user
        old_level = user.level

        goal.is_completed = True
        goal.completed_date = now
        user.total_points += goal.points

        category_streak = update_category_streak(category, now)

        user.category_completions[category.name] = user.category_completions.get(category.name, 0) + 1

        balance_bonus = check_balance_bonus(self._categories, user, now)
        streak_bonus = update_user_streak(user, now)
        update_user_level(user)

        await self._save_data()

        result = CompletionResult(
            category_id=category_id,
            goal_id=goal_id,
            goal_points=goal.points,
            streak_bonus=streak_bonus,
            balance_bonus=balance_bonus,
            category_streak=category_streak,
            consistency_streak=user.consistency_streak,
            total_points=user.total_points,
            old_level=old_level,
            new_level=user.level,
        )
        logger.info(
            f"Goal completed: category={category_id}, goal={goal_id}, "
            f"points={result.points_awarded}, total={user.total_points}"
        )
        return result

    async def reset_goal(self, category_id: int, goal_id: int) -> Optional[Goal]:
        """
        Un-complete a goal and take back its points.

        Only the goal's own points are reversed; streaks, balance bonus and
        level stay as they are. Points may go negative.

        Returns:
            The reset goal, or None if nothing changed
        """
        category = self.get_category(category_id)
        if category is None:
            return None

        goal = category.get_goal(goal_id)
        if goal is None or not goal.is_completed:
            return None

        goal.is_completed = False
        self._current_user.total_points -= goal.points

        await self._save_data()
        return goal

    async def add_goal(
        self,
        category_id: int,
        description: str,
        difficulty: str = Difficulty.NORMAL.value
    ) -> Optional[Goal]:
        """
        Add a goal to a category.

        Args:
            category_id: Target category
            description: Goal text
            difficulty: Easy, Normal or Hard (anything else counts as Normal)

        Returns:
            The new goal, or None if the category does not exist
        """
        category = self.get_category(category_id)
        if category is None:
            return None

        level = Difficulty.parse(difficulty)
        goal = Goal(
            id=category.next_goal_id(),
            description=description,
            category_id=category_id,
            points=level.points,
            difficulty=level,
        )
        category.goals.append(goal)

        await self._save_data()
        logger.info(f"Added goal {goal.id} to category {category_id} ({level.value}, {goal.points} points)")
        return goal

    async def update_user(self, user: User) -> User:
        """Replace the profile and persist it"""
        self._current_user = user
        await self._save_data()
        return user

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Load this namespace's documents, seeding starter data if needed.

        Order: stored documents, then the seed file, then the built-in
        dataset. A default profile is created if none was stored.
        """
        now = self._clock()
        self._categories = []
        self._current_user = User()

        user_loaded = await self._load_data()
        needs_save = False

        if not self._categories:
            self._categories = self._seed_categories(now)
            needs_save = True

        if not user_loaded:
            self._current_user = default_user(now)
            needs_save = True

        self._initialized = True

        if needs_save:
            await self._save_data()

        logger.info(
            f"Goals initialized for namespace '{self._namespace or 'default'}': "
            f"{len(self._categories)} categories, storage={self.storage_mode}"
        )

    async def ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()

    async def switch_namespace(self, namespace: str) -> bool:
        """
        Point the session at another identity's documents and reload.

        Returns:
            True if a reload happened
        """
        if self._initialized and namespace == self._namespace:
            return False

        logger.info(f"Switching storage namespace to '{namespace or 'default'}'")
        self._namespace = namespace
        await self.initialize()
        return True

    def _seed_categories(self, now) -> List[Category]:
        if self._seed_file_path is not None:
            try:
                categories = load_seed_file(self._seed_file_path, now)
            except (OSError, UnicodeDecodeError) as e:
                logger.error(f"Error reading seed file {self._seed_file_path}: {e}")
                categories = []
            if categories:
                return categories

        logger.info("Initializing with default categories")
        return default_categories(now)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def _load_data(self) -> bool:
        """
        Load categories and profile into memory.

        Returns:
            True if a stored profile was found
        """
        store = self._local if self.use_local_storage else self._remote
        try:
            categories = await store.load(self.categories_key, List[Category])
            user = await store.load(self.user_key, User)
        except StorageError:
            if store is self._local:
                logger.warning("Local storage unreadable, starting from starter data")
                return False
            logger.warning("Error loading from blob storage, using local storage fallback for this session")
            self.use_local_storage = True
            return await self._load_data()

        if categories:
            self._categories = categories
            logger.info(f"Categories loaded from {store.name} storage")

        if user is not None:
            self._current_user = user
            logger.info(f"User data loaded from {store.name} storage")
            return True
        return False

    async def _save_data(self) -> None:
        """Save categories and profile, falling back to local storage"""
        if not self.use_local_storage:
            if await self._write_documents(self._remote):
                logger.info("Data saved to blob storage")
                return
            logger.warning("Saving to blob storage failed, using local storage fallback")

        if not await self._write_documents(self._local):
            logger.error("Local storage fallback failed; changes are only kept in memory")

    async def _write_documents(self, store: BlobStore) -> bool:
        categories_saved = await store.put(self.categories_key, self._categories)
        user_saved = await store.put(self.user_key, self._current_user)
        return categories_saved and user_saved
