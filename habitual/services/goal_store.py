"""Goal store - persistence for goal documents."""
import logging
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from habitual.exceptions import NotFoundError, StoreFailure
from habitual.models.goal import DailyTask, Difficulty, Goal, GoalStatus
from habitual.utils.dates import as_utc

logger = logging.getLogger(__name__)


class GoalStore:
    """Durable collection of goals, one document per goal."""

    def __init__(self, db):
        """Initialize store with database connection."""
        self.db = db
        self.goals = db["goals"]

    def _doc_to_task(self, doc: dict, goal_difficulty: Optional[str] = None) -> DailyTask:
        """Convert a task sub-document; tasks without a difficulty inherit the goal's."""
        completed_at = doc.get("completedAt")
        return DailyTask(
            day=doc["day"],
            goal=doc["goal"],
            explanation=doc.get("explanation") or "",
            difficulty=doc.get("difficulty") or goal_difficulty or Difficulty.EASY,
            completed=doc.get("completed", False),
            completed_at=as_utc(completed_at) if completed_at else None,
            date=doc.get("date"),
        )

    def _doc_to_goal(self, doc: dict) -> Goal:
        """
        Convert database document to Goal model.

        Older documents carry ``type`` and ``timeframe`` instead of
        ``kind`` and ``timeframeDays``; both spellings are accepted.
        Naive datetimes coming back from MongoDB are UTC.
        """
        return Goal(
            _id=str(doc["_id"]),
            user_id=doc["userId"],
            kind=doc.get("kind") or doc.get("type") or "ai",
            category=doc["category"],
            difficulty=doc["difficulty"],
            start_date=as_utc(doc["startDate"]),
            timeframe_days=doc.get("timeframeDays", doc.get("timeframe")),
            current_condition=doc.get("currentCondition"),
            desired_achievement=doc.get("desiredAchievement"),
            title=doc.get("title"),
            description=doc.get("description"),
            date=doc.get("date"),
            daily_tasks=[
                self._doc_to_task(task, doc.get("difficulty"))
                for task in doc.get("dailyTasks", [])
            ],
            completed_days=doc.get("completedDays", 0),
            status=doc.get("status", GoalStatus.ACTIVE.value),
            created_at=as_utc(doc["createdAt"]),
            updated_at=as_utc(doc["updatedAt"]),
        )

    @staticmethod
    def task_to_doc(task: DailyTask) -> dict:
        """Convert a DailyTask to its embedded sub-document."""
        doc = {
            "day": task.day,
            "goal": task.goal,
            "explanation": task.explanation,
            "difficulty": task.difficulty.value,
            "completed": task.completed,
            "completedAt": task.completed_at,
        }
        if task.date is not None:
            doc["date"] = task.date
        return doc

    def _goal_to_doc(self, goal: Goal) -> dict:
        """Convert a Goal model to its stored document, without ``_id``."""
        return {
            "userId": goal.user_id,
            "kind": goal.kind.value,
            "category": goal.category,
            "difficulty": goal.difficulty.value,
            "startDate": goal.start_date,
            "timeframeDays": goal.timeframe_days,
            "currentCondition": goal.current_condition,
            "desiredAchievement": goal.desired_achievement,
            "title": goal.title,
            "description": goal.description,
            "date": goal.date,
            "dailyTasks": [self.task_to_doc(task) for task in goal.daily_tasks],
            "completedDays": goal.completed_days,
            "status": goal.status.value,
            "createdAt": goal.created_at,
            "updatedAt": goal.updated_at,
        }

    @staticmethod
    def _object_id(goal_id: str) -> ObjectId:
        try:
            return ObjectId(goal_id)
        except (InvalidId, TypeError):
            raise NotFoundError("Goal not found")

    async def insert(self, goal_doc: dict) -> Goal:
        """
        Insert a new goal document.

        Args:
            goal_doc: Goal document with camelCase keys and no ``_id``

        Returns:
            Persisted goal with its assigned id

        Raises:
            StoreFailure: If the insert fails
        """
        try:
            result = await self.goals.insert_one(goal_doc)
        except PyMongoError as e:
            logger.error("Failed to insert goal: %s", e)
            raise StoreFailure("Failed to save goal") from e

        goal_doc["_id"] = result.inserted_id
        return self._doc_to_goal(goal_doc)

    async def save(self, goal: Goal) -> Goal:
        """
        Replace a stored goal with the given state.

        The whole document is written in one operation, so a save never
        leaves a goal half-updated. Concurrent saves of the same goal
        resolve as last write wins.

        Raises:
            NotFoundError: If the goal no longer exists
            StoreFailure: If the write fails
        """
        object_id = self._object_id(goal.id)
        try:
            result = await self.goals.replace_one({"_id": object_id}, self._goal_to_doc(goal))
        except PyMongoError as e:
            logger.error("Failed to save goal %s: %s", goal.id, e)
            raise StoreFailure("Failed to save goal") from e

        if result.matched_count == 0:
            raise NotFoundError("Goal not found")
        return goal

    async def find_by_id(self, goal_id: str) -> Goal:
        """
        Get a goal by ID.

        Raises:
            NotFoundError: If the goal does not exist or the ID is malformed
            StoreFailure: If the read fails
        """
        object_id = self._object_id(goal_id)
        try:
            goal_doc = await self.goals.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to load goal %s: %s", goal_id, e)
            raise StoreFailure("Failed to load goal") from e

        if not goal_doc:
            raise NotFoundError("Goal not found")

        return self._doc_to_goal(goal_doc)

    async def find_by_user(
        self,
        user_id: str,
        status: Optional[GoalStatus] = None,
    ) -> list[Goal]:
        """
        List a user's goals in insertion order.

        Args:
            user_id: Owner to match
            status: Optional status filter

        Raises:
            StoreFailure: If the query fails
        """
        query = {"userId": user_id}
        if status:
            query["status"] = status.value

        try:
            cursor = self.goals.find(query).sort("_id", 1)
            goal_docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error("Failed to list goals for %s: %s", user_id, e)
            raise StoreFailure("Failed to load goals") from e

        return [self._doc_to_goal(doc) for doc in goal_docs]
