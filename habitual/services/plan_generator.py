"""Plan generator - turns a goal description into a day-by-day plan."""
import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from habitual.config import settings
from habitual.exceptions import GenerationFailure, GoalValidationError
from habitual.models.goal import DailyTask, Difficulty

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$", re.IGNORECASE)

PROMPT_TEMPLATE = """Create a detailed plan to help someone achieve their goal.
Current condition: {current_condition}
Goal: {goal}
Timeframe: {timeframe_days} days

Please provide:
1. A list of daily goals, starting from the current condition and gradually increasing in difficulty
2. Each goal should be specific, measurable, and achievable
3. The progression should be natural and sustainable
4. Include a brief explanation for each goal

Return exactly {timeframe_days} entries, one per day, numbered from 1 to {timeframe_days}.
Format the response as a JSON array of objects with the following structure:
{{
  "day": number,
  "goal": string,
  "explanation": string,
  "difficulty": "easy" | "medium" | "hard"
}}"""


class GeneratedTask(BaseModel):
    """Shape of one entry in the generator's JSON output."""

    day: int
    goal: str = Field(min_length=1)
    explanation: str = ""
    difficulty: Difficulty


_PLAN_ADAPTER = TypeAdapter(list[GeneratedTask])


def build_prompt(current_condition: str, goal: str, timeframe_days: int) -> str:
    """Render the plan request sent to the text generator."""
    return PROMPT_TEMPLATE.format(
        current_condition=current_condition,
        goal=goal,
        timeframe_days=timeframe_days,
    )


def validate_timeframe(timeframe_days) -> int:
    """
    Check that a timeframe is a whole number of days within the allowed range.

    Raises:
        GoalValidationError: If the value is not an int in 1..max_timeframe_days
    """
    if isinstance(timeframe_days, bool) or not isinstance(timeframe_days, int):
        raise GoalValidationError("Timeframe must be a whole number of days")
    if timeframe_days < 1:
        raise GoalValidationError("Timeframe must be at least 1 day")
    if timeframe_days > settings.max_timeframe_days:
        raise GoalValidationError(
            f"Timeframe must be at most {settings.max_timeframe_days} days"
        )
    return timeframe_days


def parse_plan(text: Optional[str], timeframe_days: int) -> list[DailyTask]:
    """
    Parse and validate raw generator output into an ordered plan.

    The output may be wrapped in a Markdown code fence. Every entry must
    match the task shape, and the day numbers must be exactly
    1..timeframe_days with no gaps or repeats.

    Args:
        text: Raw text returned by the generator
        timeframe_days: Number of days that was requested

    Returns:
        Tasks ordered by day

    Raises:
        GenerationFailure: If any part of the output is unusable

    Examples:
        >>> plan = parse_plan('[{"day": 1, "goal": "Walk", "difficulty": "easy"}]', 1)
        >>> plan[0].goal
        'Walk'
    """
    if not text or not text.strip():
        raise GenerationFailure("Generator returned an empty response")

    cleaned = _CODE_FENCE.sub("", text).strip()

    try:
        raw = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise GenerationFailure(f"Generator response is not valid JSON: {e}") from e

    try:
        entries = _PLAN_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise GenerationFailure(f"Generator response has the wrong shape: {e.error_count()} errors") from e

    entries.sort(key=lambda entry: entry.day)
    days = [entry.day for entry in entries]
    if len(days) != timeframe_days or days != list(range(1, len(days) + 1)):
        raise GenerationFailure(
            f"Generator returned days {days}, expected 1..{timeframe_days}"
        )

    return [
        DailyTask(
            day=entry.day,
            goal=entry.goal.strip(),
            explanation=entry.explanation.strip(),
            difficulty=entry.difficulty,
        )
        for entry in entries
    ]


class PlanGenerator(ABC):
    """
    Produces a validated day-by-day plan from free-text goal descriptions.

    Subclasses supply the raw text call; this class owns input checks,
    the per-attempt timeout, bounded retries and output validation.
    """

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        max_attempts: Optional[int] = None,
        backoff_seconds: Optional[float] = None,
    ):
        self.timeout_seconds = timeout_seconds or settings.generation_timeout_seconds
        self.max_attempts = max(1, max_attempts or settings.generation_max_attempts)
        self.backoff_seconds = (
            settings.generation_retry_backoff_seconds if backoff_seconds is None else backoff_seconds
        )

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        """Send a prompt to the text generator and return its raw reply."""

    async def _attempt(self, prompt: str, timeframe_days: int) -> list[DailyTask]:
        try:
            text = await asyncio.wait_for(self.complete(prompt), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise GenerationFailure(
                f"Plan generation timed out after {self.timeout_seconds:g}s"
            ) from e
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(f"Plan generation failed: {e}") from e
        return parse_plan(text, timeframe_days)

    async def generate(
        self,
        current_condition: str,
        goal: str,
        timeframe_days: int,
    ) -> list[DailyTask]:
        """
        Generate a plan of exactly ``timeframe_days`` tasks.

        Args:
            current_condition: Where the user is starting from
            goal: What the user wants to achieve
            timeframe_days: Plan length in days

        Returns:
            Tasks for days 1..timeframe_days, in order

        Raises:
            GoalValidationError: If timeframe_days is not a positive int
            GenerationFailure: If no attempt produced a valid plan
        """
        validate_timeframe(timeframe_days)
        prompt = build_prompt(current_condition, goal, timeframe_days)

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._attempt(prompt, timeframe_days)
            except GenerationFailure as e:
                logger.warning(
                    "Plan generation attempt %d/%d failed: %s", attempt, self.max_attempts, e
                )
                if attempt == self.max_attempts:
                    raise
                await asyncio.sleep(self.backoff_seconds * 2 ** (attempt - 1))

        raise GenerationFailure("Plan generation failed")


class GeminiPlanGenerator(PlanGenerator):
    """Plan generator backed by the Google Gen AI SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._client = None

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                logger.warning("Gemini API key not configured; relying on GOOGLE_API_KEY")
            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini client initialized for model %s", self.model)
        return self._client

    async def complete(self, prompt: str) -> str:
        client = self._get_client()
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(response_mime_type="application/json"),
        )
        return response.text


@lru_cache
def get_plan_generator() -> PlanGenerator:
    """Dependency returning the process-wide plan generator."""
    return GeminiPlanGenerator()
