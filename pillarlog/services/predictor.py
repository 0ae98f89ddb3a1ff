"""
Adapter for the external habit-success predictor.

The prediction itself is delegated to an OpenAI model constrained to a JSON
schema; this module only builds the prompt, bounds the call in time and
validates what comes back. Any failure, including an empty or malformed
answer, surfaces as PredictorFailure.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional

import httpx
from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError

from pillarlog.core.config import settings
from pillarlog.core.errors import PredictorFailure
from pillarlog.schemas.prediction import HabitPrediction, PredictFeatures

log = logging.getLogger("pillarlog.predictor")

PREDICTION_JSON_SCHEMA = {
    "name": "HabitPrediction",
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "successProbability": {"type": "integer", "minimum": 0, "maximum": 100},
            "recommendation": {"type": "string"},
            "riskFactors": {"type": "array", "items": {"type": "string"}},
            "rationale": {"type": "string"},
        },
        "required": ["successProbability", "recommendation", "riskFactors", "rationale"],
    },
    "strict": True,
}

SYSTEM_PROMPT = (
    "You predict the 7-day completion likelihood for a single habit. "
    "Calibrate probability using streaks and recent history. "
    "Return JSON only that matches the provided schema."
)

HISTORY_SYSTEM_PROMPT = """
You predict the next 7-day completion likelihood for a habit.
Use these signals:
- last7Count (recent momentum, strongest weight)
- last30Count (baseline adherence)
- streak (consistency)
- weeklyFrequencyTarget (difficulty)
If last7Count >= weeklyFrequencyTarget, probability should be high (80-95) unless month is very weak.
If last7Count is much lower than target, lower probability.
Return JSON only.
""".strip()


def build_user_prompt(habit_name: str, current_streak: int, reflection: str, features: PredictFeatures) -> str:
    return f"""
Habit: {habit_name}
Current streak (days): {current_streak}
User reflection: {reflection}
Features: {json.dumps(features.model_dump(by_alias=True, exclude_none=True))}
Goal: Probability of completing this habit over the next 7 days.
Return JSON only.""".strip()


def build_history_prompt(habit_name: str, current_streak: int, reflection: str, features: PredictFeatures) -> str:
    return f"""
Habit: {habit_name}
Signals:
- last7Count={features.last7_count} of 7
- last30Count={features.last30_count} of 30
- currentStreak={current_streak} days
- weeklyFrequencyTarget={features.weekly_frequency_target} / week
Reflection: {reflection}""".strip()


def parse_prediction(content: Optional[str]) -> HabitPrediction:
    if not content or not content.strip():
        raise PredictorFailure("No prediction returned")
    try:
        return HabitPrediction.model_validate_json(content)
    except ValidationError as exc:
        log.warning("Unparseable prediction: %s", exc)
        raise PredictorFailure("Prediction was malformed") from exc


class HabitPredictor:
    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self._client = client
        self.model = model or settings.PREDICTOR_MODEL
        self.timeout = timeout or settings.PREDICTOR_TIMEOUT_SECONDS

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not settings.OPENAI_API_KEY:
                raise PredictorFailure("Predictor is not configured")
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=httpx.Timeout(self.timeout, connect=5.0),
                max_retries=1,
            )
        return self._client

    async def predict(
        self,
        *,
        habit_name: str,
        current_streak: int,
        reflection: str = "",
        features: Optional[PredictFeatures] = None,
        from_history: bool = False,
    ) -> HabitPrediction:
        features = features or PredictFeatures()
        if from_history:
            system, user = HISTORY_SYSTEM_PROMPT, build_history_prompt(habit_name, current_streak, reflection, features)
        else:
            system, user = SYSTEM_PROMPT, build_user_prompt(habit_name, current_streak, reflection, features)

        client = self.client
        try:
            resp = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": user},
                    ],
                    response_format={"type": "json_schema", "json_schema": PREDICTION_JSON_SCHEMA},
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            log.warning("Prediction for %r timed out after %ss", habit_name, self.timeout)
            raise PredictorFailure("Prediction timed out") from exc
        except OpenAIError as exc:
            log.exception("Prediction request failed for %r", habit_name)
            raise PredictorFailure() from exc

        content = resp.choices[0].message.content if resp.choices else None
        prediction = parse_prediction(content)
        log.info("Prediction for %r: %s%%", habit_name, prediction.success_probability)
        return prediction


_predictor: Optional[HabitPredictor] = None


def get_predictor() -> HabitPredictor:
    """FastAPI dependency; tests override it with a fake."""
    global _predictor
    if _predictor is None:
        _predictor = HabitPredictor()
    return _predictor
