import asyncio
import json
from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from pillarlog.core.errors import PredictorFailure
from pillarlog.schemas.prediction import PredictFeatures
from pillarlog.services import predictor as predictor_module
from pillarlog.services.predictor import (
    HISTORY_SYSTEM_PROMPT,
    SYSTEM_PROMPT,
    HabitPredictor,
    build_history_prompt,
    parse_prediction,
)

GOOD = {
    "successProbability": 72,
    "recommendation": "Run right after breakfast.",
    "riskFactors": ["busy weekend"],
    "rationale": "Solid recent momentum.",
}


class FakeCompletions:
    def __init__(self, content=None, exc=None, delay=0.0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc:
            raise self.exc
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(**kwargs):
    completions = FakeCompletions(**kwargs)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_parse_prediction():
    prediction = parse_prediction(json.dumps(GOOD))
    assert prediction.success_probability == 72
    assert prediction.risk_factors == ["busy weekend"]


@pytest.mark.parametrize("content", [None, "", "   "])
def test_parse_empty_prediction(content):
    with pytest.raises(PredictorFailure) as exc_info:
        parse_prediction(content)
    assert exc_info.value.detail == "No prediction returned"


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({**GOOD, "successProbability": 140}),
        json.dumps({"recommendation": "x"}),
    ],
)
def test_parse_malformed_prediction(content):
    with pytest.raises(PredictorFailure) as exc_info:
        parse_prediction(content)
    assert exc_info.value.status_code == 502


def test_history_prompt_lists_signals():
    features = PredictFeatures(last7_count=4, last30_count=12, weekly_frequency_target=5)
    prompt = build_history_prompt("Run", 3, "felt good", features)
    assert "last7Count=4 of 7" in prompt
    assert "last30Count=12 of 30" in prompt
    assert "currentStreak=3 days" in prompt
    assert "weeklyFrequencyTarget=5 / week" in prompt


@pytest.mark.asyncio
async def test_predict_success():
    client, completions = fake_client(content=json.dumps(GOOD))
    predictor = HabitPredictor(client=client, model="test-model", timeout=1)

    prediction = await predictor.predict(habit_name="Run", current_streak=3, reflection="ok")

    assert prediction.success_probability == 72
    (call,) = completions.calls
    assert call["model"] == "test-model"
    assert call["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert "Habit: Run" in call["messages"][1]["content"]
    assert call["response_format"]["type"] == "json_schema"


@pytest.mark.asyncio
async def test_predict_from_history_uses_history_prompt():
    client, completions = fake_client(content=json.dumps(GOOD))
    predictor = HabitPredictor(client=client, timeout=1)

    await predictor.predict(
        habit_name="Run",
        current_streak=2,
        features=PredictFeatures(last7_count=2, last30_count=9, weekly_frequency_target=4),
        from_history=True,
    )
    assert completions.calls[0]["messages"][0]["content"] == HISTORY_SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_predict_malformed_answer():
    client, _ = fake_client(content='{"successProbability": "high"}')
    with pytest.raises(PredictorFailure):
        await HabitPredictor(client=client, timeout=1).predict(habit_name="Run", current_streak=0)


@pytest.mark.asyncio
async def test_predict_times_out():
    client, _ = fake_client(content=json.dumps(GOOD), delay=1.0)
    with pytest.raises(PredictorFailure) as exc_info:
        await HabitPredictor(client=client, timeout=0.01).predict(habit_name="Run", current_streak=0)
    assert exc_info.value.detail == "Prediction timed out"


@pytest.mark.asyncio
async def test_predict_api_error():
    error = APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    client, _ = fake_client(exc=error)
    with pytest.raises(PredictorFailure) as exc_info:
        await HabitPredictor(client=client, timeout=1).predict(habit_name="Run", current_streak=0)
    assert exc_info.value.error_code == "PREDICTOR_FAILURE"


@pytest.mark.asyncio
async def test_unconfigured_predictor(monkeypatch):
    monkeypatch.setattr(predictor_module.settings, "OPENAI_API_KEY", None)
    with pytest.raises(PredictorFailure) as exc_info:
        await HabitPredictor(timeout=1).predict(habit_name="Run", current_streak=0)
    assert exc_info.value.detail == "Predictor is not configured"
