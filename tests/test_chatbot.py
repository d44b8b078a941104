"""
Test the rule-based chatbot and /api/chatbot endpoints
"""
import pytest
from fastapi.testclient import TestClient

from services.chatbot_service import (
    DEFAULT_REPLY,
    GREETINGS,
    HELP_TEXT,
    MOTIVATION,
    NUTRITION_ADVICE,
    WORKOUT_ADVICE,
    FitGeniusChatbot,
)
from services.rate_limiter import rate_limiter


def first(options):
    return options[0]


@pytest.fixture
def bot() -> FitGeniusChatbot:
    return FitGeniusChatbot(chooser=first)


@pytest.mark.parametrize(
    "message, expected",
    [
        ("Hello there", GREETINGS[0]),
        ("Need a gym routine for an expert", WORKOUT_ADVICE["advanced"][0]),
        ("Give me a beginner workout", WORKOUT_ADVICE["beginner"][0]),
        ("Suggest a workout", WORKOUT_ADVICE["intermediate"][0]),
        ("What food helps me lose weight", NUTRITION_ADVICE["weight_loss"][0]),
        ("Best protein to bulk up", NUTRITION_ADVICE["muscle_gain"][0]),
        ("Is my diet ok", NUTRITION_ADVICE["maintenance"][0]),
        ("Feeling tired today", MOTIVATION[0]),
        ("Can you guide me", HELP_TEXT),
        ("Tell me a joke", DEFAULT_REPLY),
    ],
)
def test_generate_response_rules(bot: FitGeniusChatbot, message: str, expected: str):
    assert bot.generate_response(message) == expected


def test_muscle_group_reply(bot: FitGeniusChatbot):
    reply = bot.generate_response("Best moves for hamstrings")
    assert reply.startswith("🦵 **Leg Exercises**: Squats, Deadlifts")


def test_keywords_match_inside_words(bot: FitGeniusChatbot):
    # "this" contains "hi"
    assert bot.generate_response("Is this normal?") == GREETINGS[0]


def test_diet_plan_selection(bot: FitGeniusChatbot):
    assert bot.generate_diet_plan("I am vegan and want lunch ideas").startswith("Here's your vegan diet plan:")
    assert bot.generate_diet_plan("Vegetarian options please").startswith("Here's your vegetarian diet plan:")
    plan = bot.generate_diet_plan("Anything that keeps me full")
    assert plan.startswith("Here's your high protein diet plan:")
    assert "🌙 Dinner: Salmon with quinoa and asparagus." in plan


def test_workout_endpoint_anonymous(client: TestClient):
    response = client.post("/api/chatbot/workout", json={"message": "Tell me a joke please"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["message"] == DEFAULT_REPLY
    assert data["user"] is None
    assert data["timestamp"]


def test_workout_endpoint_with_user(client: TestClient, user, user_headers):
    response = client.post("/api/chatbot/nutrition", headers=user_headers,
                           json={"message": "What should my diet look like?"})
    assert response.status_code == 200
    assert response.json()["data"]["user"] == user.id


def test_message_length_validation(client: TestClient):
    short = client.post("/api/chatbot/workout", json={"message": "short"})
    assert short.status_code == 400
    assert short.json()["message"] == "Validation error"

    assert client.post("/api/chatbot/general", json={"message": "   "}).status_code == 400
    assert client.post("/api/chatbot/message", json={"message": "x" * 501}).status_code == 400


def test_custom_diet_endpoint(client: TestClient):
    response = client.post("/api/chatbot/custom-diet",
                           json={"requirements": "I follow a vegetarian diet and train daily"})
    assert response.status_code == 200
    assert response.json()["data"]["diet_plan"].startswith("Here's your vegetarian diet plan:")

    too_short = client.post("/api/chatbot/custom-diet", json={"requirements": "vegan"})
    assert too_short.status_code == 400


def test_message_endpoint(client: TestClient):
    response = client.post("/api/chatbot/message", json={"message": "help"})
    assert response.status_code == 200
    assert response.json()["data"]["message"] == HELP_TEXT
    assert "user" not in response.json()["data"]


def test_rate_limit(client: TestClient, monkeypatch):
    monkeypatch.setattr(rate_limiter, "rate", 2)
    rate_limiter.reset()
    for _ in range(2):
        assert client.post("/api/chatbot/message", json={"message": "hello"}).status_code == 200
    response = client.post("/api/chatbot/message", json={"message": "hello"})
    assert response.status_code == 429
    assert response.json()["success"] is False
