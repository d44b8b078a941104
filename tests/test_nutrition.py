"""
Test /api/nutrition endpoints
"""
from datetime import datetime, timedelta

from fastapi.testclient import TestClient

from api.nutrition import round_half_up
from models import FoodItem, NutritionLog


def test_list_foods_search_is_case_insensitive(client: TestClient, db, food):
    db.add(FoodItem(name="Broccoli", category="vegetable", calories=34, serving_amount=100, serving_unit="g",
                    dietary_tags=["vegan"], description="Green and CHICKEN-free"))
    db.commit()

    body = client.get("/api/nutrition/foods").json()
    assert [f["name"] for f in body["data"]] == ["Broccoli", "Chicken Breast"]

    by_name = client.get("/api/nutrition/foods", params={"search": "chicken"}).json()
    assert by_name["count"] == 2

    vegan = client.get("/api/nutrition/foods", params={"dietary_tag": "vegan"}).json()
    assert [f["name"] for f in vegan["data"]] == ["Broccoli"]


def test_get_food(client: TestClient, food):
    data = client.get(f"/api/nutrition/foods/{food.id}").json()["data"]
    assert data["serving_size"] == {"amount": 100, "unit": "g"}
    assert client.get("/api/nutrition/foods/999").status_code == 404


def test_meals(client: TestClient, meal):
    body = client.get("/api/nutrition/meals", params={"type": "lunch"}).json()
    assert body["count"] == 1
    detail = client.get(f"/api/nutrition/meals/{meal.id}").json()["data"]
    assert detail["ingredients"][0]["food"]["name"] == "Chicken Breast"
    assert client.get("/api/nutrition/meals", params={"search": "bowl"}).json()["count"] == 1
    assert client.get("/api/nutrition/meals/999").status_code == 404


def _plan_payload(meal_id: int, **overrides):
    payload = {
        "name": "Lean Week",
        "description": "Balanced plan for steady progress",
        "type": "balanced",
        "target_calories": 2200,
        "meals": [{"day": 1, "meal_type": "lunch", "meal_id": meal_id}],
    }
    payload.update(overrides)
    return payload


def test_create_and_list_diet_plans(client: TestClient, user, user_headers, meal):
    response = client.post("/api/nutrition/diet-plans", headers=user_headers, json=_plan_payload(meal.id))
    assert response.status_code == 201
    plan = response.json()["data"]
    assert plan["created_by"]["id"] == user.id
    assert plan["meals"][0]["meal"]["name"] == "Chicken Bowl"

    listing = client.get("/api/nutrition/diet-plans", params={"type": "balanced"}).json()
    assert listing["count"] == 1
    assert client.get(f"/api/nutrition/diet-plans/{plan['id']}").status_code == 200
    assert client.get("/api/nutrition/diet-plans/999").status_code == 404


def test_create_diet_plan_validation(client: TestClient, user_headers, meal):
    missing = client.post("/api/nutrition/diet-plans", headers=user_headers,
                          json=_plan_payload(meal.id, meals=[{"day": 2, "meal_type": "dinner", "meal_id": 77}]))
    assert missing.status_code == 400
    assert missing.json()["message"] == "Meal with ID 77 not found"

    low = client.post("/api/nutrition/diet-plans", headers=user_headers,
                      json=_plan_payload(meal.id, target_calories=500))
    assert low.status_code == 400

    bad_day = client.post("/api/nutrition/diet-plans", headers=user_headers,
                          json=_plan_payload(meal.id, meals=[{"day": 8, "meal_type": "lunch", "meal_id": meal.id}]))
    assert bad_day.status_code == 400


def test_log_nutrition_and_filter_logs(client: TestClient, user_headers, food):
    payload = {
        "meals": [{"type": "lunch", "foods": [{"food_id": food.id, "amount": 150, "unit": "g"}]}],
        "total_calories": 250,
        "date": "2024-03-10T12:00:00Z",
    }
    response = client.post("/api/nutrition/log", headers=user_headers, json=payload)
    assert response.status_code == 201
    assert response.json()["data"]["date"].startswith("2024-03-10T12:00:00")

    client.post("/api/nutrition/log", headers=user_headers, json={"meals": []})

    all_logs = client.get("/api/nutrition/logs", headers=user_headers).json()
    assert all_logs["total"] == 2

    march = client.get(
        "/api/nutrition/logs",
        headers=user_headers,
        params={"start_date": "2024-03-01T00:00:00", "end_date": "2024-03-31T00:00:00"},
    ).json()
    assert march["total"] == 1
    assert march["data"][0]["total_calories"] == 250


def test_log_nutrition_rejects_bad_date(client: TestClient, user_headers):
    response = client.post("/api/nutrition/log", headers=user_headers, json={"meals": [], "date": "yesterday"})
    assert response.status_code == 400


def test_summary_averages(client: TestClient, db, user, user_headers):
    now = datetime.utcnow()
    db.add_all([
        NutritionLog(user_id=user.id, date=now - timedelta(days=2), total_calories=2000,
                     total_protein=100, total_carbs=250, total_fat=60, water_intake=2000),
        NutritionLog(user_id=user.id, date=now - timedelta(days=1), total_calories=2101,
                     total_protein=121, total_carbs=200, total_fat=71, water_intake=2500),
        NutritionLog(user_id=user.id, date=now - timedelta(days=30), total_calories=9999),
    ])
    db.commit()

    data = client.get("/api/nutrition/summary", headers=user_headers).json()["data"]
    assert data["period"] == "7 days"
    assert data["total_days"] == 2
    assert data["averages"] == {"calories": 2051, "protein": 111, "carbs": 225, "fat": 66, "water": 2250}
    assert [row["calories"] for row in data["logs"]] == [2000, 2101]


def test_summary_without_logs(client: TestClient, user_headers):
    data = client.get("/api/nutrition/summary", headers=user_headers, params={"days": 3}).json()["data"]
    assert data["period"] == "3 days"
    assert data["total_days"] == 0
    assert data["averages"]["calories"] == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2050.5) == 2051
    assert round_half_up(65.49) == 65
