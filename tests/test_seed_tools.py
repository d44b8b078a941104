"""
Test the seed tools
"""
from fastapi.testclient import TestClient

from api.auth import verify_password
from config import settings
from models import Exercise, Meal, User
from tools.seed_admin import seed_admin
from tools.seed_catalog import seed_catalog


def test_seed_admin_is_idempotent(db):
    first = seed_admin()
    second = seed_admin()
    assert first.id == second.id
    admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL.lower()).one()
    assert admin.role == "admin"
    assert verify_password(settings.ADMIN_PASSWORD, admin.hashed_password)


def test_seed_catalog_is_idempotent(db):
    created = seed_catalog(db)
    assert created["exercises"] > 0 and created["foods"] > 0 and created["meals"] > 0
    assert seed_catalog(db) == {"exercises": 0, "foods": 0, "meals": 0}
    meal = db.query(Meal).filter(Meal.name == "Berry Overnight Oats").one()
    assert [i.food.name for i in meal.ingredients] == ["Rolled Oats", "Greek Yogurt", "Blueberries"]


def test_seeded_catalog_is_served(client: TestClient, db):
    seed_catalog(db)
    body = client.get("/api/workouts/exercises", params={"equipment": "dumbbells"}).json()
    assert [e["name"] for e in body["data"]] == ["Dumbbell Row"]
    assert db.query(Exercise).count() == body["count"] + 4
