"""
Pytest configuration and fixtures
Provides a TestClient bound to a throwaway SQLite database
"""
import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Settings are read at import time: configure before importing the app
_TMP_DIR = Path(tempfile.mkdtemp(prefix="fitgenius-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["ENVIRONMENT"] = "test"
os.environ["ENABLE_SCHEDULER"] = "false"
os.environ["ENABLE_ASYNC"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["REDIS_URL"] = ""
for _key in ("EMAIL_HOST", "EMAIL_USER", "EMAIL_PASS"):
    os.environ.pop(_key, None)

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from api.auth import create_access_token, get_password_hash
from database import Base, SessionLocal, engine, init_database
from main import app
from models import Exercise, FoodItem, Meal, MealIngredient, User
from services.rate_limiter import rate_limiter


@pytest.fixture(autouse=True)
def _reset_database():
    """Fresh schema and rate-limit state for every test"""
    Base.metadata.drop_all(bind=engine)
    init_database()
    rate_limiter.reset()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(role: str = "user", password: str = "secret123", **fields) -> User:
        counter["n"] += 1
        fields.setdefault("name", f"User {counter['n']}")
        fields.setdefault("email", f"user{counter['n']}@example.com")
        user = User(role=role, hashed_password=get_password_hash(password), **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def user(make_user) -> User:
    return make_user(name="Jane Doe", email="jane@example.com")


@pytest.fixture
def admin(make_user) -> User:
    return make_user(role="admin", name="Admin", email="admin@example.com")


@pytest.fixture
def user_headers(user: User) -> Dict[str, str]:
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin: User) -> Dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def exercise(db: Session) -> Exercise:
    item = Exercise(
        name="Push-up",
        description="Bodyweight press",
        category="strength",
        muscle_groups=["chest", "triceps"],
        equipment=["none"],
        difficulty="beginner",
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@pytest.fixture
def food(db: Session) -> FoodItem:
    item = FoodItem(
        name="Chicken Breast",
        category="protein",
        calories=165,
        protein=31,
        fat=3.6,
        serving_amount=100,
        serving_unit="g",
        dietary_tags=["gluten_free"],
        description="Grilled skinless chicken",
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


@pytest.fixture
def meal(db: Session, food: FoodItem) -> Meal:
    item = Meal(
        name="Chicken Bowl",
        type="lunch",
        description="Chicken with rice",
        difficulty="easy",
        ingredients=[MealIngredient(position=0, food_id=food.id, amount=150, unit="g")],
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    return item
