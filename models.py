from __future__ import annotations

"""
SQLAlchemy models (2.x typed mappings)
Users, workouts, nutrition and audit trail.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base


class User(Base):
    """Platform account with fitness profile, membership and preferences"""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default="user", nullable=False)

    # Profile
    age: Mapped[Optional[int]] = mapped_column(Integer)
    gender: Mapped[Optional[str]] = mapped_column(String(10))
    height: Mapped[Optional[float]] = mapped_column(Float)  # cm
    weight: Mapped[Optional[float]] = mapped_column(Float)  # kg
    fitness_level: Mapped[str] = mapped_column(String(20), default="beginner")
    goals: Mapped[List[str]] = mapped_column(JSON, default=list)
    dietary_preferences: Mapped[List[str]] = mapped_column(JSON, default=list)
    medical_conditions: Mapped[List[str]] = mapped_column(JSON, default=list)
    allergies: Mapped[List[str]] = mapped_column(JSON, default=list)

    # Membership
    membership_type: Mapped[str] = mapped_column(String(20), default="basic")
    membership_start_date: Mapped[Optional[datetime]] = mapped_column(DateTime, default=datetime.utcnow)
    membership_end_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    membership_is_active: Mapped[bool] = mapped_column(Boolean, default=False, index=True)

    # Preferences
    workout_duration: Mapped[int] = mapped_column(Integer, default=45)  # minutes
    workout_frequency: Mapped[int] = mapped_column(Integer, default=3)  # per week
    preferred_workout_time: Mapped[str] = mapped_column(String(20), default="morning")

    email_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    workouts: Mapped[List["Workout"]] = relationship(back_populates="creator", cascade="all, delete-orphan")
    diet_plans: Mapped[List["DietPlan"]] = relationship(back_populates="creator", cascade="all, delete-orphan")
    workout_logs: Mapped[List["WorkoutLog"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    nutrition_logs: Mapped[List["NutritionLog"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    def get_bmi(self) -> Optional[float]:
        """BMI rounded to one decimal, None without height and weight"""
        if self.height and self.weight:
            height_m = self.height / 100
            return round(self.weight / (height_m * height_m), 1)
        return None

    def get_bmi_category(self) -> Optional[str]:
        bmi = self.get_bmi()
        if bmi is None:
            return None
        if bmi < 18.5:
            return "underweight"
        if bmi < 25:
            return "normal"
        if bmi < 30:
            return "overweight"
        return "obese"

    @property
    def profile(self) -> Dict[str, Any]:
        return {
            "age": self.age,
            "gender": self.gender,
            "height": self.height,
            "weight": self.weight,
            "fitness_level": self.fitness_level,
            "goals": self.goals or [],
            "dietary_preferences": self.dietary_preferences or [],
            "medical_conditions": self.medical_conditions or [],
            "allergies": self.allergies or [],
        }

    @property
    def membership(self) -> Dict[str, Any]:
        return {
            "type": self.membership_type,
            "start_date": self.membership_start_date,
            "end_date": self.membership_end_date,
            "is_active": bool(self.membership_is_active),
        }

    @property
    def preferences(self) -> Dict[str, Any]:
        return {
            "workout_duration": self.workout_duration,
            "workout_frequency": self.workout_frequency,
            "preferred_workout_time": self.preferred_workout_time,
        }


# ==================== WORKOUTS ====================


class Exercise(Base):
    """Exercise catalog entry"""
    __tablename__ = "exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    muscle_groups: Mapped[List[str]] = mapped_column(JSON, default=list)
    equipment: Mapped[List[str]] = mapped_column(JSON, default=list)
    difficulty: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    instructions: Mapped[List[str]] = mapped_column(JSON, default=list)
    tips: Mapped[List[str]] = mapped_column(JSON, default=list)
    video_url: Mapped[Optional[str]] = mapped_column(String(500))
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    calories_per_minute: Mapped[Optional[float]] = mapped_column(Float)


class Workout(Base):
    """Workout template composed of exercises"""
    __tablename__ = "workouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    difficulty: Mapped[str] = mapped_column(String(20), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # minutes
    target_muscle_groups: Mapped[List[str]] = mapped_column(JSON, default=list)
    equipment: Mapped[List[str]] = mapped_column(JSON, default=list)
    calories: Mapped[Optional[float]] = mapped_column(Float)
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    rating_average: Mapped[float] = mapped_column(Float, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator: Mapped["User"] = relationship(back_populates="workouts")
    exercises: Mapped[List["WorkoutExercise"]] = relationship(
        back_populates="workout",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.position",
    )
    logs: Mapped[List["WorkoutLog"]] = relationship(back_populates="workout", cascade="all, delete-orphan")

    __table_args__ = (
        Index("ix_workouts_type_difficulty", "type", "difficulty"),
    )

    @property
    def rating(self) -> Dict[str, Any]:
        return {"average": self.rating_average or 0.0, "count": self.rating_count or 0}


class WorkoutExercise(Base):
    """Prescribed exercise inside a workout"""
    __tablename__ = "workout_exercises"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    sets: Mapped[int] = mapped_column(Integer, default=3)
    reps: Mapped[int] = mapped_column(Integer, default=10)
    weight: Mapped[float] = mapped_column(Float, default=0.0)  # kg
    duration: Mapped[Optional[int]] = mapped_column(Integer)  # seconds
    rest: Mapped[int] = mapped_column(Integer, default=60)  # seconds
    notes: Mapped[Optional[str]] = mapped_column(String(500))

    workout: Mapped["Workout"] = relationship(back_populates="exercises")
    exercise: Mapped["Exercise"] = relationship()


class WorkoutLog(Base):
    """A performed workout session"""
    __tablename__ = "workout_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    workout_id: Mapped[int] = mapped_column(ForeignKey("workouts.id", ondelete="CASCADE"), index=True, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # actual minutes
    # [{exercise_id, sets: [{reps, weight, duration, completed}], notes}]
    exercises: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    calories: Mapped[Optional[float]] = mapped_column(Float)
    rating: Mapped[Optional[int]] = mapped_column(Integer)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    completed: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship(back_populates="workout_logs")
    workout: Mapped["Workout"] = relationship(back_populates="logs")

    __table_args__ = (
        Index("ix_workout_logs_user_date", "user_id", "date"),
    )


# ==================== NUTRITION ====================


class FoodItem(Base):
    """Food with per-serving nutrition facts"""
    __tablename__ = "food_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    category: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    calories: Mapped[float] = mapped_column(Float, nullable=False)
    protein: Mapped[float] = mapped_column(Float, default=0.0)
    carbohydrates: Mapped[float] = mapped_column(Float, default=0.0)
    fat: Mapped[float] = mapped_column(Float, default=0.0)
    fiber: Mapped[float] = mapped_column(Float, default=0.0)
    sugar: Mapped[float] = mapped_column(Float, default=0.0)
    sodium: Mapped[float] = mapped_column(Float, default=0.0)
    serving_amount: Mapped[float] = mapped_column(Float, nullable=False)
    serving_unit: Mapped[str] = mapped_column(String(10), nullable=False)
    allergens: Mapped[List[str]] = mapped_column(JSON, default=list)
    dietary_tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    description: Mapped[Optional[str]] = mapped_column(Text)

    @property
    def serving_size(self) -> Dict[str, Any]:
        return {"amount": self.serving_amount, "unit": self.serving_unit}


class Meal(Base):
    """Recipe made from food items"""
    __tablename__ = "meals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    type: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    instructions: Mapped[List[str]] = mapped_column(JSON, default=list)
    prep_time: Mapped[Optional[int]] = mapped_column(Integer)  # minutes
    cook_time: Mapped[Optional[int]] = mapped_column(Integer)  # minutes
    difficulty: Mapped[str] = mapped_column(String(10), default="easy")
    image_url: Mapped[Optional[str]] = mapped_column(String(500))
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    rating_average: Mapped[float] = mapped_column(Float, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    ingredients: Mapped[List["MealIngredient"]] = relationship(
        back_populates="meal",
        cascade="all, delete-orphan",
        order_by="MealIngredient.position",
    )

    @property
    def rating(self) -> Dict[str, Any]:
        return {"average": self.rating_average or 0.0, "count": self.rating_count or 0}


class MealIngredient(Base):
    __tablename__ = "meal_ingredients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    meal_id: Mapped[int] = mapped_column(ForeignKey("meals.id", ondelete="CASCADE"), index=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)
    food_id: Mapped[int] = mapped_column(ForeignKey("food_items.id"), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)

    meal: Mapped["Meal"] = relationship(back_populates="ingredients")
    food: Mapped["FoodItem"] = relationship()


class DietPlan(Base):
    """Weekly plan of meals"""
    __tablename__ = "diet_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_calories: Mapped[int] = mapped_column(Integer, nullable=False)
    target_protein: Mapped[Optional[float]] = mapped_column(Float)  # grams
    target_carbs: Mapped[Optional[float]] = mapped_column(Float)  # grams
    target_fat: Mapped[Optional[float]] = mapped_column(Float)  # grams
    created_by_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True)
    difficulty: Mapped[str] = mapped_column(String(20), default="beginner")
    tags: Mapped[List[str]] = mapped_column(JSON, default=list)
    rating_average: Mapped[float] = mapped_column(Float, default=0.0)
    rating_count: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    creator: Mapped["User"] = relationship(back_populates="diet_plans")
    meals: Mapped[List["DietPlanMeal"]] = relationship(
        back_populates="diet_plan",
        cascade="all, delete-orphan",
        order_by="DietPlanMeal.position",
    )

    __table_args__ = (
        Index("ix_diet_plans_type_difficulty", "type", "difficulty"),
    )

    @property
    def rating(self) -> Dict[str, Any]:
        return {"average": self.rating_average or 0.0, "count": self.rating_count or 0}


class DietPlanMeal(Base):
    __tablename__ = "diet_plan_meals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    diet_plan_id: Mapped[int] = mapped_column(ForeignKey("diet_plans.id", ondelete="CASCADE"), index=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)
    day: Mapped[int] = mapped_column(Integer, nullable=False)  # 1..7
    meal_type: Mapped[str] = mapped_column(String(20), nullable=False)
    meal_id: Mapped[int] = mapped_column(ForeignKey("meals.id"), nullable=False)
    alternatives: Mapped[List[int]] = mapped_column(JSON, default=list)  # meal ids

    diet_plan: Mapped["DietPlan"] = relationship(back_populates="meals")
    meal: Mapped["Meal"] = relationship()


class NutritionLog(Base):
    """A day of logged food intake"""
    __tablename__ = "nutrition_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    # [{type, foods: [{food_id, amount, unit}], notes}]
    meals: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    total_calories: Mapped[float] = mapped_column(Float, default=0.0)
    total_protein: Mapped[float] = mapped_column(Float, default=0.0)
    total_carbs: Mapped[float] = mapped_column(Float, default=0.0)
    total_fat: Mapped[float] = mapped_column(Float, default=0.0)
    water_intake: Mapped[float] = mapped_column(Float, default=0.0)  # ml
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user: Mapped["User"] = relationship(back_populates="nutrition_logs")

    __table_args__ = (
        Index("ix_nutrition_logs_user_date", "user_id", "date"),
    )


# ==================== AUDIT ====================


class AuditLog(Base):
    """Trail of privileged actions"""
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    action: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[Optional[str]] = mapped_column(String(64))
    metadata_json: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    actor_user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"))
    request_id: Mapped[Optional[str]] = mapped_column(String(64))
    ip: Mapped[Optional[str]] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
