"""
Seed script: starter exercise, food and meal catalog
Usage: python tools/seed_catalog.py
Idempotent: entries are matched by name.
"""
import os
import sys
from typing import Dict

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy.orm import Session

from database import SessionLocal, init_database
from models import Exercise, FoodItem, Meal, MealIngredient

EXERCISES = [
    {
        "name": "Push-up",
        "description": "Bodyweight press from a plank position.",
        "category": "strength",
        "muscle_groups": ["chest", "triceps", "shoulders"],
        "equipment": ["none"],
        "difficulty": "beginner",
        "instructions": ["Start in a high plank", "Lower your chest to the floor", "Press back up"],
        "tips": ["Keep your core tight"],
        "calories_per_minute": 7,
    },
    {
        "name": "Bodyweight Squat",
        "description": "Hip and knee dominant lower body movement.",
        "category": "strength",
        "muscle_groups": ["quadriceps", "glutes", "hamstrings"],
        "equipment": ["none"],
        "difficulty": "beginner",
        "instructions": ["Stand shoulder width apart", "Sit back and down", "Drive through your heels"],
        "tips": ["Knees track over toes"],
        "calories_per_minute": 6,
    },
    {
        "name": "Plank",
        "description": "Isometric hold for core stability.",
        "category": "strength",
        "muscle_groups": ["core"],
        "equipment": ["none"],
        "difficulty": "beginner",
        "instructions": ["Rest on forearms and toes", "Hold a straight line from head to heels"],
        "tips": ["Do not let your hips sag"],
        "calories_per_minute": 4,
    },
    {
        "name": "Dumbbell Row",
        "description": "Single arm row supported on a bench.",
        "category": "strength",
        "muscle_groups": ["back", "biceps"],
        "equipment": ["dumbbells"],
        "difficulty": "intermediate",
        "instructions": ["Brace on a bench", "Pull the dumbbell to your hip", "Lower with control"],
        "tips": ["Squeeze your shoulder blade"],
        "calories_per_minute": 5,
    },
    {
        "name": "Jumping Jacks",
        "description": "Full body cardio warm-up.",
        "category": "cardio",
        "muscle_groups": ["full_body"],
        "equipment": ["none"],
        "difficulty": "beginner",
        "instructions": ["Jump feet apart while raising arms", "Return to start"],
        "tips": ["Land softly"],
        "calories_per_minute": 8,
    },
]

FOODS = [
    {
        "name": "Chicken Breast", "category": "protein", "calories": 165, "protein": 31, "carbohydrates": 0,
        "fat": 3.6, "serving_amount": 100, "serving_unit": "g", "dietary_tags": ["gluten_free", "dairy_free"],
        "description": "Skinless grilled chicken breast",
    },
    {
        "name": "Brown Rice", "category": "grain", "calories": 112, "protein": 2.6, "carbohydrates": 23.5,
        "fat": 0.9, "fiber": 1.8, "serving_amount": 100, "serving_unit": "g",
        "dietary_tags": ["vegan", "vegetarian", "gluten_free"], "description": "Cooked long grain brown rice",
    },
    {
        "name": "Broccoli", "category": "vegetable", "calories": 34, "protein": 2.8, "carbohydrates": 7,
        "fat": 0.4, "fiber": 2.6, "serving_amount": 100, "serving_unit": "g",
        "dietary_tags": ["vegan", "vegetarian", "gluten_free", "organic"], "description": "Steamed broccoli florets",
    },
    {
        "name": "Rolled Oats", "category": "grain", "calories": 150, "protein": 5, "carbohydrates": 27,
        "fat": 3, "fiber": 4, "serving_amount": 0.5, "serving_unit": "cup",
        "dietary_tags": ["vegan", "vegetarian"], "description": "Old fashioned rolled oats",
    },
    {
        "name": "Blueberries", "category": "fruit", "calories": 57, "protein": 0.7, "carbohydrates": 14.5,
        "fat": 0.3, "sugar": 10, "serving_amount": 100, "serving_unit": "g",
        "dietary_tags": ["vegan", "vegetarian", "gluten_free"], "description": "Fresh blueberries",
    },
    {
        "name": "Greek Yogurt", "category": "dairy", "calories": 59, "protein": 10, "carbohydrates": 3.6,
        "fat": 0.4, "serving_amount": 100, "serving_unit": "g", "allergens": ["milk"],
        "dietary_tags": ["vegetarian", "gluten_free"], "description": "Plain non-fat greek yogurt",
    },
]

MEALS = [
    {
        "name": "Chicken, Rice and Broccoli",
        "type": "lunch",
        "description": "Classic high protein lunch bowl",
        "instructions": ["Cook rice", "Grill chicken", "Steam broccoli", "Combine in a bowl"],
        "prep_time": 10,
        "cook_time": 25,
        "difficulty": "easy",
        "tags": ["high_protein", "meal_prep"],
        "ingredients": [("Chicken Breast", 150, "g"), ("Brown Rice", 150, "g"), ("Broccoli", 100, "g")],
    },
    {
        "name": "Berry Overnight Oats",
        "type": "breakfast",
        "description": "Oats soaked overnight with yogurt and blueberries",
        "instructions": ["Mix oats and yogurt", "Top with blueberries", "Refrigerate overnight"],
        "prep_time": 5,
        "cook_time": 0,
        "difficulty": "easy",
        "tags": ["vegetarian", "quick"],
        "ingredients": [("Rolled Oats", 0.5, "cup"), ("Greek Yogurt", 150, "g"), ("Blueberries", 80, "g")],
    },
]


def seed_catalog(db: Session) -> Dict[str, int]:
    """Insert missing catalog entries and return how many of each were created"""
    created = {"exercises": 0, "foods": 0, "meals": 0}

    for data in EXERCISES:
        if not db.query(Exercise).filter(Exercise.name == data["name"]).first():
            db.add(Exercise(**data))
            created["exercises"] += 1

    foods: Dict[str, FoodItem] = {}
    for data in FOODS:
        food = db.query(FoodItem).filter(FoodItem.name == data["name"]).first()
        if not food:
            food = FoodItem(**data)
            db.add(food)
            created["foods"] += 1
        foods[data["name"]] = food
    db.flush()

    for data in MEALS:
        if db.query(Meal).filter(Meal.name == data["name"]).first():
            continue
        fields = {k: v for k, v in data.items() if k != "ingredients"}
        meal = Meal(**fields)
        meal.ingredients = [
            MealIngredient(position=i, food_id=foods[name].id, amount=amount, unit=unit)
            for i, (name, amount, unit) in enumerate(data["ingredients"])
        ]
        db.add(meal)
        created["meals"] += 1

    db.commit()
    return created


if __name__ == "__main__":
    print("Seeding catalog...")
    init_database()
    session = SessionLocal()
    try:
        counts = seed_catalog(session)
    finally:
        session.close()
    print(f"Seed complete: {counts}")
