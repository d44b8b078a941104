"""
Nutrition endpoints: food catalog, meals, diet plans and nutrition logs
"""
import logging
import math
from datetime import datetime, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from api.auth import get_current_user
from database import get_db
from models import DietPlan, DietPlanMeal, FoodItem, Meal, MealIngredient, NutritionLog, User
from schemas import (
    DietPlanCreate,
    DietPlanOut,
    FoodItemOut,
    MealOut,
    NutritionLogCreate,
    NutritionLogOut,
    to_naive_utc,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["nutrition"])


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _meal_query(db: Session):
    return db.query(Meal).options(selectinload(Meal.ingredients).joinedload(MealIngredient.food))


def _diet_plan_query(db: Session):
    return db.query(DietPlan).options(
        joinedload(DietPlan.creator),
        selectinload(DietPlan.meals)
        .joinedload(DietPlanMeal.meal)
        .selectinload(Meal.ingredients)
        .joinedload(MealIngredient.food),
    )


# ==================== FOODS ====================


@router.get("/foods", summary="List food items")
async def list_foods(
    category: Optional[str] = Query(None),
    dietary_tag: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on name or description"),
    db: Session = Depends(get_db),
):
    query = db.query(FoodItem)
    if category:
        query = query.filter(FoodItem.category == category)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(FoodItem.name.ilike(pattern), FoodItem.description.ilike(pattern)))

    foods = query.order_by(FoodItem.name).all()
    if dietary_tag:
        foods = [f for f in foods if dietary_tag in (f.dietary_tags or [])]

    return {"success": True, "count": len(foods), "data": [FoodItemOut.model_validate(f) for f in foods]}


@router.get("/foods/{food_id}", summary="Get food item by ID")
async def get_food(food_id: int, db: Session = Depends(get_db)):
    food = db.get(FoodItem, food_id)
    if not food:
        raise HTTPException(status_code=404, detail="Food item not found")
    return {"success": True, "data": FoodItemOut.model_validate(food)}


# ==================== MEALS ====================


@router.get("/meals", summary="List meals")
async def list_meals(
    type: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = _meal_query(db)
    if type:
        query = query.filter(Meal.type == type)
    if difficulty:
        query = query.filter(Meal.difficulty == difficulty)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Meal.name.ilike(pattern), Meal.description.ilike(pattern)))

    meals = query.order_by(Meal.name).all()
    return {"success": True, "count": len(meals), "data": [MealOut.model_validate(m) for m in meals]}


@router.get("/meals/{meal_id}", summary="Get meal by ID")
async def get_meal(meal_id: int, db: Session = Depends(get_db)):
    meal = _meal_query(db).filter(Meal.id == meal_id).first()
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    return {"success": True, "data": MealOut.model_validate(meal)}


# ==================== DIET PLANS ====================


@router.get("/diet-plans", summary="List public diet plans")
async def list_diet_plans(
    type: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    created_by: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    query = _diet_plan_query(db).filter(DietPlan.is_public == True)  # noqa: E712
    if type:
        query = query.filter(DietPlan.type == type)
    if difficulty:
        query = query.filter(DietPlan.difficulty == difficulty)
    if created_by is not None:
        query = query.filter(DietPlan.created_by_id == created_by)

    plans = query.order_by(DietPlan.created_at.desc(), DietPlan.id.desc()).all()
    return {"success": True, "count": len(plans), "data": [DietPlanOut.model_validate(p) for p in plans]}


@router.get("/diet-plans/{plan_id}", summary="Get diet plan by ID")
async def get_diet_plan(plan_id: int, db: Session = Depends(get_db)):
    plan = _diet_plan_query(db).filter(DietPlan.id == plan_id).first()
    if not plan:
        raise HTTPException(status_code=404, detail="Diet plan not found")
    return {"success": True, "data": DietPlanOut.model_validate(plan)}


@router.post("/diet-plans", status_code=201, summary="Create diet plan")
async def create_diet_plan(
    payload: DietPlanCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    rows: List[DietPlanMeal] = []
    for position, item in enumerate(payload.meals):
        if db.get(Meal, item.meal_id) is None:
            raise HTTPException(status_code=400, detail=f"Meal with ID {item.meal_id} not found")
        rows.append(DietPlanMeal(position=position, **item.model_dump()))

    plan = DietPlan(
        **payload.model_dump(exclude={"meals"}),
        created_by_id=current_user.id,
        meals=rows,
    )
    db.add(plan)
    db.commit()
    logger.info(f"Diet plan {plan.id} created by user {current_user.id}")

    created = _diet_plan_query(db).filter(DietPlan.id == plan.id).first()
    return {
        "success": True,
        "message": "Diet plan created successfully",
        "data": DietPlanOut.model_validate(created),
    }


# ==================== LOGS ====================


@router.post("/log", status_code=201, summary="Log nutrition")
async def log_nutrition(
    payload: NutritionLogCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = payload.model_dump(mode="json", exclude={"date"})
    log = NutritionLog(
        user_id=current_user.id,
        date=payload.date or datetime.utcnow(),
        **data,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    return {
        "success": True,
        "message": "Nutrition logged successfully",
        "data": NutritionLogOut.model_validate(log),
    }


@router.get("/logs", summary="List my nutrition logs")
async def list_nutrition_logs(
    limit: int = Query(10, ge=1, le=100),
    page: int = Query(1, ge=1),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(NutritionLog).filter(NutritionLog.user_id == current_user.id)
    if start_date is not None:
        query = query.filter(NutritionLog.date >= to_naive_utc(start_date))
    if end_date is not None:
        query = query.filter(NutritionLog.date <= to_naive_utc(end_date))

    total = query.count()
    logs = (
        query.order_by(NutritionLog.date.desc(), NutritionLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "success": True,
        "count": len(logs),
        "total": total,
        "pagination": {"page": page, "pages": math.ceil(total / limit)},
        "data": [NutritionLogOut.model_validate(log) for log in logs],
    }


@router.get("/summary", summary="Nutrition averages over recent days")
async def nutrition_summary(
    days: int = Query(7, ge=1, le=365),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Average daily intake over the last ``days`` days.

    Averages are taken over the number of logs in the window (not calendar
    days) and rounded half up to whole numbers.
    """
    since = datetime.utcnow() - timedelta(days=days)
    logs = (
        db.query(NutritionLog)
        .filter(NutritionLog.user_id == current_user.id, NutritionLog.date >= since)
        .order_by(NutritionLog.date.asc(), NutritionLog.id.asc())
        .all()
    )

    rows = [
        {
            "date": log.date,
            "calories": log.total_calories or 0,
            "protein": log.total_protein or 0,
            "carbs": log.total_carbs or 0,
            "fat": log.total_fat or 0,
            "water": log.water_intake or 0,
        }
        for log in logs
    ]

    averages = {key: 0 for key in ("calories", "protein", "carbs", "fat", "water")}
    if rows:
        for key in averages:
            averages[key] = round_half_up(sum(row[key] for row in rows) / len(rows))

    return {
        "success": True,
        "data": {
            "period": f"{days} days",
            "total_days": len(rows),
            "averages": averages,
            "logs": rows,
        },
    }
