"""
Workout endpoints: exercise catalog, workout templates and workout logs
"""
import logging
import math
from typing import Iterable, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload, selectinload

from api.auth import get_current_user
from database import get_db
from models import Exercise, User, Workout, WorkoutExercise, WorkoutLog
from schemas import (
    ExerciseOut,
    WorkoutCreate,
    WorkoutExerciseIn,
    WorkoutLogCreate,
    WorkoutLogOut,
    WorkoutOut,
    WorkoutUpdate,
)
from services.rbac_service import ensure_owner_or_admin

logger = logging.getLogger(__name__)

router = APIRouter(tags=["workouts"])


def _workout_query(db: Session):
    return db.query(Workout).options(
        joinedload(Workout.creator),
        selectinload(Workout.exercises).joinedload(WorkoutExercise.exercise),
    )


def _get_workout_or_404(db: Session, workout_id: int) -> Workout:
    workout = _workout_query(db).filter(Workout.id == workout_id).first()
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")
    return workout


def _contains(values: Optional[Iterable[str]], item: str) -> bool:
    return item in (values or [])


def _build_exercises(db: Session, items: List[WorkoutExerciseIn]) -> List[WorkoutExercise]:
    """Validate exercise references and build ordered workout rows"""
    rows = []
    for position, item in enumerate(items):
        if db.get(Exercise, item.exercise_id) is None:
            raise HTTPException(status_code=400, detail=f"Exercise with ID {item.exercise_id} not found")
        rows.append(WorkoutExercise(position=position, **item.model_dump()))
    return rows


# ==================== EXERCISES ====================


@router.get("/exercises", summary="List exercises")
async def list_exercises(
    category: Optional[str] = Query(None),
    muscle_group: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    equipment: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Exercise)
    if category:
        query = query.filter(Exercise.category == category)
    if difficulty:
        query = query.filter(Exercise.difficulty == difficulty)

    exercises = query.order_by(Exercise.name).all()
    # JSON list columns are filtered in Python for SQLite/PostgreSQL parity
    if muscle_group:
        exercises = [e for e in exercises if _contains(e.muscle_groups, muscle_group)]
    if equipment:
        exercises = [e for e in exercises if _contains(e.equipment, equipment)]

    return {
        "success": True,
        "count": len(exercises),
        "data": [ExerciseOut.model_validate(e) for e in exercises],
    }


@router.get("/exercises/{exercise_id}", summary="Get exercise by ID")
async def get_exercise(exercise_id: int, db: Session = Depends(get_db)):
    exercise = db.get(Exercise, exercise_id)
    if not exercise:
        raise HTTPException(status_code=404, detail="Exercise not found")
    return {"success": True, "data": ExerciseOut.model_validate(exercise)}


# ==================== WORKOUTS ====================


@router.get("/", summary="List public workouts")
async def list_workouts(
    type: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    muscle_group: Optional[str] = Query(None),
    created_by: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """Public workouts, newest first"""
    query = _workout_query(db).filter(Workout.is_public == True)  # noqa: E712
    if type:
        query = query.filter(Workout.type == type)
    if difficulty:
        query = query.filter(Workout.difficulty == difficulty)
    if created_by is not None:
        query = query.filter(Workout.created_by_id == created_by)

    workouts = query.order_by(Workout.created_at.desc(), Workout.id.desc()).all()
    if muscle_group:
        workouts = [w for w in workouts if _contains(w.target_muscle_groups, muscle_group)]

    return {
        "success": True,
        "count": len(workouts),
        "data": [WorkoutOut.model_validate(w) for w in workouts],
    }


@router.get("/logs", summary="List my workout logs")
async def list_workout_logs(
    limit: int = Query(10, ge=1, le=100),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    base = db.query(WorkoutLog).filter(WorkoutLog.user_id == current_user.id)
    total = base.count()
    logs = (
        base.options(joinedload(WorkoutLog.workout))
        .order_by(WorkoutLog.date.desc(), WorkoutLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "success": True,
        "count": len(logs),
        "total": total,
        "pagination": {"page": page, "pages": math.ceil(total / limit)},
        "data": [WorkoutLogOut.model_validate(log) for log in logs],
    }


@router.get("/{workout_id}", summary="Get workout by ID")
async def get_workout(workout_id: int, db: Session = Depends(get_db)):
    workout = _get_workout_or_404(db, workout_id)
    return {"success": True, "data": WorkoutOut.model_validate(workout)}


@router.post("/", status_code=201, summary="Create workout")
async def create_workout(
    payload: WorkoutCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a workout owned by the caller.

    Every referenced exercise must exist; the first missing one is reported
    with a 400.
    """
    exercises = _build_exercises(db, payload.exercises)
    workout = Workout(
        **payload.model_dump(exclude={"exercises"}),
        created_by_id=current_user.id,
        exercises=exercises,
    )
    db.add(workout)
    db.commit()
    logger.info(f"Workout {workout.id} created by user {current_user.id}")

    return {
        "success": True,
        "message": "Workout created successfully",
        "data": WorkoutOut.model_validate(_get_workout_or_404(db, workout.id)),
    }


@router.put("/{workout_id}", summary="Update workout")
async def update_workout(
    workout_id: int,
    update: WorkoutUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    workout = _get_workout_or_404(db, workout_id)
    ensure_owner_or_admin(current_user, workout.created_by_id, "update", "workout")

    changes = update.model_dump(exclude_unset=True, exclude={"exercises"})
    for field, value in changes.items():
        if value is not None:
            setattr(workout, field, value)
    if update.exercises is not None:
        workout.exercises = _build_exercises(db, update.exercises)

    db.commit()
    db.expire_all()
    return {
        "success": True,
        "message": "Workout updated successfully",
        "data": WorkoutOut.model_validate(_get_workout_or_404(db, workout_id)),
    }


@router.delete("/{workout_id}", summary="Delete workout")
async def delete_workout(
    workout_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    workout = _get_workout_or_404(db, workout_id)
    ensure_owner_or_admin(current_user, workout.created_by_id, "delete", "workout")
    db.delete(workout)
    db.commit()
    logger.info(f"Workout {workout_id} deleted by user {current_user.id}")
    return {"success": True, "message": "Workout deleted successfully"}


@router.post("/{workout_id}/log", status_code=201, summary="Log a workout session")
async def log_workout(
    workout_id: int,
    payload: WorkoutLogCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    workout = db.get(Workout, workout_id)
    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")

    log = WorkoutLog(
        user_id=current_user.id,
        workout_id=workout.id,
        **payload.model_dump(mode="json"),
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    return {
        "success": True,
        "message": "Workout logged successfully",
        "data": WorkoutLogOut.model_validate(log),
    }
