"""
Pydantic schemas for request validation and response serialization
"""
import re
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StringConstraints, field_validator

EMAIL_RE = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
PHONE_RE = r"^\+?[1-9]\d{0,15}$"

Role = Literal["user", "trainer", "admin"]
Gender = Literal["male", "female", "other"]
Level = Literal["beginner", "intermediate", "advanced"]
Goal = Literal["weight_loss", "muscle_gain", "endurance", "flexibility", "strength", "general_fitness"]
DietaryPreference = Literal["vegan", "vegetarian", "omnivore", "keto", "paleo", "mediterranean"]
MembershipType = Literal["basic", "premium", "elite"]
WorkoutTime = Literal["morning", "afternoon", "evening"]
MuscleGroup = Literal[
    "chest", "back", "shoulders", "biceps", "triceps", "forearms", "abs",
    "obliques", "quads", "hamstrings", "calves", "glutes", "full_body",
]
Equipment = Literal[
    "barbell", "dumbbell", "kettlebell", "cable", "machine", "bodyweight",
    "resistance_band", "medicine_ball", "stability_ball", "foam_roller", "none",
]
ExerciseCategory = Literal["strength", "cardio", "flexibility", "balance", "sports"]
WorkoutType = Literal["strength", "cardio", "flexibility", "hiit", "circuit", "yoga", "pilates", "crossfit", "custom"]
FoodCategory = Literal["protein", "carbohydrate", "fat", "vegetable", "fruit", "dairy", "grain", "supplement"]
MealType = Literal["breakfast", "lunch", "dinner", "snack", "pre_workout", "post_workout"]
PlanMealType = Literal["breakfast", "lunch", "dinner", "snack"]
MealDifficulty = Literal["easy", "medium", "hard"]
DietType = Literal[
    "vegan", "vegetarian", "omnivore", "keto", "paleo", "mediterranean",
    "low_carb", "high_protein", "balanced",
]
DietaryTag = Literal["vegan", "vegetarian", "gluten_free", "dairy_free", "nut_free", "organic", "non_gmo"]


def Text(min_length: int = 0, max_length: Optional[int] = None):
    """Stripped string with length bounds"""
    return Annotated[str, StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length)]


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please provide a valid email")
    return value


Email = Annotated[str, AfterValidator(normalize_email)]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


# ==================== AUTH / USERS ====================


class ProfileIn(BaseModel):
    age: Optional[int] = Field(None, ge=13, le=100)
    gender: Optional[Gender] = None
    height: Optional[float] = Field(None, ge=100, le=250)
    weight: Optional[float] = Field(None, ge=30, le=300)
    fitness_level: Level = "beginner"
    goals: List[Goal] = []
    dietary_preferences: List[DietaryPreference] = []
    medical_conditions: List[str] = []
    allergies: List[str] = []


class PreferencesIn(BaseModel):
    workout_duration: int = Field(45, ge=1)
    workout_frequency: int = Field(3, ge=0, le=14)
    preferred_workout_time: WorkoutTime = "morning"


class UserCreate(BaseModel):
    name: Text(1, 50)
    email: Email
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileUpdate(BaseModel):
    name: Optional[Text(1, 50)] = None
    profile: Optional[ProfileIn] = None
    preferences: Optional[PreferencesIn] = None


class MembershipUpdate(BaseModel):
    type: Optional[MembershipType] = None
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    is_active: Optional[bool] = None


class ProfileOut(BaseModel):
    age: Optional[int] = None
    gender: Optional[str] = None
    height: Optional[float] = None
    weight: Optional[float] = None
    fitness_level: str = "beginner"
    goals: List[str] = []
    dietary_preferences: List[str] = []
    medical_conditions: List[str] = []
    allergies: List[str] = []


class MembershipOut(BaseModel):
    type: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool


class PreferencesOut(BaseModel):
    workout_duration: int
    workout_frequency: int
    preferred_workout_time: str


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    profile: ProfileOut
    membership: MembershipOut
    preferences: PreferencesOut
    email_verified: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Token(BaseModel):
    access_token: str
    token_type: str


class CreatorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class RatingOut(BaseModel):
    average: float = 0.0
    count: int = 0


# ==================== WORKOUTS ====================


class ExerciseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    category: str
    muscle_groups: List[str] = []
    equipment: List[str] = []
    difficulty: str
    instructions: List[str] = []
    tips: List[str] = []
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    calories_per_minute: Optional[float] = None


class WorkoutExerciseIn(BaseModel):
    exercise_id: int
    sets: int = Field(3, ge=1)
    reps: int = Field(10, ge=1)
    weight: float = Field(0, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    rest: int = Field(60, ge=0)
    notes: Optional[str] = None


class WorkoutCreate(BaseModel):
    name: Text(3, 100)
    description: Text(10, 500)
    type: WorkoutType
    difficulty: Level
    duration: int = Field(..., ge=5, le=300)
    exercises: List[WorkoutExerciseIn] = Field(..., min_length=1)
    target_muscle_groups: List[MuscleGroup] = []
    equipment: List[Equipment] = []
    calories: Optional[float] = Field(None, ge=0)
    is_public: bool = True
    tags: List[str] = []


class WorkoutUpdate(BaseModel):
    name: Optional[Text(3, 100)] = None
    description: Optional[Text(10, 500)] = None
    type: Optional[WorkoutType] = None
    difficulty: Optional[Level] = None
    duration: Optional[int] = Field(None, ge=5, le=300)
    exercises: Optional[List[WorkoutExerciseIn]] = Field(None, min_length=1)
    target_muscle_groups: Optional[List[MuscleGroup]] = None
    equipment: Optional[List[Equipment]] = None
    calories: Optional[float] = Field(None, ge=0)
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None


class WorkoutExerciseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    exercise_id: int
    exercise: Optional[ExerciseOut] = None
    sets: int
    reps: int
    weight: float
    duration: Optional[int] = None
    rest: int
    notes: Optional[str] = None


class WorkoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    type: str
    difficulty: str
    duration: int
    exercises: List[WorkoutExerciseOut] = []
    target_muscle_groups: List[str] = []
    equipment: List[str] = []
    calories: Optional[float] = None
    created_by: CreatorOut = Field(validation_alias="creator")
    is_public: bool
    tags: List[str] = []
    rating: RatingOut
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WorkoutBriefOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    difficulty: str
    duration: int


class LoggedSet(BaseModel):
    reps: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    duration: Optional[int] = Field(None, ge=0)
    completed: bool = True


class LoggedExercise(BaseModel):
    exercise_id: int
    sets: List[LoggedSet] = []
    notes: Optional[str] = None


class WorkoutLogCreate(BaseModel):
    duration: int = Field(..., ge=1)
    exercises: List[LoggedExercise]
    calories: Optional[float] = Field(None, ge=0)
    rating: Optional[int] = Field(None, ge=1, le=5)
    notes: Optional[str] = None
    completed: bool = True


class WorkoutLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    workout_id: int
    workout: Optional[WorkoutBriefOut] = None
    date: datetime
    duration: int
    exercises: List[LoggedExercise] = []
    calories: Optional[float] = None
    rating: Optional[int] = None
    notes: Optional[str] = None
    completed: bool
    created_at: Optional[datetime] = None


# ==================== NUTRITION ====================


class ServingSizeOut(BaseModel):
    amount: float
    unit: str


class FoodItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category: str
    calories: float
    protein: float = 0
    carbohydrates: float = 0
    fat: float = 0
    fiber: float = 0
    sugar: float = 0
    sodium: float = 0
    serving_size: ServingSizeOut
    allergens: List[str] = []
    dietary_tags: List[str] = []
    image_url: Optional[str] = None
    description: Optional[str] = None


class MealIngredientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    food_id: int
    food: Optional[FoodItemOut] = None
    amount: float
    unit: str


class MealOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    type: str
    description: Optional[str] = None
    ingredients: List[MealIngredientOut] = []
    instructions: List[str] = []
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    difficulty: str
    image_url: Optional[str] = None
    tags: List[str] = []
    rating: RatingOut


class DietPlanMealIn(BaseModel):
    day: int = Field(..., ge=1, le=7)
    meal_type: PlanMealType
    meal_id: int
    alternatives: List[int] = []


class DietPlanCreate(BaseModel):
    name: Text(3, 100)
    description: Text(10, 500)
    type: DietType
    target_calories: int = Field(..., ge=800, le=5000)
    target_protein: Optional[float] = Field(None, ge=0)
    target_carbs: Optional[float] = Field(None, ge=0)
    target_fat: Optional[float] = Field(None, ge=0)
    meals: List[DietPlanMealIn] = Field(..., min_length=1)
    difficulty: Level = "beginner"
    is_public: bool = True
    tags: List[str] = []


class DietPlanMealOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    day: int
    meal_type: str
    meal_id: int
    meal: Optional[MealOut] = None
    alternatives: List[int] = []


class DietPlanOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    type: str
    target_calories: int
    target_protein: Optional[float] = None
    target_carbs: Optional[float] = None
    target_fat: Optional[float] = None
    meals: List[DietPlanMealOut] = []
    created_by: CreatorOut = Field(validation_alias="creator")
    is_public: bool
    difficulty: str
    tags: List[str] = []
    rating: RatingOut
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class LoggedFood(BaseModel):
    food_id: int
    amount: float = Field(..., ge=0)
    unit: Text(1, 20)


class LoggedMeal(BaseModel):
    type: PlanMealType
    foods: List[LoggedFood] = []
    notes: Optional[str] = None


class NutritionLogCreate(BaseModel):
    meals: List[LoggedMeal]
    date: Optional[UtcDatetime] = None
    total_calories: float = Field(0, ge=0)
    total_protein: float = Field(0, ge=0)
    total_carbs: float = Field(0, ge=0)
    total_fat: float = Field(0, ge=0)
    water_intake: float = Field(0, ge=0)
    notes: Optional[str] = None


class NutritionLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: datetime
    meals: List[LoggedMeal] = []
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    water_intake: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# ==================== CHATBOT ====================


class ChatRequest(BaseModel):
    message: Text(10, 500)
    user_profile: Optional[Dict[str, Any]] = None


class CustomDietRequest(BaseModel):
    requirements: Text(20, 1000)
    user_profile: Optional[Dict[str, Any]] = None


class GeneralChatRequest(BaseModel):
    message: Text(1, 500)


# ==================== CONTACT ====================


class ContactRequest(BaseModel):
    name: Text(2, 50)
    email: Email
    message: Text(10, 1000)
    phone: Optional[str] = Field(None, pattern=PHONE_RE)
    subject: Text(1, 200) = "Contact Form Submission"


class MembershipInquiry(BaseModel):
    name: Text(2, 50)
    email: Email
    phone: str = Field(..., pattern=PHONE_RE)
    message: Text(0, 500) = ""
