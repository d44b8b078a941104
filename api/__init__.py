"""
API routers package
Each module exports an APIRouter named `router`.
"""
from . import auth, blog, chatbot, contact, nutrition, users, workouts

__all__ = [
    "auth",
    "blog",
    "chatbot",
    "contact",
    "nutrition",
    "users",
    "workouts",
]
