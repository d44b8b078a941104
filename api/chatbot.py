"""
Chatbot endpoints (rule-based assistant, rate limited per IP)
"""
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from api.auth import get_optional_user
from models import User
from schemas import ChatRequest, CustomDietRequest, GeneralChatRequest
from services.chatbot_service import chatbot
from services.rate_limiter import enforce_rate_limit

router = APIRouter(tags=["chatbot"], dependencies=[Depends(enforce_rate_limit)])


def _profile(explicit: Optional[Dict[str, Any]], user: Optional[User]) -> Optional[Dict[str, Any]]:
    if explicit:
        return explicit
    return user.profile if user else None


def _reply(key: str, text: str, user: Optional[User]) -> dict:
    return {
        "success": True,
        "data": {
            key: text,
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "user": user.id if user else None,
        },
    }


@router.post("/workout", summary="Workout recommendation")
async def workout_advice(payload: ChatRequest, user: Optional[User] = Depends(get_optional_user)):
    return _reply("message", chatbot.generate_response(payload.message, _profile(payload.user_profile, user)), user)


@router.post("/nutrition", summary="Nutrition recommendation")
async def nutrition_advice(payload: ChatRequest, user: Optional[User] = Depends(get_optional_user)):
    return _reply("message", chatbot.generate_response(payload.message, _profile(payload.user_profile, user)), user)


@router.post("/custom-diet", summary="Custom diet plan")
async def custom_diet(payload: CustomDietRequest, user: Optional[User] = Depends(get_optional_user)):
    plan = chatbot.generate_diet_plan(payload.requirements, _profile(payload.user_profile, user))
    return _reply("diet_plan", plan, user)


@router.post("/general", summary="General fitness advice")
async def general_advice(payload: GeneralChatRequest, user: Optional[User] = Depends(get_optional_user)):
    return _reply("message", chatbot.generate_response(payload.message, user.profile if user else None), user)


@router.post("/message", summary="Anonymous chat message")
async def message(payload: GeneralChatRequest):
    return {
        "success": True,
        "data": {
            "message": chatbot.generate_response(payload.message),
            "timestamp": datetime.utcnow().isoformat() + "Z",
        },
    }
