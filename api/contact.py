"""
Contact and membership inquiry forms
The admin notice is delivered before responding; the sender's confirmation is
dispatched in the background.
"""
import logging
import smtplib

from fastapi import APIRouter, Depends, HTTPException

from config import settings
from schemas import ContactRequest, MembershipInquiry
from services import mail_service
from services.rate_limiter import enforce_rate_limit
from services.task_executor import get_task_executor

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contact"], dependencies=[Depends(enforce_rate_limit)])

UNAVAILABLE = "{} is currently unavailable. Please configure email settings in the environment variables."


def _require_email(feature: str) -> None:
    if not settings.email_enabled:
        raise HTTPException(status_code=503, detail=UNAVAILABLE.format(feature))


@router.post("/", summary="Send contact form message")
async def send_contact_message(payload: ContactRequest):
    _require_email("Contact form")
    executor = get_task_executor()

    try:
        await executor.run(
            mail_service.send_contact_notice,
            payload.name,
            payload.email,
            payload.message,
            payload.subject,
            payload.phone,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Contact form delivery failed: {e}")
        raise HTTPException(status_code=500, detail="Error sending message. Please try again later.")

    executor.submit(mail_service.send_contact_confirmation, payload.name, payload.email, payload.message)
    return {"success": True, "message": "Message sent successfully! We will get back to you soon."}


@router.post("/membership", summary="Send membership inquiry")
async def send_membership_inquiry(payload: MembershipInquiry):
    _require_email("Membership inquiry")
    executor = get_task_executor()

    try:
        await executor.run(
            mail_service.send_membership_notice,
            payload.name,
            payload.email,
            payload.phone,
            payload.message,
        )
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Membership inquiry delivery failed: {e}")
        raise HTTPException(status_code=500, detail="Error submitting inquiry. Please try again later.")

    executor.submit(mail_service.send_membership_confirmation, payload.name, payload.email)
    return {
        "success": True,
        "message": "Membership inquiry submitted successfully! We will contact you within 24 hours.",
    }
