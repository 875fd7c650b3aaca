"""Email API: thin routes delegating to EmailService."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from assistant.api.v1.dependencies import get_email_service, get_user_id
from assistant.application.services import EmailService
from assistant.domain.enums import EmailStatus
from assistant.schemas.email import DraftRequest, SendEmailRequest

router = APIRouter()


@router.post("/send")
async def send_email(
    body: SendEmailRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[EmailService, Depends(get_email_service)],
) -> JSONResponse:
    """Send now (200, or 500 on delivery failure) or schedule (201)."""
    email = await service.send_email(user_id, body)
    status = email["status"]
    if status == EmailStatus.SCHEDULED.value:
        code, message = 201, "Email scheduled successfully"
    elif status == EmailStatus.SENT.value:
        code, message = 200, "Email sent successfully"
    else:
        code, message = 500, "Email sending failed"
    return JSONResponse(
        status_code=code,
        content={"success": code < 400, "message": message, "data": {"email": email}},
    )


@router.post("/drafts", status_code=201)
async def save_draft(
    body: DraftRequest,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[EmailService, Depends(get_email_service)],
) -> dict[str, Any]:
    draft = await service.save_draft(user_id, body)
    return {"success": True, "message": "Draft saved successfully", "data": {"draft": draft}}


@router.get("")
async def list_emails(
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[EmailService, Depends(get_email_service)],
    status: Literal["draft", "scheduled", "sent", "failed"] | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
) -> dict[str, Any]:
    """Sent history by default; drafts or scheduled emails by status."""
    return {"success": True, "data": await service.list_emails(user_id, status, limit)}


@router.get("/{email_id}")
async def get_email(
    email_id: str,
    user_id: Annotated[str, Depends(get_user_id)],
    service: Annotated[EmailService, Depends(get_email_service)],
) -> dict[str, Any]:
    email = await service.get_email(user_id, email_id)
    return {"success": True, "data": {"email": email}}
