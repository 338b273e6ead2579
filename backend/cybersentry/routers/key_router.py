# Name: key_router.py
# Description: Router for configuring the Gemini API key
# Date: 2026-10-12

import logging

from fastapi import APIRouter, Depends

from cybersentry.core.errors import ValidationError
from cybersentry.models.analysis import SetKeyRequest, MessageResponse
from cybersentry.routers.dependencies import get_client_slot
from cybersentry.services.gemini_service import ClientSlot

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="",
    tags=["configuration"],
)


@router.post("/set-key", response_model=MessageResponse)
@router.post("/set-api-key", response_model=MessageResponse, include_in_schema=False)
async def set_key_endpoint(
    request: SetKeyRequest,
    slot: ClientSlot = Depends(get_client_slot),
) -> MessageResponse:
    """
    Configure the process-wide Gemini API key.
    
    Replaces any previously configured client; the most recent key wins.
    The replaced client is closed once no request is using it.
    """
    if not request.api_key or not request.api_key.strip():
        raise ValidationError("API key is required")
    
    slot.set(request.api_key.strip())
    await slot.close_idle()
    return MessageResponse(message="API key configured successfully")
