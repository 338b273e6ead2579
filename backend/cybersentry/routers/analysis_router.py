# Name: analysis_router.py
# Description: Router for phishing, log and log-line analysis endpoints
# Date: 2026-10-12

import json
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError as PydanticValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from cybersentry.core.config import settings
from cybersentry.core.errors import (
    CyberSentryError,
    InternalError,
    LLMError,
    PayloadTooLarge,
    ValidationError,
)
from cybersentry.core.security import sanitize_for_log
from cybersentry.models.analysis import (
    AnalysisResponse,
    ExplainLineRequest,
    ExplanationResponse,
    LogsRequest,
    PhishingRequest,
)
from cybersentry.routers.dependencies import get_client_slot
from cybersentry.services.analysis_service import AnalysisOrchestrator
from cybersentry.services.gemini_service import ClientSlot

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="",
    tags=["analysis"],
)

# Filename used when a multipart upload carries none
DEFAULT_UPLOAD_FILENAME = "uploaded_log.log"

# Allowance for multipart boundaries and headers on top of the file itself
FORM_OVERHEAD_BYTES = 64 * 1024


@asynccontextmanager
async def _guard(flow: str) -> AsyncIterator[None]:
    """
    Map failures inside an analysis request to typed errors.
    
    LLM failures become "Analysis failed: ..." and anything unexpected
    becomes an InternalError, so every failure is answered by a router-level
    handler (inside the CORS middleware).
    """
    try:
        yield
    except LLMError as e:
        logger.error(f"[RESPONSE] flow={flow} LLM failure: {e.message}")
        raise LLMError(f"Analysis failed: {e.message}") from e
    except (CyberSentryError, PydanticValidationError, StarletteHTTPException):
        raise
    except Exception as e:
        logger.error(f"[RESPONSE] flow={flow} unexpected failure", exc_info=True)
        raise InternalError() from e


def _log_response(flow: str, response: AnalysisResponse, start_time: float) -> None:
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    findings = response.indicators if response.indicators is not None else response.anomalies
    logger.info(
        f"[RESPONSE] flow={flow} "
        f"risk={response.risk_level} score={response.risk_score} "
        f"findings={len(findings or [])} elapsed={elapsed_ms:.0f}ms"
    )


@router.post(
    "/analyze/phishing",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
)
async def analyze_phishing_endpoint(
    request: PhishingRequest,
    slot: ClientSlot = Depends(get_client_slot),
) -> AnalysisResponse:
    """
    Analyze an email for phishing.

    Accepts the email text and returns the LLM's risk assessment together
    with heuristic indicators found in the original text.
    """
    start_time = time.perf_counter()
    logger.info(f"[REQUEST] flow=phishing payload={sanitize_for_log(request.model_dump(by_alias=True))}")
    
    async with _guard("phishing"):
        async with slot.lease(request.api_key) as client:
            orchestrator = AnalysisOrchestrator(client, settings.max_prompt_chars)
            response = await orchestrator.analyze_phishing(request.email_content, request.include_headers)
    
    _log_response("phishing", response, start_time)
    return response


async def _read_logs_request(request: Request) -> LogsRequest:
    """
    Build a LogsRequest from either a multipart upload or a JSON body.
    
    Raises:
        PayloadTooLarge: Body or uploaded file exceeds the size cap
        ValidationError: Missing file or malformed JSON
    """
    max_bytes = settings.max_upload_bytes
    content_type = request.headers.get("content-type", "")
    content_length = request.headers.get("content-length")
    
    if content_length and content_length.isdigit() and int(content_length) > max_bytes + FORM_OVERHEAD_BYTES:
        raise PayloadTooLarge("File too large. Maximum size is 10MB")
    
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        if not isinstance(upload, UploadFile):
            raise ValidationError("Log file is required")
        
        data = await upload.read(max_bytes + 1)
        await upload.close()
        if len(data) > max_bytes:
            raise PayloadTooLarge("File too large. Maximum size is 10MB")
        
        api_key = form.get("apiKey")
        return LogsRequest(
            log_content=data.decode("utf-8", errors="replace"),
            filename=upload.filename or DEFAULT_UPLOAD_FILENAME,
            api_key=api_key if isinstance(api_key, str) else None,
        )
    
    body = await request.body()
    if len(body) > max_bytes:
        raise PayloadTooLarge("Request body too large. Maximum size is 10MB")
    try:
        payload = json.loads(body) if body else {}
    except json.JSONDecodeError as e:
        raise ValidationError("Request body must be JSON or a multipart file upload") from e
    if not isinstance(payload, dict):
        raise ValidationError("Log content is required")
    
    return LogsRequest.model_validate(payload)


@router.post(
    "/analyze/logs",
    response_model=AnalysisResponse,
    response_model_exclude_none=True,
)
async def analyze_logs_endpoint(
    request: Request,
    slot: ClientSlot = Depends(get_client_slot),
) -> AnalysisResponse:
    """
    Analyze a security log.

    Accepts a multipart `file` upload or a JSON body with `logContent`.
    """
    start_time = time.perf_counter()
    async with _guard("logs"):
        logs_request = await _read_logs_request(request)
        logger.info(
            f"[REQUEST] flow=logs filename={logs_request.filename} "
            f"chars={len(logs_request.log_content or '')}"
        )
        
        async with slot.lease(logs_request.api_key) as client:
            orchestrator = AnalysisOrchestrator(client, settings.max_prompt_chars)
            response = await orchestrator.analyze_logs(logs_request.log_content, logs_request.filename)
    
    _log_response("logs", response, start_time)
    return response


@router.post("/explain/log-line", response_model=ExplanationResponse)
async def explain_log_line_endpoint(
    request: ExplainLineRequest,
    slot: ClientSlot = Depends(get_client_slot),
) -> ExplanationResponse:
    """Explain a single log line in plain language."""
    logger.info(f"[REQUEST] flow=explain payload={sanitize_for_log(request.model_dump(by_alias=True))}")
    
    async with _guard("explain"):
        async with slot.lease(request.api_key) as client:
            orchestrator = AnalysisOrchestrator(client, settings.max_prompt_chars)
            explanation = await orchestrator.explain_log_line(request.log_line)
    return ExplanationResponse(explanation=explanation)
