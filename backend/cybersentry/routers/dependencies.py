# Name: dependencies.py
# Description: FastAPI dependencies shared by the routers
# Date: 2026-10-12

from fastapi import Request

from cybersentry.services.gemini_service import ClientSlot


def get_client_slot(request: Request) -> ClientSlot:
    """The application's LLM client slot (created in main.create_app)."""
    return request.app.state.llm_slot
