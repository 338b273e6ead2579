# Name: __init__.py
# Description: Export all routers for convenient importing
# Date: 2026-10-12

from cybersentry.routers.analysis_router import router as analysis_router
from cybersentry.routers.key_router import router as key_router

__all__ = ["analysis_router", "key_router"]
