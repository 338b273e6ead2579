# Name: gemini_service.py
# Description: Gemini API adapter and the process-wide client slot
# Date: 2026-10-12
#
# Uses the google-genai SDK. No retries and no streaming; the only timeout is
# the one configured on the SDK's HTTP client.

import logging
import time
from collections import Counter
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Optional, Protocol

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from cybersentry.core.config import settings
from cybersentry.core.errors import ConfigError, LLMError, NetworkError
from cybersentry.core.security import log_security_event, mask_token

# Configure logging
logger = logging.getLogger(__name__)

# Generation parameters
MAX_OUTPUT_TOKENS = 2000
TEMPERATURE = 0.2


class LLMClient(Protocol):
    """Anything that turns a prompt into text."""
    
    model: str
    
    async def generate(self, prompt: str) -> str:
        ...
    
    async def aclose(self) -> None:
        ...


class GeminiClient:
    """
    Thin async wrapper around a google-genai client bound to one API key.
    
    Raises ConfigError on construction with an empty key and LLMError (or
    NetworkError for transport failures) from generate().
    """
    
    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigError("API key is required")
        
        self.model = model or settings.gemini_model
        self.timeout = timeout or settings.gemini_timeout
        self._key_hint = mask_token(api_key)
        
        try:
            self._client = genai.Client(
                api_key=api_key.strip(),
                http_options=types.HttpOptions(
                    timeout=self.timeout * 1000,  # milliseconds
                ),
            )
        except Exception as e:
            raise ConfigError(f"Invalid API key: {e}") from e
        
        logger.info(f"[Gemini] Client ready - key={self._key_hint} model={self.model} timeout={self.timeout}s")
    
    async def generate(self, prompt: str) -> str:
        """
        Send a prompt to Gemini and return the reply text.
        
        Args:
            prompt: Fully rendered prompt
            
        Returns:
            Reply text (never empty)
            
        Raises:
            NetworkError: Timeout or connection failure
            LLMError: Remote error status or empty reply
        """
        api_start = time.perf_counter()
        
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=TEMPERATURE,
                    max_output_tokens=MAX_OUTPUT_TOKENS,
                ),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"[Gemini] TIMEOUT after {self.timeout}s: {e}")
            raise NetworkError("timeout") from e
        except httpx.HTTPError as e:
            logger.warning(f"[Gemini] NETWORK ERROR {e}")
            raise NetworkError(str(e) or type(e).__name__) from e
        except genai_errors.APIError as e:
            logger.warning(f"[Gemini] API ERROR {e}")
            raise LLMError(str(e)) from e
        except Exception as e:
            logger.warning(f"[Gemini] CALL FAILED {type(e).__name__}: {e}")
            raise LLMError(str(e) or type(e).__name__) from e

        api_elapsed = (time.perf_counter() - api_start) * 1000
        
        text = response.text if response is not None else None
        if not text:
            logger.warning(f"[Gemini] Empty response ({api_elapsed:.0f}ms)")
            raise LLMError("Empty response from model")
        
        logger.debug(f"[Gemini] SUCCESS chars={len(text)} ({api_elapsed:.0f}ms)")
        return text
    
    async def aclose(self) -> None:
        """Release the SDK's async and sync HTTP connection pools."""
        try:
            await self._client.aio.aclose()
            self._client.close()
        except Exception as e:
            logger.warning(f"[Gemini] Client close failed key={self._key_hint}: {e}")


# =============================================================================
# CLIENT SLOT
# =============================================================================

class ClientSlot:
    """
    Single-slot holder for the configured LLM client.
    
    set() replaces the current client with one plain attribute assignment, so
    the last writer wins and readers always see either the old or the new
    client. A replaced client stays open until no request holds a lease on
    it. A request-scoped key builds a throwaway client that is closed when
    its lease ends, without touching the slot.
    """
    
    def __init__(self, factory: Callable[[str], LLMClient] = GeminiClient):
        self._factory = factory
        self._client: Optional[LLMClient] = None
        self._retired: list[LLMClient] = []
        self._leases: Counter = Counter()
    
    def set(self, api_key: Optional[str]) -> LLMClient:
        """Build a client for api_key and publish it."""
        client = self._factory(api_key or "")
        previous, self._client = self._client, client
        if previous is not None and previous is not client:
            self._retired.append(previous)
        log_security_event("api_key_configured", f"key={mask_token(api_key)}")
        return client
    
    def get(self) -> Optional[LLMClient]:
        """Current client, or None if no key has been set."""
        return self._client
    
    @property
    def is_configured(self) -> bool:
        return self._client is not None
    
    @asynccontextmanager
    async def lease(self, api_key: Optional[str] = None) -> AsyncIterator[LLMClient]:
        """
        Hold the client for one request.
        
        A non-empty request key wins for that request only; its client is
        closed on exit. Otherwise the slot's client is used.
        
        Raises:
            ConfigError: No request key and nothing configured
        """
        if api_key and api_key.strip():
            scoped = self._factory(api_key)
            try:
                yield scoped
            finally:
                await scoped.aclose()
            return
        
        client = self._client
        if client is None:
            raise ConfigError("API key not configured")
        
        self._leases[client] += 1
        try:
            yield client
        finally:
            self._leases[client] -= 1
            if self._leases[client] <= 0:
                del self._leases[client]
            await self.close_idle()
    
    async def close_idle(self) -> None:
        """Close replaced clients that no request is still using."""
        idle = [c for c in self._retired if not self._leases[c]]
        self._retired = [c for c in self._retired if self._leases[c]]
        for client in idle:
            await client.aclose()
    
    async def aclose(self) -> None:
        """Close every client the slot owns (shutdown)."""
        clients = self._retired + ([self._client] if self._client is not None else [])
        self._retired = []
        self._client = None
        for client in clients:
            await client.aclose()
    
    def status(self) -> dict:
        """Slot status for health checks (never includes the key)."""
        client = self._client
        return {
            "configured": client is not None,
            "model": getattr(client, "model", settings.gemini_model),
        }
