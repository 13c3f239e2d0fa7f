"""
Google Gemini provider using the generateContent REST endpoint.
"""
import logging
from typing import Optional

import httpx

from jobfit.core.config import GEMINI_API_KEY, GEMINI_API_BASE, AI_REQUEST_TIMEOUT_SECONDS
from jobfit.llm.provider import LLMProvider, LLMProviderError, LLMResponse

logger = logging.getLogger(__name__)

# Deterministic sampling so repeated scans of the same resume score the same
GENERATION_CONFIG = {
    "responseMimeType": "application/json",
    "temperature": 0,
    "topP": 1,
    "topK": 1,
}


class GeminiProvider(LLMProvider):
    """Gemini provider talking to the REST API through httpx."""
    
    name = "gemini"
    
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key or GEMINI_API_KEY
        if not self.api_key:
            raise ValueError("GEMINI_API_KEY not configured")
        self.base_url = (base_url or GEMINI_API_BASE).rstrip("/")
        self.transport = transport
    
    def generate(self, prompt: str, model: str, timeout: Optional[float] = None) -> LLMResponse:
        url = f"{self.base_url}/models/{model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        
        logger.info(f"POST {url}")
        try:
            with httpx.Client(timeout=timeout or AI_REQUEST_TIMEOUT_SECONDS, transport=self.transport) as client:
                response = client.post(
                    url,
                    json=body,
                    headers={"x-goog-api-key": self.api_key},
                )
        except httpx.HTTPError as e:
            raise LLMProviderError(f"{type(e).__name__}: {e}") from e
        
        if response.status_code >= 400:
            raise LLMProviderError(f"HTTP {response.status_code}: {response.text}")
        
        try:
            data = response.json()
        except ValueError as e:
            raise LLMProviderError("Malformed response body") from e
        
        try:
            candidate = data["candidates"][0]
            text = candidate["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise LLMProviderError("No candidates returned")
        
        usage = data.get("usageMetadata") or {}
        return LLMResponse(
            content=text,
            model=model,
            tokens_in=usage.get("promptTokenCount", 0),
            tokens_out=usage.get("candidatesTokenCount", 0),
            metadata={"finish_reason": candidate.get("finishReason")},
        )
