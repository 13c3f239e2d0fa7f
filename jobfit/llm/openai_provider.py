"""
OpenAI provider implementation.
"""
import logging
from typing import Optional
from openai import OpenAI, APIError

from jobfit.core.config import OPENAI_API_KEY, AI_REQUEST_TIMEOUT_SECONDS
from jobfit.llm.provider import LLMProvider, LLMProviderError, LLMResponse

logger = logging.getLogger(__name__)

# Model pricing per 1M tokens (input/output)
MODEL_PRICING = {
    "gpt-4o-mini": {"input": 0.15, "output": 0.60},
    "gpt-4o": {"input": 2.50, "output": 10.00},
}


class OpenAIProvider(LLMProvider):
    """OpenAI provider using official OpenAI SDK."""
    
    name = "openai"
    
    def __init__(self, api_key: Optional[str] = None, client: Optional[OpenAI] = None):
        """Initialize OpenAI client."""
        self.api_key = api_key or OPENAI_API_KEY
        if client is None and not self.api_key:
            raise ValueError("OPENAI_API_KEY not configured")
        self.client = client or OpenAI(api_key=self.api_key, max_retries=0)
        logger.info("OpenAI provider initialized")
    
    def generate(self, prompt: str, model: str = "gpt-4o-mini", timeout: Optional[float] = None) -> LLMResponse:
        """Generate a JSON chat completion."""
        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0,
                top_p=1,
                response_format={"type": "json_object"},
                timeout=timeout or AI_REQUEST_TIMEOUT_SECONDS,
            )
        except APIError as e:
            raise LLMProviderError(f"OpenAI API error: {e}") from e
        
        if not response.choices or not response.choices[0].message.content:
            raise LLMProviderError("No choices returned")
        
        tokens_in = response.usage.prompt_tokens if response.usage else 0
        tokens_out = response.usage.completion_tokens if response.usage else 0
        return LLMResponse(
            content=response.choices[0].message.content,
            model=model,
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            cost_estimate=self.estimate_cost(tokens_in, tokens_out, model),
            metadata={"finish_reason": response.choices[0].finish_reason},
        )
    
    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """Estimate cost in USD."""
        pricing = MODEL_PRICING.get(model, {"input": 0.15, "output": 0.60})
        cost_input = (tokens_in / 1_000_000) * pricing["input"]
        cost_output = (tokens_out / 1_000_000) * pricing["output"]
        return cost_input + cost_output
