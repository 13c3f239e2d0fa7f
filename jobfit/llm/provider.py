"""
LLM provider interface for abstracting text-generation backends.
"""
from abc import ABC, abstractmethod
from typing import Optional, Dict, Any
from dataclasses import dataclass, field


class LLMProviderError(Exception):
    """A backend request failed (transport error, bad status, malformed body)."""


@dataclass
class LLMResponse:
    """Standardized LLM response."""
    content: str
    model: str = ""
    tokens_in: int = 0
    tokens_out: int = 0
    cost_estimate: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""
    
    name: str = ""
    
    @abstractmethod
    def generate(
        self,
        prompt: str,
        model: str,
        timeout: Optional[float] = None,
    ) -> LLMResponse:
        """
        Generate a JSON answer for a single-turn prompt.
        
        Implementations pin sampling to the most likely token (temperature 0)
        so identical inputs tend to produce identical outputs.
        
        Args:
            prompt: Full instruction prompt
            model: Model identifier
            timeout: Request timeout in seconds
            
        Returns:
            LLMResponse with the generated text
            
        Raises:
            LLMProviderError: on any request or response-shape failure
        """
        pass
    
    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """Estimated cost in USD; providers with known pricing override this."""
        return 0.0
