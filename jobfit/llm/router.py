"""
Model fallback chain for AI generation.

Tries an ordered list of (provider, model) candidates until one returns an
answer that parses. Provider errors, malformed bodies and unparseable answers
all move on to the next candidate. A shared time budget caps the total time
spent across the chain.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TypeVar

from jobfit.core.config import AI_MODELS, AI_REQUEST_TIMEOUT_SECONDS, AI_TOTAL_TIMEOUT_SECONDS
from jobfit.core.errors import AIGenerationError
from jobfit.llm.provider import LLMProvider, LLMProviderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PROVIDER = "gemini"


@dataclass(frozen=True)
class ModelCandidate:
    provider: str
    model: str

    def __str__(self):
        return f"{self.provider}:{self.model}"


@dataclass
class FallbackResult:
    value: object
    candidate: ModelCandidate
    failures: List[str] = field(default_factory=list)


def parse_model_spec(spec: str) -> ModelCandidate:
    """Parse ``"provider:model"`` (provider optional, defaults to gemini)."""
    spec = spec.strip()
    if ":" in spec:
        provider, model = spec.split(":", 1)
        return ModelCandidate(provider.strip().lower(), model.strip())
    return ModelCandidate(DEFAULT_PROVIDER, spec)


def build_model_chain(models: str = AI_MODELS) -> List[ModelCandidate]:
    """Ordered candidate list from the comma-separated config value."""
    return [parse_model_spec(item) for item in models.split(",") if item.strip()]


def _default_provider_factory(name: str) -> LLMProvider:
    if name == "gemini":
        from jobfit.llm.gemini_provider import GeminiProvider
        return GeminiProvider()
    if name == "openai":
        from jobfit.llm.openai_provider import OpenAIProvider
        return OpenAIProvider()
    raise ValueError(f"Unknown AI provider: {name}")


class ModelFallbackClient:
    """Runs a prompt through the fallback chain, first parseable answer wins."""

    def __init__(
        self,
        candidates: List[ModelCandidate],
        provider_factory: Callable[[str], LLMProvider] = _default_provider_factory,
        request_timeout: float = AI_REQUEST_TIMEOUT_SECONDS,
        total_timeout: Optional[float] = AI_TOTAL_TIMEOUT_SECONDS,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        if not candidates:
            raise ValueError("At least one AI model must be configured")
        self.candidates = list(candidates)
        self.provider_factory = provider_factory
        self.request_timeout = request_timeout
        self.total_timeout = total_timeout
        self.monotonic = monotonic
        self._providers: Dict[str, LLMProvider] = {}

    def _get_provider(self, name: str) -> LLMProvider:
        if name not in self._providers:
            self._providers[name] = self.provider_factory(name)
        return self._providers[name]

    def generate_json(self, prompt: str, parse: Callable[[str], T]) -> FallbackResult:
        """
        Generate and parse an answer, falling back across the model chain.

        Args:
            prompt: Instruction prompt
            parse: Converts raw model text into a value; any exception it
                raises counts as a failure of that model

        Returns:
            FallbackResult with the parsed value and the model that produced it

        Raises:
            AIGenerationError: every model failed or the time budget ran out
        """
        started = self.monotonic()
        failures: List[str] = []
        last_error = ""

        for candidate in self.candidates:
            timeout = self.request_timeout
            if self.total_timeout is not None:
                remaining = self.total_timeout - (self.monotonic() - started)
                if remaining <= 0:
                    last_error = f"AI time budget of {self.total_timeout:g}s exhausted"
                    logger.warning(f"{last_error} before trying {candidate}")
                    break
                timeout = min(timeout, remaining)

            try:
                provider = self._get_provider(candidate.provider)
                response = provider.generate(prompt, candidate.model, timeout=timeout)
                value = parse(response.content)
            except (LLMProviderError, ValueError, TypeError, KeyError) as e:
                last_error = str(e) or type(e).__name__
                failures.append(f"{candidate}: {last_error}")
                logger.warning(f"Failed with {candidate}: {last_error}")
                continue

            logger.info(f"Success with {candidate} after {len(failures)} failed attempt(s)")
            return FallbackResult(value=value, candidate=candidate, failures=failures)

        logger.error(f"All models failed: {last_error}")
        raise AIGenerationError(last_error, attempts=failures)


def get_ai_client() -> ModelFallbackClient:
    """FastAPI dependency: fallback client built from ``AI_MODELS``."""
    return ModelFallbackClient(build_model_chain())
