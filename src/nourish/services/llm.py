"""Text completion gateway over an ordered chain of model backends."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)


class LlmGatewayError(RuntimeError):
    """Raised when no backend produced a completion."""


@dataclass(frozen=True)
class CompletionRequest:
    """Prompt configuration sent to a completion backend."""

    system_prompt: str
    user_message: str
    max_tokens: int
    temperature: float = 0.7


class CompletionBackend(Protocol):
    """Interface for a single text completion model."""

    name: str

    async def complete(self, request: CompletionRequest) -> str:
        """Return the model's text for the request."""


@dataclass
class LlmGateway:
    """Try capability-equivalent backends in preference order."""

    backends: list[CompletionBackend]
    timeout_seconds: float = 15.0

    async def complete(self, request: CompletionRequest) -> str:
        """Return text from the first backend that succeeds."""
        if not self.backends:
            raise LlmGatewayError("No completion backends configured")
        for attempt, backend in enumerate(self.backends, start=1):
            try:
                text = await asyncio.wait_for(
                    backend.complete(request), timeout=self.timeout_seconds
                )
            except TimeoutError:
                _logger.warning(
                    "Completion timed out (backend=%s, attempt %s/%s)",
                    backend.name,
                    attempt,
                    len(self.backends),
                )
                continue
            except Exception as exc:
                _logger.warning(
                    "Completion failed (backend=%s, attempt %s/%s): %s",
                    backend.name,
                    attempt,
                    len(self.backends),
                    exc,
                )
                continue
            if text and text.strip():
                return text
            _logger.warning("Completion was empty (backend=%s)", backend.name)
        raise LlmGatewayError(
            f"All {len(self.backends)} completion backends failed"
        )
