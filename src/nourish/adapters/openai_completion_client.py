"""OpenAI chat completions backend for the LLM gateway."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nourish.services.llm import CompletionBackend, CompletionRequest


@dataclass
class OpenAICompletionClient(CompletionBackend):
    """Completion backend bound to one OpenAI model."""

    client: AsyncOpenAI
    model: str
    timeout_seconds: float = 15.0

    @property
    def name(self) -> str:
        return f"openai:{self.model}"

    @classmethod
    def for_models(
        cls, client: AsyncOpenAI, models: list[str], timeout_seconds: float = 15.0
    ) -> list["OpenAICompletionClient"]:
        """Create one backend per model sharing a single API client."""
        return [
            cls(client=client, model=model, timeout_seconds=timeout_seconds)
            for model in models
        ]

    async def complete(self, request: CompletionRequest) -> str:
        """Call the chat completions API and return the first choice."""
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": request.system_prompt},
                {"role": "user", "content": request.user_message},
            ],
            max_tokens=request.max_tokens,
            temperature=request.temperature,
            timeout=self.timeout_seconds,
        )
        if not response.choices:
            raise RuntimeError(f"OpenAI returned no choices for {self.model}")
        content = response.choices[0].message.content
        if not content:
            raise RuntimeError(f"OpenAI returned an empty message for {self.model}")
        return content
