"""Free-text meal nutrition estimation."""

import json
import logging
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from nourish.domain.meals import NutritionEstimate
from nourish.services.llm import CompletionRequest, LlmGateway

_logger = logging.getLogger(__name__)

FALLBACK_ESTIMATE = NutritionEstimate(
    calories=650, protein=35, carbs=55, fats=20, source="fallback"
)

ESTIMATOR_SYSTEM_PROMPT = (
    "You are a nutritional analysis assistant. You estimate calories, protein, "
    "carbs, and fats for meal descriptions. Always respond with valid JSON only."
)


class EstimatePayload(BaseModel):
    """Validated model output."""

    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)


@dataclass
class NutritionEstimator:
    """Turn a meal description into a macro estimate, never failing."""

    gateway: LlmGateway
    max_tokens: int = 150
    temperature: float = 0.3

    async def estimate(self, description: str) -> NutritionEstimate:
        """Estimate macros for a meal description.

        Any upstream, parse, or validation failure yields FALLBACK_ESTIMATE so
        meal logging is never blocked.
        """
        cleaned = description.strip()
        if not cleaned:
            return FALLBACK_ESTIMATE
        request = CompletionRequest(
            system_prompt=ESTIMATOR_SYSTEM_PROMPT,
            user_message=build_estimate_prompt(cleaned),
            max_tokens=self.max_tokens,
            temperature=self.temperature,
        )
        try:
            text = await self.gateway.complete(request)
        except Exception as exc:
            _logger.warning("Meal estimate fell back after gateway error: %s", exc)
            return FALLBACK_ESTIMATE
        estimate = parse_estimate(text)
        if estimate is None:
            _logger.warning("Meal estimate fell back after unparseable output")
            return FALLBACK_ESTIMATE
        return estimate


def build_estimate_prompt(description: str) -> str:
    """Build the user prompt for a meal description."""
    return (
        f'Analyze this meal description: "{description}"\n\n'
        "1. Break the meal into its components.\n"
        "2. Estimate calories, protein, carbs, and fats for each component, "
        "accounting for the cooking method and realistic adult portion sizes.\n"
        "3. Sum the components.\n\n"
        "Respond with ONLY a JSON object in exactly this format:\n"
        '{"calories": number, "protein": number, "carbs": number, "fats": number}'
    )


def parse_estimate(text: str) -> NutritionEstimate | None:
    """Parse and validate a model response into an estimate."""
    payload = extract_json_object(text)
    if payload is None:
        return None
    try:
        validated = EstimatePayload.model_validate(payload)
    except ValidationError:
        return None
    return NutritionEstimate(
        calories=validated.calories,
        protein=validated.protein,
        carbs=validated.carbs,
        fats=validated.fats,
    )


def extract_json_object(text: str) -> dict[str, object] | None:
    """Return the first brace-delimited JSON object embedded in text."""
    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
            continue
        if isinstance(value, dict):
            return value
        start = text.find("{", start + 1)
    return None
