"""Supportive companion messages generated by the LLM gateway."""

import logging
import random
from dataclasses import dataclass, field

from nourish.domain.meals import Meal, MealIngredient, NutritionEstimate
from nourish.domain.profiles import DEFAULT_THERAPY_STYLE
from nourish.services.llm import CompletionRequest, LlmGateway

_logger = logging.getLogger(__name__)

_SHARED_RULES = (
    "Talk like a warm friend, not a clinician. "
    "Keep every reply under 150 words. "
    "You are supplemental support, so gently encourage professional help "
    "when it is needed."
)

PERSONA_PROMPTS = {
    "ACT": (
        "You are a compassionate companion using Acceptance and Commitment "
        "Therapy ideas for eating disorder recovery. Help the user notice "
        "difficult thoughts without fighting them, connect with what they "
        "value, and take small committed steps toward recovery. "
    )
    + _SHARED_RULES,
    "CBT": (
        "You are a supportive companion using Cognitive Behavioral Therapy "
        "ideas for eating disorder recovery. Help the user spot unhelpful "
        "thought patterns, weigh the evidence for and against them, and find "
        "a more balanced view of the link between thoughts, feelings and "
        "actions. "
    )
    + _SHARED_RULES,
    "DBT": (
        "You are a caring companion using Dialectical Behavior Therapy ideas "
        "for eating disorder recovery. Validate the user's feelings first, "
        "then offer one practical distress tolerance or emotion regulation "
        "skill, and invite them toward wise mind. "
    )
    + _SHARED_RULES,
}

CELEBRATION_PROMPT = (
    "You are a warm, supportive companion for someone in eating disorder "
    "recovery. Celebrate the meal they just logged. Name the specific foods "
    "and the nutrients they provide, and say how those nutrients help the "
    "body heal. Stay close to 75 words. Do not sound clinical and never "
    "comment on the amount of food as too much or too little."
)

DAILY_PROMPT = (
    "You are a warm, supportive companion for someone in eating disorder "
    "recovery. Focus on nourishment and self-care."
)

FALLBACK_CHAT_REPLY = (
    "Thank you for sharing that with me. I'm having trouble finding my words "
    "right now, but what you're feeling matters. Take a slow breath, and if "
    "things feel heavy, reaching out to your care team or someone you trust "
    "is a strong, caring step."
)

FALLBACK_DAILY_MESSAGES = (
    "Every meal is an act of kindness toward yourself. Your body appreciates "
    "the care.",
    "Nourishing yourself today is a step forward, however small it feels.",
    "Your body is learning to trust you again, one meal at a time.",
    "Rest, food and gentleness are all part of healing. You deserve all three.",
)


@dataclass
class EncouragementComposer:
    """Compose persona chat replies and meal celebrations."""

    gateway: LlmGateway
    chat_max_tokens: int = 300
    celebration_max_tokens: int = 150
    daily_max_tokens: int = 80
    estimate_max_tokens: int = 120
    rng: random.Random = field(default_factory=random.Random)

    async def reply(self, therapy_style: str | None, message: str) -> str:
        """Return a persona-styled reply to a chat message."""
        request = CompletionRequest(
            system_prompt=persona_prompt(therapy_style),
            user_message=message,
            max_tokens=self.chat_max_tokens,
            temperature=0.7,
        )
        return await self._complete_or(request, FALLBACK_CHAT_REPLY)

    async def celebrate_meal(
        self, meal: Meal, ingredients: list[MealIngredient]
    ) -> str:
        """Return a short celebration of a freshly logged meal."""
        request = CompletionRequest(
            system_prompt=CELEBRATION_PROMPT,
            user_message=build_meal_summary(meal, ingredients),
            max_tokens=self.celebration_max_tokens,
            temperature=0.8,
        )
        return await self._complete_or(
            request, fallback_celebration(meal, ingredients)
        )

    async def support_estimate(
        self,
        therapy_style: str | None,
        description: str,
        estimate: NutritionEstimate,
    ) -> str:
        """Return a persona-styled note to accompany a meal estimate."""
        request = CompletionRequest(
            system_prompt=persona_prompt(therapy_style),
            user_message=build_estimate_summary(description, estimate),
            max_tokens=self.estimate_max_tokens,
            temperature=0.7,
        )
        return await self._complete_or(request, fallback_estimate_message(estimate))

    async def daily_encouragement(self) -> str:
        """Return a one or two sentence encouragement for the day."""
        request = CompletionRequest(
            system_prompt=DAILY_PROMPT,
            user_message=(
                "Write a warm, unique message about eating and self-care. "
                "One or two sentences."
            ),
            max_tokens=self.daily_max_tokens,
            temperature=0.8,
        )
        return await self._complete_or(
            request, self.rng.choice(FALLBACK_DAILY_MESSAGES)
        )

    async def _complete_or(self, request: CompletionRequest, fallback: str) -> str:
        try:
            text = await self.gateway.complete(request)
        except Exception as exc:
            _logger.warning("Encouragement fell back after gateway error: %s", exc)
            return fallback
        return text.strip()


def persona_prompt(therapy_style: str | None) -> str:
    """Return the system prompt for a persona, defaulting to ACT."""
    return PERSONA_PROMPTS.get(
        therapy_style or "", PERSONA_PROMPTS[DEFAULT_THERAPY_STYLE]
    )


def build_meal_summary(meal: Meal, ingredients: list[MealIngredient]) -> str:
    """Describe a logged meal for the celebration prompt."""
    lines = [
        f"The user just logged {meal.meal_type.lower()} with "
        f"{meal.total_calories:.0f} calories, {meal.total_protein:.0f}g protein, "
        f"{meal.total_carbs:.0f}g carbs and {meal.total_fat:.0f}g fat."
    ]
    if ingredients:
        lines.append("Foods:")
        lines.extend(f"- {item.quantity} {item.name}".strip() for item in ingredients)
    elif meal.name:
        lines.append(f"They described it as: {meal.name}")
    return "\n".join(lines)


def fallback_celebration(meal: Meal, ingredients: list[MealIngredient]) -> str:
    """Templated celebration used when the gateway is unavailable."""
    if ingredients:
        foods = ", ".join(item.name for item in ingredients)
    else:
        foods = meal.name or meal.meal_type.lower()
    return (
        f"You nourished yourself with {foods}, {meal.total_calories:.0f} calories "
        "of care for your body. Every meal you log is a step forward in your "
        "recovery. Well done!"
    )


def build_estimate_summary(description: str, estimate: NutritionEstimate) -> str:
    """Describe an estimated meal for the supportive-note prompt."""
    return (
        f"The user is planning to eat: {description.strip()}\n"
        f"Estimated at about {estimate.calories:.0f} calories, "
        f"{estimate.protein:.0f}g protein, {estimate.carbs:.0f}g carbs and "
        f"{estimate.fats:.0f}g fat.\n"
        "Write one or two supportive sentences about this meal choice. "
        "Do not judge the amount of food."
    )


def fallback_estimate_message(estimate: NutritionEstimate) -> str:
    if estimate.is_fallback:
        return (
            "I couldn't size this one up exactly, so these numbers are a gentle "
            "approximation. Choosing to nourish yourself is what matters most."
        )
    return (
        f"About {estimate.calories:.0f} calories of fuel for your body. "
        "Choosing to nourish yourself is a brave, caring step."
    )
