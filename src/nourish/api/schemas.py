"""Request and response models for the HTTP API."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from nourish.domain.chat import ChatExchange
from nourish.domain.ingredients import IngredientMatch
from nourish.domain.meals import MealDetail, MealIngredient, NutritionEstimate
from nourish.domain.profiles import ProfileView
from nourish.domain.stats import DailyTotals, Dashboard
from nourish.domain.weight import WeightEntry, WeightTrend

Gender = Literal["male", "female"]
ActivityLevel = Literal[
    "sedentary",
    "lightly-active",
    "moderately-active",
    "very-active",
    "extremely-active",
]
TherapyStyle = Literal["ACT", "CBT", "DBT"]


class EstimateRequest(BaseModel):
    description: str = Field(min_length=1)


class EstimateResponse(BaseModel):
    calories: float
    protein: float
    carbs: float
    fats: float
    approximate: bool
    suggested_meal_type: str
    message: str

    @classmethod
    def build(
        cls, estimate: NutritionEstimate, suggested_meal_type: str, message: str
    ) -> "EstimateResponse":
        return cls(
            calories=estimate.calories,
            protein=estimate.protein,
            carbs=estimate.carbs,
            fats=estimate.fats,
            approximate=estimate.is_fallback,
            suggested_meal_type=suggested_meal_type,
            message=message,
        )


class IngredientIn(BaseModel):
    """One ingredient line as entered by the user."""

    name: str = Field(min_length=1)
    quantity: str = ""
    calories: float = Field(default=0, ge=0)
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fats: float = Field(default=0, ge=0)

    def to_domain(self) -> MealIngredient:
        return MealIngredient(
            name=self.name,
            quantity=self.quantity,
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fats=self.fats,
        )


class IngredientOut(BaseModel):
    name: str
    quantity: str
    calories: float
    protein: float
    carbs: float
    fats: float

    @classmethod
    def build(cls, ingredient: MealIngredient) -> "IngredientOut":
        return cls(
            name=ingredient.name,
            quantity=ingredient.quantity,
            calories=ingredient.calories,
            protein=ingredient.protein,
            carbs=ingredient.carbs,
            fats=ingredient.fats,
        )


class MealCreate(BaseModel):
    meal_type: str | None = None
    name: str | None = None
    day: date | None = None
    ingredients: list[IngredientIn] = Field(default_factory=list)


class DescribedMealCreate(BaseModel):
    """A described meal saved with the estimate the user confirmed."""

    description: str
    meal_type: str | None = None
    day: date | None = None
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fats: float = Field(ge=0)

    def to_estimate(self) -> NutritionEstimate:
        return NutritionEstimate(
            calories=self.calories,
            protein=self.protein,
            carbs=self.carbs,
            fats=self.fats,
            source="confirmed",
        )


class MealUpdate(BaseModel):
    meal_type: str | None = None
    ingredients: list[IngredientIn] = Field(default_factory=list)


class MealOut(BaseModel):
    id: int
    date: date
    meal_type: str
    name: str | None
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    ingredients: list[IngredientOut]

    @classmethod
    def build(cls, detail: MealDetail) -> "MealOut":
        meal = detail.meal
        return cls(
            id=meal.id,
            date=meal.date,
            meal_type=meal.meal_type,
            name=meal.name,
            total_calories=meal.total_calories,
            total_protein=meal.total_protein,
            total_carbs=meal.total_carbs,
            total_fat=meal.total_fat,
            ingredients=[IngredientOut.build(item) for item in detail.ingredients],
        )


class MealSavedOut(BaseModel):
    meal: MealOut
    encouragement: str


class IngredientMatchOut(BaseModel):
    """Search hit with macros per 100 g and scaled to the requested portion."""

    fdc_id: int
    description: str
    brand_name: str | None
    data_type: str | None
    per_100g: IngredientOut
    portion: IngredientOut

    @classmethod
    def build(
        cls, match: IngredientMatch, portion: MealIngredient
    ) -> "IngredientMatchOut":
        return cls(
            fdc_id=match.fdc_id,
            description=match.description,
            brand_name=match.brand_name,
            data_type=match.data_type,
            per_100g=IngredientOut(
                name=match.description,
                quantity="100 g",
                calories=match.calories,
                protein=match.protein,
                carbs=match.carbs,
                fats=match.fats,
            ),
            portion=IngredientOut.build(portion),
        )


class ProfileUpdate(BaseModel):
    username: str | None = None
    age: int | None = Field(default=None, gt=0)
    height_cm: float | None = Field(default=None, gt=0)
    weight_kg: float | None = Field(default=None, gt=0)
    gender: Gender | None = None
    goal_weight_kg: float | None = Field(default=None, gt=0)
    weekly_weight_gain_goal: float | None = None
    activity_level: ActivityLevel | None = None
    avg_steps_per_day: int | None = Field(default=None, ge=0)
    therapy_style: TherapyStyle | None = None
    therapist_description: str | None = None
    fear_foods: list[str] | None = None


class ProfileOut(BaseModel):
    user_id: str
    username: str | None
    age: int | None
    height_cm: float | None
    weight_kg: float | None
    gender: str | None
    goal_weight_kg: float | None
    weekly_weight_gain_goal: float | None
    activity_level: str | None
    avg_steps_per_day: int | None
    therapy_style: str | None
    therapist_description: str | None
    fear_foods: list[str]
    bmr: int
    tdee: int
    daily_caloric_goal: int

    @classmethod
    def build(cls, view: ProfileView) -> "ProfileOut":
        profile = view.profile
        return cls(
            user_id=str(profile.user_id),
            username=profile.username,
            age=profile.age,
            height_cm=profile.height_cm,
            weight_kg=profile.weight_kg,
            gender=profile.gender,
            goal_weight_kg=profile.goal_weight_kg,
            weekly_weight_gain_goal=profile.weekly_weight_gain_goal,
            activity_level=profile.activity_level,
            avg_steps_per_day=profile.avg_steps_per_day,
            therapy_style=profile.therapy_style,
            therapist_description=profile.therapist_description,
            fear_foods=list(profile.fear_foods or ()),
            bmr=view.metrics.bmr,
            tdee=view.metrics.tdee,
            daily_caloric_goal=view.metrics.daily_caloric_goal,
        )


class DailyTotalsOut(BaseModel):
    day: date
    calories: float
    protein: float
    carbs: float
    fats: float
    meal_count: int

    @classmethod
    def build(cls, totals: DailyTotals) -> "DailyTotalsOut":
        return cls(
            day=totals.day,
            calories=totals.calories,
            protein=totals.protein,
            carbs=totals.carbs,
            fats=totals.fats,
            meal_count=totals.meal_count,
        )


class DashboardOut(BaseModel):
    meals_today: int
    streak: int
    daily_caloric_goal: int
    today: DailyTotalsOut

    @classmethod
    def build(cls, dashboard: Dashboard) -> "DashboardOut":
        return cls(
            meals_today=dashboard.meals_today,
            streak=dashboard.streak,
            daily_caloric_goal=dashboard.daily_caloric_goal,
            today=DailyTotalsOut.build(dashboard.today),
        )


class WeightIn(BaseModel):
    weight_kg: float = Field(gt=0)
    day: date | None = None


class WeightEntryOut(BaseModel):
    date: date
    weight_kg: float

    @classmethod
    def build(cls, entry: WeightEntry) -> "WeightEntryOut":
        return cls(date=entry.date, weight_kg=entry.weight_kg)


class WeightTrendOut(BaseModel):
    change_kg: float
    direction: str

    @classmethod
    def build(cls, trend: WeightTrend | None) -> "WeightTrendOut | None":
        if trend is None:
            return None
        return cls(change_kg=trend.change_kg, direction=trend.direction)


class WeightHistoryOut(BaseModel):
    entries: list[WeightEntryOut]
    trend: WeightTrendOut | None


class ChatIn(BaseModel):
    message: str = Field(min_length=1)
    therapy_style: TherapyStyle | None = None


class ChatOut(BaseModel):
    message_user: str
    message_bot: str
    therapy_style: str
    created_at: datetime | None = None

    @classmethod
    def build(cls, exchange: ChatExchange) -> "ChatOut":
        return cls(
            message_user=exchange.message_user,
            message_bot=exchange.message_bot,
            therapy_style=exchange.therapy_style,
            created_at=exchange.created_at,
        )


class EncouragementOut(BaseModel):
    message: str
