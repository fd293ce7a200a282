"""Meal collection schema."""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from schemas.enums import FoodUnit, MealType
from utils.helpers import UTCDatetime


class FoodMacros(BaseModel):
    """Macronutrients of a food item in grams."""
    protein: float = Field(default=0, ge=0)
    carbs: float = Field(default=0, ge=0)
    fat: float = Field(default=0, ge=0)
    fiber: float = Field(default=0, ge=0)
    sugar: float = Field(default=0, ge=0)


class Micronutrients(BaseModel):
    """Micronutrients of a food item (mg, vitamin D in IU)."""
    sodium: float = Field(default=0, ge=0)
    potassium: float = Field(default=0, ge=0)
    calcium: float = Field(default=0, ge=0)
    iron: float = Field(default=0, ge=0)
    vitamin_c: float = Field(default=0, ge=0)
    vitamin_d: float = Field(default=0, ge=0)


class FoodItem(BaseModel):
    """One line item of a meal."""
    name: str = Field(..., min_length=1, description="Food item name")
    quantity: float = Field(..., ge=0, description="Quantity eaten")
    unit: FoodUnit = Field(default=FoodUnit.GRAMS)
    calories: float = Field(..., ge=0, description="Calories of this item")
    macros: FoodMacros = Field(default_factory=FoodMacros)
    micronutrients: Micronutrients = Field(default_factory=Micronutrients)


class MealBase(BaseModel):
    """Fields a client may set on a meal."""
    date: UTCDatetime = Field(default_factory=datetime.utcnow, description="When the meal was eaten")
    meal_type: MealType = Field(..., description="Meal type")
    title: Optional[str] = Field(None, max_length=100)
    food_items: List[FoodItem] = Field(default_factory=list)
    notes: Optional[str] = Field(None, max_length=500)
    water_intake: float = Field(default=0, ge=0, description="Water drunk with the meal in ml")


class MealCreate(MealBase):
    pass


class MealUpdate(BaseModel):
    """Partial meal update."""
    date: Optional[UTCDatetime] = None
    meal_type: Optional[MealType] = None
    title: Optional[str] = Field(None, max_length=100)
    food_items: Optional[List[FoodItem]] = None
    notes: Optional[str] = Field(None, max_length=500)
    water_intake: Optional[float] = Field(None, ge=0)


class Meal(MealBase):
    """A logged meal. Totals are always derived from the food items."""
    id: Optional[str] = Field(None, alias="_id")
    user_id: Optional[str] = Field(None, description="Owning user id")

    model_config = {"populate_by_name": True}

    @computed_field
    @property
    def total_calories(self) -> float:
        return math.fsum(item.calories for item in self.food_items)

    @computed_field
    @property
    def total_macros(self) -> FoodMacros:
        return FoodMacros(**{
            name: math.fsum(getattr(item.macros, name) for item in self.food_items)
            for name in FoodMacros.model_fields
        })

    @computed_field
    @property
    def total_food_items(self) -> int:
        return len(self.food_items)
