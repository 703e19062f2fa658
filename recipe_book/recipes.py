"""Canonical recipe data: models and seed dataset loading."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .lexicon import CATEGORY_IDS, CATEGORY_TABLE

logger = logging.getLogger(__name__)


class RecipeDataError(Exception):
    """Exception raised when the recipe dataset cannot be read or written."""

    pass


@dataclass(frozen=True)
class Category:
    """A recipe category as shown in the category bar."""

    id: str
    name: str
    emoji: str


CATEGORIES: tuple[Category, ...] = tuple(Category(*row) for row in CATEGORY_TABLE)


@dataclass(frozen=True)
class Recipe:
    """Represents a recipe from the shipped dataset."""

    id: int
    name: str
    category: str
    ingredients: tuple[str, ...] = field(default_factory=tuple)
    source: str | None = None
    temp: str = ""
    time: str = ""
    instructions: str = ""
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert recipe to dictionary for serialization."""
        data: dict[str, Any] = {"id": self.id, "name": self.name}
        if self.source:
            data["source"] = self.source
        data.update(
            {
                "category": self.category,
                "ingredients": list(self.ingredients),
                "temp": self.temp,
                "time": self.time,
                "instructions": self.instructions,
                "notes": self.notes,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recipe":
        """Create recipe from dictionary."""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            source=data.get("source") or None,
            category=data["category"],
            ingredients=tuple(data.get("ingredients", [])),
            temp=data.get("temp", ""),
            time=data.get("time", ""),
            instructions=data.get("instructions", ""),
            notes=data.get("notes", ""),
        )


def get_category(category_id: str) -> Category | None:
    """Look up a category by id."""
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None


def validate_recipes(recipes: list[Recipe]) -> None:
    """
    Check the invariants of a canonical dataset.

    Raises:
        RecipeDataError: On non-positive or duplicate ids, or unknown categories
    """
    seen: set[int] = set()
    for recipe in recipes:
        if recipe.id <= 0:
            raise RecipeDataError(f"Recipe '{recipe.name}' has invalid id {recipe.id}")
        if recipe.id in seen:
            raise RecipeDataError(f"Duplicate recipe id {recipe.id}")
        if recipe.category not in CATEGORY_IDS:
            raise RecipeDataError(
                f"Recipe {recipe.id} has unknown category '{recipe.category}'"
            )
        seen.add(recipe.id)


def load_recipes(path: Path) -> list[Recipe]:
    """
    Load the canonical recipe dataset.

    Args:
        path: JSON file holding a list of recipe objects

    Returns:
        Recipes in dataset order

    Raises:
        RecipeDataError: If the file is missing, malformed or invalid
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RecipeDataError(f"Failed to load recipes from {path}: {e}") from e

    if not isinstance(data, list):
        raise RecipeDataError(f"Expected a list of recipes in {path}")

    try:
        recipes = [Recipe.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise RecipeDataError(f"Malformed recipe in {path}: {e}") from e

    validate_recipes(recipes)
    logger.debug("Loaded %d recipes from %s", len(recipes), path)
    return recipes


def save_recipes(recipes: list[Recipe], path: Path) -> None:
    """Write the recipe dataset back to disk."""
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump([r.to_dict() for r in recipes], f, indent=2, ensure_ascii=False)
            f.write("\n")
    except OSError as e:
        raise RecipeDataError(f"Failed to save recipes to {path}: {e}") from e
