"""Shared fixtures for recipe-book tests."""

import json

import pytest

from recipe_book import cli as cli_module
from recipe_book.recipes import Recipe
from recipe_book.store import RecipeStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point all local storage at a temporary directory."""
    config_dir = tmp_path / ".recipe-book"

    monkeypatch.setattr("recipe_book.config.CONFIG_DIR", config_dir)
    monkeypatch.setattr("recipe_book.config.OVERRIDES_FILE", config_dir / "overrides.json")
    monkeypatch.setattr("recipe_book.config.EXPORT_DIR", config_dir / "exports")
    monkeypatch.delenv("RECIPE_BOOK_DEVICE", raising=False)
    monkeypatch.delenv("RECIPE_BOOK_LOG_LEVEL", raising=False)

    cli_module.reset_store()
    yield config_dir
    cli_module.reset_store()


@pytest.fixture
def sample_recipes():
    """A small canonical dataset."""
    return [
        Recipe(
            id=1,
            name="עוגיות שוקולד",
            source="סבתא",
            category="cookies",
            ingredients=("2 כוסות קמח", "1 כוס סוכר", "½ כפית מלח"),
            temp="180",
            time="12 דקות",
            instructions="מערבבים ואופים",
            notes="",
        ),
        Recipe(
            id=2,
            name="עוגת גבינה",
            category="cakes",
            ingredients=("לבסיס:", "1 חבילה ביסקוויטים", "למילוי:", "750 גרם גבינה"),
            temp="170",
            time="50 דקות",
            instructions="אופים בחום נמוך",
            notes="מצננים לילה",
        ),
        Recipe(
            id=3,
            name="Butter Cookies",
            category="cookies",
            ingredients=("200 גרם חמאה", "Vanilla extract"),
            notes="Family Favorite",
        ),
        Recipe(
            id=4,
            name="חלה",
            category="breads",
            ingredients=("1 ק\"ג קמח", "1½ כפות שמרים"),
        ),
    ]


@pytest.fixture
def overrides_file(tmp_path):
    return tmp_path / "overrides.json"


@pytest.fixture
def store(sample_recipes, overrides_file):
    """Store with no saved edits."""
    return RecipeStore.open(sample_recipes, overrides_file)


@pytest.fixture
def recipes_file(tmp_path, sample_recipes, monkeypatch):
    """Dataset file written from sample_recipes and used by the CLI."""
    path = tmp_path / "recipes.json"
    path.write_text(
        json.dumps([r.to_dict() for r in sample_recipes], ensure_ascii=False),
        encoding="utf-8",
    )
    monkeypatch.setattr("recipe_book.config.RECIPES_FILE", path)
    return path
