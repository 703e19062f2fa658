"""Recipe Book - personal recipe catalog with scaling and local edits."""

__version__ = "1.0.0"

from .export import ExportResult, export_changes
from .ingredient_parser import ParsedIngredient, is_group_header, parse_ingredient
from .recipes import Recipe, load_recipes
from .scaler import format_quantity, scale_ingredient_text
from .store import RecipeStore, StoreError

__all__ = [
    "ParsedIngredient",
    "parse_ingredient",
    "is_group_header",
    "format_quantity",
    "scale_ingredient_text",
    "Recipe",
    "load_recipes",
    "RecipeStore",
    "StoreError",
    "ExportResult",
    "export_changes",
]
