"""Apply exported recipe changes to the canonical dataset."""

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .recipes import Recipe, load_recipes, save_recipes

logger = logging.getLogger(__name__)


class ChangeImportError(Exception):
    """Exception raised when an export document cannot be imported."""

    pass


@dataclass
class ImportReport:
    """Summary of an import run."""

    exported_at: str | None = None
    device: str | None = None
    updated_fields: list[tuple[int, str]] = field(default_factory=list)
    skipped_ids: list[int] = field(default_factory=list)

    @property
    def updated_count(self) -> int:
        return len(self.updated_fields)

    @property
    def updated_recipe_ids(self) -> list[int]:
        return sorted({recipe_id for recipe_id, _ in self.updated_fields})


def validate_export_document(data: Any) -> dict[str, Any]:
    """
    Check that data looks like an export document.

    Raises:
        ChangeImportError: If the document shape is wrong
    """
    if not isinstance(data, dict):
        raise ChangeImportError("Export document must be a JSON object")

    changes = data.get("changes")
    if not isinstance(changes, list):
        raise ChangeImportError("Export document has no 'changes' list")

    for change in changes:
        if not isinstance(change, dict) or not isinstance(change.get("id"), int):
            raise ChangeImportError(f"Malformed change entry: {change!r}")

    return data


def load_export_document(path: Path) -> dict[str, Any]:
    """Read and validate an export document from disk."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ChangeImportError(f"Failed to read {path}: {e}") from e

    return validate_export_document(data)


def apply_changes(document: dict[str, Any], recipes: list[Recipe]) -> tuple[list[Recipe], ImportReport]:
    """
    Apply the changes of an export document to a list of recipes.

    Empty text fields and empty ingredient lists are ignored, so an export
    can never blank out a recipe. Changes for unknown ids are skipped.

    Args:
        document: Validated export document
        recipes: Canonical recipes

    Returns:
        Tuple of (updated recipes in the same order, report)
    """
    report = ImportReport(
        exported_at=document.get("exportedAt"),
        device=document.get("device"),
    )
    by_id = {recipe.id: recipe for recipe in recipes}

    for change in document["changes"]:
        recipe_id = change["id"]
        recipe = by_id.get(recipe_id)
        if recipe is None:
            logger.warning("Skipping change for unknown recipe %s (%s)", recipe_id, change.get("name"))
            report.skipped_ids.append(recipe_id)
            continue

        updates: dict[str, Any] = {}
        for text_field in ("instructions", "notes"):
            value = change.get(text_field)
            if isinstance(value, str) and value:
                updates[text_field] = value

        ingredients = change.get("ingredients")
        if isinstance(ingredients, list) and ingredients:
            updates["ingredients"] = tuple(str(line) for line in ingredients)

        if updates:
            by_id[recipe_id] = replace(recipe, **updates)
            report.updated_fields.extend((recipe_id, name) for name in updates)

    return [by_id[recipe.id] for recipe in recipes], report


def import_changes(path: Path, recipes_file: Path) -> ImportReport:
    """
    Import an export document into the recipe dataset file.

    Args:
        path: Export document
        recipes_file: Dataset to update in place

    Returns:
        ImportReport describing what changed
    """
    document = load_export_document(path)
    recipes = load_recipes(recipes_file)
    updated, report = apply_changes(document, recipes)

    if report.updated_fields:
        save_recipes(updated, recipes_file)
    logger.info("Imported %d field(s) into %s", report.updated_count, recipes_file)
    return report
