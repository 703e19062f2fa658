"""Recipe overlay store: canonical recipes plus sparse local edits."""

import json
import logging
from collections.abc import Iterable
from dataclasses import replace
from pathlib import Path
from typing import Any

from .lexicon import ALL_CATEGORIES
from .recipes import Recipe

logger = logging.getLogger(__name__)

# Editable fields and the value type each one accepts
EDITABLE_FIELDS: dict[str, type] = {
    "instructions": str,
    "notes": str,
    "ingredients": list,
}

Overrides = dict[int, dict[str, Any]]


class StoreError(Exception):
    """Exception raised for invalid edits or failed writes."""

    pass


def _valid_field_value(field: str, value: Any) -> bool:
    if field == "ingredients":
        return isinstance(value, list) and all(isinstance(line, str) for line in value)
    return isinstance(value, EDITABLE_FIELDS[field])


def decode_overrides(data: Any) -> Overrides:
    """
    Decode a stored override map.

    Keys are string-encoded recipe ids. Entries that do not have the
    expected shape are dropped; anything that is not a JSON object
    decodes to an empty map.
    """
    if not isinstance(data, dict):
        return {}

    overrides: Overrides = {}
    for key, entry in data.items():
        try:
            recipe_id = int(key)
        except (TypeError, ValueError):
            logger.warning("Dropping override with invalid recipe id %r", key)
            continue
        if not isinstance(entry, dict):
            logger.warning("Dropping malformed override for recipe %s", recipe_id)
            continue

        fields = {
            name: value
            for name, value in entry.items()
            if name in EDITABLE_FIELDS and _valid_field_value(name, value)
        }
        if fields:
            overrides[recipe_id] = fields

    return overrides


def encode_overrides(overrides: Overrides) -> dict[str, dict[str, Any]]:
    """Encode an override map for JSON storage."""
    return {str(recipe_id): dict(fields) for recipe_id, fields in overrides.items()}


def load_overrides(path: Path) -> Overrides:
    """Load overrides from disk. Missing or corrupt data yields an empty map."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("Ignoring unreadable overrides file %s: %s", path, e)
        return {}

    return decode_overrides(data)


def save_overrides(overrides: Overrides, path: Path) -> None:
    """Save the full override map to disk."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(encode_overrides(overrides), f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise StoreError(f"Failed to save overrides: {e}") from e


def merge_recipe(recipe: Recipe, fields: dict[str, Any] | None) -> Recipe:
    """Substitute override fields into a canonical recipe."""
    if not fields:
        return recipe

    changes: dict[str, Any] = {}
    if "instructions" in fields:
        changes["instructions"] = fields["instructions"]
    if "notes" in fields:
        changes["notes"] = fields["notes"]
    if "ingredients" in fields:
        changes["ingredients"] = tuple(fields["ingredients"])
    return replace(recipe, **changes)


def matches_query(recipe: Recipe, query: str) -> bool:
    """Case-insensitive substring match on name, ingredients, source and notes."""
    term = query.strip().casefold()
    if not term:
        return True

    haystack = [recipe.name, *recipe.ingredients, recipe.source or "", recipe.notes]
    return any(term in text.casefold() for text in haystack)


def group_by_category(recipes: Iterable[Recipe]) -> dict[str, list[Recipe]]:
    """
    Partition recipes by category, keeping their relative order.

    Categories without recipes are absent from the result.
    """
    groups: dict[str, list[Recipe]] = {}
    for recipe in recipes:
        groups.setdefault(recipe.category, []).append(recipe)
    return groups


class RecipeStore:
    """
    Single source of truth for what the user currently sees.

    Canonical recipes are never modified; edits are kept as a sparse
    per-recipe, per-field override map that is written to disk on every
    change.
    """

    def __init__(self, recipes: list[Recipe], overrides_file: Path):
        self._recipes = list(recipes)
        self._ids = {recipe.id for recipe in self._recipes}
        self.overrides_file = overrides_file
        self._overrides: Overrides = {}

    @classmethod
    def open(cls, recipes: list[Recipe], overrides_file: Path) -> "RecipeStore":
        """Create a store and load any saved overrides."""
        store = cls(recipes, overrides_file)
        store.load()
        return store

    def load(self) -> None:
        """Read the override map from disk, replacing the in-memory one."""
        self._overrides = load_overrides(self.overrides_file)
        logger.debug(
            "Loaded %d override(s) from %s", len(self._overrides), self.overrides_file
        )

    def save(self) -> None:
        save_overrides(self._overrides, self.overrides_file)

    def _commit(self, overrides: Overrides) -> None:
        # Memory only changes once the new map is on disk
        save_overrides(overrides, self.overrides_file)
        self._overrides = overrides

    @property
    def canonical_recipes(self) -> list[Recipe]:
        return list(self._recipes)

    @property
    def overrides(self) -> Overrides:
        """Copy of the current override map."""
        return {recipe_id: dict(fields) for recipe_id, fields in self._overrides.items()}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def effective_recipes(self) -> list[Recipe]:
        """All recipes with overrides applied, in canonical order."""
        return [merge_recipe(r, self._overrides.get(r.id)) for r in self._recipes]

    def get_recipe(self, recipe_id: int) -> Recipe | None:
        """Get the effective recipe with the given id."""
        for recipe in self._recipes:
            if recipe.id == recipe_id:
                return merge_recipe(recipe, self._overrides.get(recipe_id))
        return None

    def is_modified(self, recipe_id: int) -> bool:
        return recipe_id in self._overrides

    def pending_change_count(self) -> int:
        """Number of recipes with at least one edited field."""
        return len(self._overrides)

    def filter(self, query: str = "", category: str = ALL_CATEGORIES) -> list[Recipe]:
        """
        Filter effective recipes by search text and category.

        Args:
            query: Substring to look for; empty matches everything
            category: Category id, or "all" to disable the category filter

        Returns:
            Matching recipes in canonical order
        """
        return [
            recipe
            for recipe in self.effective_recipes()
            if (category == ALL_CATEGORIES or recipe.category == category)
            and matches_query(recipe, query)
        ]

    def group_by_category(self, recipes: Iterable[Recipe] | None = None) -> dict[str, list[Recipe]]:
        if recipes is None:
            recipes = self.effective_recipes()
        return group_by_category(recipes)

    def category_counts(self) -> dict[str, int]:
        """Number of recipes in each non-empty category."""
        return {cid: len(items) for cid, items in self.group_by_category().items()}

    # ------------------------------------------------------------------
    # Edits
    # ------------------------------------------------------------------

    def set_field(self, recipe_id: int, field: str, value: Any) -> None:
        """
        Record an edit to one field of a recipe and persist it.

        Other edited fields of the same recipe are kept.

        Args:
            recipe_id: Id of a canonical recipe
            field: One of "instructions", "notes" or "ingredients"
            value: New text, or the full new ingredient list

        Raises:
            StoreError: If the recipe or field is unknown, the value has the
                wrong type, or the overrides cannot be written
        """
        if recipe_id not in self._ids:
            raise StoreError(f"Recipe {recipe_id} not found")
        if field not in EDITABLE_FIELDS:
            raise StoreError(f"Field '{field}' cannot be edited")
        if isinstance(value, tuple) and field == "ingredients":
            value = list(value)
        if not _valid_field_value(field, value):
            raise StoreError(f"Invalid value for field '{field}'")

        updated = self.overrides
        entry = updated.setdefault(recipe_id, {})
        entry[field] = list(value) if field == "ingredients" else value
        self._commit(updated)
        logger.info("Recipe %s: %s edited", recipe_id, field)

    def save_instructions(self, recipe_id: int, instructions: str) -> None:
        self.set_field(recipe_id, "instructions", instructions)

    def save_notes(self, recipe_id: int, notes: str) -> None:
        self.set_field(recipe_id, "notes", notes)

    def save_ingredients(self, recipe_id: int, ingredients: list[str]) -> None:
        self.set_field(recipe_id, "ingredients", ingredients)

    def clear_overrides(self, recipe_ids: Iterable[int] | None = None) -> int:
        """
        Discard edits, for the given recipes or for all of them.

        Returns:
            Number of recipes whose edits were removed
        """
        if recipe_ids is None:
            updated: Overrides = {}
        else:
            targets = set(recipe_ids)
            updated = {rid: fields for rid, fields in self.overrides.items() if rid not in targets}

        removed = len(self._overrides) - len(updated)
        if removed:
            self._commit(updated)
            logger.info("Cleared edits for %d recipe(s)", removed)
        return removed
