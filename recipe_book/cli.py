"""CLI entry point for Recipe Book."""

import logging
from pathlib import Path

import click

from . import __version__, config
from .export import ExportResult, TerminalHost, run_export
from .importer import ChangeImportError, import_changes
from .ingredient_parser import count_ingredients, is_group_header
from .lexicon import ALL_CATEGORIES, CATEGORY_IDS
from .recipes import CATEGORIES, Recipe, RecipeDataError, get_category, load_recipes
from .scaler import format_scale_info, scale_ingredients, validate_multiplier
from .store import RecipeStore, StoreError

# Shared store instance
_store: RecipeStore | None = None


def get_store() -> RecipeStore:
    """Get or create the recipe store."""
    global _store
    if _store is None:
        try:
            recipes = load_recipes(config.RECIPES_FILE)
        except RecipeDataError as e:
            click.echo(f"✗ {e}", err=True)
            raise SystemExit(1) from None
        _store = RecipeStore.open(recipes, config.OVERRIDES_FILE)
    return _store


def reset_store() -> None:
    """Drop the shared store so the next command reloads from disk."""
    global _store
    _store = None


def category_label(category_id: str) -> str:
    category = get_category(category_id)
    if category is None:
        return category_id
    return f"{category.emoji} {category.name}"


def display_recipe_line(recipe: Recipe, modified: bool) -> None:
    marker = " ✎" if modified else ""
    source = f" ({recipe.source})" if recipe.source else ""
    count = count_ingredients(recipe.ingredients)
    click.echo(f"  [{recipe.id}] {recipe.name}{source} - {count} ingredients{marker}")


def display_recipe(recipe: Recipe, multiplier: float, modified: bool) -> None:
    """Display a recipe with its ingredients at the given multiplier."""
    click.echo()
    click.echo("=" * 60)
    click.echo(f"RECIPE: {recipe.name}")
    click.echo("=" * 60)

    click.echo(f"Category: {category_label(recipe.category)}")
    if recipe.source:
        click.echo(f"Source: {recipe.source}")
    if recipe.temp:
        click.echo(f"Temperature: {recipe.temp}°")
    if recipe.time:
        click.echo(f"Time: {recipe.time}")
    click.echo(f"Scaling: {format_scale_info(multiplier)}")
    if modified:
        click.echo("✎ Has local edits")

    click.echo("\nIngredients:")
    for original, line in zip(recipe.ingredients, scale_ingredients(recipe.ingredients, multiplier)):
        if is_group_header(original):
            click.echo(f"\n  {line.strip()}")
        else:
            click.echo(f"  • {line}")

    if recipe.instructions:
        click.echo("\nInstructions:")
        click.echo(recipe.instructions)
    if recipe.notes:
        click.echo("\nNotes:")
        click.echo(recipe.notes)
    click.echo()


def report_export(result: ExportResult, host: TerminalHost) -> None:
    """Print the outcome of an export."""
    if result.error == "cancelled":
        click.echo("Export cancelled.")
        return
    if result.error == "failed":
        click.echo("✗ Could not export changes. Please try again.", err=True)
        raise SystemExit(1)

    if result.error == "clipboard":
        click.echo(f"✓ {result.count} change(s) copied to the clipboard - paste them into a message")
    else:
        click.echo(f"✓ Exported {result.count} change(s)")
    if host.last_path is not None:
        click.echo(f"  File: {host.last_path}")


# ============================================================================
# Main CLI
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="recipe-book")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Recipe Book - a personal recipe catalog.

    Browse recipes, scale ingredient lists, keep local edits to
    instructions, notes and ingredients, and export those edits.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# Browsing Commands
# ============================================================================


@cli.command("list")
@click.option("--search", "-q", default="", help="Search names, ingredients, sources and notes")
@click.option(
    "--category",
    "-c",
    type=click.Choice([ALL_CATEGORIES, *sorted(CATEGORY_IDS)]),
    default=ALL_CATEGORIES,
    help="Only show one category",
)
def list_recipes(search: str, category: str):
    """List recipes grouped by category.

    Examples:

    \b
        recipe-book list
        recipe-book list --search קמח
        recipe-book list --category cookies
    """
    store = get_store()
    results = store.filter(search, category)

    if not results:
        click.echo("No recipes found.")
        return

    groups = store.group_by_category(results)
    for category_id, recipes in groups.items():
        click.echo()
        click.echo(f"{category_label(category_id)} ({len(recipes)})")
        click.echo("-" * 40)
        for recipe in recipes:
            display_recipe_line(recipe, store.is_modified(recipe.id))

    click.echo()
    click.echo(f"Total: {len(results)} of {len(store.canonical_recipes)} recipes")
    pending = store.pending_change_count()
    if pending:
        click.echo(f"Pending changes: {pending}")


@cli.command()
def categories():
    """Show categories with recipe counts."""
    store = get_store()
    counts = store.category_counts()

    for category in CATEGORIES:
        if category.id == ALL_CATEGORIES:
            count = len(store.canonical_recipes)
        else:
            count = counts.get(category.id, 0)
        click.echo(f"  {category.emoji} {category.name} [{category.id}]: {count}")


@cli.command()
@click.argument("recipe_id", type=int)
@click.option("--scale", "-s", type=float, default=1.0, help="Multiplier (e.g., 0.5, 2, 3)")
def show(recipe_id: int, scale: float):
    """Show a recipe, optionally scaled.

    Examples:

    \b
        recipe-book show 3
        recipe-book show 3 --scale 2
    """
    try:
        validate_multiplier(scale)
    except ValueError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    store = get_store()
    recipe = store.get_recipe(recipe_id)
    if recipe is None:
        click.echo(f"✗ Recipe {recipe_id} not found.", err=True)
        raise SystemExit(1)

    display_recipe(recipe, scale, store.is_modified(recipe_id))


# ============================================================================
# Editing Commands
# ============================================================================


@cli.command()
@click.argument("recipe_id", type=int)
@click.argument("field", type=click.Choice(["instructions", "notes", "ingredients"]))
@click.option("--value", "-t", help="New text (ingredients: one per line)")
@click.option(
    "--file", "-f", "file_path", type=click.Path(exists=True, dir_okay=False), help="Read new text from file"
)
def edit(recipe_id: int, field: str, value: str | None, file_path: str | None):
    """Edit the instructions, notes or ingredients of a recipe.

    Without --value or --file, the current text opens in your editor.

    Examples:

    \b
        recipe-book edit 2 notes --value "לאפות בתבנית 26"
        recipe-book edit 2 ingredients --file ingredients.txt
        recipe-book edit 2 instructions
    """
    if value is not None and file_path:
        click.echo("✗ Provide either --value or --file, not both.", err=True)
        raise SystemExit(1)

    store = get_store()
    recipe = store.get_recipe(recipe_id)
    if recipe is None:
        click.echo(f"✗ Recipe {recipe_id} not found.", err=True)
        raise SystemExit(1)

    if file_path:
        value = Path(file_path).read_text(encoding="utf-8")
    elif value is None:
        current = "\n".join(recipe.ingredients) if field == "ingredients" else getattr(recipe, field)
        value = click.edit(current)
        if value is None:
            click.echo("No changes made.")
            return

    new_value: str | list[str]
    if field == "ingredients":
        new_value = [line.strip() for line in value.splitlines() if line.strip()]
    else:
        new_value = value.strip()

    try:
        store.set_field(recipe_id, field, new_value)
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"✓ Saved {field} for {recipe.name}")


@cli.command()
def changes():
    """Show recipes with pending local edits."""
    store = get_store()
    overrides = store.overrides

    if not overrides:
        click.echo("No pending changes.")
        return

    click.echo()
    click.echo("PENDING CHANGES")
    click.echo("=" * 50)
    for recipe_id in sorted(overrides):
        recipe = store.get_recipe(recipe_id)
        name = recipe.name if recipe else f"#{recipe_id}"
        fields = ", ".join(sorted(overrides[recipe_id]))
        click.echo(f"  [{recipe_id}] {name}: {fields}")
    click.echo()
    click.echo(f"Total: {store.pending_change_count()} recipe(s)")


@cli.command()
@click.argument("recipe_ids", nargs=-1, type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def reset(recipe_ids: tuple[int, ...], yes: bool):
    """Discard local edits (for the given recipes, or all of them)."""
    store = get_store()

    if not yes:
        target = f"recipes {', '.join(map(str, recipe_ids))}" if recipe_ids else "all recipes"
        if not click.confirm(f"Discard local edits for {target}?"):
            click.echo("Cancelled.")
            return

    try:
        removed = store.clear_overrides(recipe_ids or None)
    except StoreError as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    click.echo(f"✓ Discarded edits for {removed} recipe(s)")


# ============================================================================
# Export & Import Commands
# ============================================================================


@cli.command("export")
@click.option("--share/--no-share", default=True, help="Offer to open the export file")
@click.option("--clipboard/--no-clipboard", default=True, help="Allow copying to the clipboard")
@click.option("--clear", is_flag=True, help="Discard local edits after a successful export")
def export_cmd(share: bool, clipboard: bool, clear: bool):
    """Export pending edits as a JSON document.

    Tries, in order: opening the file for sharing, copying it to the
    clipboard, and saving it to the exports folder.
    """
    store = get_store()
    if not store.pending_change_count():
        click.echo("No changes to export.")
        return

    host = TerminalHost(
        config.EXPORT_DIR,
        config.get_device_class(),
        allow_share=share,
        allow_clipboard=clipboard,
    )
    result = run_export(store.overrides, store.canonical_recipes, host)
    report_export(result, host)

    if clear and result.delivered:
        store.clear_overrides()
        click.echo("✓ Local edits cleared")


@cli.command("import")
@click.argument("changes_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--recipes-file",
    type=click.Path(dir_okay=False),
    help="Recipe dataset to update (defaults to the configured dataset)",
)
def import_cmd(changes_file: str, recipes_file: str | None):
    """Apply an exported changes file to the recipe dataset."""
    target = Path(recipes_file) if recipes_file else config.RECIPES_FILE

    try:
        report = import_changes(Path(changes_file), target)
    except (ChangeImportError, RecipeDataError) as e:
        click.echo(f"✗ {e}", err=True)
        raise SystemExit(1) from None

    if report.device or report.exported_at:
        click.echo(f"Changes from {report.device or 'unknown device'} (exported {report.exported_at})")
    for recipe_id, field in report.updated_fields:
        click.echo(f"  [{recipe_id}] {field} updated")
    for recipe_id in report.skipped_ids:
        click.echo(f"  [{recipe_id}] skipped - recipe not found")

    click.echo(f"✓ {report.updated_count} field(s) updated in {target}")


# ============================================================================
# Entry Point
# ============================================================================


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
