"""Export of local recipe edits through a chain of delivery strategies."""

import asyncio
import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

import click
import pyperclip

from .recipes import Recipe
from .store import EDITABLE_FIELDS, Overrides

logger = logging.getLogger(__name__)

EXPORT_TITLE = "שינויים במתכונים"  # "recipe changes"


class ShareCancelled(Exception):
    """Raised by a host when the user dismisses a share dialog."""

    pass


class ShareUnsupported(Exception):
    """Raised by a host when a delivery method is not available."""

    pass


class Outcome(Enum):
    """Result of a single delivery attempt."""

    DELIVERED = "delivered"
    NOT_APPLICABLE = "not_applicable"
    CANCELLED = "cancelled"


@dataclass
class ExportResult:
    """
    Result of an export.

    ``error`` is None when the document was delivered, "clipboard" when it
    was copied to the clipboard instead, "cancelled" when the user backed
    out of a share dialog and "failed" when no strategy worked.
    """

    count: int
    error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.error in (None, "clipboard")


@dataclass
class ExportPayload:
    """An export document ready for delivery."""

    document: dict[str, Any]
    filename: str

    @property
    def text(self) -> str:
        return json.dumps(self.document, indent=2, ensure_ascii=False)

    @property
    def count(self) -> int:
        return self.document["changesCount"]


class ExportHost(Protocol):
    """Sharing, clipboard and download capabilities of the host environment."""

    def device_class(self) -> str: ...

    def can_share_files(self) -> bool: ...

    def can_share_text(self) -> bool: ...

    async def share_file(self, filename: str, content: str) -> None: ...

    async def share_text(self, title: str, text: str) -> None: ...

    async def copy_to_clipboard(self, text: str) -> None: ...

    async def download(self, filename: str, content: str) -> None: ...


# ============================================================================
# Export Document
# ============================================================================


def placeholder_name(recipe_id: int) -> str:
    """Name used for an edited recipe that is no longer in the dataset."""
    return f"מתכון #{recipe_id}"


def build_export_records(overrides: Overrides, canonical: list[Recipe]) -> list[dict[str, Any]]:
    """
    Build one export record per edited recipe.

    Args:
        overrides: Override map keyed by recipe id
        canonical: Shipped recipes, used for names

    Returns:
        Records ordered by recipe id, each holding only the edited fields
    """
    names = {recipe.id: recipe.name for recipe in canonical}

    records = []
    for recipe_id in sorted(overrides):
        fields = overrides[recipe_id]
        record: dict[str, Any] = {
            "id": recipe_id,
            "name": names.get(recipe_id, placeholder_name(recipe_id)),
        }
        for field in EDITABLE_FIELDS:
            if field in fields:
                value = fields[field]
                record[field] = list(value) if field == "ingredients" else value
        records.append(record)

    return records


def build_export_document(
    overrides: Overrides,
    canonical: list[Recipe],
    device: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """
    Build the export document for a set of overrides.

    Args:
        overrides: Override map keyed by recipe id
        canonical: Shipped recipes
        device: "mobile" or "desktop"
        now: Export time (defaults to the current UTC time)

    Returns:
        Document with exportedAt, device, changesCount and changes
    """
    now = now or datetime.now(timezone.utc)
    changes = build_export_records(overrides, canonical)
    return {
        "exportedAt": now.isoformat(),
        "device": device,
        "changesCount": len(changes),
        "changes": changes,
    }


def export_filename(now: datetime | None = None) -> str:
    """File name for an export document (e.g., recipe-changes-2026-10-18.json)."""
    now = now or datetime.now(timezone.utc)
    return f"recipe-changes-{now.strftime('%Y-%m-%d')}.json"


# ============================================================================
# Delivery Strategies
# ============================================================================


class ExportStrategy:
    """A delivery method. Subclasses implement ``deliver``."""

    name = "strategy"
    # Reported in ExportResult.error when this strategy delivers
    result_flag: str | None = None

    async def deliver(self, host: ExportHost, payload: ExportPayload) -> Outcome:
        raise NotImplementedError


class ShareFileStrategy(ExportStrategy):
    """Share the document as an attached file."""

    name = "share-file"

    async def deliver(self, host: ExportHost, payload: ExportPayload) -> Outcome:
        if not host.can_share_files():
            return Outcome.NOT_APPLICABLE
        try:
            await host.share_file(payload.filename, payload.text)
        except ShareCancelled:
            return Outcome.CANCELLED
        except ShareUnsupported:
            return Outcome.NOT_APPLICABLE
        return Outcome.DELIVERED


class ShareTextStrategy(ExportStrategy):
    """Share the document as inline text."""

    name = "share-text"

    async def deliver(self, host: ExportHost, payload: ExportPayload) -> Outcome:
        if not host.can_share_text():
            return Outcome.NOT_APPLICABLE
        try:
            await host.share_text(EXPORT_TITLE, payload.text)
        except ShareCancelled:
            return Outcome.CANCELLED
        except ShareUnsupported:
            return Outcome.NOT_APPLICABLE
        return Outcome.DELIVERED


class ClipboardStrategy(ExportStrategy):
    """Copy the document text to the clipboard."""

    name = "clipboard"
    result_flag = "clipboard"

    async def deliver(self, host: ExportHost, payload: ExportPayload) -> Outcome:
        try:
            await host.copy_to_clipboard(payload.text)
        except ShareUnsupported:
            return Outcome.NOT_APPLICABLE
        return Outcome.DELIVERED


class DownloadStrategy(ExportStrategy):
    """Save the document as a file."""

    name = "download"

    async def deliver(self, host: ExportHost, payload: ExportPayload) -> Outcome:
        try:
            await host.download(payload.filename, payload.text)
        except ShareUnsupported:
            return Outcome.NOT_APPLICABLE
        return Outcome.DELIVERED


def default_strategies() -> list[ExportStrategy]:
    return [ShareFileStrategy(), ShareTextStrategy(), ClipboardStrategy(), DownloadStrategy()]


async def deliver_payload(
    payload: ExportPayload,
    host: ExportHost,
    strategies: Sequence[ExportStrategy] | None = None,
) -> ExportResult:
    """
    Try each strategy in order until one delivers the payload.

    A cancelled share stops the chain. Unsupported methods and unexpected
    errors fall through to the next strategy.
    """
    if strategies is None:
        strategies = default_strategies()

    for strategy in strategies:
        try:
            outcome = await strategy.deliver(host, payload)
        except Exception as e:
            logger.warning("Export via %s failed: %s", strategy.name, e, exc_info=True)
            continue

        if outcome is Outcome.CANCELLED:
            logger.info("Export cancelled during %s", strategy.name)
            return ExportResult(count=0, error="cancelled")
        if outcome is Outcome.DELIVERED:
            logger.info("Exported %d change(s) via %s", payload.count, strategy.name)
            return ExportResult(count=payload.count, error=strategy.result_flag)

        logger.debug("Export strategy %s not available", strategy.name)

    return ExportResult(count=0, error="failed")


async def export_changes(
    overrides: Overrides,
    canonical: list[Recipe],
    host: ExportHost,
    strategies: Sequence[ExportStrategy] | None = None,
    now: datetime | None = None,
) -> ExportResult:
    """
    Export the current overrides through the first strategy that works.

    Args:
        overrides: Override map keyed by recipe id
        canonical: Shipped recipes
        host: Host environment providing sharing, clipboard and download
        strategies: Delivery strategies in order (defaults to share file,
            share text, clipboard, download)
        now: Export time

    Returns:
        ExportResult with the number of exported recipes and an error flag
    """
    try:
        document = build_export_document(overrides, canonical, host.device_class(), now)
        payload = ExportPayload(document=document, filename=export_filename(now))
    except Exception as e:
        logger.error("Could not build export document: %s", e, exc_info=True)
        return ExportResult(count=0, error="failed")

    return await deliver_payload(payload, host, strategies)


def run_export(
    overrides: Overrides,
    canonical: list[Recipe],
    host: ExportHost,
    strategies: Sequence[ExportStrategy] | None = None,
) -> ExportResult:
    """Synchronous wrapper around export_changes."""
    return asyncio.run(export_changes(overrides, canonical, host, strategies))


# ============================================================================
# Terminal Host
# ============================================================================


class TerminalHost:
    """
    Export host for the command line.

    File sharing writes the document to the export directory and reveals it
    in the system file manager after confirmation. Text sharing is not
    available in a terminal.
    """

    def __init__(
        self,
        export_dir: Path,
        device: str = "desktop",
        *,
        allow_share: bool = True,
        allow_clipboard: bool = True,
    ):
        self.export_dir = export_dir
        self.device = device
        self.allow_share = allow_share
        self.allow_clipboard = allow_clipboard
        self.last_path: Path | None = None

    def device_class(self) -> str:
        return self.device

    def can_share_files(self) -> bool:
        return self.allow_share

    def can_share_text(self) -> bool:
        return False

    def _write(self, filename: str, content: str) -> Path:
        self.export_dir.mkdir(parents=True, exist_ok=True)
        path = self.export_dir / filename
        path.write_text(content, encoding="utf-8")
        self.last_path = path
        return path

    async def share_file(self, filename: str, content: str) -> None:
        try:
            confirmed = click.confirm("Open the export file in your file manager?", default=True)
        except click.Abort:
            raise ShareCancelled() from None
        if not confirmed:
            raise ShareCancelled()

        path = self._write(filename, content)
        if click.launch(str(path), locate=True) != 0:
            self.last_path = None
            raise ShareUnsupported(f"Could not open a file manager for {path}")

    async def share_text(self, title: str, text: str) -> None:
        raise ShareUnsupported("Text sharing is not available in a terminal")

    async def copy_to_clipboard(self, text: str) -> None:
        if not self.allow_clipboard:
            raise ShareUnsupported("Clipboard disabled")
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ShareUnsupported(str(e)) from e

    async def download(self, filename: str, content: str) -> None:
        self._write(filename, content)
