"""Delivery of the aggregated text to its destination."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import pyperclip

from .errors import DeliveryError

logger = logging.getLogger(__name__)


def deliver_to_stdout(text: str) -> None:
    click.echo(text, nl=False)


def deliver_to_file(text: str, path: Path) -> Path:
    """Write *text* to *path*, creating parent directories as needed."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise DeliveryError(f"Cannot write {path}: {e}") from e
    logger.debug("Wrote %d chars to %s", len(text), path)
    return path


def deliver_to_clipboard(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as e:
        raise DeliveryError(f"Clipboard unavailable: {e}") from e
    logger.debug("Copied %d chars to clipboard", len(text))


def deliver(text: str, output: Path | None = None, clipboard: bool = False) -> str:
    """Send *text* to the clipboard, a file, or stdout.

    Returns:
        A short description of where the text went.
    """
    if clipboard:
        deliver_to_clipboard(text)
        return "clipboard"
    if output is not None:
        deliver_to_file(text, output)
        return str(output)
    deliver_to_stdout(text)
    return "stdout"
