"""Host capabilities consumed by the enhance command.

The pipeline never reads editor or terminal state directly; it goes through
a ``Host``. ``TerminalHost`` backs the CLI with a file-or-argument selection,
click prompts, and the system clipboard.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

import click
import pyperclip
from rich.console import Console
from rich.markup import escape

from .core.types import PlacementAction


logger = logging.getLogger(__name__)

MIN_INPUT_LENGTH = 3
CLIPBOARD_PREVIEW_CHARS = 60

INPUT_SOURCES = ("clipboard", "input", "cancel")
POST_ACTIONS = ("copy", "insertBelow", "replaceSelection", "openNew")


def accept_input(text: Optional[str]) -> Optional[str]:
    """Return ``text`` when it has at least 3 non-blank characters, else None."""
    if not isinstance(text, str) or len(text.strip()) < MIN_INPUT_LENGTH:
        return None
    return text


def clipboard_preview(text: Optional[str]) -> str:
    if not text:
        return "(clipboard empty)"
    suffix = "…" if len(text) > CLIPBOARD_PREVIEW_CHARS else ""
    return f"{text[:CLIPBOARD_PREVIEW_CHARS]}{suffix}"


class Host(Protocol):
    """What the enhance command needs from its surroundings."""

    def get_active_selection(self) -> Optional[str]:
        ...

    def prompt_for_input(self) -> Optional[str]:
        ...

    def read_clipboard(self) -> Optional[str]:
        ...

    def choose_input_source(self, clipboard_hint: str) -> Optional[str]:
        ...

    def choose_post_action(self) -> Optional[str]:
        ...

    def write_preview(self, delta: str) -> None:
        ...

    def apply_result(self, text: str, action: PlacementAction) -> None:
        ...

    def copy_to_clipboard(self, text: str) -> bool:
        ...

    def show_info(self, message: str) -> None:
        ...

    def show_warning(self, message: str) -> None:
        ...


class TerminalHost:
    """
    Host for the command line.

    The selection is the prompt argument, or the contents of ``source_path``.
    Placement actions work on that file: ``insertBelow`` appends after the
    selection, ``replaceSelection`` swaps it out, ``openNew`` writes
    ``output_path`` (or stdout).
    """

    def __init__(
        self,
        selection: Optional[str] = None,
        source_path: Optional[str] = None,
        output_path: Optional[str] = None,
        console: Optional[Console] = None,
        preview: bool = False
    ):
        self.source_path = Path(source_path) if source_path else None
        self.output_path = Path(output_path) if output_path else None
        self.console = console or Console(stderr=True)
        self.preview = preview
        if selection is None and self.source_path is not None:
            selection = self.source_path.read_text(encoding="utf-8")
        self.selection = selection

    def get_active_selection(self) -> Optional[str]:
        return self.selection

    def prompt_for_input(self) -> Optional[str]:
        try:
            value = click.prompt("Enter the prompt to enhance", default="", show_default=False)
        except click.Abort:
            return None
        text = accept_input(value)
        if text is None:
            self.show_warning("Please enter more detail")
        return text

    def read_clipboard(self) -> Optional[str]:
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as e:
            logger.warning(f"Clipboard unavailable: {e}")
            return None

    def choose_input_source(self, clipboard_hint: str) -> Optional[str]:
        self.console.print(f"No selection found. Clipboard: [dim]{escape(clipboard_hint)}[/dim]", markup=True)
        try:
            return click.prompt(
                "Choose input source",
                type=click.Choice(INPUT_SOURCES),
                default="input"
            )
        except click.Abort:
            return None

    def choose_post_action(self) -> Optional[str]:
        try:
            return click.prompt(
                "Apply enhanced prompt as",
                type=click.Choice(POST_ACTIONS),
                default="copy"
            )
        except click.Abort:
            return None

    def write_preview(self, delta: str) -> None:
        if self.preview:
            self.console.print(delta, end="", markup=False, highlight=False)

    def apply_result(self, text: str, action: PlacementAction) -> None:
        if action == PlacementAction.NONE:
            return

        if action in (PlacementAction.REPLACE_SELECTION, PlacementAction.INSERT_BELOW):
            content = self._target_content()
            if content is not None:
                if action == PlacementAction.REPLACE_SELECTION:
                    self._replace_selection(content, text)
                else:
                    self._insert_below(content, text)
                return

        self._open_new(text)

    def _target_content(self) -> Optional[str]:
        """Contents of the source file, when it holds the selection."""
        if self.source_path is None or not self.selection:
            return None
        try:
            content = self.source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.show_warning(f"Cannot update {self.source_path}: {e}")
            return None
        if self.selection not in content:
            self.show_warning(f"Selection not found in {self.source_path}; writing the result instead")
            return None
        return content

    def _replace_selection(self, content: str, text: str) -> None:
        self.source_path.write_text(content.replace(self.selection, text, 1), encoding="utf-8")
        logger.info(f"Replaced selection in {self.source_path}")

    def _insert_below(self, content: str, text: str) -> None:
        end = content.find(self.selection) + len(self.selection)
        search_from = end - 1 if end and content[end - 1] == "\n" else end
        line_end = content.find("\n", search_from)
        if line_end < 0:
            content += "\n"
            line_end = len(content) - 1
        position = line_end + 1
        updated = f"{content[:position]}\n{text}\n{content[position:]}"
        self.source_path.write_text(updated, encoding="utf-8")
        logger.info(f"Inserted enhanced prompt into {self.source_path}")

    def _open_new(self, text: str) -> None:
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_text(text, encoding="utf-8")
            self.show_info(f"Saved to: {self.output_path}")
        else:
            click.echo(text)

    def copy_to_clipboard(self, text: str) -> bool:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            self.show_warning(f"Could not copy to clipboard: {e}")
            return False
        return True

    def show_info(self, message: str) -> None:
        self.console.print(f"[green]{escape(message)}[/green]", markup=True)

    def show_warning(self, message: str) -> None:
        self.console.print(f"[yellow]Warning:[/yellow] {escape(message)}", markup=True, highlight=False)
