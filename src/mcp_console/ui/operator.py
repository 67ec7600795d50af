# mcp_console/ui/operator.py
"""
The human at the terminal.

Everything the orchestrator and the sampling bridge need from the operator
(show text, ask a question, confirm, pick from a list) goes through
:class:`Operator`, so the flows can be driven by scripted fakes in tests.
"""
from __future__ import annotations

import abc
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

HISTORY_FILE = "~/.mcp_console_history"


@dataclass(frozen=True)
class Choice:
    """One selectable entry: *title* is shown, *value* is returned."""
    title: str
    value: str
    description: str = ""


class Operator(abc.ABC):
    """Abstract interactive operator."""

    @abc.abstractmethod
    def say(self, text: str, *, style: Optional[str] = None) -> None:
        """Print one line of output."""

    @abc.abstractmethod
    def preview(self, text: str, *, title: str = "Prompt") -> None:
        """Show a block of text the operator is about to act on."""

    @abc.abstractmethod
    async def ask(self, question: str) -> str:
        """Free-text input."""

    @abc.abstractmethod
    async def confirm(self, question: str, *, default: bool = True) -> bool:
        """Yes / no gate."""

    @abc.abstractmethod
    async def select(self, question: str, choices: Sequence[Choice]) -> str:
        """Pick one of *choices*; returns its ``value``."""


class TerminalOperator(Operator):
    """Rich output + prompt-toolkit async input."""

    _STYLE = Style.from_dict(
        {
            "completion-menu": "bg:default",
            "completion-menu.completion": "bg:default fg:goldenrod",
            "completion-menu.completion.current": "bg:default fg:goldenrod bold",
            "auto-suggestion": "fg:ansibrightblack",
        }
    )

    def __init__(self, console: Optional[Console] = None, *, history_file: str = HISTORY_FILE) -> None:
        self.console = console or Console()
        self._session: PromptSession = PromptSession(
            history=FileHistory(os.path.expanduser(history_file)),
            auto_suggest=AutoSuggestFromHistory(),
            style=self._STYLE,
        )

    def say(self, text: str, *, style: Optional[str] = None) -> None:
        # Text() keeps server-provided strings from being parsed as markup
        self.console.print(Text(text, style=style or ""))

    def preview(self, text: str, *, title: str = "Prompt") -> None:
        self.console.print(Panel(Text(text), title=title, border_style="yellow"))

    async def ask(self, question: str) -> str:
        return (await self._session.prompt_async(f"{question} ")).strip()

    async def confirm(self, question: str, *, default: bool = True) -> bool:
        hint = "Y/n" if default else "y/N"
        while True:
            answer = (await self._session.prompt_async(f"{question} ({hint}) ")).strip().lower()
            if not answer:
                return default
            if answer in ("y", "yes"):
                return True
            if answer in ("n", "no"):
                return False
            self.console.print("[yellow]Please answer 'y' or 'n'.[/yellow]")

    async def select(self, question: str, choices: Sequence[Choice]) -> str:
        if not choices:
            raise ValueError("Nothing to select from")

        table = Table(title=question, header_style="bold magenta", show_lines=False)
        table.add_column("#", style="cyan", justify="right")
        table.add_column("Name", style="green")
        table.add_column("Description", overflow="fold")
        for idx, choice in enumerate(choices, 1):
            table.add_row(str(idx), choice.title, choice.description)
        self.console.print(table)

        completer = WordCompleter([c.title for c in choices], ignore_case=True, sentence=True)
        while True:
            raw = (await self._session.prompt_async("> ", completer=completer)).strip()
            picked = _match_choice(raw, choices)
            if picked is not None:
                return picked.value
            self.console.print("[red]Invalid selection.[/red]")


def _match_choice(raw: str, choices: Sequence[Choice]) -> Optional[Choice]:
    """Accept a 1-based index or a case-insensitive title."""
    if raw.isdigit():
        idx = int(raw) - 1
        return choices[idx] if 0 <= idx < len(choices) else None
    lowered = raw.lower()
    for choice in choices:
        if choice.title.lower() == lowered:
            return choice
    return None
