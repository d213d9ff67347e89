"""Operator input for the interactive restore."""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence

from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table


Validator = Callable[[str], Optional[str]]


class RawPrompt(Prompt):
    """``Prompt`` that returns the answer exactly as typed, surrounding spaces included."""

    def process_response(self, value: str) -> str:
        return value


class Prompter(Protocol):
    """Source of operator answers.

    ``select`` returns one of ``choices`` and ``text`` returns a value accepted
    by ``validate``; both return ``None`` when the operator cancels.
    ``validate`` returns an error message for rejected input, ``None`` otherwise.
    """

    def select(self, message: str, choices: Sequence[str]) -> Optional[str]:
        ...

    def text(self, message: str, validate: Validator) -> Optional[str]:
        ...


class RichPrompter:
    """Terminal prompts rendered with rich."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console or Console()

    def select(self, message: str, choices: Sequence[str]) -> Optional[str]:
        table = Table(title=message)
        table.add_column("#", justify="right", style="cyan")
        table.add_column("Backup")
        for index, choice in enumerate(choices, start=1):
            table.add_row(str(index), choice)
        self.console.print(table)

        numbers = [str(index) for index in range(1, len(choices) + 1)]
        try:
            answer = Prompt.ask(
                "Enter a number (blank to cancel)",
                choices=numbers,
                default="",
                show_choices=False,
                show_default=False,
                console=self.console,
            )
        except (KeyboardInterrupt, EOFError):
            self.console.print()
            return None
        if not answer:
            return None
        return choices[int(answer) - 1]

    def text(self, message: str, validate: Validator) -> Optional[str]:
        while True:
            try:
                value = RawPrompt.ask(message, console=self.console)
            except (KeyboardInterrupt, EOFError):
                self.console.print()
                return None
            error = validate(value)
            if error is None:
                return value
            self.console.print(f"[prompt.invalid]{error}")
