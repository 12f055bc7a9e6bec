"""
User-facing prompts shown when no running editor can be found.

ConsolePrompt reads answers from stdin; TextualPrompt shows the same
dialogs as small textual screens.
"""

from __future__ import annotations

import asyncio
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Optional, TextIO

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label, Static

NOT_FOUND_MESSAGE = "Running Defold editor is not found"
LAUNCH_FAILED_MESSAGE = "Failed to start Defold editor. Please start it and try again."
PORT_PROMPT_TITLE = "Port of the running Defold editor"
PORT_PROMPT_HELP = (
    "How to find a port of your running Defold editor:\n"
    ' In the menu open "Debug" > "Open Web Profiler". The profiler will open in a browser.'
    " Copy the port from the URL. In example, for http://localhost:XXXXX/engine-profiler"
    " the port will be XXXXX. Input the port into the text input above."
)
PORT_PLACEHOLDER = "xxxxx"


class NotFoundChoice(str, Enum):
    OPEN_EDITOR = "Open Defold"
    INPUT_PORT = "Input Port"
    CANCEL = "Cancel"


class UserPrompt(ABC):
    """Interactive fallback used by the resolver."""

    @abstractmethod
    async def ask_not_found(self) -> Optional[NotFoundChoice]:
        """Return the chosen action, or None when the dialog was dismissed."""

    @abstractmethod
    async def ask_port(self) -> Optional[str]:
        """Return the port typed by the user, or None/empty when nothing was entered."""

    @abstractmethod
    async def show_error(self, message: str) -> None:
        ...


class ConsolePrompt(UserPrompt):
    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
    ):
        self._input = input_fn
        self._output = output

    def _print(self, text: str = "") -> None:
        print(text, file=self._output or sys.stderr)

    async def _read(self, prompt: str) -> Optional[str]:
        try:
            return (await asyncio.to_thread(self._input, prompt)).strip()
        except (EOFError, KeyboardInterrupt):
            return None

    async def ask_not_found(self) -> Optional[NotFoundChoice]:
        choices = list(NotFoundChoice)
        self._print(NOT_FOUND_MESSAGE)
        for idx, choice in enumerate(choices, start=1):
            self._print(f"  {idx}. {choice.value}")
        answer = await self._read(f"Enter choice [1-{len(choices)}]: ")
        if not answer:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return choices[int(answer) - 1]
        for choice in choices:
            if answer.lower() == choice.value.lower():
                return choice
        return None

    async def ask_port(self) -> Optional[str]:
        self._print(PORT_PROMPT_TITLE)
        self._print(PORT_PROMPT_HELP)
        return await self._read(f"Port [{PORT_PLACEHOLDER}]: ")

    async def show_error(self, message: str) -> None:
        self._print(f"Error: {message}")


class NotFoundDialog(App[str]):
    BINDINGS = [("escape", "dismiss_dialog", "Cancel")]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(NOT_FOUND_MESSAGE)
            with Horizontal():
                yield Button(NotFoundChoice.OPEN_EDITOR.value, id="open", variant="primary")
                yield Button(NotFoundChoice.INPUT_PORT.value, id="input")
                yield Button(NotFoundChoice.CANCEL.value, id="cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.exit(event.button.id)

    def action_dismiss_dialog(self) -> None:
        self.exit(None)


class PortInputDialog(App[str]):
    BINDINGS = [("escape", "dismiss_dialog", "Cancel")]

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(PORT_PROMPT_TITLE)
            yield Input(placeholder=PORT_PLACEHOLDER, id="port")
            yield Static(PORT_PROMPT_HELP)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.exit(event.value.strip())

    def action_dismiss_dialog(self) -> None:
        self.exit(None)


class ErrorDialog(App[None]):
    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Label(self.message)
            yield Button("OK", id="ok", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.exit(None)


_DIALOG_CHOICES = {
    "open": NotFoundChoice.OPEN_EDITOR,
    "input": NotFoundChoice.INPUT_PORT,
    "cancel": NotFoundChoice.CANCEL,
}


class TextualPrompt(UserPrompt):
    async def ask_not_found(self) -> Optional[NotFoundChoice]:
        answer = await NotFoundDialog().run_async()
        return _DIALOG_CHOICES.get(answer or "")

    async def ask_port(self) -> Optional[str]:
        return await PortInputDialog().run_async()

    async def show_error(self, message: str) -> None:
        await ErrorDialog(message).run_async()
