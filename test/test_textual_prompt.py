from __future__ import annotations

import asyncio

import pytest
from textual.app import App

from defold_bridge.prompts import (
    ErrorDialog,
    NotFoundChoice,
    NotFoundDialog,
    PortInputDialog,
    TextualPrompt,
)

SIZE = (100, 30)


def _drive(app: App, *steps) -> object:
    async def main() -> object:
        async with app.run_test(size=SIZE) as pilot:
            for step in steps:
                await step(pilot)
            await pilot.pause()
        return app.return_value

    return asyncio.run(main())


def _click(selector: str):
    async def step(pilot) -> None:
        await pilot.click(selector)

    return step


def _press(*keys: str):
    async def step(pilot) -> None:
        await pilot.press(*keys)

    return step


@pytest.mark.parametrize("button", ["open", "input", "cancel"])
def test_not_found_dialog_returns_button_id(button: str) -> None:
    assert _drive(NotFoundDialog(), _click(f"#{button}")) == button


def test_not_found_dialog_escape_dismisses() -> None:
    assert _drive(NotFoundDialog(), _press("escape")) is None


def test_port_dialog_returns_stripped_port() -> None:
    port = _drive(PortInputDialog(), _press("space", "5", "1", "2", "3", "4", "space", "enter"))
    assert port == "51234"


def test_port_dialog_escape_dismisses() -> None:
    assert _drive(PortInputDialog(), _press("escape")) is None


def test_error_dialog_closes_on_ok() -> None:
    app = ErrorDialog("Failed to start Defold editor.")
    assert _drive(app, _click("#ok")) is None
    assert app.message == "Failed to start Defold editor."


@pytest.mark.parametrize(
    "answer,expected",
    [
        ("open", NotFoundChoice.OPEN_EDITOR),
        ("input", NotFoundChoice.INPUT_PORT),
        ("cancel", NotFoundChoice.CANCEL),
        (None, None),
    ],
)
def test_textual_prompt_maps_dialog_answers(
    monkeypatch: pytest.MonkeyPatch, answer, expected
) -> None:
    async def fake_run_async(self, **kwargs):
        return answer

    monkeypatch.setattr(NotFoundDialog, "run_async", fake_run_async)
    assert asyncio.run(TextualPrompt().ask_not_found()) == expected
