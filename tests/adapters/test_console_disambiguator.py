import io

import pytest
from rich.console import Console

from adapters.console_disambiguator import ConsoleDisambiguator
from core.domain.errors import InvalidChoice

LABELS = ["Artist - Album 1 (1991)", "Artist - Album [Deluxe] (N/A)", "Artist - Album 3 (1993)"]


def make_console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=120, color_system=None), buffer


def scripted(*answers: str):
    pending = list(answers)
    prompts: list[str] = []

    def ask(prompt: str) -> str:
        prompts.append(prompt)
        return pending.pop(0)

    return ask, prompts


@pytest.mark.asyncio
async def test_lists_candidates_and_returns_zero_based_index():
    console, buffer = make_console()
    ask, prompts = scripted("2")

    index = await ConsoleDisambiguator(console=console, ask=ask).choose_one(LABELS)

    assert index == 1
    output = buffer.getvalue()
    assert "[1] Artist - Album 1 (1991)" in output
    assert "[2] Artist - Album [Deluxe] (N/A)" in output
    assert prompts == ["Enter the number of your choice (1-3): "]


@pytest.mark.asyncio
@pytest.mark.parametrize("answer", ["0", "7", "abc"])
async def test_single_shot_fails_on_invalid_input(answer):
    console, _ = make_console()
    ask, prompts = scripted(answer, "1")

    with pytest.raises(InvalidChoice):
        await ConsoleDisambiguator(console=console, ask=ask).choose_one(LABELS)
    assert len(prompts) == 1


@pytest.mark.asyncio
async def test_retries_when_configured():
    console, buffer = make_console()
    ask, prompts = scripted("x", "9", "3")

    index = await ConsoleDisambiguator(console=console, ask=ask, max_attempts=3).choose_one(LABELS)

    assert index == 2
    assert len(prompts) == 3
    assert "Invalid selection. Please try again." in buffer.getvalue()


@pytest.mark.asyncio
async def test_retries_exhausted_raise_invalid_choice():
    console, buffer = make_console()
    ask, prompts = scripted("x", "9")

    with pytest.raises(InvalidChoice) as excinfo:
        await ConsoleDisambiguator(console=console, ask=ask, max_attempts=2).choose_one(LABELS)

    assert excinfo.value.raw == "9"
    assert len(prompts) == 2
    assert buffer.getvalue().count("Invalid selection. Please try again.") == 1
