"""Tokenizer for ZPL label markup."""

import re
from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

# ^XX or ~XX followed by everything up to the next designator
COMMAND_PATTERN = re.compile(r"[\^~]([A-Z]{1,2})([^\^~]*)", re.IGNORECASE)


class CommandRecord(BaseModel):
    """One parsed ZPL command."""

    model_config = ConfigDict(frozen=True)

    name: str
    params: str = ""


class CommandSequence:
    """Lazy, restartable sequence of command records parsed from ZPL text.

    Each iteration re-scans the source, so the sequence can be walked
    any number of times.
    """

    def __init__(self, text: str) -> None:
        self.text = text or ""

    def __iter__(self) -> Iterator[CommandRecord]:
        for match in COMMAND_PATTERN.finditer(self.text):
            yield CommandRecord(name=match.group(1).upper(), params=match.group(2).strip())

    def __repr__(self) -> str:
        return f"CommandSequence({len(self.text)} chars)"


def parse_zpl(text: str) -> CommandSequence:
    """Parse ZPL text into an ordered sequence of command records.

    Text between commands that does not start with a designator is skipped.
    No parameter validation is performed here.

    Args:
        text: Raw ZPL markup.

    Returns:
        Iterable of CommandRecord in source order.
    """
    return CommandSequence(text)
