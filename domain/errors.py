from __future__ import annotations

from collections.abc import Mapping, Sequence


class LayoutEngineError(Exception):
    """Base class for errors raised by the layout engine."""


class ValidationError(LayoutEngineError):
    """A layout failed validation on save.

    ``errors`` maps a field name to the list of messages collected for it, so
    an editing UI can show every problem at once.
    """

    def __init__(self, errors: Mapping[str, Sequence[str]]) -> None:
        self.errors: dict[str, list[str]] = {key: list(value) for key, value in errors.items()}
        super().__init__(self.full_messages_text())

    def full_messages(self) -> list[str]:
        return [f"{field} {message}" for field, messages in self.errors.items() for message in messages]

    def full_messages_text(self) -> str:
        return "Validation failed: " + ", ".join(self.full_messages())


class StructuralError(LayoutEngineError):
    """The layout tree is malformed (cyclic or unreasonably deep parent chain)."""
