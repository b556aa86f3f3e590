"""Dataclasses for greeting request/response types."""
from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class GreetingRequest:
    """Greeting request; ``name`` is None when the path has no trailing segment."""
    name: str | None = None

    @classmethod
    def absent(cls) -> "GreetingRequest":
        return cls(name=None)

    @classmethod
    def present(cls, name: str) -> "GreetingRequest":
        if not name:
            raise ValueError("name must be a non-empty string")
        return cls(name=name)

    @property
    def is_named(self) -> bool:
        return self.name is not None

@dataclass(frozen=True)
class GreetingResponse:
    """Rendered greeting text."""
    body: str
