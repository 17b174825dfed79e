from __future__ import annotations

from typing import List, Protocol


class Navigator(Protocol):
    """Where the user currently is, and how to send them somewhere else."""

    @property
    def location(self) -> str:
        ...

    def redirect(self, path: str) -> None:
        ...


class RecordingNavigator:
    """In-process navigator: tracks the current location and every redirect issued."""

    def __init__(self, location: str = "/") -> None:
        self._location = location
        self.history: List[str] = []

    @property
    def location(self) -> str:
        return self._location

    def go(self, path: str) -> None:
        """User-initiated navigation."""
        self._location = path

    def redirect(self, path: str) -> None:
        self.history.append(path)
        self._location = path
