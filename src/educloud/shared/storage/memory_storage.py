from __future__ import annotations

from typing import Dict, Optional


class MemoryStorage:
    """Process-local storage. Used in tests and for throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._items.get(key)

    async def set(self, key: str, value: str) -> None:
        self._items[key] = value

    async def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def snapshot(self) -> Dict[str, str]:
        return dict(self._items)
