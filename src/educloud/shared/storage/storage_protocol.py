"""
Key-Value Storage Protocol (Abstract Interface)
Contract for durable session persistence backends
"""
from __future__ import annotations

from typing import Protocol


class IKeyValueStorage(Protocol):
    """
    Durable string key-value storage.

    Only session tokens and profiles are ever written here; every other piece
    of client state lives in memory and is rebuilt from the API.
    """

    async def get(self, key: str) -> str | None:
        """
        Retrieve a stored value.

        Args:
            key: Storage key (e.g. "school_token")

        Returns:
            Stored string or None if absent
        """
        ...

    async def set(self, key: str, value: str) -> None:
        """
        Store a value, overwriting any previous one.

        Args:
            key: Storage key
            value: String value (JSON for structured data)
        """
        ...

    async def delete(self, key: str) -> bool:
        """
        Remove a key.

        Args:
            key: Storage key

        Returns:
            True if the key existed
        """
        ...
