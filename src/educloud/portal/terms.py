from __future__ import annotations

from typing import List, Optional

from educloud.portal.models import Term
from educloud.shared.resource_store import BaseResourceStore, Payload, to_payload


class TermStore(BaseResourceStore[Term]):
    """
    Academic terms. At most one term is current at a time.

    Whenever the server reports a term as current (set-current, or a create /
    update carrying `isCurrent=true`) every other cached term loses the flag.
    """

    model = Term
    base_path = "/portal/terms"
    singular = "term"
    plural = "terms"

    def __init__(self, gateway) -> None:
        super().__init__(gateway)
        self.current: Optional[Term] = None

    def _mark_current(self, term: Term) -> None:
        self.items = [
            t if t.id == term.id else t.model_copy(update={"is_current": False}) for t in self.items
        ]
        self.current = term

    def _sync_current(self, term: Term) -> None:
        if term.is_current:
            self._mark_current(term)
        elif self.current is not None and self.current.id == term.id:
            self.current = None

    async def fetch_all(self, params=None) -> List[Term]:
        items = await super().fetch_all(params)
        self.current = next((t for t in items if t.is_current), None)
        return items

    async def fetch_current(self) -> Optional[Term]:
        async def _do() -> Optional[Term]:
            data = await self._gateway.get(self._path("current"), fallback="Failed to fetch current term")
            return self._parse(data) if data else None

        self.current = await self._call(_do, action="fetch_current")
        return self.current

    async def create(self, data: Payload) -> Term:
        term = await super().create(to_payload(data))
        self._sync_current(term)
        return term

    async def update(self, item_id: str, data: Payload) -> Term:
        term = await super().update(item_id, to_payload(data))
        self._sync_current(term)
        return term

    async def set_current(self, term_id: str) -> Term:
        async def _do() -> Term:
            body = await self._gateway.patch(self._path(term_id, "current"), fallback="Failed to set current term")
            return self._parse(body)

        term = await self._call(_do, action="set_current")
        if not any(t.id == term.id for t in self.items):
            self._prepend(term)
        self._replace(term)
        self._mark_current(term)
        return term

    async def delete(self, item_id: str) -> None:
        await super().delete(item_id)
        if self.current is not None and self.current.id == item_id:
            self.current = None
