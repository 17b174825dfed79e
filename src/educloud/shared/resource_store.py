# src/educloud/shared/resource_store.py
"""
Base resource store with generic CRUD over the REST API.

A store keeps the last fetched list as a local cache and merges each
mutation's response back into it (create prepends, update replaces, delete
drops). Failures land in the store's `error` slot and are re-raised; nothing
is retried. The server stays the only arbiter of concurrent edits.
"""
from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from educloud.shared.exceptions import EduCloudError, MalformedResponseError, ValidationError
from educloud.shared.logging import get_logger
from educloud.shared.models import ApiModel

if TYPE_CHECKING:
    from educloud.gateway.client import HttpGateway

logger = get_logger(__name__)

EntityType = TypeVar("EntityType", bound=ApiModel)
PayloadModel = TypeVar("PayloadModel", bound=BaseModel)
ResultType = TypeVar("ResultType")

Payload = Union[Mapping[str, Any], BaseModel]


def to_payload(data: Payload) -> Dict[str, Any]:
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, exclude_none=True, mode="json")
    return dict(data)


def error_details(e: PydanticValidationError) -> Dict[str, Any]:
    return {"errors": e.errors(include_url=False, include_context=False)}


class BaseResourceStore(Generic[EntityType]):
    """
    Generic CRUD store for one REST collection.

    Subclasses set `model`, `base_path`, and the singular/plural labels used in
    fallback error messages ("Failed to fetch classes").
    """

    model: Type[EntityType]
    base_path: str
    singular: str = "item"
    plural: str = "items"
    list_key: Optional[str] = None  # envelope key when the list is wrapped, e.g. {"tenants": [...]}

    def __init__(self, gateway: "HttpGateway") -> None:
        self._gateway = gateway
        self.items: List[EntityType] = []
        self.selected: Optional[EntityType] = None
        self.is_loading = False
        self.error: Optional[str] = None

    # ------------------------------------------------------------------ helpers

    def clear_error(self) -> None:
        self.error = None

    def find(self, item_id: str) -> Optional[EntityType]:
        return next((i for i in self.items if i.id == item_id), None)

    def _path(self, *parts: str) -> str:
        return "/".join([self.base_path.rstrip("/"), *parts])

    def _parse(self, data: Any) -> EntityType:
        return self.model.model_validate(data)

    def _parse_list(self, data: Any) -> List[EntityType]:
        if isinstance(data, dict) and self.list_key:
            data = data.get(self.list_key, [])
        return [self._parse(d) for d in (data or [])]

    def _validate(self, model: Type[PayloadModel], data: Payload) -> PayloadModel:
        """Build a request body, or raise ValidationError without touching the network."""
        if isinstance(data, model):
            return data
        try:
            return model.model_validate(to_payload(data))
        except PydanticValidationError as e:
            error = ValidationError(details=error_details(e))
            self.error = error.message
            raise error from e

    def _prepend(self, item: EntityType) -> None:
        self.items.insert(0, item)

    def _replace(self, item: EntityType) -> None:
        for idx, existing in enumerate(self.items):
            if existing.id == item.id:
                self.items[idx] = item
                break
        if self.selected is not None and self.selected.id == item.id:
            self.selected = item

    def _drop(self, item_id: str) -> None:
        self.items = [i for i in self.items if i.id != item_id]
        if self.selected is not None and self.selected.id == item_id:
            self.selected = None

    async def _call(
        self,
        fn: Callable[[], Awaitable[ResultType]],
        *,
        action: str,
        track_loading: bool = False,
    ) -> ResultType:
        """Run one API action; record the failure in the error slot and re-raise."""
        if track_loading:
            self.is_loading = True
            self.error = None
        try:
            return await fn()
        except EduCloudError as e:
            self.error = e.message
            logger.warning("Resource action failed", resource=self.plural, action=action, error=e.message)
            raise
        except PydanticValidationError as e:
            error = MalformedResponseError(details=error_details(e))
            self.error = error.message
            logger.warning("Malformed response", resource=self.plural, action=action, errors=e.error_count())
            raise error from e
        finally:
            if track_loading:
                self.is_loading = False

    # --------------------------------------------------------------------- CRUD

    async def fetch_all(self, params: Optional[Mapping[str, Any]] = None) -> List[EntityType]:
        async def _do() -> List[EntityType]:
            data = await self._gateway.get(
                self.base_path,
                params=dict(params or {}),
                fallback=f"Failed to fetch {self.plural}",
            )
            return self._parse_list(data)

        self.items = await self._call(_do, action="fetch_all", track_loading=True)
        return self.items

    async def fetch_one(self, item_id: str) -> EntityType:
        async def _do() -> EntityType:
            data = await self._gateway.get(self._path(item_id), fallback=f"Failed to fetch {self.singular}")
            return self._parse(data)

        self.selected = await self._call(_do, action="fetch_one")
        return self.selected

    async def create(self, data: Payload) -> EntityType:
        async def _do() -> EntityType:
            body = await self._gateway.post(
                self.base_path,
                json=to_payload(data),
                fallback=f"Failed to create {self.singular}",
            )
            return self._parse(body)

        item = await self._call(_do, action="create")
        self._prepend(item)
        return item

    async def update(self, item_id: str, data: Payload) -> EntityType:
        async def _do() -> EntityType:
            body = await self._gateway.put(
                self._path(item_id),
                json=to_payload(data),
                fallback=f"Failed to update {self.singular}",
            )
            return self._parse(body)

        item = await self._call(_do, action="update")
        self._replace(item)
        return item

    async def delete(self, item_id: str) -> None:
        async def _do() -> None:
            await self._gateway.delete(self._path(item_id), fallback=f"Failed to delete {self.singular}")

        await self._call(_do, action="delete")
        self._drop(item_id)


class ToggleableResourceStore(BaseResourceStore[EntityType]):
    """Store whose records are soft-disabled via `PATCH {base}/{id}/status {isActive}`."""

    async def set_active(self, item_id: str, is_active: bool) -> EntityType:
        async def _do() -> EntityType:
            body = await self._gateway.patch(
                self._path(item_id, "status"),
                json={"isActive": is_active},
                fallback="Failed to update status",
            )
            return self._parse(body)

        item = await self._call(_do, action="set_active")
        self._replace(item)
        return item
