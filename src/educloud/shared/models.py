from __future__ import annotations

from typing import Any, Annotated, Optional

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _ref_id(value: Any) -> Any:
    """The API returns references either as a bare id or as a populated document."""
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


RefId = Annotated[str, BeforeValidator(_ref_id)]
OptionalRefId = Annotated[Optional[str], BeforeValidator(_ref_id)]


class ApiModel(BaseModel):
    """Base for every resource the API returns (camelCase JSON, Mongo-style `_id`)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str = Field(validation_alias=AliasChoices("_id", "id"))

    def to_api(self, **kwargs: Any) -> dict:
        """Dump in the API's camelCase shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json", **kwargs)


class ApiPayload(BaseModel):
    """Base for request bodies the client sends."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )
