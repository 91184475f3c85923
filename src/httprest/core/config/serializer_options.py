from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import ConfigDict, Field, TypeAdapter
from pydantic_core import to_jsonable_python

from httprest.core.interfaces.model_bases import DomainModel

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


class SerializerOptions(DomainModel):
    """JSON settings shared by request bodies and response decoding."""

    model_config = ConfigDict(frozen=True)

    indent: int | None = Field(
        default=None, description="Indentation of written JSON; compact when None."
    )
    exclude_none: bool = Field(
        default=False, description="Drop None-valued fields when writing."
    )
    by_alias: bool = Field(
        default=True, description="Write pydantic field aliases instead of names."
    )
    strict: bool = Field(
        default=False, description="Validate responses in pydantic strict mode."
    )

    def dumps(self, value: Any) -> str:
        """Serialize pydantic models, dataclasses and plain values to JSON text."""
        jsonable = to_jsonable_python(
            value, by_alias=self.by_alias, exclude_none=self.exclude_none
        )
        return json.dumps(jsonable, indent=self.indent, ensure_ascii=False)

    def loads(self, text: str | bytes, target_type: type[T] | Any) -> T:
        """Decode JSON text into ``target_type``."""
        return _adapter(target_type).validate_json(text, strict=self.strict)

    def validate(self, value: Any, target_type: type[T] | Any) -> T:
        """Validate an already decoded JSON value into ``target_type``."""
        return _adapter(target_type).validate_python(value, strict=self.strict)
