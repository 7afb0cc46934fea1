"""
Model Binding

Populates pydantic models from a registry and writes them back.

Each leaf field is bound to one key: the ``env`` entry of the field's
``json_schema_extra`` if given, otherwise the field name uppercased. Nested
``BaseModel`` fields are bound recursively with the same rule.

Example:
    >>> class DB(BaseModel):
    ...     host: str = Field("localhost", json_schema_extra={"env": "DB_HOST"})
    ...     port: int = Field(5432, json_schema_extra={"env": "DB_PORT"})
    ...
    >>> class Settings(BaseModel):
    ...     api_endpoint: str = "http://localhost:8080"
    ...     timeout: timedelta = Field(timedelta(seconds=1), json_schema_extra={"env": "TIMEOUT"})
    ...     db: DB = DB()
    ...
    >>> settings = unmarshal(env, Settings)
"""

from __future__ import annotations

import typing
from datetime import timedelta
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from dotenv_registry.utils.casting import to_duration, to_string, to_string_list

if TYPE_CHECKING:
    from dotenv_registry.api.registry import DotEnv

ModelT = TypeVar("ModelT", bound=BaseModel)


def field_key(name: str, field: FieldInfo) -> str:
    """Return the registry key a model field is bound to."""
    extra = field.json_schema_extra
    if isinstance(extra, dict) and isinstance(extra.get("env"), str):
        return extra["env"]
    return name.upper()


def _nested_model(annotation: Any) -> type[BaseModel] | None:
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    return None


def _is_list(annotation: Any) -> bool:
    return annotation is list or typing.get_origin(annotation) in (list, tuple, set)


def _convert(annotation: Any, value: Any) -> Any:
    """Pre-convert values pydantic cannot parse from registry strings."""
    if annotation is timedelta:
        return to_duration(value)
    if _is_list(annotation) and isinstance(value, str):
        return to_string_list(value)
    return value


def _collect(registry: "DotEnv", model_cls: type[BaseModel]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for name, field in model_cls.model_fields.items():
        nested = _nested_model(field.annotation)
        if nested is not None:
            data[name] = _collect(registry, nested)
            continue

        resolved = registry.resolve(field_key(name, field))
        if resolved.present and resolved.value != "":
            data[name] = _convert(field.annotation, resolved.value)
    return data


def unmarshal(registry: "DotEnv", model_cls: type[ModelT]) -> ModelT:
    """
    Build ``model_cls`` from values resolved through ``registry``.

    Fields whose key is absent or empty keep their model default.

    Raises:
        pydantic.ValidationError: If a required field is missing or a value
            cannot be converted
    """
    return model_cls.model_validate(_collect(registry, model_cls))


def marshal(registry: "DotEnv", model: BaseModel, *, save: bool = False) -> None:
    """
    Set every leaf field of ``model`` in ``registry``.

    Args:
        registry: Target registry
        model: Model instance to store
        save: Also write the config file afterwards
    """
    for name, field in type(model).model_fields.items():
        value = getattr(model, name)
        if isinstance(value, BaseModel):
            marshal(registry, value)
            continue
        registry.set(field_key(name, field), to_string(value))

    if save:
        registry.save()
