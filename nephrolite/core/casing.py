from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake

__all__ = ["CamelModel", "to_camel", "to_snake", "to_camel_keys", "to_snake_keys"]


class CamelModel(BaseModel):
    """API schema base: camelCase on the wire, snake_case attributes in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def to_snake_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {(to_snake(k) if isinstance(k, str) else k): to_snake_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_snake_keys(v) for v in obj]
    return obj


def to_camel_keys(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {(to_camel(k) if isinstance(k, str) else k): to_camel_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [to_camel_keys(v) for v in obj]
    return obj
