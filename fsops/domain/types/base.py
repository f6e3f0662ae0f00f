"""
Base model for snapshots returned by the filesystem service.
"""
from pydantic import BaseModel, ConfigDict


def _snake_to_camel(name: str) -> str:
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class BaseInfo(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        alias_generator=_snake_to_camel,
        serialize_by_alias=True,
    )


def enum_from_wire(enum_cls, value):
    """Map a wire tag (name, value or ordinal) to a member of `enum_cls`, or None."""
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        members = list(enum_cls)
        for member in members:
            if getattr(member, "ordinal", None) == value:
                return member
        return None
    if isinstance(value, str):
        try:
            return enum_cls(value.upper())
        except ValueError:
            return None
    return None
