"""
Path union over the two storage backends an operation can address.
"""
import enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BeforeValidator, ConfigDict, Discriminator, Tag

from fsops.domain.types.base import BaseInfo, enum_from_wire

_UNKNOWN_TAG = "UNKNOWN"


class PathType(str, enum.Enum):
    """Storage backend a path belongs to."""

    LOCAL = "LOCAL"
    REMOTE = "REMOTE"

    @property
    def ordinal(self) -> int:
        return _PATH_TYPE_ORDINALS[self]


_PATH_TYPE_ORDINALS = {PathType.LOCAL: 0, PathType.REMOTE: 1}


def _coerce_path_type(value: Any) -> Any:
    path_type = enum_from_wire(PathType, value)
    return path_type if path_type is not None else value


class RemotePath(BaseInfo):
    """Path inside the remote filesystem namespace."""

    path_type: Annotated[
        Literal[PathType.REMOTE], BeforeValidator(_coerce_path_type)
    ] = PathType.REMOTE
    remote: str


class LocalPath(BaseInfo):
    """Path on the local disk."""

    path_type: Annotated[
        Literal[PathType.LOCAL], BeforeValidator(_coerce_path_type)
    ] = PathType.LOCAL
    local: str


class UnknownPath(BaseInfo):
    """Path whose tag is missing or not understood by this client."""

    model_config = ConfigDict(extra="allow")

    path_type: Any = None


def _path_tag(value: Any) -> str:
    if isinstance(value, dict):
        raw = value.get("pathType", value.get("path_type"))
    else:
        raw = getattr(value, "path_type", None)
    path_type = enum_from_wire(PathType, raw)
    return path_type.value if path_type is not None else _UNKNOWN_TAG


Path = Annotated[
    Union[
        Annotated[RemotePath, Tag(PathType.REMOTE.value)],
        Annotated[LocalPath, Tag(PathType.LOCAL.value)],
        Annotated[UnknownPath, Tag(_UNKNOWN_TAG)],
    ],
    Discriminator(_path_tag),
]


def path_of(path: Optional[Path]) -> str:
    """
    Resolve a path to display text.

    Remote and local paths yield their stored string; anything else yields ``""``.
    """
    if isinstance(path, RemotePath):
        return path.remote
    if isinstance(path, LocalPath):
        return path.local
    return ""
