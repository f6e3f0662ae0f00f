"""
Descriptions of asynchronous filesystem operations tracked by the service.

Each operation kind has its own description class carrying a kind-specific
payload under ``args``. Descriptions that cannot be decoded are kept as
:class:`UndecodableOpDescription` so a listing can still show the rest.
"""
import enum
from typing import Annotated, Any, Literal, Tuple, Union

from pydantic import (
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    PlainSerializer,
    Tag,
    TypeAdapter,
    ValidationError,
)

from fsops.domain.types.base import BaseInfo, enum_from_wire
from fsops.domain.types.path import Path
from fsops.exceptions import MalformedIdentifierError, UnknownKindError, WrongKindError

OP_ID_SIZE = 16  # bytes

_UNKNOWN_TAG = "UNKNOWN"


# ----------------------------------- identifiers -------------------------------------------
def op_id_hex(op_id: bytes) -> str:
    """Lowercase hex form of an operation id, two characters per byte."""
    return bytes(op_id).hex()


def _coerce_op_id(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        data = bytes(value)
    elif isinstance(value, str):
        try:
            data = bytes.fromhex(value)
        except ValueError:
            raise ValueError(f"op id is not valid hex: {value!r}")
    elif isinstance(value, (list, tuple)):
        try:
            data = bytes(value)
        except (TypeError, ValueError):
            raise ValueError("op id bytes must be integers in range 0..255")
    else:
        raise ValueError(f"unsupported op id value: {value!r}")
    if not data:
        raise ValueError("op id must not be empty")
    return data


OpID = Annotated[
    bytes,
    BeforeValidator(_coerce_op_id),
    PlainSerializer(op_id_hex, return_type=str),
]


def parse_op_id(text: str) -> bytes:
    """
    Decode an operation id typed by a user.

    :param text: Hex string, ``2 * OP_ID_SIZE`` characters long.
    :raises MalformedIdentifierError: if the text is not hex or has the wrong width.
    """
    try:
        data = bytes.fromhex(text.strip())
    except ValueError:
        raise MalformedIdentifierError(f"bad opid {text!r}: not a hex string")
    if len(data) != OP_ID_SIZE:
        raise MalformedIdentifierError(
            f"bad opid {text!r}: expected {OP_ID_SIZE} bytes, got {len(data)}"
        )
    return data


# ----------------------------------- kinds -------------------------------------------------
class AsyncOps(str, enum.Enum):
    """Kinds of asynchronous operations. Values double as display names."""

    LIST = "LIST"
    LIST_RECURSIVE = "LIST_RECURSIVE"
    READ = "READ"
    WRITE = "WRITE"
    COPY = "COPY"
    MOVE = "MOVE"
    REMOVE = "REMOVE"

    @property
    def ordinal(self) -> int:
        return _ASYNC_OP_ORDINALS[self]


_ASYNC_OP_ORDINALS = {op: idx for idx, op in enumerate(AsyncOps)}


def _coerce_async_op(value: Any) -> Any:
    op = enum_from_wire(AsyncOps, value)
    return op if op is not None else value


def _kind(op: AsyncOps):
    return Annotated[Literal[op], BeforeValidator(_coerce_async_op)]


# ----------------------------------- payloads ----------------------------------------------
class ListArgs(BaseInfo):
    op_id: OpID = Field(alias="opID")
    path: Path

    @property
    def paths(self) -> Tuple[Path, ...]:
        return (self.path,)


class ReadArgs(BaseInfo):
    op_id: OpID = Field(alias="opID")
    path: Path
    offset: int = 0
    size: int = 0

    @property
    def paths(self) -> Tuple[Path, ...]:
        return (self.path,)


class WriteArgs(BaseInfo):
    op_id: OpID = Field(alias="opID")
    path: Path
    offset: int = 0

    @property
    def paths(self) -> Tuple[Path, ...]:
        return (self.path,)


class CopyArgs(BaseInfo):
    op_id: OpID = Field(alias="opID")
    src: Path
    dest: Path

    @property
    def paths(self) -> Tuple[Path, ...]:
        return (self.src, self.dest)


class MoveArgs(CopyArgs):
    pass


class RemoveArgs(BaseInfo):
    op_id: OpID = Field(alias="opID")
    path: Path

    @property
    def paths(self) -> Tuple[Path, ...]:
        return (self.path,)


# ----------------------------------- descriptions ------------------------------------------
class ListOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.LIST) = AsyncOps.LIST
    args: ListArgs = Field(alias="list")


class ListRecursiveOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.LIST_RECURSIVE) = AsyncOps.LIST_RECURSIVE
    args: ListArgs = Field(alias="listRecursive")


class ReadOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.READ) = AsyncOps.READ
    args: ReadArgs = Field(alias="read")


class WriteOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.WRITE) = AsyncOps.WRITE
    args: WriteArgs = Field(alias="write")


class CopyOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.COPY) = AsyncOps.COPY
    args: CopyArgs = Field(alias="copy")


class MoveOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.MOVE) = AsyncOps.MOVE
    args: MoveArgs = Field(alias="move")


class RemoveOpDescription(BaseInfo):
    async_op: _kind(AsyncOps.REMOVE) = AsyncOps.REMOVE
    args: RemoveArgs = Field(alias="remove")


class UndecodableOpDescription(BaseInfo):
    """A description whose kind is unknown or whose payload is malformed."""

    model_config = ConfigDict(extra="allow")

    async_op: Any = None
    reason: str = ""
    raw: Any = None

    def error_message(self) -> str:
        if self.reason:
            return self.reason
        return f"unknown async op: {self.async_op!r}"


def _op_tag(value: Any) -> str:
    if isinstance(value, dict):
        raw = value.get("asyncOp", value.get("async_op"))
    else:
        raw = getattr(value, "async_op", None)
    op = enum_from_wire(AsyncOps, raw)
    return op.value if op is not None else _UNKNOWN_TAG


OpDescription = Annotated[
    Union[
        Annotated[ListOpDescription, Tag(AsyncOps.LIST.value)],
        Annotated[ListRecursiveOpDescription, Tag(AsyncOps.LIST_RECURSIVE.value)],
        Annotated[ReadOpDescription, Tag(AsyncOps.READ.value)],
        Annotated[WriteOpDescription, Tag(AsyncOps.WRITE.value)],
        Annotated[CopyOpDescription, Tag(AsyncOps.COPY.value)],
        Annotated[MoveOpDescription, Tag(AsyncOps.MOVE.value)],
        Annotated[RemoveOpDescription, Tag(AsyncOps.REMOVE.value)],
        Annotated[UndecodableOpDescription, Tag(_UNKNOWN_TAG)],
    ],
    Discriminator(_op_tag),
]

_DESCRIPTION_ADAPTER = TypeAdapter(OpDescription)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    err = errors[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def parse_op_description(data: Any) -> OpDescription:
    """
    Decode one description received from the service.

    Never raises for bad input: anything that cannot be decoded comes back as an
    :class:`UndecodableOpDescription` carrying the reason.
    """
    try:
        return _DESCRIPTION_ADAPTER.validate_python(data)
    except ValidationError as exc:
        tag = data.get("asyncOp", data.get("async_op")) if isinstance(data, dict) else None
        op = enum_from_wire(AsyncOps, tag)
        if op is not None:
            reason = f"malformed {op.value} operation: {_first_error(exc)}"
        else:
            reason = f"undecodable operation description: {_first_error(exc)}"
        return UndecodableOpDescription(async_op=tag, reason=reason, raw=data)


# ----------------------------------- accessors ---------------------------------------------
def kind_of(description: OpDescription) -> AsyncOps:
    """Return the kind of a description, or raise UnknownKindError."""
    if isinstance(description, UndecodableOpDescription):
        raise UnknownKindError(description.error_message())
    op = enum_from_wire(AsyncOps, getattr(description, "async_op", None))
    if op is None:
        raise UnknownKindError(f"unknown async op: {getattr(description, 'async_op', None)!r}")
    return op


def _expect(description: OpDescription, op: AsyncOps):
    actual = kind_of(description)
    if actual is not op:
        raise WrongKindError(f"expected a {op.value} operation, got {actual.value}")
    return description.args


def as_list(description: OpDescription) -> ListArgs:
    return _expect(description, AsyncOps.LIST)


def as_list_recursive(description: OpDescription) -> ListArgs:
    return _expect(description, AsyncOps.LIST_RECURSIVE)


def as_read(description: OpDescription) -> ReadArgs:
    return _expect(description, AsyncOps.READ)


def as_write(description: OpDescription) -> WriteArgs:
    return _expect(description, AsyncOps.WRITE)


def as_copy(description: OpDescription) -> CopyArgs:
    return _expect(description, AsyncOps.COPY)


def as_move(description: OpDescription) -> MoveArgs:
    return _expect(description, AsyncOps.MOVE)


def as_remove(description: OpDescription) -> RemoveArgs:
    return _expect(description, AsyncOps.REMOVE)
