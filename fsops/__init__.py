"""
Public package interface for the fsops client.

Query the asynchronous operations a remote filesystem service is running and
render them as a table.
"""

from __future__ import annotations

from fsops.api.api import Api
from fsops.domain.types.op import (
    AsyncOps,
    OpDescription,
    as_copy,
    as_list,
    as_list_recursive,
    as_move,
    as_read,
    as_remove,
    as_write,
    kind_of,
    op_id_hex,
    parse_op_description,
    parse_op_id,
)
from fsops.domain.types.path import LocalPath, PathType, RemotePath, path_of
from fsops.exceptions import (
    FsopsError,
    MalformedIdentifierError,
    TransportError,
    UnknownKindError,
    WrongKindError,
)
from fsops.io.paths import make_path
from fsops.ops.render.listing import render, render_all

__all__ = [
    "Api",
    "AsyncOps",
    "OpDescription",
    "LocalPath",
    "RemotePath",
    "PathType",
    "as_copy",
    "as_list",
    "as_list_recursive",
    "as_move",
    "as_read",
    "as_remove",
    "as_write",
    "kind_of",
    "op_id_hex",
    "parse_op_description",
    "parse_op_id",
    "path_of",
    "make_path",
    "render",
    "render_all",
    "FsopsError",
    "MalformedIdentifierError",
    "TransportError",
    "UnknownKindError",
    "WrongKindError",
]
