"""
Tabular rendering of operation descriptions.

Each description becomes one tab-separated line; the first two columns are
always the operation id in hex and the kind name. A description that cannot
be decoded becomes a line holding only the error text, and the remaining
descriptions are still rendered.
"""
import logging
from typing import Iterable, List, TextIO

from fsops.domain.types.op import (
    AsyncOps,
    OpDescription,
    kind_of,
    op_id_hex,
)
from fsops.domain.types.path import path_of
from fsops.exceptions import UnknownKindError
from fsops.io.tabwriter import TabWriter

logger = logging.getLogger(__name__)

# diagnostics must stay a single cell on a single line
_FLATTEN = str.maketrans({"\t": " ", "\n": " ", "\r": " "})


def _columns(description: OpDescription) -> List[str]:
    op = kind_of(description)
    args = description.args
    columns = [op_id_hex(args.op_id), op.value]

    if op in (AsyncOps.LIST, AsyncOps.LIST_RECURSIVE, AsyncOps.REMOVE):
        columns.append(path_of(args.path))
    elif op is AsyncOps.READ:
        columns.extend([path_of(args.path), str(args.offset), str(args.size)])
    elif op is AsyncOps.WRITE:
        columns.extend([path_of(args.path), str(args.offset)])
    elif op in (AsyncOps.COPY, AsyncOps.MOVE):
        columns.extend([path_of(args.src), path_of(args.dest)])
    else:
        raise UnknownKindError(f"unknown async op: {op!r}")
    return columns


def render(description: OpDescription) -> str:
    """
    Render one description as a tab-separated line, without the newline.

    If the kind cannot be determined, the line is the error text instead.
    """
    try:
        return "\t".join(_columns(description))
    except UnknownKindError as exc:
        logger.warning("Rendering diagnostic row: %s", exc)
        return str(exc).translate(_FLATTEN)


def render_all(descriptions: Iterable[OpDescription], sink: TextIO) -> None:
    """
    Write every description to `sink` as an aligned table, one line each.

    Output is flushed before returning.
    """
    writer = TabWriter(sink)
    for description in descriptions:
        writer.write(render(description) + "\n")
    writer.flush()
    flush = getattr(sink, "flush", None)
    if callable(flush):
        flush()
