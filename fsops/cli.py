"""
Command line entry point: ``fsops ps`` lists running filesystem operations.
"""

import argparse
import logging
import sys
from typing import Iterable, List, Optional

from pydantic import ValidationError

from fsops.api.api import Api
from fsops.domain.types.op import OpDescription, kind_of, parse_op_id
from fsops.domain.types.path import Path, path_of
from fsops.exceptions import MalformedIdentifierError, TransportError, UnknownKindError
from fsops.io.credentials import ClientConfig
from fsops.io.env import load_env
from fsops.io.paths import is_under, make_path
from fsops.ops.render.listing import render_all

logger = logging.getLogger(__name__)


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fsops", description="Remote filesystem operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    ps = subparsers.add_parser("ps", help="list running operations")
    ps.add_argument("-o", "--opid", help="only show the operation with this hex id")
    ps.add_argument(
        "-r", "--recurse", action="store_true", help="also match operations below PATH"
    )
    ps.add_argument("path", nargs="?", help="only show operations touching this path")
    return parser


def _touches(description: OpDescription, target: Path, recurse: bool) -> bool:
    wanted = path_of(target)
    for path in description.args.paths:
        if type(path) is not type(target):
            continue
        text = path_of(path)
        if text == wanted or (recurse and is_under(text, wanted)):
            return True
    return False


def filter_ops(
    descriptions: Iterable[OpDescription],
    op_id: Optional[bytes] = None,
    target: Optional[Path] = None,
    recurse: bool = False,
) -> List[OpDescription]:
    """
    Keep descriptions matching the id and path filters.

    Undecodable descriptions are always kept so their diagnostics stay visible.
    """
    selected = []
    for description in descriptions:
        try:
            kind_of(description)
        except UnknownKindError:
            selected.append(description)
            continue
        if op_id is not None and bytes(description.args.op_id) != op_id:
            continue
        if target is not None and not _touches(description, target, recurse):
            continue
        selected.append(description)
    return selected


def cmd_ps(args, config: ClientConfig, out=None) -> int:
    out = out or sys.stdout
    op_id = None
    if args.opid:
        try:
            op_id = parse_op_id(args.opid)
        except MalformedIdentifierError as exc:
            print(f"fsops ps: {exc}", file=sys.stderr)
            return 2
    target = make_path(args.path, config.FSOPS_REMOTE_PREFIX) if args.path else None

    try:
        api = Api.from_config(config)
        descriptions = api.ops.get_list()
    except (TransportError, ValueError) as exc:
        print(f"fsops ps: {exc}", file=sys.stderr)
        return 1

    render_all(filter_ops(descriptions, op_id, target, args.recurse), out)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_env()
    try:
        config = ClientConfig()
    except ValidationError as exc:
        print(f"fsops {args.command}: invalid configuration: {_first_error(exc)}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.command == "ps":
        return cmd_ps(args, config)
    return 2


if __name__ == "__main__":
    sys.exit(main())
