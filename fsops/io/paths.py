"""
Construction of tagged paths from raw user input.
"""
import posixpath

from fsops.domain.types.path import LocalPath, Path, RemotePath

DEFAULT_REMOTE_PREFIX = "/remote"


def is_remote(raw: str, remote_prefix: str = DEFAULT_REMOTE_PREFIX) -> bool:
    prefix = remote_prefix.rstrip("/")
    return raw == prefix or raw.startswith(prefix + "/")


def make_path(raw: str, remote_prefix: str = DEFAULT_REMOTE_PREFIX) -> Path:
    """
    Tag a raw path string by addressing convention.

    Strings under the remote mount prefix become remote paths with the prefix
    stripped; everything else is local.
    """
    if is_remote(raw, remote_prefix):
        rest = raw[len(remote_prefix.rstrip("/")):]
        return RemotePath(remote=posixpath.normpath("/" + rest.lstrip("/")))
    return LocalPath(local=raw)


def is_under(candidate: str, root: str) -> bool:
    """True if `candidate` equals `root` or lies below it."""
    root = root.rstrip("/") or "/"
    if candidate == root:
        return True
    if root == "/":
        return candidate.startswith("/")
    return candidate.startswith(root + "/")
