from fsops.domain.types.op import (
    OP_ID_SIZE,
    AsyncOps,
    CopyArgs,
    CopyOpDescription,
    ListArgs,
    ListOpDescription,
    ListRecursiveOpDescription,
    MoveArgs,
    MoveOpDescription,
    OpDescription,
    ReadArgs,
    ReadOpDescription,
    RemoveArgs,
    RemoveOpDescription,
    UndecodableOpDescription,
    WriteArgs,
    WriteOpDescription,
)
from fsops.domain.types.path import LocalPath, Path, PathType, RemotePath, UnknownPath
