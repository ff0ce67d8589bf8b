from dataclasses import dataclass, replace
from enum import Enum
import os
import stat as stat_mod
from typing import Any, Dict, Iterator, List, Optional


class NodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    DEVICE = "device"
    SYMLINK = "symlink"
    FIFO = "fifo"
    SOCKET = "socket"
    # stat result matched none of the predicates above
    UNRESOLVED = "unresolved"


def stats_type(st: os.stat_result) -> NodeType:
    """
    Resolve an lstat() result to its node type.

    Returns NodeType.UNRESOLVED if no predicate matches. It is unclear
    whether that ever happens on a real filesystem.
    """
    mode = st.st_mode
    if stat_mod.S_ISREG(mode):
        return NodeType.FILE
    if stat_mod.S_ISDIR(mode):
        return NodeType.DIRECTORY
    if stat_mod.S_ISBLK(mode):
        return NodeType.DEVICE
    if stat_mod.S_ISCHR(mode):
        return NodeType.DEVICE
    if stat_mod.S_ISLNK(mode):
        return NodeType.SYMLINK
    if stat_mod.S_ISFIFO(mode):
        return NodeType.FIFO
    if stat_mod.S_ISSOCK(mode):
        return NodeType.SOCKET
    return NodeType.UNRESOLVED


@dataclass
class FSNode:
    """
    One entry of a filesystem snapshot.

    `checksum` is None on nodes produced by the structure builder only.
    `children` is set for directories (sorted by name), `target` for
    symlinks; every other type carries neither.

    N.b.: directories have a size too.
    """
    name: str
    type: NodeType
    size: int
    atime: float
    mtime: float
    ctime: float
    btime: float = 0.0

    checksum: Optional[str] = None
    children: Optional[List["FSNode"]] = None
    target: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.type, NodeType):
            self.type = NodeType(self.type)

    def walk(self) -> Iterator["FSNode"]:
        """Yield this node and all descendants, pre-order."""
        yield self
        for child in self.children or []:
            yield from child.walk()

    def with_checksum(self, checksum: str, children: Optional[List["FSNode"]] = None) -> "FSNode":
        if children is None:
            return replace(self, checksum=checksum)
        return replace(self, checksum=checksum, children=children)

    def to_dict(self) -> Dict[str, Any]:
        record: Dict[str, Any] = {
            "name": self.name,
            "type": None if self.type is NodeType.UNRESOLVED else self.type.value,
            "size": self.size,
            "atime": self.atime,
            "mtime": self.mtime,
            "ctime": self.ctime,
            "btime": self.btime,
            "checksum": self.checksum,
        }
        if self.children is not None:
            record["children"] = [child.to_dict() for child in self.children]
        if self.target is not None:
            record["target"] = self.target
        return record

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "FSNode":
        """
        Rebuild a node tree from a to_dict() record.

        Raises ValueError when a record carries fields its type does not
        allow: children are required on directories only, target on
        symlinks only.
        """
        raw_type = record.get("type")
        node_type = NodeType.UNRESOLVED if raw_type is None else NodeType(raw_type)
        children = record.get("children")
        target = record.get("target")

        if (children is not None) != (node_type is NodeType.DIRECTORY):
            raise ValueError(f"{record.get('name')!r}: children are only allowed on directories, and required there")
        if (target is not None) != (node_type is NodeType.SYMLINK):
            raise ValueError(f"{record.get('name')!r}: target is only allowed on symlinks, and required there")

        return cls(
            name=record["name"],
            type=node_type,
            size=record.get("size", 0),
            atime=record.get("atime", 0.0),
            mtime=record.get("mtime", 0.0),
            ctime=record.get("ctime", 0.0),
            btime=record.get("btime", 0.0),
            checksum=record.get("checksum"),
            children=[cls.from_dict(c) for c in children] if children is not None else None,
            target=target,
        )


def build_node(name: str, st: os.stat_result) -> FSNode:
    """
    Build an FSNode from an lstat() result.

    Metadata only: children, target and checksum are filled in later.
    """
    return FSNode(
        name=name,
        type=stats_type(st),
        size=st.st_size,
        atime=st.st_atime,
        mtime=st.st_mtime,
        ctime=st.st_ctime,
        # Not every platform reports creation time
        btime=getattr(st, "st_birthtime", 0.0),
    )
