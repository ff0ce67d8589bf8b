import asyncio
import logging
import os

from FS_Snapshot.core import fs
from FS_Snapshot.core.models import FSNode, NodeType, build_node
from FS_Snapshot.core.tasks import map_concurrently

logger = logging.getLogger(__name__)


def entry_name(path: str) -> str:
    """Local name of the entry at path, without any parent information."""
    return os.path.basename(os.path.normpath(path))


def sorted_children(names):
    # Plain codepoint order; never trust the order readdir hands back
    return sorted(names)


# ============================================================
# ASYNC IMPLEMENTATION (single source of truth)
# ============================================================

async def build_structure_async(path: str) -> FSNode:
    """
    Walk the filesystem from `path` and return an unchecksummed tree.

    - Symlinks are described, never followed
    - Directory children are built concurrently, assembled in name order
    - The first error anywhere in the subtree aborts the whole walk
    """
    path = os.fspath(path)
    st = await fs.stat_entry_async(path)
    node = build_node(entry_name(path), st)

    if node.type is NodeType.DIRECTORY:
        names = sorted_children(await fs.list_directory_async(path))
        logger.debug("Listed %s (%d entries)", path, len(names))
        node.children = await map_concurrently(
            build_structure_async,
            [os.path.join(path, name) for name in names],
        )
    elif node.type is NodeType.SYMLINK:
        node.target = await fs.read_link_target_async(path)
    elif node.type is NodeType.UNRESOLVED:
        logger.warning("Could not resolve entry type for %s", path)

    return node


# ============================================================
# SYNC WRAPPER
# ============================================================

def build_structure(path):
    """
    Sync wrapper for build_structure_async.
    Safe under pytest-asyncio.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop → safe to create one
        return asyncio.run(build_structure_async(path))
    else:
        # Running loop → must create a task
        return loop.create_task(build_structure_async(path))
