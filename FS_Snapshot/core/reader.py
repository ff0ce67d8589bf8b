import asyncio
import logging
import os

from FS_Snapshot.core import fs
from FS_Snapshot.core import hashing
from FS_Snapshot.core.checksum import directory_checksum, leaf_checksum, propagate_checksums_async
from FS_Snapshot.core.models import FSNode, NodeType, build_node
from FS_Snapshot.core.structure import build_structure_async, entry_name, sorted_children
from FS_Snapshot.core.tasks import map_concurrently

logger = logging.getLogger(__name__)


async def read_async(
    path,
    *,
    algorithm: str = hashing.DEFAULT_ALGORITHM,
    chunk_size: int = hashing.DEFAULT_CHUNK_SIZE,
) -> FSNode:
    """
    Snapshot the subtree at `path`: walk the structure, then checksum it.

    Either a fully checksummed tree comes back or a single SnapshotError
    is raised; partial trees are never returned.
    """
    path = os.path.normpath(os.fspath(path))
    hashing.check_algorithm(algorithm)
    logger.info("Reading %s (%s)", path, algorithm)

    structure = await build_structure_async(path)
    node = await propagate_checksums_async(
        structure,
        os.path.dirname(path),
        algorithm=algorithm,
        chunk_size=chunk_size,
    )

    logger.info("Snapshot of %s: %s", path, node.checksum)
    return node


async def _read_node(path: str, algorithm: str, chunk_size: int) -> FSNode:
    st = await fs.stat_entry_async(path)
    node = build_node(entry_name(path), st)

    if node.type is NodeType.DIRECTORY:
        names = sorted_children(await fs.list_directory_async(path))
        children = await map_concurrently(
            lambda name: _read_node(os.path.join(path, name), algorithm, chunk_size),
            names,
        )
        return node.with_checksum(directory_checksum(children, algorithm), children)

    if node.type is NodeType.SYMLINK:
        node.target = await fs.read_link_target_async(path)
    elif node.type is NodeType.UNRESOLVED:
        logger.warning("Could not resolve entry type for %s", path)

    return node.with_checksum(await leaf_checksum(node, path, algorithm, chunk_size))


async def read_interleaved_async(
    path,
    *,
    algorithm: str = hashing.DEFAULT_ALGORITHM,
    chunk_size: int = hashing.DEFAULT_CHUNK_SIZE,
) -> FSNode:
    """
    Same contract as read_async, computed in a single pass.

    Each node is checksummed as soon as it is discovered instead of after
    the whole structure has been walked.
    """
    path = os.path.normpath(os.fspath(path))
    hashing.check_algorithm(algorithm)
    logger.info("Reading %s in one pass (%s)", path, algorithm)

    node = await _read_node(path, algorithm, chunk_size)

    logger.info("Snapshot of %s: %s", path, node.checksum)
    return node


def read(
    path,
    *,
    algorithm: str = hashing.DEFAULT_ALGORITHM,
    chunk_size: int = hashing.DEFAULT_CHUNK_SIZE,
    interleaved: bool = False,
):
    """
    Sync wrapper for read_async / read_interleaved_async.

    With no running event loop this blocks and returns the checksummed
    tree. Inside a running loop it returns an asyncio.Task instead; async
    callers should await read_async / read_interleaved_async directly.
    """
    reader = read_interleaved_async if interleaved else read_async
    coro = reader(path, algorithm=algorithm, chunk_size=chunk_size)
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        return loop.create_task(coro)
