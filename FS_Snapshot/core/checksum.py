import asyncio
import logging
import os
from typing import List

from FS_Snapshot.core import fs
from FS_Snapshot.core import hashing
from FS_Snapshot.core.errors import translate_os_error
from FS_Snapshot.core.models import FSNode, NodeType
from FS_Snapshot.core.tasks import map_concurrently

logger = logging.getLogger(__name__)


def directory_checksum(children: List[FSNode], algorithm: str = hashing.DEFAULT_ALGORITHM) -> str:
    """
    Checksum of a directory from its already-checksummed children.

    Children are used in the order given; the structure builder has
    already sorted them by name.
    """
    return hashing.aggregate_children(
        ((child.name, child.checksum) for child in children),
        algorithm,
    )


def file_checksum(
    path: str,
    algorithm: str = hashing.DEFAULT_ALGORITHM,
    chunk_size: int = hashing.DEFAULT_CHUNK_SIZE,
) -> str:
    """Stream a file's bytes through the digest. Blocking."""
    with fs.open_byte_stream(path) as stream:
        try:
            digest = hashing.digest_stream(stream, algorithm, chunk_size)
        except OSError as exc:
            raise translate_os_error(exc, path, "read") from exc
    logger.debug("Hashed %s: %s", path, digest)
    return digest


async def leaf_checksum(
    node: FSNode,
    path: str,
    algorithm: str,
    chunk_size: int,
) -> str:
    """Checksum for every non-directory node type."""
    if node.type is NodeType.FILE:
        return await asyncio.to_thread(file_checksum, path, algorithm, chunk_size)
    if node.type is NodeType.SYMLINK:
        if node.target is None:
            raise ValueError(f"Symlink node {node.name!r} has no target")
        # The target string itself, nothing at the destination
        return hashing.digest_text(node.target, algorithm)
    if node.type in (NodeType.DEVICE, NodeType.FIFO, NodeType.SOCKET, NodeType.UNRESOLVED):
        return hashing.null_checksum(algorithm)
    raise ValueError(f"Not a leaf node type: {node.type}")


async def propagate_checksums_async(
    node: FSNode,
    parent_path: str,
    *,
    algorithm: str = hashing.DEFAULT_ALGORITHM,
    chunk_size: int = hashing.DEFAULT_CHUNK_SIZE,
) -> FSNode:
    """
    Compute a checksum for every node of a structure tree, bottom-up.

    `parent_path` is the directory containing `node`; it is only used to
    rebuild full paths for reading file content. The input tree is left
    untouched; a new checksummed tree is returned.
    """
    path = os.path.join(os.fspath(parent_path), node.name)

    if node.type is NodeType.DIRECTORY:
        children = await map_concurrently(
            lambda child: propagate_checksums_async(
                child,
                path,
                algorithm=algorithm,
                chunk_size=chunk_size,
            ),
            node.children or [],
        )
        return node.with_checksum(directory_checksum(children, algorithm), children)

    return node.with_checksum(await leaf_checksum(node, path, algorithm, chunk_size))


def propagate_checksums(
    node: FSNode,
    parent_path,
    *,
    algorithm: str = hashing.DEFAULT_ALGORITHM,
    chunk_size: int = hashing.DEFAULT_CHUNK_SIZE,
):
    """
    Sync wrapper for propagate_checksums_async.
    Safe under pytest-asyncio.
    """
    coro = propagate_checksums_async(
        node,
        parent_path,
        algorithm=algorithm,
        chunk_size=chunk_size,
    )
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        return loop.create_task(coro)
