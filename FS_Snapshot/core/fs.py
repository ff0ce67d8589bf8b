"""Boundary calls into the host filesystem.

Every function translates OSError into the snapshot error taxonomy. The
async variants run the blocking call in the default thread pool.
"""

import asyncio
import os
from typing import BinaryIO, List

from .errors import translate_os_error


def stat_entry(path: str) -> os.stat_result:
    # lstat, since stat would resolve symlinks
    try:
        return os.lstat(path)
    except OSError as exc:
        raise translate_os_error(exc, path, "stat") from exc


def list_directory(path: str) -> List[str]:
    """Immediate child names, in whatever order the OS reports them."""
    try:
        return os.listdir(path)
    except OSError as exc:
        raise translate_os_error(exc, path, "listdir") from exc


def read_link_target(path: str) -> str:
    try:
        return os.readlink(path)
    except OSError as exc:
        raise translate_os_error(exc, path, "readlink") from exc


def open_byte_stream(path: str) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise translate_os_error(exc, path, "open") from exc


async def stat_entry_async(path: str) -> os.stat_result:
    return await asyncio.to_thread(stat_entry, path)


async def list_directory_async(path: str) -> List[str]:
    return await asyncio.to_thread(list_directory, path)


async def read_link_target_async(path: str) -> str:
    return await asyncio.to_thread(read_link_target, path)
