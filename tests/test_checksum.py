import hashlib
import os
import socket
from pathlib import Path

import pytest

from FS_Snapshot.core.checksum import directory_checksum, propagate_checksums, propagate_checksums_async
from FS_Snapshot.core.errors import NotFoundError
from FS_Snapshot.core.models import FSNode, NodeType
from FS_Snapshot.core.structure import build_structure_async


def sha1(data: bytes) -> str:
    return hashlib.sha1(data).hexdigest()


async def snapshot(path: Path) -> FSNode:
    structure = await build_structure_async(path)
    return await propagate_checksums_async(structure, os.path.dirname(str(path)))


def child(node: FSNode, name: str) -> FSNode:
    return next(c for c in node.children if c.name == name)


@pytest.mark.asyncio
async def test_every_node_gets_fixed_width_checksum(sample_tree: Path):
    root = await snapshot(sample_tree)

    for node in root.walk():
        assert node.checksum is not None
        assert len(node.checksum) == 40
        int(node.checksum, 16)


@pytest.mark.asyncio
async def test_file_checksum_is_content_digest(sample_tree: Path):
    root = await snapshot(sample_tree)

    assert child(root, "a.txt").checksum == sha1(b"hello")
    assert child(root, "a.txt").checksum == child(root, "b.txt").checksum


@pytest.mark.asyncio
async def test_directory_checksum_aggregates_sorted_children(sample_tree: Path):
    root = await snapshot(sample_tree)

    expected = sha1(
        "\n".join(c.name + c.checksum for c in root.children).encode()
    )
    assert root.checksum == expected


@pytest.mark.asyncio
async def test_empty_directory_is_digest_of_empty_string(tmp_path: Path):
    (tmp_path / "empty").mkdir()

    node = await snapshot(tmp_path / "empty")

    assert node.checksum == sha1(b"")
    assert node.checksum == (await snapshot(tmp_path / "empty")).checksum


@pytest.mark.asyncio
async def test_symlink_checksum_ignores_destination(tmp_path: Path):
    d = tmp_path / "d"
    d.mkdir()
    (d / "link").symlink_to("/tmp/x")

    node = await snapshot(d)

    link = child(node, "link")
    assert link.checksum == sha1(b"/tmp/x")
    assert node.checksum == sha1(("link" + sha1(b"/tmp/x")).encode())


@pytest.mark.asyncio
async def test_dangling_relative_symlink(tmp_path: Path):
    (tmp_path / "broken").symlink_to("../does/not/exist")

    node = await snapshot(tmp_path)

    assert child(node, "broken").checksum == sha1(b"../does/not/exist")


@pytest.mark.asyncio
async def test_renaming_child_changes_parent_only(tmp_path: Path):
    left = tmp_path / "left"
    right = tmp_path / "right"
    for d, second in [(left, "b.txt"), (right, "c.txt")]:
        d.mkdir()
        (d / "a.txt").write_text("hello")
        (d / second).write_text("hello")

    l_node = await snapshot(left)
    r_node = await snapshot(right)

    assert child(l_node, "b.txt").checksum == child(r_node, "c.txt").checksum
    assert l_node.checksum != r_node.checksum


@pytest.mark.asyncio
async def test_content_change_propagates_to_ancestors_only(tmp_path: Path):
    root = tmp_path / "root"
    (root / "x" / "deep").mkdir(parents=True)
    (root / "y").mkdir()
    (root / "x" / "deep" / "f.bin").write_bytes(b"\x00\x01\x02")
    (root / "y" / "g.txt").write_text("same")

    before = await snapshot(root)
    (root / "x" / "deep" / "f.bin").write_bytes(b"\x00\x01\x03")
    after = await snapshot(root)

    assert before.checksum != after.checksum
    assert child(before, "x").checksum != child(after, "x").checksum
    assert child(child(before, "x"), "deep").checksum != child(child(after, "x"), "deep").checksum
    assert child(before, "y").checksum == child(after, "y").checksum


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires mkfifo")
@pytest.mark.asyncio
async def test_fifo_gets_null_checksum(tmp_path: Path):
    os.mkfifo(tmp_path / "pipe")

    node = await snapshot(tmp_path)

    assert child(node, "pipe").checksum == "0" * 40


@pytest.mark.asyncio
async def test_unresolved_type_gets_null_checksum():
    odd = FSNode(name="odd", type=NodeType.UNRESOLVED, size=0, atime=0.0, mtime=0.0, ctime=0.0)

    node = await propagate_checksums_async(odd, "/nonexistent")

    assert node.checksum == "0" * 40


@pytest.mark.asyncio
async def test_propagator_does_not_resort_children():
    def leaf(name):
        return FSNode(name=name, type=NodeType.SYMLINK, size=0, atime=0.0, mtime=0.0, ctime=0.0, target=name)

    def directory(children):
        return FSNode(name="d", type=NodeType.DIRECTORY, size=0, atime=0.0, mtime=0.0, ctime=0.0, children=children)

    sorted_node = await propagate_checksums_async(directory([leaf("a"), leaf("b")]), "/")
    reversed_node = await propagate_checksums_async(directory([leaf("b"), leaf("a")]), "/")

    assert sorted_node.checksum != reversed_node.checksum
    assert [c.name for c in reversed_node.children] == ["b", "a"]


@pytest.mark.asyncio
async def test_input_structure_left_untouched(sample_tree: Path):
    structure = await build_structure_async(sample_tree)

    result = await propagate_checksums_async(structure, str(sample_tree.parent))

    assert result.checksum is not None
    assert all(node.checksum is None for node in structure.walk())


@pytest.mark.asyncio
async def test_vanished_file_aborts_propagation(sample_tree: Path):
    structure = await build_structure_async(sample_tree)
    (sample_tree / "docs" / "readme.md").unlink()

    with pytest.raises(NotFoundError) as info:
        await propagate_checksums_async(structure, str(sample_tree.parent))

    assert info.value.path.endswith(os.path.join("docs", "readme.md"))


@pytest.mark.asyncio
async def test_recompute_from_captured_structure(sample_tree: Path):
    captured = (await build_structure_async(sample_tree)).to_dict()

    restored = FSNode.from_dict(captured)
    recomputed = await propagate_checksums_async(restored, str(sample_tree.parent))
    direct = await snapshot(sample_tree)

    assert recomputed.checksum == direct.checksum


def test_directory_checksum_pure_function():
    children = [
        FSNode(name="a", type=NodeType.FILE, size=0, atime=0.0, mtime=0.0, ctime=0.0, checksum="1" * 40),
    ]
    assert directory_checksum(children) == sha1(("a" + "1" * 40).encode())


def test_sync_wrapper_with_alternate_algorithm(sample_tree: Path):
    structure = FSNode.from_dict({"name": "a.txt", "type": "file", "size": 5})

    node = propagate_checksums(structure, sample_tree, algorithm="sha256")

    assert node.checksum == hashlib.sha256(b"hello").hexdigest()


@pytest.mark.asyncio
async def test_symlink_without_target_is_rejected():
    link = FSNode(name="l", type=NodeType.SYMLINK, size=0, atime=0.0, mtime=0.0, ctime=0.0)

    with pytest.raises(ValueError):
        await propagate_checksums_async(link, "/")


@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="requires unix sockets")
@pytest.mark.asyncio
async def test_socket_gets_null_checksum(tmp_path: Path):
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        sock.bind(str(tmp_path / "sock"))
        node = await snapshot(tmp_path)
    finally:
        sock.close()

    sock_node = child(node, "sock")
    assert sock_node.type is NodeType.SOCKET
    assert sock_node.checksum == "0" * 40
