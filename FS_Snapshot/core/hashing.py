import hashlib
from typing import BinaryIO, Iterable, Tuple

from .errors import ConfigError

# sha1 matches the `shasum` command line default
DEFAULT_ALGORITHM = "sha1"
DEFAULT_CHUNK_SIZE = 64 * 1024

# Names and link targets may hold undecodable bytes
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def new_hash(algorithm: str = DEFAULT_ALGORITHM):
    try:
        h = hashlib.new(algorithm)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"Unsupported hash algorithm: {algorithm!r}") from exc

    # shake_* and friends have no fixed digest length
    if h.digest_size == 0 or algorithm.lower().startswith("shake"):
        raise ConfigError(f"Hash algorithm must have a fixed digest size: {algorithm!r}")
    return h


def check_algorithm(algorithm: str) -> str:
    new_hash(algorithm)
    return algorithm


def null_checksum(algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Sentinel checksum for nodes without content semantics.

    All zeros, the same width as a real hex digest (40 chars for sha1).
    """
    return "0" * (new_hash(algorithm).digest_size * 2)


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


def digest_text(text: str, algorithm: str = DEFAULT_ALGORITHM) -> str:
    h = new_hash(algorithm)
    h.update(encode_text(text))
    return h.hexdigest()


def digest_stream(
    stream: BinaryIO,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    h = new_hash(algorithm)
    for chunk in iter(lambda: stream.read(chunk_size), b""):
        h.update(chunk)
    return h.hexdigest()


def aggregate_children(
    entries: Iterable[Tuple[str, str]],
    algorithm: str = DEFAULT_ALGORITHM,
) -> str:
    """
    Digest of a directory from its children's (name, checksum) pairs.

    The pairs are taken in the order given; callers pass them sorted by
    name. An empty directory hashes the empty string.
    """
    lines = [name + checksum for name, checksum in entries]
    return digest_text("\n".join(lines), algorithm)
