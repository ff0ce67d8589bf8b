import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from FS_Snapshot.core import hashing
from FS_Snapshot.core.checksum import propagate_checksums_async
from FS_Snapshot.core.errors import ConfigError
from FS_Snapshot.core.models import FSNode
from FS_Snapshot.core.reader import read_async, read_interleaved_async
from FS_Snapshot.core.structure import build_structure_async
from FS_Snapshot.paths import default_settings_path

logger = logging.getLogger(__name__)


# ----------------------------
# Settings
# ----------------------------

DEFAULT_SETTINGS = {
    "checksum": {
        "algorithm": hashing.DEFAULT_ALGORITHM,
        "chunk_size": hashing.DEFAULT_CHUNK_SIZE,
    },
    "output": {
        "indent": 2,
        "mode": "two_phase",  # or "interleaved"
    },
    "logging": {"level": "WARNING"},
}

OUTPUT_MODES = ("two_phase", "interleaved")


def load_settings(settings_path: Optional[Path] = None) -> Dict[str, Any]:
    path = Path(settings_path) if settings_path is not None else default_settings_path()

    merged = json.loads(json.dumps(DEFAULT_SETTINGS))
    if not path.exists():
        return merged

    try:
        with open(path, "r", encoding="utf-8") as f:
            user_settings = json.load(f)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not load settings from {path}: {exc}", path=str(path)) from exc

    if not isinstance(user_settings, dict):
        raise ConfigError(f"Settings in {path} must be a JSON object", path=str(path))

    for k, v in user_settings.items():
        if k in merged and not isinstance(v, dict):
            raise ConfigError(f"Settings section {k!r} in {path} must be a JSON object", path=str(path))
        if k in merged:
            merged[k].update(v)
        else:
            merged[k] = v

    return merged


def validate_settings(settings: Dict[str, Any]) -> Dict[str, Any]:
    checksum = settings["checksum"]
    hashing.check_algorithm(checksum["algorithm"])

    chunk_size = checksum["chunk_size"]
    if not isinstance(chunk_size, int) or isinstance(chunk_size, bool) or chunk_size <= 0:
        raise ConfigError(f"checksum.chunk_size must be a positive integer, got {chunk_size!r}")

    mode = settings["output"]["mode"]
    if mode not in OUTPUT_MODES:
        raise ConfigError(f"output.mode must be one of {', '.join(OUTPUT_MODES)}, got {mode!r}")

    level = settings["logging"]["level"]
    if not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ConfigError(f"Unknown logging.level: {level!r}")

    return settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=str(level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ----------------------------
# Output
# ----------------------------

def dump_node(node: FSNode, indent: Optional[int] = 2) -> str:
    return json.dumps(node.to_dict(), indent=indent, ensure_ascii=False)


def load_structure(path: Path) -> FSNode:
    try:
        with open(path, "r", encoding="utf-8") as f:
            record = json.load(f)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Could not load structure from {path}: {exc}", path=str(path)) from exc

    if not isinstance(record, dict):
        raise ConfigError(f"Structure in {path} must be a JSON object", path=str(path))

    try:
        return FSNode.from_dict(record)
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ConfigError(f"Malformed structure in {path}: {exc}", path=str(path)) from exc


# ----------------------------
# CLI Orchestrator
# ----------------------------

async def run(
    *,
    path=None,
    settings: Optional[Dict[str, Any]] = None,
    algorithm: Optional[str] = None,
    chunk_size: Optional[int] = None,
    interleaved: Optional[bool] = None,
    structure_only: bool = False,
    from_structure: Optional[Path] = None,
    parent=None,
    output: Optional[Path] = None,
    indent: Optional[int] = None,
    stream=None,
) -> FSNode:
    """
    Snapshot `path` (or re-checksum a captured structure) and write JSON.

    Explicit arguments override the matching settings.
    """
    settings = settings if settings is not None else load_settings()

    # --- Apply overrides ---
    if algorithm is not None:
        settings["checksum"]["algorithm"] = algorithm
    if chunk_size is not None:
        settings["checksum"]["chunk_size"] = chunk_size
    if interleaved is not None:
        settings["output"]["mode"] = "interleaved" if interleaved else "two_phase"
    if indent is not None:
        settings["output"]["indent"] = indent
    validate_settings(settings)
    # -----------------------

    algorithm = settings["checksum"]["algorithm"]
    chunk_size = settings["checksum"]["chunk_size"]

    if from_structure is not None:
        structure = load_structure(Path(from_structure))
        if parent is None:
            parent = os.path.dirname(os.path.normpath(os.fspath(path))) if path is not None else os.curdir
        logger.info("Re-checksumming captured structure %s against %s", from_structure, parent)
        node = await propagate_checksums_async(
            structure,
            parent,
            algorithm=algorithm,
            chunk_size=chunk_size,
        )
    elif path is None:
        raise ConfigError("A path is required unless --from-structure is given")
    elif structure_only:
        node = await build_structure_async(path)
    elif settings["output"]["mode"] == "interleaved":
        node = await read_interleaved_async(path, algorithm=algorithm, chunk_size=chunk_size)
    else:
        node = await read_async(path, algorithm=algorithm, chunk_size=chunk_size)

    text = dump_node(node, settings["output"]["indent"])
    if output is not None:
        Path(output).write_text(text + "\n", encoding="utf-8")
        logger.info("Wrote snapshot to %s", output)
    else:
        out = stream if stream is not None else sys.stdout
        out.write(text + "\n")

    return node
