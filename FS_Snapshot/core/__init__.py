# Auto-generated __init__.py

from . import checksum
from .checksum import directory_checksum
from .checksum import propagate_checksums
from .checksum import propagate_checksums_async
from . import errors
from .errors import ConfigError
from .errors import IOFailure
from .errors import NotFoundError
from .errors import PermissionDeniedError
from .errors import SnapshotError
from . import fs
from . import hashing
from .hashing import null_checksum
from . import models
from .models import FSNode
from .models import NodeType
from .models import build_node
from .models import stats_type
from . import reader
from .reader import read
from .reader import read_async
from .reader import read_interleaved_async
from . import structure
from .structure import build_structure
from .structure import build_structure_async
from . import tasks
from .tasks import map_concurrently

__all__ = [
    "checksum",
    "errors",
    "fs",
    "hashing",
    "models",
    "reader",
    "structure",
    "tasks",
    "ConfigError",
    "FSNode",
    "IOFailure",
    "NodeType",
    "NotFoundError",
    "PermissionDeniedError",
    "SnapshotError",
    "build_node",
    "build_structure",
    "build_structure_async",
    "directory_checksum",
    "map_concurrently",
    "null_checksum",
    "propagate_checksums",
    "propagate_checksums_async",
    "read",
    "read_async",
    "read_interleaved_async",
    "stats_type",
]
