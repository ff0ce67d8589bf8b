# Auto-generated __init__.py

from . import conftest
from .conftest import isolated_config_dir
from .conftest import sample_tree
from . import test_checksum
from . import test_cli
from . import test_hashing
from . import test_models
from . import test_reader
from . import test_structure
from . import test_tasks

__all__ = [
    "conftest",
    "test_checksum",
    "test_cli",
    "test_hashing",
    "test_models",
    "test_reader",
    "test_structure",
    "test_tasks",
    "isolated_config_dir",
    "sample_tree",
]
