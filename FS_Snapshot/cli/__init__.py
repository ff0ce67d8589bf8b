# Auto-generated __init__.py

from . import snapshot
from .snapshot import load_settings
from .snapshot import run
from .snapshot import validate_settings

__all__ = [
    "snapshot",
    "load_settings",
    "run",
    "validate_settings",
]
