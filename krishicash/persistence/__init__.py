"""
Persistence - Saved games.

The engine never saves by itself. The session layer calls a SaveStore
after the month ends, and loads from it at startup. Anything that fails
to load is treated as "no save exists".
"""

from .schema import (
    CURRENT_SCHEMA_VERSION,
    SaveValidationError,
    dump_save,
    dumps_save,
    load_save,
    loads_save,
    migrate,
    validate_state,
)
from .store import FileSaveStore, MemorySaveStore, SaveResult, SaveStore

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "SaveValidationError",
    "dump_save",
    "dumps_save",
    "load_save",
    "loads_save",
    "migrate",
    "validate_state",
    "FileSaveStore",
    "MemorySaveStore",
    "SaveResult",
    "SaveStore",
]
