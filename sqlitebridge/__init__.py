from .errors import (
    Error, EngineError, DatabaseNotOpened, TypeMismatch,
    RegistryUnavailable, UnknownCommand, InvalidArguments,
)
from .codec import ValueKind, kind_of, encode, decode
from .config import BridgeConfig
from .registry import Session, SessionRegistry
from .commands import Commands, Reply
from .client import Database, default_commands, set_default_commands

__version__ = "0.1.0"

# Positional ``?`` placeholders, as SQLite prepares them.
paramstyle = "qmark"

__all__ = [
    "Error", "EngineError", "DatabaseNotOpened", "TypeMismatch",
    "RegistryUnavailable", "UnknownCommand", "InvalidArguments",
    "ValueKind", "kind_of", "encode", "decode",
    "BridgeConfig", "Session", "SessionRegistry",
    "Commands", "Reply", "Database", "default_commands", "set_default_commands",
]
