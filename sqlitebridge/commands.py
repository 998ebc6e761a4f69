from __future__ import annotations

import dataclasses
import inspect
import logging
from typing import Any, Optional

from . import executor
from .config import BridgeConfig
from .errors import Error, InvalidArguments, UnknownCommand
from .registry import SessionRegistry

logger = logging.getLogger(__name__)

COMMANDS = ("open", "execute", "execute2", "select")


@dataclasses.dataclass(frozen=True)
class Reply:
    ok: bool
    value: Any = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        if self.ok:
            return {"ok": True, "value": self.value}
        return {"ok": False, "error": self.error}


class Commands:
    """The four operations a host application calls, keyed by database path."""

    def __init__(self, registry: Optional[SessionRegistry] = None, config: Optional[BridgeConfig] = None):
        if registry is None:
            registry = SessionRegistry(config)
        self.registry = registry

    def open(self, path: str) -> bool:
        return self.registry.open(path)

    def execute(self, path: str, sql: str) -> bool:
        with self.registry.session(path) as session:
            return executor.execute(session, sql)

    def execute2(self, path: str, sql: str, values: list) -> bool:
        with self.registry.session(path) as session:
            return executor.execute2(session, sql, values)

    def select(self, path: str, sql: str, values: list) -> list[dict[str, Any]]:
        with self.registry.session(path) as session:
            return executor.select(session, sql, values)

    def invoke(self, name: str, **args: Any) -> Reply:
        """Dispatch by command name and fold the outcome into a ``Reply``."""
        try:
            if name not in COMMANDS:
                raise UnknownCommand(name)
            command = getattr(self, name)
            try:
                inspect.signature(command).bind(**args)
            except TypeError as e:
                raise InvalidArguments(name, str(e)) from None
            for key in ("path", "sql"):
                if key in args and not isinstance(args[key], str):
                    raise InvalidArguments(name, f"{key} must be a string, got {type(args[key]).__name__}")
            value = command(**args)
        except Error as e:
            logger.debug("command %s failed: %s", name, e)
            return Reply(ok=False, error=e.to_payload())
        return Reply(ok=True, value=value)

    def close(self) -> None:
        self.registry.close()
