import threading

from .commands import Commands

_default_commands = None
_default_lock = threading.Lock()


def default_commands():
    """Return the process-wide ``Commands`` shared by handles opened without one."""
    global _default_commands
    with _default_lock:
        if _default_commands is None or _default_commands.registry.closed:
            _default_commands = Commands()
        return _default_commands


def set_default_commands(commands):
    """Install ``commands`` as the shared default; returns the previous one."""
    global _default_commands
    with _default_lock:
        previous = _default_commands
        _default_commands = commands
        return previous


class Database:
    """Caller-side handle bound to one path, the shape host UIs use."""

    def __init__(self, path, commands):
        self.path = path
        self._commands = commands

    @classmethod
    def open(cls, path, commands=None):
        if commands is None:
            commands = default_commands()
        commands.open(path)
        return cls(path, commands)

    def execute(self, sql, values=None):
        if values is not None:
            return self._commands.execute2(self.path, sql, values)
        return self._commands.execute(self.path, sql)

    def select(self, sql, values=None):
        return self._commands.select(self.path, sql, values if values is not None else [])

    def __repr__(self):
        return f"Database({self.path!r})"
