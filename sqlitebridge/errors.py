import collections.abc
import json


class Error(Exception):
    """Base class for every failure returned across the command boundary."""

    def to_payload(self):
        # Replies carry errors as plain strings.
        return str(self)


class EngineError(Error):
    """A failure raised by SQLite while preparing, binding or stepping."""

    def __init__(self, message, *, code=None, name=None, sql=None, params=None):
        self.message = message
        self.code = code
        self.name = name
        self.sql = sql
        self.params = params
        super().__init__(self._render())

    def _render(self):
        if self.sql is None:
            return self.message
        ctx = {
            "code": self.code,
            "name": self.name,
            "sql": _safe_text(self.sql),
            "params": _format_params_for_error(self.params),
        }
        return self.message + "\nContext: " + json.dumps(ctx, ensure_ascii=False)

    @classmethod
    def from_sqlite(cls, exc, *, sql=None, params=None):
        return cls(
            str(exc),
            code=getattr(exc, "sqlite_errorcode", None),
            name=getattr(exc, "sqlite_errorname", None),
            sql=sql,
            params=params,
        )


class DatabaseNotOpened(Error):
    def __init__(self, path):
        self.path = path
        super().__init__(f"database {path} not opened")


class TypeMismatch(Error):
    def __init__(self, position, value):
        self.position = position
        self.value = value
        super().__init__(
            f"cannot bind value of type {type(value).__name__} at position {position}: "
            f"{json.dumps(_format_value_for_error(value), ensure_ascii=False)}"
        )


class RegistryUnavailable(Error):
    def __init__(self, reason="session registry is closed"):
        super().__init__(reason)


class UnknownCommand(Error):
    def __init__(self, name):
        self.command = name
        super().__init__(f"unknown command {name!r}")


class InvalidArguments(Error):
    def __init__(self, name, detail):
        self.command = name
        self.detail = detail
        super().__init__(f"invalid arguments for command {name!r}: {detail}")


def _safe_text(s):
    # Replies must stay UTF-8 encodable even when the input was not.
    return s.encode("utf-8", "backslashreplace").decode("utf-8")


def _clip(s, limit):
    s = _safe_text(s)
    return s if len(s) <= limit else s[:limit] + "…"


def _format_value_for_error(v, *, max_str=200, max_bytes=64, max_items=10, depth=2):
    if v is None or isinstance(v, bool):
        return v
    if isinstance(v, int):
        # JSON readers lose precision past 53 bits; keep the digits exact.
        return v if -(2**53) <= v <= 2**53 else str(v)
    if isinstance(v, float):
        return v
    if isinstance(v, str):
        return _clip(v, max_str)
    if isinstance(v, (bytes, bytearray, memoryview)):
        b = bytes(v)
        out = {"_type": "bytes", "len": len(b)}
        if len(b) <= max_bytes:
            out["hex"] = b.hex()
        else:
            out["hex_prefix"] = b[:max_bytes].hex()
        return out
    if depth > 0 and isinstance(v, (list, tuple, collections.abc.Mapping)):
        kw = {"max_str": max_str, "max_bytes": max_bytes, "max_items": max_items, "depth": depth - 1}
        if isinstance(v, collections.abc.Mapping):
            items = list(v.items())
            out = {_clip(str(k), max_str): _format_value_for_error(x, **kw) for k, x in items[:max_items]}
            if len(items) > max_items:
                out["_truncated"] = True
            return out
        out = [_format_value_for_error(x, **kw) for x in v[:max_items]]
        if len(v) > max_items:
            out.append("<truncated>")
        return out
    return _clip(repr(v), max_str)


def _format_params_for_error(params, *, max_items=50):
    if params is None:
        return None
    # Parameter sets are flat rows or a batch of rows, so two levels deep.
    return _format_value_for_error(params, max_items=max_items, depth=2)
