"""Conversion between boundary values and SQLite values.

Outbound, every bind value resolves to exactly one ``ValueKind``; booleans
are bound as INTEGER 0/1 because SQLite has no boolean storage class.
Inbound, BLOB cells come back as a list of byte values rather than
``bytes`` so results stay JSON-serializable for the host.
"""
import enum
import logging

from .errors import TypeMismatch

logger = logging.getLogger(__name__)

INT64_MIN = -9223372036854775808
INT64_MAX = 9223372036854775807


class ValueKind(enum.IntEnum):
    NULL = 0
    BOOLEAN = 1
    INTEGER = 2
    FLOAT = 3
    STRING = 4
    BINARY = 5


def kind_of(value):
    """Return the ``ValueKind`` of ``value`` or ``None`` if it has no kind."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first.
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        if value < INT64_MIN or value > INT64_MAX:
            return None
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        # TEXT is stored as UTF-8; lone surrogates have no encoding.
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return None
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BINARY
    return None


def encode(value, position, strict=True):
    """Convert one boundary value into the object bound at ``position`` (1-based).

    Unrecognized values raise ``TypeMismatch`` when ``strict``; otherwise the
    position is bound as NULL, which is what SQLite does with an unbound
    parameter.
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return None
    if kind is ValueKind.BOOLEAN:
        return 1 if value else 0
    if kind is ValueKind.INTEGER:
        return int(value)
    if kind is ValueKind.FLOAT:
        return float(value)
    if kind is ValueKind.STRING:
        return str(value)
    if kind is ValueKind.BINARY:
        return bytes(value)
    if strict:
        raise TypeMismatch(position, value)
    logger.warning(
        "leaving parameter %d unbound, unsupported type %s", position, type(value).__name__
    )
    return None


def encode_row(values, strict=True):
    return tuple(encode(v, i + 1, strict) for i, v in enumerate(values))


def decode(cell):
    if cell is None:
        return None
    if isinstance(cell, float):
        return cell
    if isinstance(cell, int):
        return cell
    if isinstance(cell, str):
        return cell
    if isinstance(cell, (bytes, bytearray, memoryview)):
        return list(bytes(cell))
    return None


def decode_row(names, cells):
    row = {}
    # Duplicate column names collapse, the last column wins.
    for name, cell in zip(names, cells):
        row[name] = decode(cell)
    return row


def is_batch(values):
    """A parameter set is a batch when its first element is itself a sequence."""
    return len(values) > 0 and isinstance(values[0], (list, tuple))
