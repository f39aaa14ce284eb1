"""JSON helpers shared by scenario files, snapshots and the front ends."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union


Message = Dict[str, Any]
ENCODING = "utf-8"


class ProtocolError(RuntimeError):
    pass


def encode(message: Message) -> bytes:
    """Serialize a message to compact JSON bytes with a trailing newline."""

    return (json.dumps(message, separators=(",", ":")) + "\n").encode(ENCODING)


def decode(payload: bytes) -> Message:
    """Parse bytes into a Python dictionary."""

    try:
        message = json.loads(payload.decode(ENCODING))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ProtocolError("Malformed payload") from exc

    if not isinstance(message, dict):
        raise ProtocolError(f"Expected a JSON object, got {type(message).__name__}")
    return message


def read_file(path: Union[str, Path]) -> Message:
    """Read and decode a JSON object from ``path``."""

    return decode(Path(path).read_bytes())


def write_file(path: Union[str, Path], message: Message) -> None:
    Path(path).write_bytes(encode(message))
