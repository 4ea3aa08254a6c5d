from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class TextPayload:
    text: str
    encoding: str = "utf-8"

    def to_bytes(self) -> bytes:
        return self.text.encode(self.encoding)


@dataclass(frozen=True)
class BinaryPayload:
    data: bytes

    def to_bytes(self) -> bytes:
        return bytes(self.data)


Payload = Union[TextPayload, BinaryPayload]


def as_payload(data: Union[Payload, str, bytes, bytearray, memoryview]) -> Payload:
    """Wrap raw ``str``/``bytes`` in the matching payload variant."""
    if isinstance(data, (TextPayload, BinaryPayload)):
        return data
    if isinstance(data, str):
        return TextPayload(data)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return BinaryPayload(bytes(data))
    raise TypeError(f"Unsupported payload type: {type(data).__name__}")
