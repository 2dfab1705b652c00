"""Constant tensors embedded in the graph."""

from __future__ import annotations

import struct
from typing import Iterable, Sequence, Union

from ..connectors import OutputConnector
from ..datatypes import DataType, MemoryType, NodeOpcode
from ..node import Node

_PACK_FORMATS = {
    DataType.UINT8: "B",
    DataType.FLOAT32: "f",
}

ConstantData = Union[bytes, bytearray, memoryview, Iterable[float]]


def _to_bytes(dtype: DataType, data: ConstantData) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    try:
        code = _PACK_FORMATS[dtype]
    except KeyError:
        raise ValueError(f"unsupported datatype: {dtype!r}") from None
    values = list(data)
    try:
        return struct.pack(f"<{len(values)}{code}", *values)
    except struct.error as exc:
        raise ValueError(f"values do not fit {dtype.value}: {exc}") from None


class Constant(Node):
    """A tensor whose raw little-endian bytes live in constant memory.

    ``data`` is either raw bytes or an iterable of element values, which are
    packed according to ``dtype``.
    """

    opcode = NodeOpcode.CONSTANT

    def __init__(self, dtype: DataType, shape: Sequence[int], data: ConstantData) -> None:
        super().__init__()
        self._data = _to_bytes(dtype, data)
        self.add_output("output", dtype, shape, MemoryType.CONST)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)