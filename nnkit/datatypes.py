"""Core value types shared by the IR, the scheduler and the runtime."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag, auto
from typing import Iterable


class DataType(Enum):
    """Element types a tensor can hold."""

    UINT8 = "uint8"
    FLOAT32 = "float32"


_ELEMENT_SIZES = {
    DataType.UINT8: 1,
    DataType.FLOAT32: 4,
}


def element_size(dtype: DataType) -> int:
    """Return the size in bytes of one element of ``dtype``."""
    try:
        return _ELEMENT_SIZES[dtype]
    except KeyError:
        raise ValueError(f"unsupported datatype: {dtype!r}") from None


class MemoryType(Enum):
    """Memory region a tensor lives in."""

    CONST = "const"
    MAIN = "main"
    K210_KPU = "k210_kpu"


class NodeOpcode(IntEnum):
    """Opcodes of the IR node kinds."""

    INPUT_NODE = auto()
    OUTPUT_NODE = auto()
    IGNORE_NODE = auto()
    CONSTANT = auto()
    CONV2D = auto()
    MATMUL = auto()
    BINARY = auto()
    UNARY = auto()
    CONCAT = auto()
    REDUCE = auto()
    REDUCE_WINDOW2D = auto()
    PAD = auto()
    RESHAPE = auto()
    TRANSPOSE = auto()
    STRIDED_SLICE = auto()
    RESIZE_IMAGE = auto()
    QUANTIZE = auto()
    DEQUANTIZE = auto()
    FAKE_QUANTIZE = auto()
    FAKE_DEQUANTIZE = auto()
    K210_KPU_UPLOAD = auto()
    K210_KPU_DOWNLOAD = auto()
    K210_KPU_CONV2D = auto()
    K210_FAKE_KPU_CONV2D = auto()
    K210_FAKE_PIECEWISE_LINEAR = auto()


_TARGET_PREFIX = "K210_"


def node_opcode_name(opcode: NodeOpcode | int) -> str:
    """Return the display name of an opcode; raise ValueError for unknown ones."""
    try:
        op = NodeOpcode(opcode)
    except ValueError:
        raise ValueError("invalid opcode") from None
    name = op.name
    if name.startswith(_TARGET_PREFIX):
        name = name[len(_TARGET_PREFIX):]
    return name.lower()


class NodeAttributes(IntFlag):
    """Attribute flags carried by a node."""

    NONE = 0
    ACTION = 1


class BinaryOp(Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MIN = "min"
    MAX = "max"


class UnaryOp(Enum):
    ABS = "abs"
    CEIL = "ceil"
    COS = "cos"
    EXP = "exp"
    FLOOR = "floor"
    LOG = "log"
    NEG = "neg"
    RSQRT = "rsqrt"
    SIN = "sin"
    SQUARE = "square"


class ReduceOp(Enum):
    MEAN = "mean"
    MIN = "min"
    MAX = "max"
    SUM = "sum"


class ImageResizeMode(Enum):
    BILINEAR = "bilinear"
    NEAREST_NEIGHBOR = "nearest_neighbor"


@dataclass(frozen=True)
class Padding:
    """Padding applied before and after one dimension."""

    before: int
    after: int

    def sum(self) -> int:
        return self.before + self.after

    @classmethod
    def zero(cls) -> "Padding":
        return cls(0, 0)


@dataclass(frozen=True)
class ValueRange:
    """Inclusive clamp range, used for fused activations."""

    min: float
    max: float


@dataclass(frozen=True)
class QuantParam:
    """Affine quantization parameters."""

    zero_point: int
    scale: float


def shape_to_string(shape: Iterable[int]) -> str:
    """Format a shape as dimensions joined by ``x``."""
    return "x".join(str(dim) for dim in shape)