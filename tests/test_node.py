import pytest

from nnkit.datatypes import DataType, MemoryType, NodeAttributes, NodeOpcode
from nnkit.node import IgnoreNode, InputNode, Node, OutputNode

SHAPE = (1, 8)


class TwoPorts(Node):
    opcode = NodeOpcode.BINARY

    def __init__(self):
        super().__init__()
        self.add_input("input_a", DataType.FLOAT32, SHAPE)
        self.add_input("input_b", DataType.FLOAT32, SHAPE)
        self.add_output("output", DataType.FLOAT32, SHAPE)


def test_base_node_without_opcode_cannot_be_built():
    with pytest.raises(TypeError):
        Node()


def test_input_node_has_single_output():
    node = InputNode(DataType.UINT8, SHAPE)
    assert len(node.outputs) == 1
    assert node.inputs == ()
    assert node.output is node.output_at(0)
    assert node.output.name == "output"
    assert node.output.dtype is DataType.UINT8
    assert node.output.shape == SHAPE
    assert node.output.memory_type is MemoryType.MAIN
    assert node.output.owner is node


def test_input_node_memory_type():
    node = InputNode(DataType.UINT8, SHAPE, MemoryType.K210_KPU)
    assert node.output.memory_type is MemoryType.K210_KPU


def test_output_node_has_single_input():
    node = OutputNode(DataType.FLOAT32, SHAPE)
    assert node.outputs == ()
    assert node.input is node.input_at(0)
    assert node.input.name == "input"
    assert node.input.owner is node


def test_opcodes():
    assert InputNode(DataType.FLOAT32, SHAPE).runtime_opcode is NodeOpcode.INPUT_NODE
    assert OutputNode(DataType.FLOAT32, SHAPE).runtime_opcode is NodeOpcode.OUTPUT_NODE
    assert IgnoreNode(DataType.FLOAT32, SHAPE).runtime_opcode is NodeOpcode.IGNORE_NODE
    assert TwoPorts().runtime_opcode is NodeOpcode.BINARY


def test_attributes():
    assert IgnoreNode(DataType.FLOAT32, SHAPE).attributes is NodeAttributes.ACTION
    assert InputNode(DataType.FLOAT32, SHAPE).attributes is NodeAttributes.NONE
    assert OutputNode(DataType.FLOAT32, SHAPE).attributes is NodeAttributes.NONE


def test_ports_keep_order():
    node = OutputNode(DataType.FLOAT32, SHAPE)
    extra = node.add_input("extra", DataType.FLOAT32, SHAPE)
    assert [conn.name for conn in node.inputs] == ["input", "extra"]
    assert node.input_at(1) is extra
    assert node.input_at(1) is node.inputs[1]


@pytest.mark.parametrize("index", [1, -1])
def test_input_at_out_of_range(index):
    node = OutputNode(DataType.FLOAT32, SHAPE)
    with pytest.raises(IndexError):
        node.input_at(index)


@pytest.mark.parametrize("index", [1, -1])
def test_output_at_out_of_range(index):
    node = InputNode(DataType.FLOAT32, SHAPE)
    with pytest.raises(IndexError):
        node.output_at(index)


def test_name_defaults_empty_and_is_settable():
    node = InputNode(DataType.FLOAT32, SHAPE)
    assert node.name == ""
    node.name = "join"
    assert node.name == "join"


def test_add_output_returns_registered_connector():
    node = InputNode(DataType.FLOAT32, SHAPE)
    extra = node.add_output("extra", DataType.UINT8, (4,), MemoryType.CONST)
    assert node.output_at(1) is extra
    assert extra.memory_type is MemoryType.CONST
    assert extra.owner is node