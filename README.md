# nnkit

nnkit is a small toolkit for building neural-network computation graphs,
inferring the shapes of their tensors, and laying those tensors out in memory.
It has no dependencies beyond the standard library.

## What is in it

- **Core types** (`nnkit.datatypes`): `DataType`, `MemoryType`, `NodeOpcode`,
  `NodeAttributes`, the operator enums `BinaryOp`, `UnaryOp`, `ReduceOp` and
  `ImageResizeMode`, and the value types `Padding`, `ValueRange` and
  `QuantParam`. `element_size()` gives the byte size of a data type,
  `node_opcode_name()` the display name of an opcode, and `shape_to_string()`
  formats a shape such as `1x3x4x4`.
- **Connectors** (`nnkit.connectors`): `InputConnector` and `OutputConnector`
  are typed, shaped ports. An input is fed by at most one output; an output may
  feed many inputs. Connecting ports whose data types or shapes differ raises
  `ValueError`.
- **Nodes** (`nnkit.node`): the `Node` base class and the boundary nodes
  `InputNode`, `OutputNode` and `IgnoreNode`.
- **Graphs** (`nnkit.graph`): `Graph.emplace()` adds a node,
  `Graph.assign_names()` gives every node a unique name (such as `binary_0`),
  and `Graph.collect()` disconnects and drops nodes the outputs do not depend
  on.
- **Traversal** (`nnkit.visitor`): `DfsIRVisitor` walks from the outputs back
  to their producers, visiting each node after the nodes that feed it;
  `make_relay_ir_visitor()` wraps a callback. `try_get_direct_child()`,
  `try_get_direct_parent()` and `node_cast()` find neighbours or cast by opcode.
- **Operators** with shape inference:
  - `nnkit.ops.arith`: `Binary` (with broadcasting), `Unary`, `MatMul`
  - `nnkit.ops.conv`: `Conv2D`, `ReduceWindow2D`
  - `nnkit.ops.quant`: `Quantize`, `Dequantize`, `FakeQuantize`, `FakeDequantize`
  - `nnkit.ops.constant`: `Constant`, holding raw little-endian bytes in
    constant memory
  - `nnkit.ops.kpu`: `KpuUpload`, `KpuDownload`, moving uint8 data between main
    and KPU memory
  - `nnkit.ops.shape`: `Concat`, `Pad`, `Reshape`, `Transpose`,
    `StridedSlice`, `ResizeImage`, `Reduce`
- **Shape helpers** (`nnkit.op_utils`): broadcasting, windowed output sizes
  and paddings, reshape and strided-slice normalisation, concatenation and
  padding shapes, and extension of shapes to rank 4.
- **Memory scheduling**:
  - `nnkit.freelist.Freelist`: a first-fit free list over a fixed region
    (raising `OutOfMemoryError` when full) or over a heap that grows on demand.
  - `nnkit.memory_allocator`: `MemoryAllocator` and `MainMemoryAllocator` hand
    out aligned, reference-counted `MemoryNode` blocks; `MemoryAllocation`
    records where a tensor was placed.
  - `nnkit.scheduler`: `schedule()` orders the graph for execution and gives
    each output connector memory through an `AllocationContext`, releasing a
    tensor's memory once its consumers have run. Graph inputs and constants
    keep their memory. `register_input_allocator()` lets nodes of a given
    opcode place the tensors they consume themselves.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from nnkit.datatypes import BinaryOp, DataType, MemoryType, ValueRange
from nnkit.graph import Graph
from nnkit.memory_allocator import MainMemoryAllocator
from nnkit.node import InputNode, OutputNode
from nnkit.ops.arith import Binary
from nnkit.scheduler import AllocationContext, schedule

shape = [1, 3, 4, 4]
graph = Graph()
a = graph.emplace(InputNode(DataType.FLOAT32, shape))
b = graph.emplace(InputNode(DataType.FLOAT32, shape))
add = graph.emplace(
    Binary(BinaryOp.ADD, shape, shape, ValueRange(float("-inf"), float("inf")))
)
out = graph.emplace(OutputNode(DataType.FLOAT32, shape))

add.input_a.connect(a.output)
add.input_b.connect(b.output)
out.input.connect(add.output)

graph.assign_names()

allocator = MainMemoryAllocator()
context = AllocationContext({MemoryType.MAIN: allocator})
sequence = schedule(graph.outputs, context)

for node in sequence:
    print(node.name, [context.allocations[o] for o in node.outputs])
print("peak memory:", allocator.max_usage)
```

## What it does not do

nnkit describes graphs and plans their memory; it does not compute anything.
There are no kernels that evaluate the operators, no model file reader or
writer, no runtime interpreter, and no command-line tool. The KPU nodes only
describe data movement between memory regions; there is no KPU convolution
node and no allocator specific to KPU memory.