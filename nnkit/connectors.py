"""Typed connection points through which IR nodes are wired together."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from .datatypes import DataType, MemoryType, shape_to_string

if TYPE_CHECKING:
    from .node import Node


@dataclass(frozen=True, eq=False)
class Connection:
    """An edge from an output connector to an input connector."""

    source: OutputConnector
    target: InputConnector


class BaseConnector:
    """A named, typed and shaped port owned by a node."""

    def __init__(self, owner: Node, name: str, dtype: DataType, shape: Iterable[int]) -> None:
        self._owner = owner
        self._name = name
        self._dtype = dtype
        self._shape = tuple(int(dim) for dim in shape)

    @property
    def owner(self) -> Node:
        return self._owner

    @property
    def name(self) -> str:
        return self._name

    @property
    def dtype(self) -> DataType:
        return self._dtype

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self._name!r}, dtype={self._dtype.value}, "
            f"shape=[{shape_to_string(self._shape)}])"
        )


class InputConnector(BaseConnector):
    """A port that receives data from at most one output connector."""

    def __init__(self, owner: Node, name: str, dtype: DataType, shape: Iterable[int]) -> None:
        super().__init__(owner, name, dtype, shape)
        self._connection: OutputConnector | None = None

    @property
    def connection(self) -> OutputConnector | None:
        """The output connector feeding this input, if any."""
        return self._connection

    def connect(self, connector: OutputConnector) -> None:
        """Attach this input to ``connector``, replacing any earlier source."""
        if self.dtype != connector.dtype:
            raise ValueError("Type must be same")
        if self.shape != connector.shape:
            raise ValueError(
                f"Shapes must be same, but got [{shape_to_string(self.shape)}] "
                f"and [{shape_to_string(connector.shape)}]"
            )
        if self._connection is not connector:
            self.clear_connection()
            self._connection = connector
            connector.connect(self)

    def clear_connection(self) -> None:
        """Detach this input from its source, if it has one."""
        source = self._connection
        if source is not None:
            self._connection = None
            source.disconnect(self)


class OutputConnector(BaseConnector):
    """A port whose data may feed any number of input connectors."""

    def __init__(
        self,
        owner: Node,
        name: str,
        dtype: DataType,
        shape: Iterable[int],
        memory_type: MemoryType = MemoryType.MAIN,
    ) -> None:
        super().__init__(owner, name, dtype, shape)
        self._memory_type = memory_type
        self._connections: list[InputConnector] = []

    @property
    def memory_type(self) -> MemoryType:
        return self._memory_type

    @property
    def connections(self) -> tuple[InputConnector, ...]:
        """The inputs this output feeds, in the order they were attached."""
        return tuple(self._connections)

    def connect(self, connector: InputConnector) -> None:
        """Feed ``connector`` from this output."""
        if not any(existing is connector for existing in self._connections):
            self._connections.append(connector)
            connector.connect(self)

    def disconnect(self, connector: InputConnector) -> None:
        """Stop feeding ``connector``."""
        self._connections = [existing for existing in self._connections if existing is not connector]
        connector.clear_connection()

    def clear_connections(self) -> None:
        """Detach every input fed by this output."""
        connections, self._connections = self._connections, []
        for connector in connections:
            connector.clear_connection()