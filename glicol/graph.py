"""Audio graph with stable node indices and the processor that renders it."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field

from .buffer import Buffer


@dataclass
class Input:
    """The buffers of one node feeding another, with that node's index."""

    buffers: list[Buffer]
    node_id: int


class Node(ABC):
    """A unit of audio processing."""

    last_message: object = None

    @abstractmethod
    def process(self, inputs: dict[int, Input], output: list[Buffer]) -> None:
        """Fill ``output`` from ``inputs``, keyed by the index of each input node."""

    def send_msg(self, msg: object) -> None:
        """Receive a message; by default only the latest one is kept."""
        self.last_message = msg


@dataclass
class NodeData:
    """A node together with the output buffers it renders into."""

    node: Node
    buffers: list[Buffer] = field(default_factory=list)


def _source_for_channel(buffers: list[Buffer], channel: int) -> Buffer | None:
    if len(buffers) == 1:
        return buffers[0]
    if channel < len(buffers):
        return buffers[channel]
    return None


class Pass(Node):
    """Copy the first input to the output; with no input, leave the output as is.

    A mono input is copied to every output channel.
    """

    def process(self, inputs: dict[int, Input], output: list[Buffer]) -> None:
        source = next(iter(inputs.values()), None)
        if source is None:
            return
        for channel, out in enumerate(output):
            buf = _source_for_channel(source.buffers, channel)
            if buf is not None:
                out[:] = buf


class Sum2(Node):
    """Sum every input into the output; a mono input feeds every channel."""

    def process(self, inputs: dict[int, Input], output: list[Buffer]) -> None:
        for channel, out in enumerate(output):
            out.silence()
            for source in inputs.values():
                buf = _source_for_channel(source.buffers, channel)
                if buf is not None:
                    out[:] = [a + b for a, b in zip(out, buf)]


class StableGraph:
    """Directed multigraph whose node indices stay valid when others are removed.

    Indices of removed nodes and edges are reused, the most recently freed first.
    """

    def __init__(self) -> None:
        self._nodes: dict[int, NodeData] = {}
        self._edges: dict[int, tuple[int, int]] = {}
        self._incoming: dict[int, list[int]] = {}
        self._free_nodes: list[int] = []
        self._free_edges: list[int] = []
        self._node_bound = 0
        self._edge_bound = 0

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, index: object) -> bool:
        return index in self._nodes

    def __getitem__(self, index: int) -> NodeData:
        try:
            return self._nodes[index]
        except KeyError:
            raise KeyError(f"no node exists for index {index}") from None

    def add_node(self, data: NodeData) -> int:
        """Add a node and return its index."""
        if self._free_nodes:
            index = self._free_nodes.pop()
        else:
            index = self._node_bound
            self._node_bound += 1
        self._nodes[index] = data
        self._incoming[index] = []
        return index

    def remove_node(self, index: int) -> NodeData | None:
        """Remove a node and its edges; return its data, or None if it is absent."""
        data = self._nodes.pop(index, None)
        if data is None:
            return None
        for edge, (source, target) in list(self._edges.items()):
            if index in (source, target):
                self._remove_edge(edge)
        del self._incoming[index]
        self._free_nodes.append(index)
        return data

    def _remove_edge(self, edge: int) -> None:
        _, target = self._edges.pop(edge)
        incoming = self._incoming.get(target)
        if incoming is not None:
            incoming.remove(edge)
        self._free_edges.append(edge)

    def add_edge(self, source: int, target: int) -> int:
        """Add an edge from ``source`` to ``target`` and return its index."""
        for index in (source, target):
            if index not in self._nodes:
                raise KeyError(f"no node exists for index {index}")
        if self._free_edges:
            edge = self._free_edges.pop()
        else:
            edge = self._edge_bound
            self._edge_bound += 1
        self._edges[edge] = (source, target)
        self._incoming[target].append(edge)
        return edge

    def clear_edges(self) -> None:
        """Remove every edge and keep the nodes."""
        self._edges.clear()
        self._free_edges.clear()
        self._edge_bound = 0
        for incoming in self._incoming.values():
            incoming.clear()

    def clear(self) -> None:
        """Remove every node and edge."""
        self._nodes.clear()
        self._incoming.clear()
        self._free_nodes.clear()
        self._node_bound = 0
        self.clear_edges()

    def neighbors_incoming(self, index: int) -> list[int]:
        """Sources of the edges into ``index``, the newest edge first."""
        return [self._edges[edge][0] for edge in reversed(self._incoming.get(index, []))]

    def node_weights(self) -> Iterator[NodeData]:
        """The data of every node, in index order."""
        for index in sorted(self._nodes):
            yield self._nodes[index]


def _post_order(graph: StableGraph, start: int) -> Iterator[int]:
    """Depth-first post order over the edges reversed, starting at ``start``."""
    discovered: set[int] = set()
    finished: set[int] = set()
    stack = [start]
    while stack:
        current = stack[-1]
        if current not in discovered:
            discovered.add(current)
            stack.extend(
                source
                for source in graph.neighbors_incoming(current)
                if source not in discovered
            )
        else:
            stack.pop()
            if current not in finished:
                finished.add(current)
                yield current


class Processor:
    """Renders a graph by processing every node upstream of a target node."""

    def __init__(self, max_nodes: int = 1024) -> None:
        self.max_nodes = max_nodes
        self.inputs: dict[int, Input] = {}

    def process(self, graph: StableGraph, node: int) -> None:
        """Process ``node`` after every node it depends on."""
        process(self, graph, node)


def process(processor: Processor, graph: StableGraph, node: int) -> None:
    """Process ``node`` of ``graph`` after every node it depends on."""
    if node not in graph:
        raise KeyError(f"no node exists for index {node}")
    for current in _post_order(graph, node):
        processor.inputs.clear()
        for source in graph.neighbors_incoming(current):
            if source == current:
                continue
            processor.inputs[source] = Input(graph[source].buffers, source)
        data = graph[current]
        data.node.process(processor.inputs, data.buffers)