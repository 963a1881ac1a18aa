"""Audio context: a graph with a destination node, and its builder."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from itertools import pairwise

from .buffer import Buffer
from .graph import Node, NodeData, Pass, Processor, StableGraph, Sum2
from .messages import Index, IndexOrder

DEFAULT_BLOCK_SIZE = 128


@dataclass
class AudioContextConfig:
    """Settings of an :class:`AudioContext`."""

    sr: int = 44100
    channels: int = 2
    max_nodes: int = 1024
    max_edges: int = 1024


def _node_data(node: Node, channels: int, block_size: int) -> NodeData:
    return NodeData(node, [Buffer(block_size) for _ in range(channels)])


class AudioContextBuilder:
    """Builds an :class:`AudioContext`; every setter returns a new builder."""

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        self._block_size = block_size
        self._config = AudioContextConfig()

    def _with(self, **changes: int) -> AudioContextBuilder:
        builder = copy.copy(self)
        builder._config = AudioContextConfig(**{**vars(self._config), **changes})
        return builder

    def sr(self, sr: int) -> AudioContextBuilder:
        return self._with(sr=sr)

    def channels(self, channels: int) -> AudioContextBuilder:
        return self._with(channels=channels)

    def max_nodes(self, max_nodes: int) -> AudioContextBuilder:
        return self._with(max_nodes=max_nodes)

    def max_edges(self, max_edges: int) -> AudioContextBuilder:
        return self._with(max_edges=max_edges)

    def build(self) -> AudioContext:
        return AudioContext(AudioContextConfig(**vars(self._config)), self._block_size)


class AudioContext:
    """A graph whose output is summed into a destination node."""

    def __init__(
        self,
        config: AudioContextConfig | None = None,
        block_size: int = DEFAULT_BLOCK_SIZE,
    ) -> None:
        self.config = config if config is not None else AudioContextConfig()
        self.block_size = block_size
        self.graph = StableGraph()
        self.processor = Processor(self.config.max_nodes)
        self.tags: dict[str, int] = {}
        self.destination, self.input = self._add_endpoints()

    def _add_endpoints(self) -> tuple[int, int]:
        channels = self.config.channels
        destination = self.graph.add_node(_node_data(Sum2(), channels, self.block_size))
        input_index = self.graph.add_node(_node_data(Pass(), channels, self.block_size))
        return destination, input_index

    def reset(self) -> None:
        """Remove every node and recreate the destination and input nodes."""
        self.graph.clear()
        self.destination, self.input = self._add_endpoints()

    def add_mono_node(self, node: Node) -> int:
        return self.add_multi_chan_node(1, node)

    def add_stereo_node(self, node: Node) -> int:
        return self.add_multi_chan_node(2, node)

    def add_multi_chan_node(self, chan: int, node: Node) -> int:
        return self.graph.add_node(_node_data(node, chan, self.block_size))

    def connect(self, source: int, target: int) -> int:
        """Connect two nodes and tell the target about its new input."""
        edge = self.graph.add_edge(source, target)
        self.graph[target].node.send_msg(Index(source))
        return edge

    def connect_with_order(self, source: int, target: int, pos: int) -> int:
        """Connect two nodes, telling the target which input ``source`` is."""
        edge = self.graph.add_edge(source, target)
        self.graph[target].node.send_msg(IndexOrder(pos, source))
        return edge

    def chain(self, chain: list[int]) -> list[int]:
        """Connect each node to the next one; return the new edges."""
        return [self.connect(source, target) for source, target in pairwise(chain)]

    def chain_boxed(self, chain: list[NodeData]) -> tuple[list[int], list[int]]:
        """Add nodes and connect each to the next; return node and edge indices."""
        indices = [self.graph.add_node(data) for data in chain]
        return indices, self.chain(indices)

    def add_node_chain(self, chain: list[NodeData]) -> tuple[list[int], list[int]]:
        """Add nodes and link each to the next without sending messages."""
        indices = [self.graph.add_node(data) for data in chain]
        edges = [self.graph.add_edge(source, target) for source, target in pairwise(indices)]
        return indices, edges

    def next_block(self) -> list[Buffer]:
        """Render one block and return the destination's buffers."""
        self.processor.process(self.graph, self.destination)
        return self.graph[self.destination].buffers

    def send_msg(self, index: int, msg: object) -> None:
        self.graph[index].node.send_msg(msg)

    def send_msg_to_all(self, msg: object) -> None:
        for data in self.graph.node_weights():
            data.node.send_msg(msg)