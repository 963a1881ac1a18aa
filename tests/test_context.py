import pytest

from glicol.buffer import Buffer
from glicol.context import AudioContext, AudioContextBuilder, AudioContextConfig
from glicol.graph import Node, NodeData
from glicol.messages import Index, IndexOrder, ResetOrder, SetToNumber


class Const(Node):
    def __init__(self, value):
        self.value = value

    def process(self, inputs, output):
        for buf in output:
            buf[:] = [self.value] * len(buf)

    def send_msg(self, msg):
        if isinstance(msg, SetToNumber) and msg.pos == 0:
            self.value = msg.value


class Log(Node):
    def __init__(self):
        self.messages = []

    def process(self, inputs, output):
        for buf in output:
            buf.silence()

    def send_msg(self, msg):
        self.messages.append(msg)


def test_builder_defaults():
    config = AudioContextBuilder().build().config
    assert config == AudioContextConfig(sr=44100, channels=2, max_nodes=1024, max_edges=1024)


def test_builder_setters_return_new_builders():
    base = AudioContextBuilder(8)
    changed = base.sr(48000).channels(1).max_nodes(16).max_edges(32)
    assert base.build().config.sr == 44100
    context = changed.build()
    assert context.config == AudioContextConfig(sr=48000, channels=1, max_nodes=16, max_edges=32)
    assert context.block_size == 8


def test_new_context_has_destination_and_input():
    context = AudioContext(AudioContextConfig(channels=2), block_size=8)
    assert (context.destination, context.input) == (0, 1)
    assert len(context.graph[context.destination].buffers) == 2
    assert len(context.graph[context.input].buffers) == 2


def test_next_block_is_silent_without_nodes():
    context = AudioContextBuilder(8).build()
    block = context.next_block()
    assert block == [Buffer(8), Buffer(8)]


def test_const_to_destination_then_message():
    context = AudioContextBuilder(8).channels(1).build()
    node = context.add_mono_node(Const(42.0))
    context.connect(node, context.destination)
    assert context.next_block()[0] == [42.0] * 8
    context.send_msg(node, SetToNumber(0, 100.0))
    assert context.next_block()[0] == [100.0] * 8


def test_mono_node_fills_stereo_destination():
    context = AudioContextBuilder(8).channels(2).build()
    node = context.add_mono_node(Const(42.0))
    context.connect(node, context.destination)
    left, right = context.next_block()
    assert left == right == [42.0] * 8


def test_connect_sends_index():
    context = AudioContextBuilder(4).build()
    log = Log()
    source = context.add_mono_node(Const(1.0))
    target = context.add_stereo_node(log)
    context.connect(source, target)
    assert log.messages == [Index(source)]
    assert context.graph.neighbors_incoming(target) == [source]


def test_connect_with_order_sends_index_order():
    context = AudioContextBuilder(4).build()
    log = Log()
    source = context.add_mono_node(Const(1.0))
    target = context.add_mono_node(log)
    context.connect_with_order(source, target, 1)
    assert log.messages == [IndexOrder(1, source)]


def test_chain_connects_consecutive_nodes():
    context = AudioContextBuilder(4).build()
    logs = [Log(), Log(), Log()]
    indices = [context.add_mono_node(log) for log in logs]
    edges = context.chain(indices)
    assert len(edges) == len(indices) - 1
    assert logs[0].messages == []
    assert logs[1].messages == [Index(indices[0])]
    assert logs[2].messages == [Index(indices[1])]


def test_chain_boxed_adds_and_connects():
    context = AudioContextBuilder(4).build()
    log = Log()
    chain = [NodeData(Const(0.5), [Buffer(4)]), NodeData(log, [Buffer(4)])]
    indices, edges = context.chain_boxed(chain)
    assert len(indices) == 2 and len(edges) == 1
    assert context.graph[indices[1]].node is log
    assert log.messages == [Index(indices[0])]


def test_add_node_chain_sends_no_messages():
    context = AudioContextBuilder(4).build()
    log = Log()
    indices, edges = context.add_node_chain(
        [NodeData(Const(0.5), [Buffer(4)]), NodeData(log, [Buffer(4)])]
    )
    assert log.messages == []
    assert context.graph.neighbors_incoming(indices[1]) == [indices[0]]
    assert len(edges) == 1


def test_send_msg_to_all_reaches_every_node():
    context = AudioContextBuilder(4).build()
    logs = [Log(), Log()]
    for log in logs:
        context.add_mono_node(log)
    context.send_msg_to_all(ResetOrder())
    assert all(log.messages == [ResetOrder()] for log in logs)


def test_multi_chan_node_buffers():
    context = AudioContextBuilder(4).build()
    index = context.add_multi_chan_node(3, Const(0.0))
    assert len(context.graph[index].buffers) == 3
    assert all(len(buf) == 4 for buf in context.graph[index].buffers)


def test_reset_removes_added_nodes():
    context = AudioContextBuilder(4).build()
    node = context.add_mono_node(Const(1.0))
    context.connect(node, context.destination)
    context.reset()
    assert len(context.graph) == 2
    assert (context.destination, context.input) == (0, 1)
    assert context.next_block() == [Buffer(4), Buffer(4)]
    with pytest.raises(KeyError):
        context.graph[node]