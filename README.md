# glicol

A parser for the Glicol audio live-coding language, plus a small graph of
audio nodes that is processed one fixed-size block at a time. Pure Python,
no dependencies.

## Installation

```
pip install .
```

## Parsing Glicol code

`glicol.parser.get_ast(code)` reads a block of Glicol code and returns a
`glicol.ast.Ast`, whose `nodes` dict maps each chain name to its list of
components:

```python
from glicol.parser import get_ast

ast = get_ast("o: sin 440 >> mul 0.5")
for name, chain in ast.nodes.items():
    print(name, chain)
# o [Sin(param=440.0), Mul(param=0.5)]
```

The code is a list of lines separated by new lines or `;`. Each line is
`name: node args >> node args ...`. A chain may continue on the next line
with `>>`, and `//` starts a comment that runs to the end of the line, so
comments may sit inside a chain. Names starting with `~` are references
that other nodes can take as parameters (`mul ~mod`); a parameter that
refers to another chain is held as a `glicol.ast.Ref`.

Nodes the parser knows: `sin`, `saw`, `squ`, `tri`, `imp`, `onepole`,
`mul`, `add`, `pan`, `bd`, `sn`, `hh`, `delayn`, `delayms`, `seq`,
`choose`, `arrange`, `mix`, `sp`, `speed`, `constsig` (also `sig`), `adc`,
`sawsynth`, `squsynth`, `trisynth`, `msgsynth`, `pattern_synth`, `lpf`,
`rhpf`, `apfmsgain`, `psampler`, `balance`, `reverb`, `envperc`, `adsr`,
`plate`, `get`, `noise`, `meta`, `expr`, `eval`, and point lists written
in brackets such as `[0.1=>100, 1/4=>10.0]*(1/2)..`.

Each of these has a dataclass in `glicol.ast` (`Sin`, `Mul`, `Seq`, `Mix`,
`Lpf`, `Points`, ...), all subclasses of `Component`.
`Component.all_references()` lists the names of the chains a component
reads from:

```python
from glicol.parser import get_ast

chain = get_ast("o: seq 60 ~a >> mul ~b").nodes["o"]
print([c.all_references() for c in chain])  # [['~a'], ['~b']]
```

### Parse errors

Invalid code raises `glicol.errors.ParseError`. It carries `positives`
(the `Rule`s that were expected), `negatives`, the offending offset `pos`
and `line_col`, its one-based line and column. `get_error_info(error)`
returns the two rule lists:

```python
from glicol.errors import ParseError, Rule, get_error_info
from glicol.parser import get_ast

try:
    get_ast("o: delayn 0.5")
except ParseError as error:
    positives, negatives = get_error_info(error)
    assert positives == [Rule.integer]
```

`glicol.errors` also defines `EngineError` and its subclasses
`ParsingError` (wrapping a `ParseError`), `NonExistReference` and
`NonExistSample`, for code that builds on the parser to report problems
in the same terms; `get_error_info` accepts a `ParsingError` too.

## Processing an audio graph

`glicol.context.AudioContextBuilder(block_size)` builds an `AudioContext`.
The setters `sr`, `channels`, `max_nodes` and `max_edges` each return a new
builder. The context holds a `StableGraph` of nodes, a `destination` node
that sums its inputs, and an `input` node that passes its input on.

```python
from glicol.context import AudioContextBuilder
from glicol.graph import Pass

context = AudioContextBuilder(8).sr(44100).channels(2).build()
node = context.add_stereo_node(Pass())
context.connect(node, context.destination)
left, right = context.next_block()
```

- `add_mono_node`, `add_stereo_node` and `add_multi_chan_node(chan, node)`
  add a node with one, two or `chan` output buffers and return its index.
- `connect(source, target)` adds an edge and sends the target an `Index`
  message; `connect_with_order(source, target, pos)` sends `IndexOrder`.
- `chain([a, b, c])` connects each index to the next; `chain_boxed` and
  `add_node_chain` first add a list of `NodeData` (the latter without
  sending messages).
- `send_msg(index, msg)` and `send_msg_to_all(msg)` deliver messages.
- `reset()` clears the graph and recreates the destination and input.
- `next_block()` processes every node upstream of the destination, in
  depth-first post order, and returns the destination's buffers.

Nodes subclass `glicol.graph.Node` and implement
`process(inputs, output)`, where `inputs` maps each input node's index to
an `Input` (its buffers and index) and `output` is the node's list of
`Buffer`s. `send_msg` stores the latest message in `last_message` unless a
node overrides it. The package ships two nodes: `Pass`, which copies its
first input, and `Sum2`, which sums all inputs; a mono input feeds every
channel of either.

`glicol.buffer.Buffer` is a fixed-length sequence of floats: `Buffer(n)`
is `n` samples of silence, `Buffer(values)` holds the given values,
`silence()` zeroes it, and slice assignment must keep its length.

`glicol.messages` holds the message dataclasses (`SetToNumber`,
`SetToSymbol`, `SetBPM`, `SetPattern`, `SetToSeq`, `Index`, `IndexOrder`,
`ResetOrder`, `SetParam`, ...) and `GlicolPara`, a parameter value tagged
with a `ParaKind`.

## What this package does not do

- It has no engine that turns a parsed `Ast` into a graph of nodes: parsing
  and graph processing are separate, and you connect them yourself.
- Apart from `Pass` and `Sum2` it has no sound-making nodes: no
  oscillators, filters, envelopes, delays, samplers or sequencers. The
  parser recognises those names, but processing them is up to nodes you
  write.
- It does not play or record audio, load samples, or offer a command-line
  program; `next_block()` returns plain buffers of floats.

## Running the tests

```
pip install .[test]
pytest
```