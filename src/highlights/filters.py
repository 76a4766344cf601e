"""Filter chains — the named nodes of an ffmpeg filter graph.

A chain serializes as:

    [0:v:0][op_a]scale=1280:720,pad=1280:720:(ow-iw)/2:(oh-ih)/2[op_v]

Pads reference either a declared input's stream ([file:kind:stream]) or
another chain's output label ([label]). Upstream references hold the chain
object itself plus an output index, so a label can never be mistyped.
"""

from typing import NamedTuple

from .errors import InvalidReference

STREAM_KINDS = {"v": "v", "video": "v", "a": "a", "audio": "a"}


# ── Filter operation text ─────────────────────────────────────────


def _param(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def filter_op(name: str, *args, **kwargs) -> str:
    """Build one filter operation in ffmpeg's 'name=a:b:key=value' grammar.

    Positional args come first, then keyword args in call order.

        filter_op("scale", 1280, 720, force_original_aspect_ratio="decrease")
        -> "scale=1280:720:force_original_aspect_ratio=decrease"
        filter_op("setsar", "1:1") -> "setsar=1:1"
    """
    params = [_param(a) for a in args]
    params += [f"{k}={_param(v)}" for k, v in kwargs.items()]
    if not params:
        return name
    return f"{name}={':'.join(params)}"


def quote(value: str) -> str:
    """Single-quote a filter argument (paths, force_style strings)."""
    value = str(value)
    if "'" in value:
        raise ValueError(f"Cannot quote filter argument containing a single quote: {value!r}")
    return f"'{value}'"


# ── Pads ──────────────────────────────────────────────────────────


class SourcePad(NamedTuple):
    file_index: int
    kind: str
    stream_index: int

    def to_text(self) -> str:
        return f"[{self.file_index}:{self.kind}:{self.stream_index}]"


class ChainPad(NamedTuple):
    chain: "FilterChain"
    output_index: int

    @property
    def label(self) -> str:
        return self.chain.labels[self.output_index]

    def to_text(self) -> str:
        return f"[{self.label}]"


# ── Filter chain ──────────────────────────────────────────────────


class FilterChain:
    """A processing node: input pads, chained operations, output labels.

    Chains are created against a FilterGraph so source pads can be checked
    against the inputs declared so far. Adding the chain to the graph is a
    separate step (FilterGraph.add_chain).
    """

    def __init__(self, graph, *labels: str):
        if not 1 <= len(labels) <= 2:
            raise ValueError(f"A filter chain takes one or two labels, got {len(labels)}")
        for label in labels:
            if not label or "[" in label or "]" in label:
                raise ValueError(f"Invalid chain label: {label!r}")
        if len(set(labels)) != len(labels):
            raise ValueError(f"Duplicate chain labels: {labels}")
        self.graph = graph
        self.labels = tuple(labels)
        self.inputs: list[SourcePad | ChainPad] = []
        self.operations: list[str] = []

    def add_source_input(self, file_index: int, kind: str, stream_index: int = 0) -> None:
        """Append a pad bound to stream `stream_index` of declared input `file_index`."""
        if kind not in STREAM_KINDS:
            raise InvalidReference(
                f"Chain {self.name}: unknown stream kind '{kind}'. "
                f"Valid: {sorted(STREAM_KINDS)}"
            )
        if not 0 <= file_index < len(self.graph.inputs):
            raise InvalidReference(
                f"Chain {self.name}: input #{file_index} has not been declared "
                f"({len(self.graph.inputs)} input(s) so far)"
            )
        if stream_index < 0:
            raise InvalidReference(f"Chain {self.name}: stream index must be >= 0")
        self.inputs.append(SourcePad(file_index, STREAM_KINDS[kind], stream_index))

    def add_upstream_input(self, other: "FilterChain", output_index: int = 0) -> None:
        """Append a pad bound to output `output_index` of another chain."""
        if not 0 <= output_index < len(other.labels):
            raise InvalidReference(
                f"Chain {self.name}: chain {other.name} has no output #{output_index} "
                f"(it declares {len(other.labels)})"
            )
        self.inputs.append(ChainPad(other, output_index))

    def chain(self, operation: str) -> "FilterChain":
        """Append one filter operation. Operations apply left to right."""
        if not operation:
            raise ValueError(f"Chain {self.name}: empty filter operation")
        self.operations.append(operation)
        return self

    @property
    def name(self) -> str:
        return "".join(f"[{label}]" for label in self.labels)

    def to_text(self) -> str:
        pads = "".join(pad.to_text() for pad in self.inputs)
        return f"{pads}{','.join(self.operations)}{self.name}"

    def __repr__(self):
        return f"FilterChain({self.to_text()!r})"
