"""Filter graph and command model.

A FilterGraph owns everything one ffmpeg run needs:
  - inputs:           ordered source files; list position is the ffmpeg index.
  - chains:           ordered FilterChains; joined with ';' in that order.
  - output_mappings:  (chain, output_index) pairs, emitted as -map [label].
  - pre/post commands: auxiliary processes run around the ffmpeg call.

Serialization produces the ffmpeg argument vector (without the program):

    -y -i op.jpg -i a.mp4 -filter_complex "<chains>" -map [outv] -map [outa] out.mp4
"""

from typing import NamedTuple

from .errors import DanglingReference, InvalidReference
from .filters import ChainPad, FilterChain, SourcePad


class Command(NamedTuple):
    """One auxiliary process invocation: program plus arguments."""

    program: str
    args: tuple[str, ...] = ()

    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self):
        return " ".join(self.argv())


class TempArtifact(NamedTuple):
    """A temporary file created before the render and removed after it.

    The create and remove commands always target the same path and are
    registered together through FilterGraph.add_artifact.
    """

    path: str
    create: Command
    remove: Command


class FilterGraph:
    def __init__(self, output_file: str, overwrite: bool = True):
        self.output_file = str(output_file)
        self.overwrite = overwrite
        self.inputs: list[str] = []
        self.chains: list[FilterChain] = []
        self.pre_commands: list[Command] = []
        self.post_commands: list[Command] = []
        self.artifacts: list[TempArtifact] = []
        self.output_mappings: list[tuple[FilterChain, int]] = []

    # ── Building ──────────────────────────────────────────────────

    def declare_input(self, file: str) -> int:
        """Declare a source file and return its new input index.

        Every call allocates a fresh index, even for a path declared before.
        """
        self.inputs.append(str(file))
        return len(self.inputs) - 1

    def new_chain(self, *labels: str) -> FilterChain:
        """Create a chain bound to this graph (not yet added)."""
        return FilterChain(self, *labels)

    def add_chain(self, chain: FilterChain) -> FilterChain:
        self.chains.append(chain)
        return chain

    def add_pre_command(self, command: Command) -> None:
        self.pre_commands.append(command)

    def add_post_command(self, command: Command) -> None:
        self.post_commands.append(command)

    def add_artifact(self, artifact: TempArtifact) -> None:
        """Register a temp file: create runs before ffmpeg, remove after."""
        self.artifacts.append(artifact)
        self.add_pre_command(artifact.create)
        self.add_post_command(artifact.remove)

    def map_output(self, chain: FilterChain, output_index: int = 0) -> None:
        """Select a chain output as a final stream, in call order.

        With no mappings ffmpeg picks the last chain's labeled outputs.
        """
        if not 0 <= output_index < len(chain.labels):
            raise InvalidReference(
                f"Cannot map {chain.name}: no output #{output_index}"
            )
        self.output_mappings.append((chain, output_index))

    # ── Validation & serialization ────────────────────────────────

    def validate(self) -> None:
        """Check every reference in the graph.

        Raises:
            DanglingReference: Undeclared input index, upstream chain not in
                this graph (or added after its consumer), duplicate label,
                or a mapping to a chain that was never added.
        """
        position = {}
        labels_seen = {}
        for i, chain in enumerate(self.chains):
            if id(chain) in position:
                raise DanglingReference(f"Chain {chain.name} added twice")
            position[id(chain)] = i

            for label in chain.labels:
                if label in labels_seen:
                    raise DanglingReference(
                        f"Label [{label}] used by chains {labels_seen[label]} and {i}"
                    )
                labels_seen[label] = i

            if not chain.operations:
                raise DanglingReference(f"Chain {chain.name} has no filter operations")

            for pad in chain.inputs:
                if isinstance(pad, SourcePad):
                    if not 0 <= pad.file_index < len(self.inputs):
                        raise DanglingReference(
                            f"Chain {chain.name}: input #{pad.file_index} is not declared "
                            f"({len(self.inputs)} input(s))"
                        )
                elif isinstance(pad, ChainPad):
                    upstream = position.get(id(pad.chain))
                    if upstream is None or upstream >= i:
                        raise DanglingReference(
                            f"Chain {chain.name}: upstream {pad.chain.name} is not an "
                            f"earlier chain in this graph"
                        )

        for chain, _ in self.output_mappings:
            if id(chain) not in position:
                raise DanglingReference(f"Mapped chain {chain.name} is not in the graph")

    def filter_complex(self) -> str:
        return ";".join(chain.to_text() for chain in self.chains)

    def serialize(self) -> list[str]:
        """Full ffmpeg argument vector, validated."""
        self.validate()

        args = ["-y"] if self.overwrite else []
        for file in self.inputs:
            args.extend(["-i", file])
        if self.chains:
            args.extend(["-filter_complex", self.filter_complex()])
        for chain, output_index in self.output_mappings:
            args.extend(["-map", f"[{chain.labels[output_index]}]"])
        args.append(self.output_file)
        return args
