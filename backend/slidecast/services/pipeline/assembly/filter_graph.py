"""
Typed builder for ffmpeg -filter_complex graphs

Chains are described as data (filter name, positional args, keyword options,
input/output pad labels), checked for wiring mistakes, and only turned into
ffmpeg's text syntax at the very end. Every option value is escaped at both
levels ffmpeg parses: once for the filter's option list and once for the
graph description.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple, Union

OptionValue = Union[str, int, float]

FILTER_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")
LABEL_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
# Pads that refer to a demuxed input stream, e.g. "0:v" or "12:a"
STREAM_LABEL_PATTERN = re.compile(r"^\d+:[va]$")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

_OPTION_SPECIALS = "\\':"
_GRAPH_SPECIALS = "\\'[],;"


class FilterGraphError(ValueError):
    """Graph is malformed: bad label, bad value, or broken pad wiring"""
    pass


def format_number(value: float) -> str:
    """Shortest stable decimal form, millisecond precision (8.0 -> '8', 7.25 -> '7.25')"""
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _escape(value: str, specials: str) -> str:
    return "".join("\\" + char if char in specials else char for char in value)


def escape_option_value(value: OptionValue) -> str:
    """Escape a value for both the option-list and graph-description levels"""
    if isinstance(value, bool):
        raise FilterGraphError("Boolean option values are ambiguous, pass 0/1")
    if isinstance(value, float):
        text = format_number(value)
    else:
        text = str(value)
    if _CONTROL_CHARS.search(text):
        raise FilterGraphError(f"Control character in filter option value: {text!r}")
    return _escape(_escape(text, _OPTION_SPECIALS), _GRAPH_SPECIALS)


@dataclass(frozen=True)
class FilterNode:
    """A single filter invocation, e.g. fade=t=in:st=0:d=0.5"""
    name: str
    args: Tuple[OptionValue, ...] = ()
    kwargs: Dict[str, OptionValue] = field(default_factory=dict)

    def __post_init__(self):
        if not FILTER_NAME_PATTERN.match(self.name):
            raise FilterGraphError(f"Invalid filter name: {self.name!r}")
        for key in self.kwargs:
            if not FILTER_NAME_PATTERN.match(key):
                raise FilterGraphError(f"Invalid option name {key!r} for filter {self.name}")

    def serialize(self) -> str:
        options = [escape_option_value(arg) for arg in self.args]
        options.extend(f"{key}={escape_option_value(value)}" for key, value in self.kwargs.items())
        if not options:
            return self.name
        return f"{self.name}={':'.join(options)}"


def _check_label(label: str) -> None:
    if not (LABEL_PATTERN.match(label) or STREAM_LABEL_PATTERN.match(label)):
        raise FilterGraphError(f"Invalid pad label: {label!r}")


@dataclass
class FilterChain:
    """Linear run of filters between labelled input and output pads"""
    inputs: List[str]
    filters: List[FilterNode]
    outputs: List[str]

    def serialize(self) -> str:
        ins = "".join(f"[{label}]" for label in self.inputs)
        outs = "".join(f"[{label}]" for label in self.outputs)
        return ins + ",".join(node.serialize() for node in self.filters) + outs


@dataclass
class FilterGraph:
    """
    Ordered list of chains plus the pads that leave the graph

    `outputs` are the labels handed to `-map`; they must be produced and
    never consumed inside the graph.
    """
    chains: List[FilterChain] = field(default_factory=list)
    outputs: List[str] = field(default_factory=list)

    def add(self, inputs: Sequence[str], filters: Sequence[FilterNode], outputs: Sequence[str]) -> FilterChain:
        chain = FilterChain(list(inputs), list(filters), list(outputs))
        self.chains.append(chain)
        return chain

    def validate(self) -> None:
        """
        Raise FilterGraphError unless every pad is wired exactly once

        Rules: labels are well-formed, input streams are read at most once,
        each intermediate pad is produced once and consumed once after it
        was produced, and the declared outputs exist and stay unconsumed.
        """
        if not self.chains:
            raise FilterGraphError("Filter graph has no chains")

        produced: Dict[str, int] = {}
        consumed: Dict[str, int] = {}
        streams_read = set()

        for index, chain in enumerate(self.chains):
            if not chain.filters:
                raise FilterGraphError(f"Chain {index} has no filters")
            for label in chain.inputs:
                _check_label(label)
                if STREAM_LABEL_PATTERN.match(label):
                    if label in streams_read:
                        raise FilterGraphError(f"Input stream [{label}] is read more than once")
                    streams_read.add(label)
                    continue
                if label not in produced:
                    raise FilterGraphError(f"Pad [{label}] consumed by chain {index} before it is produced")
                if label in consumed:
                    raise FilterGraphError(f"Pad [{label}] is consumed more than once")
                consumed[label] = index
            for label in chain.outputs:
                _check_label(label)
                if STREAM_LABEL_PATTERN.match(label):
                    raise FilterGraphError(f"Chain {index} writes to input stream label [{label}]")
                if label in produced:
                    raise FilterGraphError(f"Pad [{label}] is produced more than once")
                produced[label] = index

        for label in self.outputs:
            if label not in produced:
                raise FilterGraphError(f"Graph output [{label}] is never produced")
            if label in consumed:
                raise FilterGraphError(f"Graph output [{label}] is consumed inside the graph")

        dangling = sorted(set(produced) - set(consumed) - set(self.outputs))
        if dangling:
            raise FilterGraphError(f"Pads produced but never used: {', '.join(dangling)}")

    def serialize(self) -> str:
        self.validate()
        return ";".join(chain.serialize() for chain in self.chains)
