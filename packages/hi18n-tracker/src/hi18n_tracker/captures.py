"""Capture results produced by pattern matching."""

from dataclasses import dataclass
from typing import Optional, Union

from tree_sitter import Node


class CaptureFailure:
    """Sentinel for an optional capture whose sub-pattern did not match"""

    _instance = None
    type = "CaptureFailure"

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "CAPTURE_FAILURE"

    def __bool__(self):
        return False

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


CAPTURE_FAILURE = CaptureFailure()


@dataclass(frozen=True)
class CapturedNode:
    """A captured syntax node and the outermost node to report or replace for it"""

    node: Node
    root: Optional[Node] = None

    def __post_init__(self):
        if self.root is None:
            object.__setattr__(self, "root", self.node)

    @property
    def type(self) -> str:
        return self.node.type


CaptureResult = Union[CapturedNode, CaptureFailure]
CaptureMap = dict[str, CaptureResult]


def captured_root(result: CaptureResult) -> Optional[Node]:
    """Node to report for a capture; None for a failed capture"""
    if isinstance(result, CapturedNode):
        return result.root
    return None


def captured_node(result: CaptureResult) -> Optional[Node]:
    if isinstance(result, CapturedNode):
        return result.node
    return None
