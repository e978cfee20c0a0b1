"""Call shape classification and stream index assignment."""

from dataclasses import dataclass
from enum import StrEnum, auto

from .types import MethodDescriptor, ServiceDescriptor


class CallShape(StrEnum):
    """How a method is invoked over a channel."""

    UNARY = auto()
    SERVER_STREAMING = auto()
    CLIENT_OR_BIDI_STREAMING = auto()  # Also covers bidirectional methods

    @property
    def is_streaming(self) -> bool:
        return self != CallShape.UNARY


def classify(method: MethodDescriptor) -> CallShape:
    """Return the call shape for a method's streaming flags."""
    if method.client_streaming:
        return CallShape.CLIENT_OR_BIDI_STREAMING
    if method.server_streaming:
        return CallShape.SERVER_STREAMING
    return CallShape.UNARY


class StreamIndexer:
    """Hands out stream indices for one service, starting at 0."""

    def __init__(self) -> None:
        self._next = 0

    def next_index(self) -> int:
        index = self._next
        self._next += 1
        return index


@dataclass(frozen=True)
class MethodPlan:
    """A method with its call shape and stream index (None for unary)."""

    method: MethodDescriptor
    shape: CallShape
    stream_index: int | None


def plan_service(service: ServiceDescriptor) -> list[MethodPlan]:
    """Classify every method of a service in declaration order.

    Streaming methods index into the service descriptor's Streams array,
    which lists them in the same order.
    """
    indexer = StreamIndexer()
    plans: list[MethodPlan] = []
    for method in service.methods:
        shape = classify(method)
        index = indexer.next_index() if shape.is_streaming else None
        plans.append(MethodPlan(method=method, shape=shape, stream_index=index))
    return plans
