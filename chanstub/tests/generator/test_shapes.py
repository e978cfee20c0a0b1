"""Tests for call shape classification and stream indices."""

from chanstub.generator.shapes import CallShape, StreamIndexer, classify, plan_service
from chanstub.generator.types import ServiceDescriptor


def describe_classify():
    def classifies_unary(expect, method):
        expect(classify(method("M"))) == CallShape.UNARY

    def classifies_server_streaming(expect, method):
        expect(classify(method("M", server=True))) == CallShape.SERVER_STREAMING

    def classifies_client_streaming(expect, method):
        expect(classify(method("M", client=True))) == CallShape.CLIENT_OR_BIDI_STREAMING

    def classifies_bidi_as_client_streaming(expect, method):
        expect(classify(method("M", client=True, server=True))) == CallShape.CLIENT_OR_BIDI_STREAMING

    def marks_only_unary_as_non_streaming(expect):
        expect([shape.is_streaming for shape in CallShape]) == [False, True, True]


def describe_stream_indexer():
    def starts_at_zero_and_increments(expect):
        indexer = StreamIndexer()
        expect([indexer.next_index() for _ in range(3)]) == [0, 1, 2]


def describe_plan_service():
    def assigns_indices_to_streaming_methods_in_order(expect, method):
        service = ServiceDescriptor(
            name="Mixed",
            methods=[
                method("A"),
                method("B", server=True),
                method("C"),
                method("D", client=True, server=True),
            ],
        )
        plans = plan_service(service)
        expect([p.stream_index for p in plans]) == [None, 0, None, 1]
        expect([p.shape for p in plans]) == [
            CallShape.UNARY,
            CallShape.SERVER_STREAMING,
            CallShape.UNARY,
            CallShape.CLIENT_OR_BIDI_STREAMING,
        ]

    def keeps_declaration_order(expect, method):
        service = ServiceDescriptor(name="S", methods=[method("Z"), method("A"), method("M")])
        expect([p.method.name for p in plan_service(service)]) == ["Z", "A", "M"]

    def resets_indices_per_service(expect, method):
        first = ServiceDescriptor(name="One", methods=[method("A", server=True), method("B", client=True)])
        second = ServiceDescriptor(name="Two", methods=[method("C"), method("D", client=True)])
        expect([p.stream_index for p in plan_service(first)]) == [0, 1]
        expect([p.stream_index for p in plan_service(second)]) == [None, 0]

    def handles_service_without_methods(expect):
        expect(plan_service(ServiceDescriptor(name="Empty"))) == []
