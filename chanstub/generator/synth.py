"""Synthesis of the Go declarations generated for each service."""

from dataclasses import dataclass

from .decls import (
    ERROR,
    Decl,
    FuncDecl,
    GoPackage,
    Line,
    NamedType,
    Param,
    PointerType,
    SliceType,
    StructDecl,
    Symbol,
)
from .naming import GRPC, GRPCHAN, GoNames, MethodNames, ServiceNames
from .shapes import CallShape, MethodPlan, plan_service
from .types import FileDescriptor, ServiceDescriptor

REGISTRY = NamedType(Symbol(GRPCHAN, "ServiceRegistry"))
CHANNEL = NamedType(Symbol(GRPCHAN, "Channel"))
CALL_OPTIONS = SliceType(NamedType(Symbol(GRPC, "CallOption")))


def _return_on_error() -> list[Line]:
    return [
        Line("if err != nil {"),
        Line("return nil, err", indent=1),
        Line("}"),
    ]


@dataclass
class ServiceStubs:
    """All declarations generated for one service."""

    names: ServiceNames
    registration: FuncDecl
    client_holder: StructDecl
    constructor: FuncDecl
    methods: list[FuncDecl]

    def declarations(self) -> list[Decl]:
        return [self.registration, self.client_holder, self.constructor, *self.methods]


class MethodSynthesizer:
    """Builds method declarations on a service's client-holder type."""

    def __init__(self, svc: ServiceNames, names: GoNames, context_import: str) -> None:
        self.svc = svc
        self.names = names
        self.context = NamedType(
            Symbol(GoPackage(context_import, context_import.rsplit("/", 1)[-1]), "Context")
        )
        self.receiver = Param("c", PointerType(NamedType(svc.client_holder)))

    def build(self, fd: FileDescriptor, plan: MethodPlan) -> FuncDecl:
        mtd = self.names.method_names(fd, self.svc, plan.method)
        if plan.shape == CallShape.UNARY:
            return self.unary(plan, mtd)
        if plan.shape == CallShape.SERVER_STREAMING:
            return self.server_streaming(plan, mtd)
        return self.client_streaming(plan, mtd)

    def _method(
        self, mtd: MethodNames, params: list[Param], result: NamedType | PointerType
    ) -> FuncDecl:
        return FuncDecl(
            name=mtd.go_name,
            receiver=self.receiver,
            params=[Param("ctx", self.context), *params, Param("opts", CALL_OPTIONS)],
            results=[result, ERROR],
            variadic=True,
        )

    def _open_stream(self, plan: MethodPlan, mtd: MethodNames) -> list[Line]:
        # The line is %-formatted, so literal text must not carry bare "%"
        wire_path = mtd.wire_path.replace("%", "%%")
        return [
            Line(
                f'stream, err := c.ch.NewStream(ctx, &%s.Streams[{plan.stream_index}], "{wire_path}", opts...)',
                (self.svc.service_desc,),
            ),
            *_return_on_error(),
            Line("x := &%s{stream}", (mtd.stream_client_impl,)),
        ]

    def unary(self, plan: MethodPlan, mtd: MethodNames) -> FuncDecl:
        request = PointerType(NamedType(self.names.message_type(plan.method.input_type)))
        response = NamedType(self.names.message_type(plan.method.output_type))

        decl = self._method(mtd, [Param("in", request)], PointerType(response))
        decl.body = [
            Line("out := new(%s)", (response,)),
            Line(f'err := c.ch.Invoke(ctx, "{mtd.wire_path}", in, out, opts...)'),
            *_return_on_error(),
            Line("return out, nil"),
        ]
        return decl

    def server_streaming(self, plan: MethodPlan, mtd: MethodNames) -> FuncDecl:
        request = PointerType(NamedType(self.names.message_type(plan.method.input_type)))
        # The response type must resolve even though only the stream wrapper names it
        self.names.message_type(plan.method.output_type)

        decl = self._method(mtd, [Param("in", request)], NamedType(mtd.stream_client))
        decl.body = [
            *self._open_stream(plan, mtd),
            Line("if err := x.ClientStream.SendMsg(in); err != nil {"),
            Line("return nil, err", indent=1),
            Line("}"),
            Line("if err := x.ClientStream.CloseSend(); err != nil {"),
            Line("return nil, err", indent=1),
            Line("}"),
            Line("return x, nil"),
        ]
        return decl

    def client_streaming(self, plan: MethodPlan, mtd: MethodNames) -> FuncDecl:
        self.names.message_type(plan.method.input_type)
        self.names.message_type(plan.method.output_type)

        decl = self._method(mtd, [], NamedType(mtd.stream_client))
        decl.body = [
            *self._open_stream(plan, mtd),
            Line("return x, nil"),
        ]
        return decl


def synthesize_service(fd: FileDescriptor, sd: ServiceDescriptor, names: GoNames) -> ServiceStubs:
    """Build the registration function, client holder, constructor and methods for a service."""
    svc = names.service_names(fd, sd)

    registration = FuncDecl(
        name=svc.register_func.name,
        params=[
            Param("reg", REGISTRY),
            Param("srv", NamedType(svc.server_iface)),
        ],
        body=[Line("reg.RegisterService(&%s, srv)", (svc.service_desc,))],
    )

    holder = StructDecl(name=svc.client_holder.name, fields=[Param("ch", CHANNEL)])

    constructor = FuncDecl(
        name=svc.constructor.name,
        params=[Param("ch", CHANNEL)],
        results=[NamedType(svc.client_iface)],
        body=[Line("return &%s{ch: ch}", (svc.client_holder,))],
    )

    methods = MethodSynthesizer(svc, names, names.options.context_import)
    return ServiceStubs(
        names=svc,
        registration=registration,
        client_holder=holder,
        constructor=constructor,
        methods=[methods.build(fd, plan) for plan in plan_service(sd)],
    )
