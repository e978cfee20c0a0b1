"""In-memory model of generated Go declarations.

Declarations are plain values: the synthesizer builds them, the assembler
collects them into a GoFile, and the Go renderer serializes the file. Body
lines carry the symbols they reference as format arguments, so imports can
be collected and names qualified only at render time.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class GoPackage:
    """A Go package: its import path and the name it declares."""

    import_path: str
    name: str


@dataclass(frozen=True)
class Symbol:
    """A package-level Go identifier. package=None means the universe scope."""

    package: GoPackage | None
    name: str


Qualifier = Callable[[Symbol], str]


@dataclass(frozen=True)
class NamedType:
    symbol: Symbol

    def render(self, qualify: Qualifier) -> str:
        return qualify(self.symbol)

    def symbols(self) -> Iterator[Symbol]:
        yield self.symbol


@dataclass(frozen=True)
class PointerType:
    elem: "TypeRef"

    def render(self, qualify: Qualifier) -> str:
        return "*" + self.elem.render(qualify)

    def symbols(self) -> Iterator[Symbol]:
        yield from self.elem.symbols()


@dataclass(frozen=True)
class SliceType:
    elem: "TypeRef"

    def render(self, qualify: Qualifier) -> str:
        return "[]" + self.elem.render(qualify)

    def symbols(self) -> Iterator[Symbol]:
        yield from self.elem.symbols()


TypeRef = NamedType | PointerType | SliceType

ERROR = NamedType(Symbol(None, "error"))


def _arg_symbols(arg: Symbol | TypeRef) -> Iterator[Symbol]:
    if isinstance(arg, Symbol):
        yield arg
    else:
        yield from arg.symbols()


@dataclass(frozen=True)
class Line:
    """One statement line of a function body.

    text is a %-format string when args is non-empty; each arg is rendered
    (qualified) before substitution. indent counts nesting levels below the
    function body.
    """

    text: str
    args: tuple[Symbol | TypeRef, ...] = ()
    indent: int = 0

    def render(self, qualify: Qualifier) -> str:
        if not self.args:
            return self.text
        rendered = []
        for arg in self.args:
            if isinstance(arg, Symbol):
                rendered.append(qualify(arg))
            else:
                rendered.append(arg.render(qualify))
        return self.text % tuple(rendered)

    def symbols(self) -> Iterator[Symbol]:
        for arg in self.args:
            yield from _arg_symbols(arg)


@dataclass(frozen=True)
class Param:
    name: str
    type: TypeRef


@dataclass
class StructDecl:
    """A named struct type."""

    name: str
    fields: list[Param] = field(default_factory=list)

    @property
    def kind(self) -> str:
        return "type"

    def symbols(self) -> Iterator[Symbol]:
        for f in self.fields:
            yield from f.type.symbols()


@dataclass
class FuncDecl:
    """A function, or a method when receiver is set.

    When variadic is set, the last parameter must have a SliceType and is
    declared as "...elem".
    """

    name: str
    params: list[Param] = field(default_factory=list)
    results: list[TypeRef] = field(default_factory=list)
    body: list[Line] = field(default_factory=list)
    variadic: bool = False
    receiver: Param | None = None

    @property
    def kind(self) -> str:
        return "method" if self.receiver else "func"

    def symbols(self) -> Iterator[Symbol]:
        if self.receiver:
            yield from self.receiver.type.symbols()
        for p in self.params:
            yield from p.type.symbols()
        for r in self.results:
            yield from r.symbols()
        for line in self.body:
            yield from line.symbols()


Decl = StructDecl | FuncDecl


@dataclass
class GoFile:
    """A complete output file ready for rendering."""

    name: str
    package: GoPackage
    header: list[str] = field(default_factory=list)
    decls: list[Decl] = field(default_factory=list)

    def symbols(self) -> Iterator[Symbol]:
        for decl in self.decls:
            yield from decl.symbols()
