"""Go source renderer for assembled files."""

import posixpath
from collections.abc import Iterable

from jinja2 import Environment, PackageLoader

from .decls import Decl, FuncDecl, GoFile, GoPackage, SliceType, StructDecl, Symbol

env = Environment(
    loader=PackageLoader("chanstub.generator", "templates"),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    line_comment_prefix="%%",
    line_statement_prefix="%",
)

template = env.get_template("go.go.j2")


class Imports:
    """Import aliases for one file.

    Imports are ordered by path. A package keeps its own name unless that name
    is already taken by the file's package or an earlier import, in which case
    a numeric suffix is added.
    """

    def __init__(self, package: GoPackage, symbols: Iterable[Symbol]) -> None:
        self.package = package
        names: dict[str, str] = {}
        for symbol in symbols:
            if self._is_local(symbol):
                continue
            names.setdefault(symbol.package.import_path, symbol.package.name)

        taken = {package.name}
        self.aliases: dict[str, str] = {}
        for path in sorted(names):
            name = alias = names[path]
            n = 1
            while alias in taken:
                alias = f"{name}{n}"
                n += 1
            taken.add(alias)
            self.aliases[path] = alias

    def _is_local(self, symbol: Symbol) -> bool:
        return symbol.package is None or symbol.package.import_path == self.package.import_path

    def qualify(self, symbol: Symbol) -> str:
        if self._is_local(symbol):
            return symbol.name
        return f"{self.aliases[symbol.package.import_path]}.{symbol.name}"

    def specs(self) -> list[str]:
        """Return import specs as they appear inside an import block."""
        result = []
        for path, alias in self.aliases.items():
            if alias == posixpath.basename(path):
                result.append(f'"{path}"')
            else:
                result.append(f'{alias} "{path}"')
        return result


def _render_struct(decl: StructDecl, imports: Imports) -> str:
    width = max((len(f.name) for f in decl.fields), default=0)
    lines = [f"type {decl.name} struct {{"]
    for f in decl.fields:
        lines.append(f"\t{f.name.ljust(width)} {f.type.render(imports.qualify)}")
    lines.append("}")
    return "\n".join(lines)


def _render_func(decl: FuncDecl, imports: Imports) -> str:
    q = imports.qualify

    params = []
    for i, p in enumerate(decl.params):
        if decl.variadic and i == len(decl.params) - 1:
            if not isinstance(p.type, SliceType):
                raise ValueError(f"variadic parameter {p.name} of {decl.name} is not a slice")
            params.append(f"{p.name} ...{p.type.elem.render(q)}")
        else:
            params.append(f"{p.name} {p.type.render(q)}")

    results = [r.render(q) for r in decl.results]
    if len(results) == 0:
        result = ""
    elif len(results) == 1:
        result = f" {results[0]}"
    else:
        result = f" ({', '.join(results)})"

    receiver = ""
    if decl.receiver:
        receiver = f"({decl.receiver.name} {decl.receiver.type.render(q)}) "

    lines = [f"func {receiver}{decl.name}({', '.join(params)}){result} {{"]
    for line in decl.body:
        lines.append("\t" * (line.indent + 1) + line.render(q))
    lines.append("}")
    return "\n".join(lines)


def render_decl(decl: Decl, imports: Imports) -> str:
    """Render a single declaration to Go source."""
    if isinstance(decl, StructDecl):
        return _render_struct(decl, imports)
    return _render_func(decl, imports)


def render(file: GoFile) -> str:
    """Render an assembled file to Go source code."""
    imports = Imports(file.package, file.symbols())
    return template.render(
        file=file,
        imports=imports.specs(),
        render_decl=lambda decl: render_decl(decl, imports),
    )
