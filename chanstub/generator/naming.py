"""Go naming policy: identifier casing, packages, output files and collisions."""

import posixpath
import re
from dataclasses import dataclass

from .decls import GoPackage, Symbol
from .errors import DescriptorError
from .options import GeneratorOptions, PathsMode
from .types import FileDescriptor, MethodDescriptor, ServiceDescriptor

GRPCHAN = GoPackage("github.com/fullstorydev/grpchan", "grpchan")
GRPC = GoPackage("google.golang.org/grpc", "grpc")

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_BAD_PACKAGE_CHARS = re.compile(r"[^A-Za-z0-9_]")
_DOTTED_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")
_IMPORT_PATH = re.compile(r"^[^\s\"\\`%;]*$")


def camel_case(name: str) -> str:
    """Convert an IDL name to an exported Go identifier.

    Follows protoc-gen-go: a leading underscore becomes "X", an underscore
    before a lowercase letter is dropped and the letter upper-cased, and
    every letter starting a new word (after a digit, say) is upper-cased.
    """
    if not name:
        return ""

    out: list[str] = []
    i = 0
    if name[0] == "_":
        out.append("X")
        i = 1

    while i < len(name):
        c = name[i]
        if c == "_" and i + 1 < len(name) and name[i + 1].islower():
            i += 1
            continue
        if c.isdigit():
            out.append(c)
            i += 1
            continue
        out.append(c.upper() if c.islower() else c)
        # Keep the lowercase run that follows
        while i + 1 < len(name) and name[i + 1].islower():
            i += 1
            out.append(name[i])
        i += 1

    return "".join(out)


def camel_case_dotted(name: str) -> str:
    """Convert a dotted nested name ("Outer.Inner") to "Outer_Inner"."""
    return "_".join(camel_case(part) for part in name.split("."))


def unexport(name: str) -> str:
    """Lower-case the first character of an identifier."""
    return name[:1].lower() + name[1:]


def package_name(name: str) -> str:
    """Sanitize a string into a valid Go package name."""
    result = _BAD_PACKAGE_CHARS.sub("_", name)
    if result[:1].isdigit():
        result = "_" + result
    return result


class NameTable:
    """Per-run record of generated identifiers.

    Identifiers are claimed within a scope (a Go import path for package-level
    names, or a type for its methods). A second owner claiming the same
    identifier in the same scope is a collision.
    """

    def __init__(self) -> None:
        self._owners: dict[tuple[str, str], str] = {}

    def claim(self, scope: str, identifier: str, owner: str) -> str:
        existing = self._owners.setdefault((scope, identifier), owner)
        if existing != owner:
            raise DescriptorError(
                f"generated name {identifier} for {owner} collides with the one for {existing}"
            )
        return identifier

    def __len__(self) -> int:
        return len(self._owners)


@dataclass(frozen=True)
class ServiceNames:
    """Identifiers derived for one service."""

    go_name: str
    wire_name: str
    client_holder: Symbol
    register_func: Symbol
    constructor: Symbol
    server_iface: Symbol
    client_iface: Symbol
    service_desc: Symbol


@dataclass(frozen=True)
class MethodNames:
    """Identifiers derived for one method of a service."""

    go_name: str
    wire_path: str
    stream_client: Symbol
    stream_client_impl: Symbol


class GoNames:
    """Resolves descriptor names to Go names for one generation run."""

    def __init__(
        self,
        files: list[FileDescriptor],
        options: GeneratorOptions | None = None,
        table: NameTable | None = None,
    ) -> None:
        self.options = options or GeneratorOptions()
        self.table = table if table is not None else NameTable()
        self._messages: dict[str, FileDescriptor] = {}
        self._packages: dict[str, tuple[str, str]] = {}
        for fd in files:
            for message in fd.messages:
                key = message.lstrip(".")
                existing = self._messages.setdefault(key, fd)
                if existing is not fd:
                    raise DescriptorError(
                        f"{fd.name}: message type {key!r} is already declared in {existing.name}"
                    )

    def go_package_for(self, fd: FileDescriptor) -> GoPackage:
        """Return the Go package generated code for a unit belongs to."""
        if not fd.name:
            raise DescriptorError("unit has no name")
        if fd.package and not _DOTTED_NAME.match(fd.package):
            raise DescriptorError(f"package {fd.package!r} is not a dotted identifier")
        pkg = self._derive_package(fd)

        # Go allows one package name per import path
        name, owner = self._packages.setdefault(pkg.import_path, (pkg.name, fd.name))
        if name != pkg.name:
            raise DescriptorError(
                f"Go package {pkg.name} for {fd.name} clashes with {name} for {owner} "
                f"at import path {pkg.import_path!r}"
            )
        return pkg

    def _derive_package(self, fd: FileDescriptor) -> GoPackage:
        if fd.go_package:
            import_path, sep, name = fd.go_package.partition(";")
            import_path = import_path.strip()
            if not _IMPORT_PATH.match(import_path):
                raise DescriptorError(f"go_package {fd.go_package!r} is not a valid import path")
            name = name.strip() if sep else posixpath.basename(import_path)
            if not name:
                raise DescriptorError(f"go_package {fd.go_package!r} yields no package name")
            return GoPackage(import_path, package_name(name))

        if fd.package:
            name = fd.package.replace(".", "_")
        else:
            name = posixpath.splitext(posixpath.basename(fd.name))[0]
        if not name:
            raise DescriptorError(f"cannot derive a package name for {fd.name!r}")
        return GoPackage(posixpath.dirname(fd.name), package_name(name))

    def output_filename_for(self, fd: FileDescriptor, suffix: str) -> str:
        """Return the output file name for a unit: its base name plus suffix."""
        stem = posixpath.splitext(fd.name)[0]
        if self.options.paths == PathsMode.SOURCE_RELATIVE:
            return stem + suffix
        pkg = self.go_package_for(fd)
        return posixpath.join(pkg.import_path, posixpath.basename(stem) + suffix)

    def message_type(self, full_name: str) -> Symbol:
        """Resolve a fully-qualified message name to its Go type."""
        key = full_name.lstrip(".")
        fd = self._messages.get(key)
        if fd is None:
            raise DescriptorError(f"unknown message type {full_name!r}")
        relative = key
        if fd.package:
            if not key.startswith(fd.package + "."):
                raise DescriptorError(
                    f"message type {full_name!r} is outside package {fd.package!r} of {fd.name}"
                )
            relative = key[len(fd.package) + 1 :]
        if not _DOTTED_NAME.match(relative):
            raise DescriptorError(f"message type {full_name!r} is not a dotted identifier")
        go_name = _identifier(camel_case_dotted(relative), f"message type {full_name!r}")
        return Symbol(self.go_package_for(fd), go_name)

    def service_names(self, fd: FileDescriptor, sd: ServiceDescriptor) -> ServiceNames:
        """Derive and claim the identifiers generated for a service."""
        svc = _identifier(camel_case(sd.name), f"service {sd.name!r}")
        pkg = self.go_package_for(fd)
        owner = f"{fd.name}:{sd.name}"

        def local(name: str) -> Symbol:
            return Symbol(pkg, name)

        def claimed(name: str) -> Symbol:
            return local(self.table.claim(pkg.import_path, name, owner))

        return ServiceNames(
            go_name=svc,
            wire_name=fd.qualify(sd.name),
            client_holder=claimed(f"{unexport(svc)}ChannelClient"),
            register_func=claimed(f"RegisterHandler{svc}"),
            constructor=claimed(f"New{svc}ChannelClient"),
            server_iface=local(f"{svc}Server"),
            client_iface=local(f"{svc}Client"),
            service_desc=local(f"_{svc}_serviceDesc"),
        )

    def method_names(
        self, fd: FileDescriptor, svc: ServiceNames, md: MethodDescriptor
    ) -> MethodNames:
        """Derive and claim the identifiers generated for a method."""
        mtd = _identifier(camel_case(md.name), f"method {md.name!r}")
        pkg = svc.client_holder.package
        scope = f"{pkg.import_path}.{svc.client_holder.name}"
        self.table.claim(scope, mtd, f"{fd.name}:{svc.wire_name}.{md.name}")

        return MethodNames(
            go_name=mtd,
            wire_path=f"/{svc.wire_name}/{md.name}",
            stream_client=Symbol(pkg, f"{svc.go_name}_{mtd}Client"),
            stream_client_impl=Symbol(pkg, f"{unexport(svc.go_name)}{mtd}Client"),
        )


def _identifier(name: str, what: str) -> str:
    if not _IDENTIFIER.match(name):
        raise DescriptorError(f"{what} does not yield a valid Go identifier")
    return name
