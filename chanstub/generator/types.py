"""Descriptor and host-protocol types consumed by the generator."""

from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin

from .errors import DescriptorError


@dataclass
class MethodDescriptor(DataClassJsonMixin):
    """Represents a single RPC method.

    input_type and output_type are fully-qualified message names. A leading
    "." (as protoc writes them) is accepted and ignored.
    """

    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False


@dataclass
class ServiceDescriptor(DataClassJsonMixin):
    """Represents a service and its methods, in declaration order."""

    name: str
    methods: list[MethodDescriptor] = field(default_factory=list)


@dataclass
class FileDescriptor(DataClassJsonMixin):
    """Represents one service-definition unit.

    - name: identifying path of the unit, e.g. "echo/echo.proto"
    - package: dotted IDL package, empty when the unit declares none
    - go_package: output module target, "import/path" or "import/path;name"
    - messages: fully-qualified names of the message types declared here
    """

    name: str
    package: str = ""
    go_package: str | None = None
    messages: list[str] = field(default_factory=list)
    services: list[ServiceDescriptor] = field(default_factory=list)

    def qualify(self, name: str) -> str:
        """Return name qualified with this unit's package."""
        if self.package:
            return f"{self.package}.{name}"
        return name


@dataclass
class CodeGenRequest(DataClassJsonMixin):
    """A generation request from the host.

    files holds every unit the request knows about, dependencies included.
    Only the units named in files_to_generate produce output; when it is
    empty, every unit does.
    """

    files: list[FileDescriptor] = field(default_factory=list)
    files_to_generate: list[str] = field(default_factory=list)
    parameter: str = ""

    def units_to_generate(self) -> list[FileDescriptor]:
        if not self.files_to_generate:
            return list(self.files)
        by_name = {fd.name: fd for fd in self.files}
        units = []
        for name in self.files_to_generate:
            if name not in by_name:
                raise DescriptorError(f"{name}: not found in request files")
            units.append(by_name[name])
        return units


@dataclass
class OutputFile(DataClassJsonMixin):
    """A generated file."""

    name: str
    content: str


@dataclass
class CodeGenResponse(DataClassJsonMixin):
    """The generator's answer to a CodeGenRequest."""

    files: list[OutputFile] = field(default_factory=list)
    error: str | None = None
