"""Generator options parsed from the plugin parameter string."""

from dataclasses import dataclass, replace
from enum import StrEnum

from .errors import OptionsError


class PathsMode(StrEnum):
    """Where output files are placed."""

    IMPORT = "import"  # Under the Go import path of the unit
    SOURCE_RELATIVE = "source_relative"  # Next to the unit


class ContextFlavor(StrEnum):
    """Which package provides context.Context in generated code."""

    XNET = "x/net"
    STD = "std"


CONTEXT_IMPORTS = {
    ContextFlavor.XNET: "golang.org/x/net/context",
    ContextFlavor.STD: "context",
}


@dataclass(frozen=True)
class GeneratorOptions:
    """Settings for one generation run."""

    paths: PathsMode = PathsMode.IMPORT
    context: ContextFlavor = ContextFlavor.XNET

    @property
    def context_import(self) -> str:
        return CONTEXT_IMPORTS[self.context]

    def override(self, paths: str | None = None, context: str | None = None) -> "GeneratorOptions":
        """Return a copy with the given values replaced (None keeps the current one)."""
        result = self
        if paths is not None:
            result = replace(result, paths=_choice(PathsMode, "paths", paths))
        if context is not None:
            result = replace(result, context=_choice(ContextFlavor, "context", context))
        return result


def _choice(enum_type: type[StrEnum], key: str, value: str) -> StrEnum:
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(v.value for v in enum_type)
        raise OptionsError(f"invalid value {value!r} for {key} (expected one of: {allowed})") from None


def parse_parameter(parameter: str | None) -> GeneratorOptions:
    """Parse a protoc-style parameter string such as "paths=source_relative,context=std"."""
    values: dict[str, str] = {}
    for item in (parameter or "").split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep:
            raise OptionsError(f"option {key!r} has no value")
        key = key.strip()
        if key not in ("paths", "context"):
            raise OptionsError(f"unknown option {key!r}")
        values[key] = value.strip()

    return GeneratorOptions().override(paths=values.get("paths"), context=values.get("context"))
