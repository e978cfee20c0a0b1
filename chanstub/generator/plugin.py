"""Request handling: runs every requested unit through the generator."""

import logging
from pathlib import Path

from .assembler import Sink, emit_unit
from .errors import DescriptorError, GenerationError
from .naming import GoNames, NameTable
from .options import GeneratorOptions, parse_parameter
from .types import CodeGenRequest, CodeGenResponse, OutputFile

logger = logging.getLogger(__name__)


def generate(
    request: CodeGenRequest, sink: Sink, options: GeneratorOptions | None = None
) -> list[str]:
    """Generate stubs for every requested unit, in request order.

    Stops at the first failing unit. Descriptor problems are re-raised as a
    GenerationError naming the unit; sink failures propagate unchanged.
    Returns the names of the emitted files.
    """
    if options is None:
        options = parse_parameter(request.parameter)

    try:
        names = GoNames(request.files, options, NameTable())
    except DescriptorError as e:
        # Already names the offending unit
        raise GenerationError(str(e)) from e

    emitted: list[str] = []
    for fd in request.units_to_generate():
        try:
            name = emit_unit(fd, names, sink)
        except DescriptorError as e:
            raise GenerationError(f"{fd.name or '<unnamed>'}: {e}") from e
        if name is not None:
            emitted.append(name)

    return emitted


def handle_request(request: CodeGenRequest, options: GeneratorOptions | None = None) -> CodeGenResponse:
    """Answer a request. A failure yields an error and no files."""
    response = CodeGenResponse()

    def collect(name: str, content: str) -> None:
        response.files.append(OutputFile(name=name, content=content))

    try:
        generate(request, collect, options)
    except GenerationError as e:
        logger.debug(f"Request failed: {e}")
        return CodeGenResponse(error=str(e))

    return response


def directory_sink(root: str | Path) -> Sink:
    """Return a sink writing files below a root directory."""
    root_path = Path(root)

    def write(name: str, content: str) -> None:
        path = root_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    return write
