"""Assembly of per-unit output files and their emission."""

import logging
from collections.abc import Callable

from . import golang
from .decls import GoFile
from .naming import GoNames
from .synth import synthesize_service
from .types import FileDescriptor

logger = logging.getLogger(__name__)

GENERATOR_NAME = "chanstub"
OUTPUT_SUFFIX = ".pb.grpchan.go"

Sink = Callable[[str, str], None]


def assemble(fd: FileDescriptor, names: GoNames) -> GoFile | None:
    """Collect every service's declarations for a unit into one file.

    Returns None when the unit declares no services.
    """
    if not fd.services:
        return None

    go_file = GoFile(
        name=names.output_filename_for(fd, OUTPUT_SUFFIX),
        package=names.go_package_for(fd),
        header=[
            f"Code generated by {GENERATOR_NAME}. DO NOT EDIT.",
            f"source: {fd.name}",
        ],
    )
    for sd in fd.services:
        stubs = synthesize_service(fd, sd, names)
        go_file.decls.extend(stubs.declarations())
        logger.debug(f"{fd.name}: {sd.name} -> {len(stubs.methods)} method(s)")

    return go_file


def emit_unit(fd: FileDescriptor, names: GoNames, sink: Sink) -> str | None:
    """Assemble, render and emit the file for a unit.

    Returns the emitted file name, or None when the unit was skipped.
    """
    go_file = assemble(fd, names)
    if go_file is None:
        logger.debug(f"{fd.name}: no services, skipping")
        return None

    sink(go_file.name, golang.render(go_file))
    logger.info(f"Generated {go_file.name} from {fd.name}")
    return go_file.name
