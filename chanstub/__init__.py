"""chanstub - Channel-based gRPC client stub generator for Go."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("chanstub")
except PackageNotFoundError:
    __version__ = "(local)"
