"""Errors raised while generating stubs."""


class GenerationError(RuntimeError):
    """Raised when a generation request cannot be completed."""


class DescriptorError(GenerationError):
    """Raised when a descriptor is malformed or yields colliding names."""


class OptionsError(GenerationError):
    """Raised when the generator parameter string is invalid."""
