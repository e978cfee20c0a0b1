"""chanstub stub generator."""

from .errors import DescriptorError as DescriptorError
from .errors import GenerationError as GenerationError
from .errors import OptionsError as OptionsError
from .options import GeneratorOptions as GeneratorOptions
from .options import parse_parameter as parse_parameter
from .plugin import generate as generate
from .plugin import handle_request as handle_request
from .shapes import CallShape as CallShape
from .shapes import classify as classify
from .shapes import plan_service as plan_service
from .types import *
