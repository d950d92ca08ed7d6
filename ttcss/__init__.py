"""
Process the contents of tagged template literals (css`...`) in JavaScript
and TypeScript modules and re-embed the results safely.
"""

from .config import ProcessorConfig, ProcessTagConfig, ResolvedProcessorConfig, TagSetOptions, make_tag_map
from .errors import (
    DiscoveryError,
    DuplicateTagError,
    OverlappingEditsError,
    ProcessorError,
    TagConfigError,
    TaggedTemplateError,
)
from .plugin import TaggedTemplateTransformer, TransformOutput, transform_code
from .processor import Processor, ProcessResult
from .transforms import make_output_escaper, pipe, standard_output_transform

__version__ = "0.2.0"

__all__ = [
    "ProcessorConfig",
    "ProcessTagConfig",
    "ResolvedProcessorConfig",
    "TagSetOptions",
    "make_tag_map",
    "DiscoveryError",
    "DuplicateTagError",
    "OverlappingEditsError",
    "ProcessorError",
    "TagConfigError",
    "TaggedTemplateError",
    "TaggedTemplateTransformer",
    "TransformOutput",
    "transform_code",
    "Processor",
    "ProcessResult",
    "make_output_escaper",
    "pipe",
    "standard_output_transform",
]
