from .config import Config, NamingContext, OutputSettings, load_config
from .driver import generate
from .errors import ConfigurationError, DescriptorError, GeneratorError, ResolutionError
from .loader import load_descriptors
from .naming import normalize
from .renderer import DefaultRenderer, OverrideRenderer, Renderer
from .state import GenerationResult, OperationArtifact, OperationModule, SchemaArtifact, State

__all__ = [
    "Config",
    "NamingContext",
    "OutputSettings",
    "load_config",
    "generate",
    "ConfigurationError",
    "DescriptorError",
    "GeneratorError",
    "ResolutionError",
    "load_descriptors",
    "normalize",
    "DefaultRenderer",
    "OverrideRenderer",
    "Renderer",
    "GenerationResult",
    "OperationArtifact",
    "OperationModule",
    "SchemaArtifact",
    "State",
]
