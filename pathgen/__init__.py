"""Prompt-template driven path planning and file generation."""

from .errors import (
    ContentGenerationError,
    FileSystemError,
    InvalidPath,
    MalformedResponse,
    PathgenError,
    ProviderError,
    TemplateStoreError,
)
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "ContentGenerationError",
    "FileSystemError",
    "InvalidPath",
    "MalformedResponse",
    "Orchestrator",
    "PathgenError",
    "ProviderError",
    "TemplateStoreError",
    "__version__",
]
