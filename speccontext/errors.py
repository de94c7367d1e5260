"""Exception types raised by the speccontext engine and its collaborators."""


class SpecContextError(Exception):
    """Base class for all speccontext errors."""


class DocumentNotFound(SpecContextError, KeyError):
    """A document path does not exist in the context store."""

    def __init__(self, path: str):
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"Document not found: {self.path}"


class InvalidDocumentPath(SpecContextError, ValueError):
    """A document path is malformed or escapes its base directory."""


class LLMConfigurationError(SpecContextError):
    """The text-generation client is missing provider, key or model settings."""


class LLMResponseError(SpecContextError):
    """The text-generation service returned no usable content."""
