"""Error types raised by Plume.

Every stage of the pipeline reports failures through one of these classes
so the build can decide which failures skip a single document and which
ones stop a stage.

Hierarchy:
- PlumeError: base class.
- DocumentError: a single source document could not be turned into a Page.
- RenderError: markdown conversion failed (degrades to empty content).
- TemplateError: a template is missing, unparsable or failed to execute.
- OutputError: the output tree could not be created or written.
- ConfigError: plume.yaml could not be parsed.
"""

from __future__ import annotations

from pathlib import Path


class PlumeError(Exception):
    """Base class for all Plume errors."""


class DocumentError(PlumeError):
    """Error tied to one source document.

    Attributes:
        source_path: Path to the document that caused the error.
        message: Human-readable error message.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        source_path: Path | None,
        message: str,
        cause: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.cause = cause
        prefix = f"{source_path}: " if source_path is not None else ""
        suffix = f" ({cause})" if cause is not None else ""
        super().__init__(f"{prefix}{message}{suffix}")


class MalformedDocument(DocumentError):
    """Front matter delimiters are missing or unterminated."""


class MetadataDecodeError(DocumentError):
    """The front matter block is not valid TOML or has a badly typed field."""


class DuplicateSlugError(DocumentError):
    """Another document in the same build already uses this slug."""


class ContentReadError(DocumentError):
    """The source document could not be read."""


class RenderError(PlumeError):
    """Markdown to HTML conversion failed."""

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        source_path: Path | None = None,
    ):
        self.message = message
        self.cause = cause
        self.source_path = source_path
        prefix = f"{source_path}: " if source_path is not None else ""
        suffix = f" ({cause})" if cause is not None else ""
        super().__init__(f"{prefix}{message}{suffix}")


class TemplateError(PlumeError):
    """A template could not be located, parsed or executed.

    Attributes:
        template: Name of the template involved.
        cause: The underlying Jinja2 exception, if any.
    """

    def __init__(self, template: str, message: str, cause: Exception | None = None):
        self.template = template
        self.cause = cause
        super().__init__(f"{template}: {message}")


class OutputError(PlumeError):
    """Creating a directory or writing a file in the output tree failed."""

    def __init__(self, path: Path, message: str, cause: Exception | None = None):
        self.path = path
        self.cause = cause
        suffix = f" ({cause})" if cause is not None else ""
        super().__init__(f"{path}: {message}{suffix}")


class ConfigError(PlumeError):
    """plume.yaml cannot be read or is not valid YAML."""
