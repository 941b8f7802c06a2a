from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docext.models import Range


class DocextError(Exception):
    """Base exception for all documentation transformation errors."""

    def __init__(self, message: str):
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for diagnostics output."""
        return {"detail": str(self), "kind": type(self).__name__}


class InvalidMathBlockError(DocextError):
    """Raised when a rendered math segment contains a blank line.

    Markdown treats the blank line as a paragraph break, which would split the
    math across blocks before the typesetter ever sees it.
    """

    def __init__(self, span: "Range", payload: str, *, message: str | None = None):
        super().__init__(
            message or f"Math block at {span.start}..{span.end} contains a blank line: {payload!r}"
        )
        self.span = span
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "start": self.span.start, "end": self.span.end}


class ImageError(DocextError):
    """Base for failures tied to a local image file."""

    def __init__(self, path: Path, message: str):
        super().__init__(message)
        self.path = path

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "path": str(self.path)}


class ImageNotFoundError(ImageError):
    """Raised when a local image cannot be statted or read."""

    def __init__(self, path: Path, *, message: str | None = None):
        super().__init__(path, message or f"Failed to read image: {path}")


class ImageTooLargeError(ImageError):
    """Raised when a local image exceeds the size ceiling."""

    def __init__(self, path: Path, size: int, max_size: int, *, message: str | None = None):
        super().__init__(path, message or f"Image file too large: {path} ({size} bytes), max size is {max_size} bytes")
        self.size = size
        self.max_size = max_size

    def to_dict(self) -> dict[str, Any]:
        return {**super().to_dict(), "size": self.size, "max_size": self.max_size}


class UnsupportedImageFormatError(ImageError):
    """Raised when an image path has no extension or one outside the MIME table."""

    def __init__(self, path: Path, extension: str | None, *, message: str | None = None):
        if message is None:
            message = (
                f"Image path has no extension: {path}"
                if not extension
                else f"Unsupported image format: {extension} ({path})"
            )
        super().__init__(path, message)
        self.extension = extension


class MissingDocumentationError(DocextError):
    """Raised when an object handed to the rewriter has no documentation to transform."""

    def __init__(self, name: str, *, message: str | None = None):
        super().__init__(message or f"{name} has no docstring; docext only applies to documented objects")
        self.name = name
