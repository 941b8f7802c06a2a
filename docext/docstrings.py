"""Rewrite Python docstrings with KaTeX math and inlined images.

``@docext`` is the host-side sink for the pipeline: it reads an object's
docstring, renders it and writes the result back, so documentation tools that
render docstrings as Markdown show typeset math and embedded images.
"""

import inspect
from dataclasses import dataclass
from enum import StrEnum, auto
from pathlib import Path
from types import FunctionType, ModuleType
from typing import Any, TypeVar, overload

from loguru import logger

from docext.config import Settings
from docext.exceptions import MissingDocumentationError
from docext.pipeline import render_doc

T = TypeVar("T")


class DocumentableKind(StrEnum):
    MODULE = auto()
    CLASS = auto()
    FUNCTION = auto()
    PROPERTY = auto()


@dataclass(frozen=True)
class Documentable:
    """An object whose docstring can be read and replaced."""

    kind: DocumentableKind
    target: Any

    @classmethod
    def of(cls, obj: Any) -> "Documentable":
        """Classify ``obj``; staticmethod and classmethod wrappers resolve to their function."""
        if isinstance(obj, (staticmethod, classmethod)):
            obj = obj.__func__
        if isinstance(obj, ModuleType):
            return cls(DocumentableKind.MODULE, obj)
        if isinstance(obj, type):
            return cls(DocumentableKind.CLASS, obj)
        if isinstance(obj, FunctionType):
            return cls(DocumentableKind.FUNCTION, obj)
        if isinstance(obj, property):
            return cls(DocumentableKind.PROPERTY, obj)
        raise TypeError(f"docext cannot document objects of type {type(obj).__name__}")

    @property
    def name(self) -> str:
        match self.kind:
            case DocumentableKind.MODULE:
                return self.target.__name__
            case DocumentableKind.CLASS | DocumentableKind.FUNCTION:
                return f"{self.target.__module__}.{self.target.__qualname__}"
            case DocumentableKind.PROPERTY:
                fget = self.target.fget
                return f"property {fget.__qualname__}" if fget else "property"

    def get_doc(self) -> str | None:
        # Classes must not inherit a docstring from their bases here
        if self.kind is DocumentableKind.CLASS:
            return self.target.__dict__.get("__doc__")
        return self.target.__doc__

    def set_doc(self, doc: str) -> None:
        self.target.__doc__ = doc

    def source_dir(self) -> Path:
        """Directory of the file defining the object, or the working directory if unknown."""
        source = self.target.fget if self.kind is DocumentableKind.PROPERTY else self.target
        try:
            filename = inspect.getsourcefile(source) or inspect.getfile(source)
        except TypeError:
            logger.warning(f"No source file for {self.name}, resolving images against {Path.cwd()}")
            return Path.cwd()
        return Path(filename).resolve().parent


def apply(obj: T, base_dir: Path | None = None, settings: Settings | None = None) -> T:
    """Render the docstring of ``obj`` in place and return ``obj``.

    Raises:
        MissingDocumentationError: If ``obj`` has no docstring or only whitespace.
        TypeError: If ``obj`` is not a module, class, function or property.
    """
    item = Documentable.of(obj)
    doc = item.get_doc()
    if not doc or not doc.strip():
        raise MissingDocumentationError(item.name)

    resolved = base_dir if base_dir is not None else item.source_dir()
    item.set_doc(render_doc(inspect.cleandoc(doc), resolved, settings))
    return obj


@overload
def docext(obj: T, /) -> T: ...


@overload
def docext(*, base_dir: Path | None = None, settings: Settings | None = None) -> Any: ...


def docext(obj: Any = None, /, *, base_dir: Path | None = None, settings: Settings | None = None) -> Any:
    """Decorator form of ``apply``, usable bare or with arguments.

    Example::

        @docext
        def area(r):
            \"\"\"Area of a circle, $A = \\pi r^2$.\"\"\"
    """
    if obj is None:
        return lambda target: apply(target, base_dir, settings)
    return apply(obj, base_dir, settings)
