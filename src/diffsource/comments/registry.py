# topmark:header:start
#
#   project      : DiffSource
#   file         : registry.py
#   file_relpath : src/diffsource/comments/registry.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Registry of comment classifiers by file type.

Concrete classifier modules register themselves with the `register_filetype`
class decorator; `register_all_classifiers` imports every module in this
package so the decorators run.
"""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from diffsource.comments.base import CommentClassifier
from diffsource.config.logging import get_logger
from diffsource.filetypes import get_file_type_registry, resolve_file_type

if TYPE_CHECKING:
    from collections.abc import Callable

    from diffsource.config.logging import DiffSourceLogger
    from diffsource.filetypes import FileType

logger: DiffSourceLogger = get_logger(__name__)


_registry: dict[str, CommentClassifier] = {}

_NO_COMMENTS: CommentClassifier = CommentClassifier()


def register_filetype(
    name: str,
) -> Callable[[type[CommentClassifier]], type[CommentClassifier]]:
    """Class decorator to register a CommentClassifier for a specific file type.

    Args:
        name (str): Name of the file type as defined in the file type registry.

    Returns:
        Callable[[type[CommentClassifier]], type[CommentClassifier]]: A decorator that
            registers the class.

    Raises:
        ValueError: If the file type name is unknown.
    """
    file_type_registry = get_file_type_registry()
    if name not in file_type_registry:
        raise ValueError(f"Unknown file type: {name}")

    file_type: FileType = file_type_registry[name]

    def decorator(cls: type[CommentClassifier]) -> type[CommentClassifier]:
        """Instantiate ``cls``, bind it to the file type and register it.

        Raises:
            ValueError: If the file type already has a registered classifier.
        """
        logger.debug("Registering classifier %s for file type: %s", cls.__name__, file_type.name)
        if file_type.name in _registry:
            raise ValueError(f"File type '{file_type.name}' already has a registered classifier.")
        instance = cls()
        instance.file_type = file_type
        _registry[file_type.name] = instance
        return cls

    return decorator


def get_classifier_registry() -> dict[str, CommentClassifier]:
    """Return the registry of file type names to classifier instances."""
    return _registry


def get_classifier(name: str) -> CommentClassifier:
    """Return the classifier registered for file type ``name`` (or the no-comment default)."""
    register_all_classifiers()
    return _registry.get(name, _NO_COMMENTS)


def get_classifier_for_path(
    path: PurePath | None,
    *,
    default: CommentClassifier | None = None,
) -> CommentClassifier:
    """Select the classifier for ``path`` by file type.

    Args:
        path (PurePath | None): Path (or display name) of the source, if any.
        default (CommentClassifier | None): Classifier for unrecognized types;
            the no-comment classifier when None.

    Returns:
        CommentClassifier: The registered classifier or ``default``.
    """
    register_all_classifiers()
    fallback: CommentClassifier = default if default is not None else _NO_COMMENTS
    if path is None:
        return fallback
    file_type: FileType | None = resolve_file_type(path)
    if file_type is None:
        return fallback
    classifier: CommentClassifier | None = _registry.get(file_type.name)
    if classifier is None:
        logger.debug("File type '%s' has no registered classifier", file_type.name)
        return fallback
    return classifier


_registered: bool = False


def register_all_classifiers() -> None:
    """Import all classifier modules in this package (idempotent)."""
    global _registered
    if _registered:
        return
    _registered = True
    package_dir = Path(__file__).parent
    for module_info in pkgutil.iter_modules([str(package_dir)]):
        if not module_info.ispkg and module_info.name not in {"base", "registry"}:
            importlib.import_module(f"{__package__}.{module_info.name}")
