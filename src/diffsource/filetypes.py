# topmark:header:start
#
#   project      : DiffSource
#   file         : filetypes.py
#   file_relpath : src/diffsource/filetypes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""File type definitions used to select a comment classifier.

A `FileType` matches paths by extension or by exact file name. The registry is
built lazily on first access and cached thereafter; callers should treat the
returned mapping as read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Final

from diffsource.config.logging import get_logger

if TYPE_CHECKING:
    from pathlib import PurePath

    from diffsource.config.logging import DiffSourceLogger

logger: DiffSourceLogger = get_logger(__name__)


@dataclass(frozen=True)
class FileType:
    """A named family of files sharing one comment syntax.

    Attributes:
        name (str): Stable identifier (e.g. ``"python"``).
        extensions (tuple[str, ...]): Lower-case extensions including the dot.
        filenames (tuple[str, ...]): Exact file names (e.g. ``"Makefile"``).
        description (str): Human-readable description.
    """

    name: str
    extensions: tuple[str, ...] = ()
    filenames: tuple[str, ...] = ()
    description: str = ""

    def matches(self, path: PurePath) -> bool:
        """Return True if ``path`` belongs to this file type."""
        if path.name in self.filenames:
            return True
        suffix: str = path.suffix.lower()
        return bool(suffix) and suffix in self.extensions


FILETYPES: Final[list[FileType]] = [
    # C-style
    FileType("c", (".c", ".h"), description="C source"),
    FileType("cpp", (".cpp", ".cc", ".cxx", ".hpp", ".hh", ".hxx"), description="C++ source"),
    FileType("cs", (".cs",), description="C#"),
    FileType("css", (".css", ".scss", ".less"), description="Stylesheets"),
    FileType("go", (".go",), description="Go"),
    FileType("java", (".java",), description="Java"),
    FileType("javascript", (".js", ".mjs", ".cjs", ".jsx"), description="JavaScript"),
    FileType("jsonc", (".jsonc",), description="JSON with comments"),
    FileType("kotlin", (".kt", ".kts"), description="Kotlin"),
    FileType("rust", (".rs",), description="Rust"),
    FileType("swift", (".swift",), description="Swift"),
    FileType("typescript", (".ts", ".tsx"), description="TypeScript"),
    # Pound
    FileType("dockerfile", (), ("Dockerfile",), description="Dockerfile"),
    FileType("ini", (".ini", ".cfg", ".conf"), description="INI-style configuration"),
    FileType("makefile", (".mk",), ("Makefile", "GNUmakefile"), description="Makefile"),
    FileType("perl", (".pl", ".pm"), description="Perl"),
    FileType("python", (".py", ".pyi", ".pyw"), description="Python"),
    FileType("r", (".r",), description="R"),
    FileType("ruby", (".rb",), ("Rakefile", "Gemfile"), description="Ruby"),
    FileType("shell", (".sh", ".bash", ".zsh"), description="Shell script"),
    FileType("toml", (".toml",), description="TOML"),
    FileType("yaml", (".yaml", ".yml"), description="YAML"),
    # Markup
    FileType("html", (".html", ".htm", ".xhtml"), description="HTML"),
    FileType("markdown", (".md", ".markdown"), description="Markdown"),
    FileType("svg", (".svg",), description="SVG"),
    FileType("xml", (".xml", ".xsd", ".xsl", ".xslt", ".plist"), description="XML"),
]


@lru_cache(maxsize=1)
def get_file_type_registry() -> dict[str, FileType]:
    """Return the registry of file type names to `FileType` definitions."""
    registry: dict[str, FileType] = {}
    for ft in FILETYPES:
        if ft.name in registry:
            logger.warning("Duplicate file type definition ignored: %s", ft.name)
            continue
        registry[ft.name] = ft
    return registry


def resolve_file_type(path: PurePath) -> FileType | None:
    """Return the first file type matching ``path``, or None."""
    for ft in get_file_type_registry().values():
        if ft.matches(path):
            logger.debug("File type '%s' detected for: %s", ft.name, path)
            return ft
    logger.debug("No file type for: %s", path)
    return None
