"""Archive reader - jar/war/zip artifacts as a hierarchical entry tree.

Two views over the same file:

- ArchiveReader.walk(): lazy depth-first traversal rooted at "/", used to
  locate a specific entry (embedded pom.xml, plugin descriptor). Stopping
  the iteration is the early-return signal; every call starts a new walk.
- iter_entry_names(): plain sequential enumeration in archive order, used
  for content scanning.

Both release the underlying file handle on every exit path.
"""

import zipfile
import zlib
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import ArchiveFormatError


@dataclass(frozen=True)
class ArchiveEntry:
    """One node of the archive tree, addressed by its absolute path."""

    path: str
    is_dir: bool = False

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def __str__(self) -> str:
        return self.path


@dataclass
class _Node:
    entry: ArchiveEntry
    member: str | None = None
    children: dict[str, "_Node"] = field(default_factory=dict)


class ArchiveReader:
    """Random-access view over an open zip archive."""

    def __init__(self, zip_file: zipfile.ZipFile, path: Path | str):
        self.path = path
        self._zip = zip_file
        self._root: _Node | None = None

    def _tree(self) -> _Node:
        if self._root is None:
            root = _Node(ArchiveEntry("/", is_dir=True))
            for info in self._zip.infolist():
                parts = [p for p in info.filename.split("/") if p]
                if not parts:
                    continue
                node = root
                for depth, part in enumerate(parts):
                    is_last = depth == len(parts) - 1
                    child = node.children.get(part)
                    if child is None:
                        child_path = "/" + "/".join(parts[: depth + 1])
                        is_dir = not is_last or info.is_dir()
                        child = _Node(ArchiveEntry(child_path, is_dir=is_dir))
                        node.children[part] = child
                    node = child
                if not info.is_dir():
                    node.member = info.filename
            self._root = root
        return self._root

    def walk(self) -> Iterator[ArchiveEntry]:
        """Yield every entry below "/" depth-first, directories before their contents."""

        def visit(node: _Node) -> Iterator[ArchiveEntry]:
            for child in node.children.values():
                yield child.entry
                if child.entry.is_dir:
                    yield from visit(child)

        return visit(self._tree())

    def find_first(self, predicate: Callable[[ArchiveEntry], bool]) -> ArchiveEntry | None:
        """Return the first file entry in walk order matching predicate.

        The walk stops at the match; later entries are never visited.
        """
        for entry in self.walk():
            if not entry.is_dir and predicate(entry):
                return entry
        return None

    def read(self, entry: ArchiveEntry | str) -> bytes:
        """Read the contents of a file entry."""
        path = entry.path if isinstance(entry, ArchiveEntry) else entry
        node = self._tree()
        for part in (p for p in path.split("/") if p):
            node = node.children.get(part)
            if node is None:
                raise FileNotFoundError(f"{path} not found in {self.path}")
        if node.member is None:
            raise IsADirectoryError(f"{path} is a directory in {self.path}")
        # NotImplementedError: unsupported compression, RuntimeError: encrypted entry
        try:
            return self._zip.read(node.member)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, EOFError) as e:
            raise ArchiveFormatError(
                f"Unreadable entry {path} in {self.path}: {e}", self.path
            ) from e

    def entry_names(self) -> list[str]:
        """Entry names in archive order, as stored."""
        return self._zip.namelist()


@contextmanager
def open_archive(path: Path | str) -> Iterator[ArchiveReader]:
    """Open an artifact as an archive for the duration of the with-block.

    Raises:
        ArchiveFormatError: the file is not a valid zip archive
        OSError: the file is missing or unreadable
    """
    try:
        zip_file = zipfile.ZipFile(path)
    except zipfile.BadZipFile as e:
        raise ArchiveFormatError(f"Not a valid archive: {path}", path) from e
    try:
        yield ArchiveReader(zip_file, path)
    finally:
        zip_file.close()


def iter_entry_names(path: Path | str) -> Iterator[str]:
    """Sequentially yield entry names of an archive.

    The archive is closed when the generator is exhausted, closed or
    garbage collected.
    """
    with open_archive(path) as archive:
        yield from archive.entry_names()
