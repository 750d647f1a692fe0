"""Files picked for upload but not uploaded yet."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple, Union

from clouddrive.client.formatting import guess_content_type

logger = logging.getLogger(__name__)


@dataclass
class PendingFile:
    """A selected file, held in memory until its batch is uploaded."""
    name: str
    size: int
    content_type: str
    data: bytes = field(repr=False)

    @property
    def identity(self) -> Tuple[str, int]:
        """Two files are the same selection if name and size match. Content is not compared."""
        return (self.name, self.size)

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str | None = None) -> "PendingFile":
        return cls(
            name=name,
            size=len(data),
            content_type=guess_content_type(name) if content_type is None else content_type,
            data=data,
        )

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "PendingFile":
        path = Path(path)
        return cls.from_bytes(path.name, path.read_bytes())


class FileSelection:
    """The pending-file set of one controller."""

    def __init__(self, files: Iterable[PendingFile] = ()):
        self._files: List[PendingFile] = []
        self.add(files)

    def add(self, files: Iterable[PendingFile]) -> int:
        """
        Add files, skipping any whose (name, size) is already selected.

        Returns the number of files actually added.
        """
        added = 0
        for file in files:
            if any(existing.identity == file.identity for existing in self._files):
                logger.debug(f"Skipping duplicate selection {file.name} ({file.size} bytes)")
                continue
            self._files.append(file)
            added += 1
        return added

    def remove(self, index: int) -> PendingFile:
        return self._files.pop(index)

    def clear(self) -> None:
        self._files.clear()

    @property
    def files(self) -> List[PendingFile]:
        return list(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __iter__(self) -> Iterator[PendingFile]:
        return iter(list(self._files))

    def __bool__(self) -> bool:
        return bool(self._files)
