import dataclasses
import enum
import logging
from collections.abc import Iterator
from typing import Optional

from .vfs import VirtualFileSystem

logger = logging.getLogger(__name__)

# DC Universe Online alone has more than 20k upk files.
MAX_GAME_FILES = 32768
MAX_FOREIGN_FILES = 32768


class ScanStatus(enum.Enum):
    CONTINUE = 0
    # The registry is full. Everything registered so far stays valid.
    STOP_CAPACITY = 1


@dataclasses.dataclass
class FileEntry:
    # fmt: off
    # Relative to the root directory with '/' separators for real files, or the path
    # inside the virtual file system for mounted files.
    relativeName : str
    isPackage    : bool
    sizeInKb     : int                         = 0
    # Non-owning back reference. None for files on the real file system.
    fileSystem   : Optional[VirtualFileSystem] = dataclasses.field(default=None, repr=False, compare=False)
    # fmt: on

    @property
    def shortName(self) -> str:
        return self.relativeName.rsplit('/', 1)[-1]

    @property
    def extension(self) -> str:
        shortName = self.shortName
        return shortName.rsplit('.', 1)[1] if '.' in shortName else ''

    @property
    def is_virtual(self) -> bool:
        return self.fileSystem is not None


class FileRegistry:
    """
    Ordered, append-only collection of file entries with a hard capacity limit.
    The registration order is the precedence order for lookups.
    The registry also owns all virtual file systems that were mounted for it.
    """

    def __init__(self, capacity: int = MAX_GAME_FILES) -> None:
        if capacity <= 0:
            raise ValueError("Registry capacity must be positive!")
        self.capacity = capacity
        self.entries: list[FileEntry] = []
        self.fileSystems: list[VirtualFileSystem] = []
        self.packageCount = 0
        self.foreignCount = 0

    @property
    def fileCount(self) -> int:
        return len(self.entries)

    def is_full(self) -> bool:
        return len(self.entries) >= self.capacity

    def add(self, entry: FileEntry) -> None:
        if self.is_full():
            raise OverflowError(f"Cannot register more than {self.capacity} files!")
        self.entries.append(entry)
        if entry.isPackage:
            self.packageCount += 1

    def add_file_system(self, fileSystem: VirtualFileSystem) -> None:
        self.fileSystems.append(fileSystem)

    def count_foreign(self) -> int:
        self.foreignCount += 1
        return self.foreignCount

    def close(self) -> None:
        for fileSystem in self.fileSystems:
            fileSystem.close()

    def clear(self) -> None:
        self.close()
        self.entries.clear()
        self.fileSystems.clear()
        self.packageCount = 0
        self.foreignCount = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self.entries)

    def __getitem__(self, index: int) -> FileEntry:
        return self.entries[index]
