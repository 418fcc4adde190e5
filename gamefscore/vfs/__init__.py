"""
This module offers the VirtualFileSystem interface for archive containers, which are transparently mounted
while scanning the game folder. A virtual file system is attached to an opened file object and then exposes
a flat list of contained file paths, their sizes, and readers for their contents.

Implementations are chosen solely by file extension. See the 'factory' submodule for the mapping.

Example:

    from gamefscore.vfs.factory import open_virtual_file_system

    with open_virtual_file_system("main.obb") as fileSystem:
        for i in range(fileSystem.file_count()):
            print(fileSystem.file_name_at(i), fileSystem.size_of(fileSystem.file_name_at(i)))
"""

from abc import ABC, abstractmethod
from typing import IO, Optional


class VirtualFileSystem(ABC):
    """
    Generic class representing one opened archive container.

    The file system owns the attached file object and its own directory table.
    It does not own the registry entries that refer to it.
    """

    def __init__(self) -> None:
        self.fileObject: Optional[IO[bytes]] = None

    @abstractmethod
    def attach(self, fileObject: IO[bytes]) -> bool:
        """
        Reads the container directory from the given file object.
        Returns False if it is not a valid container of this format. Should not raise for malformed input.
        On success, the file system takes ownership of the file object.
        """

    @abstractmethod
    def file_count(self) -> int:
        pass

    @abstractmethod
    def file_name_at(self, index: int) -> str:
        pass

    @abstractmethod
    def size_of(self, path: str) -> int:
        """Returns the uncompressed size in bytes or 0 if the path does not exist."""

    @abstractmethod
    def open_reader(self, path: str) -> IO[bytes]:
        """Raises FileNotFoundError if the path does not exist inside this container."""

    def file_names(self) -> list[str]:
        return [self.file_name_at(i) for i in range(self.file_count())]

    def close(self) -> None:
        if self.fileObject is not None:
            self.fileObject.close()
            self.fileObject = None

    def __enter__(self):
        return self

    def __exit__(self, exception_type, exception_value, exception_traceback):
        self.close()
