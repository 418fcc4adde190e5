import logging
import posixpath
import zipfile
from typing import IO, Optional

from gamefscore.utils import VirtualFileSystemError, normalize_separators, overrides

from . import VirtualFileSystem

logger = logging.getLogger(__name__)


def clean_path(path: str) -> str:
    result = posixpath.normpath(normalize_separators(path)).lstrip('/')
    while result.startswith('../'):
        result = result[3:]
    return result


class ObbVirtualFileSystem(VirtualFileSystem):
    """
    Android expansion files (.obb) are plain ZIP archives. Directory members are not listed
    because only files can be registered.
    """

    def __init__(self) -> None:
        super().__init__()
        self.archive: Optional[zipfile.ZipFile] = None
        self.names: list[str] = []
        self.files: dict[str, zipfile.ZipInfo] = {}

    @overrides(VirtualFileSystem)
    def attach(self, fileObject: IO[bytes]) -> bool:
        try:
            archive = zipfile.ZipFile(fileObject, 'r')
        except (zipfile.BadZipFile, OSError, ValueError) as exception:
            logger.info(
                "Failed to read ZIP directory because of: %s", exception, exc_info=logger.isEnabledFor(logging.DEBUG)
            )
            return False

        self.archive = archive
        self.fileObject = fileObject
        for info in archive.infolist():
            if info.is_dir():
                continue
            path = clean_path(info.filename)
            if not path or path in self.files:
                continue
            self.names.append(path)
            self.files[path] = info
        return True

    @overrides(VirtualFileSystem)
    def file_count(self) -> int:
        return len(self.names)

    @overrides(VirtualFileSystem)
    def file_name_at(self, index: int) -> str:
        return self.names[index]

    @overrides(VirtualFileSystem)
    def size_of(self, path: str) -> int:
        info = self.files.get(normalize_separators(path))
        return info.file_size if info else 0

    @overrides(VirtualFileSystem)
    def open_reader(self, path: str) -> IO[bytes]:
        if self.archive is None:
            raise VirtualFileSystemError("No OBB file has been attached!")
        info = self.files.get(normalize_separators(path))
        if info is None:
            raise FileNotFoundError(f"File '{path}' does not exist in the OBB file!")
        # zipfile shares the underlying file object between all opened members.
        return self.archive.open(info, 'r')

    @overrides(VirtualFileSystem)
    def close(self) -> None:
        if self.archive is not None:
            self.archive.close()
            self.archive = None
        super().close()
