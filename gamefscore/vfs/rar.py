import contextlib
import logging
import sys
from typing import IO

from gamefscore.utils import VirtualFileSystemError, normalize_separators, overrides

from . import VirtualFileSystem
from .obb import clean_path

with contextlib.suppress(ImportError):
    import rarfile

logger = logging.getLogger(__name__)


def is_rar_file(fileObject: IO[bytes]) -> bool:
    # RAR 5.0 signature: 0x52 0x61 0x72 0x21 0x1A 0x07 0x01 0x00, RAR 4.x: 0x52 0x61 0x72 0x21 0x1A 0x07 0x00
    oldPosition = fileObject.tell()
    try:
        return fileObject.read(6) == b'Rar!\x1a\x07'
    finally:
        fileObject.seek(oldPosition)


class RarVirtualFileSystem(VirtualFileSystem):
    # Basically the same as ObbVirtualFileSystem because the rarfile interface mirrors zipfile.

    def __init__(self) -> None:
        super().__init__()
        self.archive = None
        self.names: list[str] = []
        self.files: dict = {}

    @overrides(VirtualFileSystem)
    def attach(self, fileObject: IO[bytes]) -> bool:
        if 'rarfile' not in sys.modules:
            logger.warning("Did not find the rarfile module. Try: pip install rarfile")
            return False

        if not is_rar_file(fileObject):
            return False

        try:
            # Raise on broken headers instead of silently returning an empty listing.
            archive = rarfile.RarFile(fileObject, 'r', errors='strict')
        except (rarfile.Error, OSError) as exception:
            logger.info(
                "Failed to read RAR directory because of: %s", exception, exc_info=logger.isEnabledFor(logging.DEBUG)
            )
            return False

        if archive.needs_password():
            logger.warning("Encrypted RAR archives are not supported.")
            archive.close()
            return False

        self.archive = archive
        self.fileObject = fileObject
        for info in archive.infolist():
            if not info.is_file():
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
            raise VirtualFileSystemError("No RAR file has been attached!")
        info = self.files.get(normalize_separators(path))
        if info is None:
            raise FileNotFoundError(f"File '{path}' does not exist in the RAR file!")
        return self.archive.open(info, 'r')

    @overrides(VirtualFileSystem)
    def close(self) -> None:
        if self.archive is not None:
            self.archive.close()
            self.archive = None
        super().close()
