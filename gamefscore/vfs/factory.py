import dataclasses
import logging
from typing import Callable, Optional

from gamefscore.utils import split_extension

from . import VirtualFileSystem
from .obb import ObbVirtualFileSystem
from .rar import RarVirtualFileSystem

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class VirtualFileSystemInfo:
    # Creates a not yet attached virtual file system. The class itself is a fitting callable.
    create: Callable[[], VirtualFileSystem]
    # Lower-case file extensions, without the dot, which are mounted with this backend.
    extensions: set[str]
    # Tuple: (module name, package name) for diagnostics when the backend is not usable.
    requiredModules: list[tuple[str, str]]


# Map of backend names to their info. Selection is solely done by file extension.
# Files with extensions not listed here are never mounted.
VIRTUAL_FILE_SYSTEMS: dict[str, VirtualFileSystemInfo] = {
    "obb": VirtualFileSystemInfo(ObbVirtualFileSystem, {"obb"}, [('zipfile', '')]),
    "rarfile": VirtualFileSystemInfo(RarVirtualFileSystem, {"rar"}, [('rarfile', 'rarfile')]),
}


def find_virtual_file_system(path: str) -> Optional[VirtualFileSystemInfo]:
    extension = split_extension(path)[1].lower()
    if not extension:
        return None
    for info in VIRTUAL_FILE_SYSTEMS.values():
        if extension in info.extensions:
            return info
    return None


def is_mountable(path: str) -> bool:
    return find_virtual_file_system(path) is not None


def open_virtual_file_system(path: str) -> Optional[VirtualFileSystem]:
    """
    Returns an attached virtual file system for the given container file or None if the extension is not
    mapped to any backend or if the file is not a valid container. On failure, nothing stays opened.
    """
    info = find_virtual_file_system(path)
    if info is None:
        return None

    try:
        fileObject = open(path, 'rb')
    except OSError as exception:
        logger.warning("Failed to open '%s' for mounting because of: %s", path, exception)
        return None

    fileSystem = info.create()
    try:
        if fileSystem.attach(fileObject):
            logger.info("Mounted virtual file system: %s", path)
            return fileSystem
    except Exception as exception:
        logger.warning(
            "Mounting of '%s' failed because of: %s", path, exception, exc_info=logger.isEnabledFor(logging.DEBUG)
        )

    fileSystem.close()
    fileObject.close()
    logger.warning("Skipping '%s' because it could not be mounted.", path)
    return None
