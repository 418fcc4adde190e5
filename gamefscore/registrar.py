import logging
import os
from typing import Optional

from .extensions import ExtensionClassifier, FileCategory
from .registry import MAX_FOREIGN_FILES, FileEntry, FileRegistry, ScanStatus
from .utils import TooManyForeignFilesError, normalize_separators, size_in_kb
from .vfs import VirtualFileSystem
from .vfs.factory import is_mountable, open_virtual_file_system

logger = logging.getLogger(__name__)


def strip_root_prefix(root: Optional[str], path: str) -> str:
    """
    Returns the part of path after the root directory and the following separator, or the path itself if
    it is not located inside root. Backslashes and slashes are treated as equal.
    """
    if not root:
        return path

    prefix = normalize_separators(root)
    normalizedPath = normalize_separators(path)
    if not normalizedPath.startswith(prefix):
        return path

    # Exactly one separator following the root is consumed, also for roots ending in one, e.g., "/".
    if normalizedPath[len(prefix) : len(prefix) + 1] == '/':
        return path[len(prefix) + 1 :]
    if prefix.endswith('/'):
        return path[len(prefix) :]
    # Rejects root "dir/name" for path "dir/name2/file".
    return path


class Registrar:
    """
    Decides for each candidate path whether it is a container to mount, a file to register, or a file to skip.
    """

    def __init__(
        self,
        registry: FileRegistry,
        classifier: Optional[ExtensionClassifier] = None,
        root: Optional[str] = None,
        maxForeignFiles: int = MAX_FOREIGN_FILES,
    ) -> None:
        self.registry = registry
        self.classifier = classifier if classifier is not None else ExtensionClassifier()
        self.root = root
        self.maxForeignFiles = maxForeignFiles

    def register(self, path: str, fileSystem: Optional[VirtualFileSystem] = None) -> ScanStatus:
        """
        path: Full path on the host file system if fileSystem is None, else the path inside fileSystem.
        Raises TooManyForeignFilesError when the foreign file limit is reached.
        """
        if self.registry.is_full():
            return ScanStatus.STOP_CAPACITY

        # Only mount containers found on the real file system. This limits nesting to exactly one level.
        if fileSystem is None and is_mountable(path):
            return self._mount(path)

        category = self.classifier.classify(path)
        if category == FileCategory.SKIP:
            return ScanStatus.CONTINUE
        if category == FileCategory.UNKNOWN:
            if self.registry.count_foreign() >= self.maxForeignFiles:
                raise TooManyForeignFilesError(self.root, self.registry.foreignCount)
            return ScanStatus.CONTINUE

        self.registry.add(self._create_entry(path, category == FileCategory.PACKAGE, fileSystem))
        return ScanStatus.CONTINUE

    def _mount(self, path: str) -> ScanStatus:
        mounted = open_virtual_file_system(path)
        if mounted is None:
            return ScanStatus.CONTINUE

        self.registry.add_file_system(mounted)
        for name in mounted.file_names():
            if self.register(name, mounted) == ScanStatus.STOP_CAPACITY:
                return ScanStatus.STOP_CAPACITY
        return ScanStatus.CONTINUE

    def _create_entry(self, path: str, isPackage: bool, fileSystem: Optional[VirtualFileSystem]) -> FileEntry:
        if fileSystem is not None:
            return FileEntry(
                relativeName=path,
                isPackage=isPackage,
                sizeInKb=size_in_kb(fileSystem.size_of(path)),
                fileSystem=fileSystem,
            )

        try:
            size = os.stat(path).st_size
        except OSError as exception:
            logger.info("Could not determine size of '%s' because of: %s", path, exception)
            size = 0

        relativeName = strip_root_prefix(self.root, path)
        assert relativeName != path or not self.root, f"File '{path}' is not inside root '{self.root}'"
        return FileEntry(
            relativeName=normalize_separators(relativeName),
            isPackage=isPackage,
            sizeInKb=size_in_kb(size),
        )
