import enum
import logging
import os
from collections.abc import Iterator
from typing import IO, Callable, Optional

from .extensions import ExtensionClassifier
from .lookup import STARTUP_PACKAGE, LookupEngine
from .registrar import Registrar, strip_root_prefix
from .registry import MAX_FOREIGN_FILES, MAX_GAME_FILES, FileEntry, FileRegistry, ScanStatus
from .rootdetect import Platform, RootDirectoryDetector
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


class Phase(enum.Enum):
    EMPTY = 0
    BUILDING = 1
    READY = 2


class GameFileSystem:
    """
    Index over all game files below one root folder including the files inside mountable containers.

    The index is built once by set_root or set_root_from_file and is read-only afterwards.
    Lookups while the index is being built are not supported and raise a RuntimeError.
    Multiple independent instances can coexist.
    """

    def __init__(
        self,
        capacity: int = MAX_GAME_FILES,
        maxForeignFiles: int = MAX_FOREIGN_FILES,
        classifier: Optional[ExtensionClassifier] = None,
        detector: Optional[RootDirectoryDetector] = None,
        startupPackage: str = STARTUP_PACKAGE,
        forcedPlatform: Platform = Platform.UNKNOWN,
    ) -> None:
        self.registry = FileRegistry(capacity)
        self.maxForeignFiles = maxForeignFiles
        self.classifier = classifier if classifier is not None else ExtensionClassifier()
        self.detector = detector if detector is not None else RootDirectoryDetector()
        self.lookup = LookupEngine(self.registry, startupPackage)
        self.forcedPlatform = forcedPlatform
        self.platform = forcedPlatform
        self.root: Optional[str] = None
        self.phase = Phase.EMPTY

    def _check_queryable(self) -> None:
        if self.phase == Phase.BUILDING:
            raise RuntimeError("The game file index must not be queried while it is being built!")

    def set_root(self, path: str, recurse: bool = True) -> None:
        """Scans the given folder and replaces any previously built index."""
        if self.phase == Phase.BUILDING:
            raise RuntimeError("Cannot set a new root while the game file index is being built!")

        # An empty path would result in scanning the file system root.
        if not path:
            path = '.'
        root = path.rstrip('/\\') or path[0]

        self.registry.clear()
        self.root = root
        self.phase = Phase.BUILDING
        try:
            registrar = Registrar(self.registry, self.classifier, root, self.maxForeignFiles)
            status = DirectoryScanner(registrar).scan(root, recurse)
        except Exception:
            self.registry.clear()
            self.root = None
            self.phase = Phase.EMPTY
            raise
        self.phase = Phase.READY

        if status == ScanStatus.STOP_CAPACITY:
            logger.warning("Stopped scanning because the maximum of %d game files was reached.", self.registry.capacity)
        logger.info("Found %d game files (%d skipped)", self.registry.fileCount, self.registry.foreignCount)

    def set_root_from_file(self, path: str) -> None:
        """Detects the game root from the path to one of its files and then scans it."""
        detected = self.detector.detect(path, self.forcedPlatform)
        if self.forcedPlatform == Platform.UNKNOWN:
            self.platform = detected.platform
        self.set_root(detected.root, detected.recurse)

    def get_root(self) -> Optional[str]:
        return self.root

    @property
    def file_count(self) -> int:
        return self.registry.fileCount

    @property
    def package_count(self) -> int:
        return self.registry.packageCount

    @property
    def foreign_count(self) -> int:
        return self.registry.foreignCount

    def find_file(self, name: str, extension: Optional[str] = None) -> Optional[FileEntry]:
        self._check_queryable()
        return self.lookup.find_file(name, extension)

    def strip_root_prefix(self, path: str) -> str:
        return strip_root_prefix(self.root, path)

    def create_reader(self, entry: FileEntry) -> IO[bytes]:
        self._check_queryable()
        if entry.fileSystem is not None:
            return entry.fileSystem.open_reader(entry.relativeName)
        assert self.root is not None
        return open(os.path.join(self.root, entry.relativeName), 'rb')

    def enumerate(self, visit: Callable[[FileEntry], Optional[bool]], extension: Optional[str] = None) -> None:
        self._check_queryable()
        self.lookup.enumerate(visit, extension)

    def iter_files(self, extension: Optional[str] = None) -> Iterator[FileEntry]:
        self._check_queryable()
        return self.lookup.iter_files(extension)

    def close(self) -> None:
        self.registry.close()

    def __enter__(self):
        return self

    def __exit__(self, exception_type, exception_value, exception_traceback):
        self.close()
