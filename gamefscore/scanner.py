import logging
import os
import stat

from .registrar import Registrar
from .registry import ScanStatus

logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Depth-first walk over a real folder, which feeds all found files to the registrar."""

    def __init__(self, registrar: Registrar) -> None:
        self.registrar = registrar
        # (st_dev, st_ino) of all folders entered during the current scan.
        self._visited: set[tuple[int, int]] = set()

    def scan(self, folder: str, recurse: bool = True) -> ScanStatus:
        self._visited.clear()
        try:
            stats = os.stat(folder)
        except OSError as exception:
            logger.info("Could not access folder '%s' because of: %s", folder, exception)
            return ScanStatus.CONTINUE
        return self._scan(folder, stats, recurse)

    def _scan(self, folder: str, folderStats: os.stat_result, recurse: bool) -> ScanStatus:
        # Symbolic links to an ancestor folder would otherwise be followed until the OS reports ELOOP.
        folderKey = (folderStats.st_dev, folderStats.st_ino)
        if folderKey in self._visited:
            logger.info("Skipping already scanned folder '%s'", folder)
            return ScanStatus.CONTINUE
        self._visited.add(folderKey)

        try:
            # Sort for a reproducible registration order, which decides lookup precedence.
            dirEntries = sorted(os.scandir(folder), key=lambda dirEntry: dirEntry.name)
        except OSError as exception:
            logger.info("Could not list folder '%s' because of: %s", folder, exception)
            return ScanStatus.CONTINUE

        for dirEntry in dirEntries:
            # Hidden files are not supported. This also would skip "." and "..".
            if dirEntry.name.startswith('.'):
                continue

            path = os.path.join(folder, dirEntry.name)
            try:
                stats = dirEntry.stat()
            except OSError:
                # E.g., dangling symbolic links.
                continue

            if stat.S_ISDIR(stats.st_mode):
                if not recurse:
                    continue
                status = self._scan(path, stats, recurse)
            else:
                status = self.registrar.register(path)

            if status == ScanStatus.STOP_CAPACITY:
                return status

        return ScanStatus.CONTINUE
