import logging
from collections.abc import Iterator
from typing import Callable, Optional

from .registry import FileEntry, FileRegistry
from .utils import normalize_separators, split_extension

logger = logging.getLogger(__name__)

STARTUP_PACKAGE = "startup"


def _has_name(candidate: str, name: str) -> bool:
    """Checks for a case-insensitive match of name directly followed by the extension dot."""
    return candidate[: len(name)].lower() == name and candidate[len(name) : len(name) + 1] == '.'


class LookupEngine:
    """
    Resolves names to registered files by a linear scan in registration order.
    There is no secondary index because lookups are rare compared to the number of registered files.
    """

    def __init__(self, registry: FileRegistry, startupPackage: str = STARTUP_PACKAGE) -> None:
        self.registry = registry
        self.startupPackage = startupPackage

    def _find_startup_package(self) -> Optional[FileEntry]:
        """
        Possible variants in order of priority: "startup.upk", "startup_int.upk", "startup_<locale>.upk".
        Localized variants are only returned if neither of the first two exists.
        """
        prefix = self.startupPackage.lower()
        fallback = None
        for entry in self.registry:
            shortName = entry.shortName.lower()
            if not shortName.startswith(prefix):
                continue
            suffix = shortName[len(prefix) :]
            if suffix.startswith('.') or suffix.startswith('_int.'):
                return entry
            if suffix.startswith('_'):
                fallback = entry
        return fallback

    def find_file(self, name: str, extension: Optional[str] = None) -> Optional[FileEntry]:
        """
        Returns the first registered file whose short name or relative name matches the given name.
        If no extension is given, then it may be part of the name. If there is none at all, only packages match.
        """
        if name == self.startupPackage:
            return self._find_startup_package()

        name = normalize_separators(name)
        if extension is not None:
            assert '.' not in name, f"File name '{name}' must not contain an extension if one is given explicitly!"
        elif '.' in name:
            name, extension = split_extension(name)

        name = name.lower()
        for entry in self.registry:
            if not _has_name(entry.shortName, name) and not _has_name(entry.relativeName, name):
                continue

            if extension is not None:
                if entry.extension.lower() != extension.lower():
                    continue
            elif not entry.isPackage:
                continue

            return entry

        logger.debug("Did not find game file: %s (extension: %s)", name, extension)
        return None

    def iter_files(self, extension: Optional[str] = None) -> Iterator[FileEntry]:
        """Yields all packages or, if an extension is given, all files with that extension."""
        for entry in self.registry:
            if extension is None:
                if not entry.isPackage:
                    continue
            elif entry.extension.lower() != extension.lower():
                continue
            yield entry

    def enumerate(self, visit: Callable[[FileEntry], Optional[bool]], extension: Optional[str] = None) -> None:
        """Calls visit for each matching file in registration order. Stops as soon as visit returns False."""
        for entry in self.iter_files(extension):
            if visit(entry) is False:
                break
