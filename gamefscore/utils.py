import contextlib
import importlib
import os
import platform
import sys
import types
from typing import Optional, Union, get_type_hints


class GameFileSystemError(Exception):
    """Base exception for the gamefscore module."""


class TooManyForeignFilesError(GameFileSystemError):
    """Exception for scans that encountered too many files of unknown type, i.e., most probably a wrong root."""

    def __init__(self, root: Optional[str], count: int) -> None:
        super().__init__(f"Too many unknown files - bad root directory ({root})?")
        self.root = root
        self.count = count


class VirtualFileSystemError(GameFileSystemError):
    """Exception for virtual file systems used before a container has been successfully attached."""


def overrides(parentClass):
    """Simple decorator that checks that a method with the same name exists in the parent class"""

    def overrider(method):
        if platform.python_implementation() == 'PyPy':
            return method

        assert method.__name__ in dir(parentClass)
        parentMethod = getattr(parentClass, method.__name__)
        assert callable(parentMethod)

        if os.getenv('GAMEFS_CHECK_OVERRIDES', '').lower() not in ('1', 'yes', 'on', 'enable', 'enabled'):
            return method

        parentTypes = get_type_hints(parentMethod)
        for argument, argumentType in get_type_hints(method).items():
            if argument in parentTypes:
                parentType = parentTypes[argument]
                assert argumentType == parentType, f"{method.__name__}: {argument}: {argumentType} != {parentType}"

        return method

    return overrider


def normalize_separators(path: str) -> str:
    return path.replace('\\', '/')


def size_in_kb(size: int) -> int:
    """Rounds a size in bytes to the nearest KiB."""
    return (size + 512) // 1024


def split_extension(name: str) -> tuple[str, str]:
    """
    Splits at the last dot. Contrary to os.path.splitext, leading dots are not special and the dot itself
    is not part of the returned extension.
    """
    if '.' not in name:
        return name, ''
    stem, extension = name.rsplit('.', 1)
    return stem, extension


def get_module(module: Union[str, types.ModuleType]) -> Optional[types.ModuleType]:
    if isinstance(module, types.ModuleType):
        return module

    if module not in sys.modules:
        with contextlib.suppress(ImportError):
            importlib.import_module(module)
    return sys.modules.get(module, None)


def find_module_version(moduleOrName: Union[str, types.ModuleType]) -> Optional[str]:
    module = get_module(moduleOrName)
    if not module:
        return None

    version = getattr(module, '__version__', None)
    if version:
        return str(version)

    # zipfile and other built-in modules have no version other than the Python version.
    import importlib.metadata as imeta  # noqa: E402

    with contextlib.suppress(imeta.PackageNotFoundError):
        return imeta.version(module.__name__)
    return None
