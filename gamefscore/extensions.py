"""
Classification of game files by their file extension.

There are three disjoint sets of extensions:

 - Package extensions: Primary, loadable asset containers.
 - Support extensions: Secondary files that are required alongside packages, e.g., texture file caches,
                       but which cannot be loaded as packages by themselves.
 - Skip extensions: Files as exported by this kind of tool. If a previous export landed inside the game folder,
                    those files should neither be registered nor be counted as foreign files.

Everything else is of unknown type.
"""

import enum
from collections.abc import Iterable
from typing import Optional

from .utils import split_extension


class FileCategory(enum.Enum):
    PACKAGE = 1
    SUPPORT = 2
    SKIP = 3
    UNKNOWN = 4


# fmt: off
PACKAGE_EXTENSIONS = (
    "u", "ut2", "utx", "uax", "usx", "ukx",
    "ums",                              # Rune
    "bsx", "btx", "bkx",                # Battle Territory, older version
    "ebsx", "ebtx", "ebkx", "ebax",     # Battle Territory, newer version with encryption
    "pkg",                              # Tribes 3
    "bsm",                              # Bioshock
    "uea", "uem",                       # Vanguard
    "ass", "umd",                       # Lead
    "upk", "ut3", "xxx", "umap", "udk", "map",
    "uasset",
    "sfm",                              # Mass Effect
    "pcc",                              # Mass Effect 2
    "tlr",
    "ppk", "pda",                       # Legendary: Pandora's Box
    "uppc", "rmpc",                     # Rainbow 6 Vegas 2
    "gpk",                              # TERA: Exiled Realms of Arborea
    "apb",                              # All Points Bulletin
    "fmap",                             # Tribes: Ascend
    "lm",                               # Landmass
    "s8m",                              # Section 8 map
    "ccpk",                             # Crime Craft character package
)

SUPPORT_EXTENSIONS = (
    "tfc",                              # Texture File Cache
    "bin",
    "xpr",                              # XBox texture container
    "blk", "bdc",                       # Bulk Content + Catalog
    "rtc",
)

SKIP_EXTENSIONS = (
    "tga", "dds", "bmp", "mat",         # textures, materials
    "psk", "pskx", "psa", "config",     # meshes, animations
    "ogg", "wav", "fsb", "xma", "unk",  # sounds
    "gfx", "fxa",                       # 3rd party
    "md5mesh", "md5anim",               # md5 mesh
    "uc", "3d",                         # vertex mesh
)
# fmt: on


class ExtensionClassifier:
    """Case-insensitive matcher over the package, support, and skip extension tables."""

    def __init__(
        self,
        packageExtensions: Optional[Iterable[str]] = None,
        supportExtensions: Optional[Iterable[str]] = None,
        skipExtensions: Optional[Iterable[str]] = None,
    ) -> None:
        self.packageExtensions = ExtensionClassifier._normalize(
            PACKAGE_EXTENSIONS if packageExtensions is None else packageExtensions
        )
        self.supportExtensions = ExtensionClassifier._normalize(
            SUPPORT_EXTENSIONS if supportExtensions is None else supportExtensions
        )
        self.skipExtensions = ExtensionClassifier._normalize(
            SKIP_EXTENSIONS if skipExtensions is None else skipExtensions
        )

        overlap = (
            (self.packageExtensions & self.supportExtensions)
            | (self.packageExtensions & self.skipExtensions)
            | (self.supportExtensions & self.skipExtensions)
        )
        if overlap:
            raise ValueError(f"Extension tables must be disjoint but share: {', '.join(sorted(overlap))}")

    @staticmethod
    def _normalize(extensions: Iterable[str]) -> frozenset[str]:
        return frozenset(extension.lower().lstrip('.') for extension in extensions)

    def classify_extension(self, extension: str) -> FileCategory:
        extension = extension.lower()
        if not extension:
            return FileCategory.UNKNOWN
        if self.is_package_extension(extension):
            return FileCategory.PACKAGE
        if extension in self.supportExtensions:
            return FileCategory.SUPPORT
        if extension in self.skipExtensions:
            return FileCategory.SKIP
        return FileCategory.UNKNOWN

    def classify(self, filename: str) -> FileCategory:
        if '.' not in filename:
            return FileCategory.UNKNOWN
        return self.classify_extension(split_extension(filename)[1])

    def is_package_extension(self, extension: str) -> bool:
        return extension.lower() in self.packageExtensions
