"""
Heuristic detection of the game root folder given the path to any one game file inside it.

Unreal Engine 1 and 2 games have a simple folder hierarchy with a depth of one, i.e., packages reside in
well-known folders like "Maps" or "Textures" directly below the game root. Unreal Engine 3 and 4 games
store their packages somewhere below a folder containing "Cooked" or "Content" in its name. The "Cooked"
folder name may also hint at the target platform, e.g., "CookedPS3" or "CookedXenon".
"""

import dataclasses
import enum
import logging
from collections.abc import Iterable
from typing import Optional

from .utils import normalize_separators

logger = logging.getLogger(__name__)


class Platform(enum.Enum):
    UNKNOWN = 0
    PC = 1
    XBOX360 = 2
    PS3 = 3
    IOS = 4

    @property
    def displayName(self) -> str:
        return _PLATFORM_NAMES[self]


_PLATFORM_NAMES = {
    Platform.UNKNOWN: "",
    Platform.PC: "PC",
    Platform.XBOX360: "XBox360",
    Platform.PS3: "PS3",
    Platform.IOS: "iPhone",
}

# fmt: off
KNOWN_DIRECTORIES = (
    "Animations",
    "Maps",
    "Sounds",
    "StaticMeshes",
    "System",
    "Systextures",      # Lineage 2
    "XboxTextures",     # Unreal Championship 2
    "XboxAnimations",   # Unreal Championship 2
    "Textures",
)
# fmt: on

COOKED_MARKER = "cooked"
CONTENT_MARKER = "content"

# Prefixes of the text directly following the "Cooked" marker.
PLATFORM_TAGS: dict[str, Platform] = {
    "ps3": Platform.PS3,
    "xenon": Platform.XBOX360,
    "iphone": Platform.IOS,
}

MAX_DETECTION_DEPTH = 8


@dataclasses.dataclass
class DetectedRoot:
    root: str
    # 0: nothing detected, 1: well-known leaf folder found, 2: cooked or content folder found
    priority: int
    platform: Platform = Platform.UNKNOWN

    @property
    def recurse(self) -> bool:
        return self.priority > 0


class RootDirectoryDetector:
    def __init__(
        self,
        knownDirectories: Iterable[str] = KNOWN_DIRECTORIES,
        maxDepth: int = MAX_DETECTION_DEPTH,
        platformTags: Optional[dict[str, Platform]] = None,
    ) -> None:
        self.knownDirectories = {name.lower() for name in knownDirectories}
        self.maxDepth = maxDepth
        self.platformTags = {
            tag.lower(): platform for tag, platform in (PLATFORM_TAGS if platformTags is None else platformTags).items()
        }

    def detect_platform(self, folderName: str) -> Platform:
        """Returns the platform encoded directly after the "Cooked" marker, e.g., "CookedPS3"."""
        position = folderName.lower().find(COOKED_MARKER)
        if position < 0:
            return Platform.UNKNOWN
        suffix = folderName[position + len(COOKED_MARKER) :].lower()
        for tag, platform in self.platformTags.items():
            if suffix.startswith(tag):
                return platform
        return Platform.UNKNOWN

    def detect(self, filename: str, forcedPlatform: Platform = Platform.UNKNOWN) -> DetectedRoot:
        path = normalize_separators(filename)
        if '/' not in path:
            return DetectedRoot('.', 0)

        # Cut the file name.
        path = path.rsplit('/', 1)[0]
        result = DetectedRoot(path if path else '/', 0)

        cookedFolder: Optional[str] = None
        for level in range(self.maxDepth):
            if '/' not in path:
                break
            path, folderName = path.rsplit('/', 1)

            # Old-style layouts only have a depth of one, so only check the direct parent.
            if level == 0 and folderName.lower() in self.knownDirectories and result.priority < 1:
                result.root = path if path else '/'
                result.priority = 1

            lowerName = folderName.lower()
            if COOKED_MARKER in lowerName or CONTENT_MARKER in lowerName:
                result.root = f"{path}/{folderName}"
                result.priority = 2
                if COOKED_MARKER in lowerName:
                    cookedFolder = folderName
                break

        if forcedPlatform == Platform.UNKNOWN and cookedFolder is not None:
            result.platform = self.detect_platform(cookedFolder)

        if result.platform != Platform.UNKNOWN:
            logger.info(
                "Detected game root %s%s; platform %s",
                result.root,
                "" if result.recurse else " (no recurse)",
                result.platform.displayName,
            )
        else:
            logger.info("Detected game root %s%s", result.root, "" if result.recurse else " (no recurse)")
        return result
