"""Game File System Core

This library builds an in-memory index over all game files below a root folder, including the files inside
archive containers like Android .obb files, which are mounted transparently while scanning. The index can be
queried by package name and enumerated by extension.

Example:

    from gamefscore.gamefilesystem import GameFileSystem

    with GameFileSystem() as fileSystem:
        fileSystem.set_root_from_file("/games/UT3/UTGame/CookedPC/Maps/DM-Deck.ut3")
        info = fileSystem.find_file("Engine")
        with fileSystem.create_reader(info) as file:
            print(file.read(4))
"""

from .version import __version__
