#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK

# Import as late as possible in order to speed up calls by argcomplete!
# pylint: disable=import-outside-toplevel

import argparse
import logging
import sys
import traceback
from typing import Optional

from .utils import GameFileSystemError

try:
    import argcomplete
except ImportError:
    pass


PLATFORM_CHOICES = ['pc', 'xbox360', 'ps3', 'ios']


class _CustomFormatter(argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter):
    def add_arguments(self, actions):
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super().add_arguments(actions)


class PrintVersionAction(argparse.Action):
    def __call__(self, parser, args, values, option_string=None):
        print_versions()
        parser.exit()


def print_versions() -> None:
    from .utils import find_module_version
    from .version import __version__

    print("gamefscore", __version__)
    print()
    print("Python", sys.version.split(' ', maxsplit=1)[0])
    print()
    print("Container Backends:")
    print()

    from .vfs.factory import VIRTUAL_FILE_SYSTEMS

    for name, info in VIRTUAL_FILE_SYSTEMS.items():
        for moduleName, _ in info.requiredModules:
            version = find_module_version(moduleName)
            extensions = ', '.join(sorted(info.extensions))
            if version:
                print(f"{moduleName} {version} ({name}: {extensions})")
            elif moduleName in sys.builtin_module_names or moduleName in sys.stdlib_module_names:
                print(f"{moduleName} (built-in) ({name}: {extensions})")
            else:
                print(f"{moduleName} not installed ({name}: {extensions})")


def _parse_args(rawArgs: Optional[list[str]] = None):
    parser = argparse.ArgumentParser(
        prog='gamefs',
        formatter_class=_CustomFormatter,
        add_help=False,
        description='''\
Index all game files below a game folder including files inside .obb and .rar containers
and query that index by package name or file extension.
''',
        epilog='''\
Examples:

 - gamefs --stats /games/UT2004
 - gamefs --list --extension tfc /games/UT3/UTGame/CookedPC
 - gamefs --from-file --find Engine /games/UT3/UTGame/CookedPC/Maps/DM-Deck.ut3
''',
    )

    commonGroup = parser.add_argument_group("Optional Arguments")
    queryGroup = parser.add_argument_group("Query Options")
    positionalGroup = parser.add_argument_group("Positional Options")

    # fmt: off
    commonGroup.add_argument(
        '-h', '--help', action='help', default=argparse.SUPPRESS,
        help='Show this help message and exit.')

    commonGroup.add_argument(
        '-v', '--version', action=PrintVersionAction, nargs=0, default=argparse.SUPPRESS,
        help='Print version information and exit.')

    commonGroup.add_argument(
        '-d', '--debug', type=int, default=1,
        help='Sets the debugging level. Higher means more output. Currently, 3 is the highest.')

    commonGroup.add_argument(
        '-f', '--from-file', action='store_true', default=False,
        help='Interpret the given path as a path to any game file and detect the game root folder from it.')

    commonGroup.add_argument(
        '--no-recurse', action='store_true', default=False,
        help='Do not descend into subfolders of the root folder. Ignored with --from-file.')

    commonGroup.add_argument(
        '--platform', choices=PLATFORM_CHOICES, default=None,
        help='Force the target platform instead of detecting it from the folder name.')

    commonGroup.add_argument(
        '--max-files', type=int, default=None,
        help='Maximum number of game files to register before stopping the scan.')

    commonGroup.add_argument(
        '--max-foreign-files', type=int, default=None,
        help='Maximum number of files with unknown extension before aborting because of a probably wrong root.')

    queryGroup.add_argument(
        '--find', type=str, metavar='NAME',
        help='Print the relative path of the first game file matching the given name.')

    queryGroup.add_argument(
        '-e', '--extension', type=str, default=None,
        help='Only consider files with this extension for --find and --list. '
             'If not specified, only packages are considered.')

    queryGroup.add_argument(
        '-l', '--list', action='store_true', default=False,
        help='Print the relative paths of all packages or of all files with the given extension.')

    queryGroup.add_argument(
        '-s', '--stats', action='store_true', default=False,
        help='Print the number of registered files, packages, and skipped files.')

    positionalGroup.add_argument(
        'path',
        help='The game root folder or, with --from-file, the path to any game file inside it.')
    # fmt: on

    if 'argcomplete' in sys.modules:
        argcomplete.autocomplete(parser)
    return parser.parse_args(rawArgs)


def _configure_logging(debug: int) -> None:
    level = logging.WARNING
    if debug >= 3:
        level = logging.DEBUG
    elif debug >= 2:
        level = logging.INFO
    logging.basicConfig(format='[%(levelname)s] %(message)s', level=level)


def process_parsed_arguments(args) -> int:
    from .gamefilesystem import GameFileSystem
    from .registry import MAX_FOREIGN_FILES, MAX_GAME_FILES
    from .rootdetect import Platform

    forcedPlatform = Platform[args.platform.upper()] if args.platform else Platform.UNKNOWN
    capacity = args.max_files if args.max_files is not None else MAX_GAME_FILES
    maxForeignFiles = args.max_foreign_files if args.max_foreign_files is not None else MAX_FOREIGN_FILES

    if args.find and args.extension and '.' in args.find:
        raise ValueError("Either specify the extension as part of the name or with --extension but not both!")

    fileSystem = GameFileSystem(capacity=capacity, maxForeignFiles=maxForeignFiles, forcedPlatform=forcedPlatform)
    with fileSystem:
        if args.from_file:
            fileSystem.set_root_from_file(args.path)
        else:
            fileSystem.set_root(args.path, recurse=not args.no_recurse)

        if args.stats or not (args.find or args.list):
            print(f"Root: {fileSystem.get_root()}")
            if fileSystem.platform != Platform.UNKNOWN:
                print(f"Platform: {fileSystem.platform.displayName}")
            print(f"Files: {fileSystem.file_count}")
            print(f"Packages: {fileSystem.package_count}")
            print(f"Skipped: {fileSystem.foreign_count}")

        if args.list:
            for entry in fileSystem.iter_files(args.extension):
                print(f"{entry.relativeName}\t{entry.sizeInKb} KiB")

        if args.find:
            entry = fileSystem.find_file(args.find, args.extension)
            if entry is None:
                print(f"Did not find: {args.find}", file=sys.stderr)
                return 1
            print(entry.relativeName)

    return 0


def cli(rawArgs: Optional[list[str]] = None) -> int:
    """
    Command line interface for gamefs. Call with args = [ '--help' ] for a description.

    rawArgs: In general, rawArgs is None, meaning sys.argv is used. When used programmatically with a custom
             list of arguments, the first argument should not be the path to the script / the executable.
    """

    # Manually parse --debug argument in case argument parsing with argparse itself goes wrong.
    tmpArgs = rawArgs if rawArgs else sys.argv
    debug = 1
    for i in range(len(tmpArgs) - 1):
        if tmpArgs[i] in ['-d', '--debug'] and tmpArgs[i + 1].isdecimal():
            debug = int(tmpArgs[i + 1])

    try:
        args = _parse_args(rawArgs)
        _configure_logging(args.debug)
        return process_parsed_arguments(args)
    except (FileNotFoundError, GameFileSystemError, ValueError) as exception:
        print("[Error]", exception)
        if debug >= 3:
            traceback.print_exc()

    return 1


if __name__ == '__main__':
    sys.exit(cli())
