import contextlib
import os
import tempfile
import zipfile
from collections.abc import Iterable
from typing import Union


def create_files(folder: str, files: Union[Iterable[str], dict[str, bytes]]) -> list[str]:
    """Creates the given files relative to folder including parent folders and returns the full paths."""
    if not isinstance(files, dict):
        files = {path: b'' for path in files}

    paths = []
    for relativePath, contents in files.items():
        path = os.path.join(folder, *relativePath.split('/'))
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'wb') as file:
            file.write(contents)
        paths.append(path)
    return paths


def create_obb(path: str, members: dict[str, bytes], folders: Iterable[str] = ()) -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with zipfile.ZipFile(path, 'w') as archive:
        for folder in folders:
            archive.writestr(folder.rstrip('/') + '/', b'')
        for name, contents in members.items():
            archive.writestr(name, contents)
    return path


@contextlib.contextmanager
def game_folder(files: Union[Iterable[str], dict[str, bytes]] = ()):
    with tempfile.TemporaryDirectory() as folder:
        create_files(folder, files)
        yield folder


def find_test_file(name: str) -> str:
    """Returns the path to a binary fixture shipped beside the tests."""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), name)
