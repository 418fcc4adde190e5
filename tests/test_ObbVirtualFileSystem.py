# pylint: disable=wrong-import-position
# pylint: disable=protected-access

import io
import os
import sys
import tempfile
import zipfile

from helpers import create_obb, find_test_file

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest  # noqa: E402
from gamefscore.utils import VirtualFileSystemError  # noqa: E402
from gamefscore.vfs.factory import (  # noqa: E402
    VIRTUAL_FILE_SYSTEMS,
    VirtualFileSystemInfo,
    find_virtual_file_system,
    is_mountable,
    open_virtual_file_system,
)
from gamefscore.vfs.obb import ObbVirtualFileSystem, clean_path  # noqa: E402
from gamefscore.vfs.rar import RarVirtualFileSystem  # noqa: E402

# Stored RAR 4 archive with Windows separators in the member names.
RAR_MEMBERS = {
    "CookedPC/Maps/Level.upk": b"level data\n",
    "CookedPC/Textures.tfc": b"texture cache\n",
    "readme.txt": b"hello\n",
}

MEMBERS = {
    "data/level1.upk": b'\xc1\x83\x2a\x9e' + b'\0' * 2044,
    "data/Textures.tfc": b'tfc',
    "main.ini": b'[Engine]\n',
}


def test_clean_path():
    assert clean_path("data/level1.upk") == "data/level1.upk"
    assert clean_path("/data//level1.upk") == "data/level1.upk"
    assert clean_path("data\\maps\\level1.upk") == "data/maps/level1.upk"
    assert clean_path("../../escape.upk") == "escape.upk"
    assert clean_path("data/./x/../level1.upk") == "data/level1.upk"


class TestObbVirtualFileSystem:
    @staticmethod
    def test_simple_usage():
        with tempfile.TemporaryDirectory() as folder:
            path = create_obb(os.path.join(folder, "main.obb"), MEMBERS, folders=["data"])

            with ObbVirtualFileSystem() as fileSystem:
                assert fileSystem.attach(open(path, 'rb'))

                # Folder members are not listed.
                assert fileSystem.file_count() == 3
                assert fileSystem.file_names() == list(MEMBERS.keys())
                assert fileSystem.file_name_at(0) == "data/level1.upk"

                assert fileSystem.size_of("data/level1.upk") == 2048
                assert fileSystem.size_of("data\\Textures.tfc") == 3
                assert fileSystem.size_of("missing.upk") == 0

                for name, contents in MEMBERS.items():
                    with fileSystem.open_reader(name) as file:
                        assert file.read() == contents

                with fileSystem.open_reader("data/level1.upk") as file:
                    file.seek(2)
                    assert file.read(2) == b'\x2a\x9e'

                with pytest.raises(FileNotFoundError):
                    fileSystem.open_reader("data/level2.upk")

            assert fileSystem.archive is None
            assert fileSystem.fileObject is None

    @staticmethod
    def test_invalid_container():
        fileSystem = ObbVirtualFileSystem()
        assert not fileSystem.attach(io.BytesIO(b'definitely not a zip file' * 10))
        assert fileSystem.file_count() == 0
        with pytest.raises(VirtualFileSystemError):
            fileSystem.open_reader("data/level1.upk")

    @staticmethod
    def test_empty_container():
        fileObject = io.BytesIO()
        with zipfile.ZipFile(fileObject, 'w'):
            pass
        fileObject.seek(0)

        fileSystem = ObbVirtualFileSystem()
        assert fileSystem.attach(fileObject)
        assert fileSystem.file_count() == 0


class TestRarVirtualFileSystem:
    @staticmethod
    def test_invalid_container():
        fileSystem = RarVirtualFileSystem()
        assert not fileSystem.attach(io.BytesIO(b'PK\x03\x04 no rar signature here'))
        assert fileSystem.file_count() == 0
        with pytest.raises(VirtualFileSystemError):
            fileSystem.open_reader("data/level1.upk")

    @staticmethod
    @pytest.mark.parametrize('signature', [b'Rar!\x1a\x07\x01\x00', b'Rar!\x1a\x07\x00'])
    def test_corrupt_container(signature):
        fileSystem = RarVirtualFileSystem()
        assert not fileSystem.attach(io.BytesIO(signature + b'\xff' * 100))
        assert fileSystem.file_count() == 0
        assert fileSystem.archive is None

    @staticmethod
    def test_simple_usage():
        with open(find_test_file('game-data.rar'), 'rb') as file, RarVirtualFileSystem() as fileSystem:
            assert fileSystem.attach(file)
            assert fileSystem.file_count() == len(RAR_MEMBERS)
            assert fileSystem.file_names() == list(RAR_MEMBERS)

            for name, contents in RAR_MEMBERS.items():
                assert fileSystem.size_of(name) == len(contents)
                with fileSystem.open_reader(name) as reader:
                    assert reader.read() == contents

            assert fileSystem.size_of("CookedPC\\Maps\\Level.upk") == len(RAR_MEMBERS["CookedPC/Maps/Level.upk"])
            assert fileSystem.size_of("missing.upk") == 0
            with pytest.raises(FileNotFoundError):
                fileSystem.open_reader("missing.upk")


class TestFactory:
    @staticmethod
    def test_selection_by_extension():
        assert set(VIRTUAL_FILE_SYSTEMS) == {"obb", "rarfile"}
        assert isinstance(find_virtual_file_system("main.obb"), VirtualFileSystemInfo)
        assert find_virtual_file_system("main.obb").create is ObbVirtualFileSystem
        assert find_virtual_file_system("/games/patch.OBB").create is ObbVirtualFileSystem
        assert find_virtual_file_system("textures.rar").create is RarVirtualFileSystem
        assert find_virtual_file_system("main.zip") is None
        assert find_virtual_file_system("obb") is None
        assert is_mountable("a/b/c.obb")
        assert not is_mountable("a/b/c.upk")

    @staticmethod
    def test_open():
        with tempfile.TemporaryDirectory() as folder:
            path = create_obb(os.path.join(folder, "main.obb"), MEMBERS)
            fileSystem = open_virtual_file_system(path)
            assert isinstance(fileSystem, ObbVirtualFileSystem)
            with fileSystem:
                assert fileSystem.file_count() == 3

    @staticmethod
    def test_open_rar():
        fileSystem = open_virtual_file_system(find_test_file('game-data.rar'))
        assert isinstance(fileSystem, RarVirtualFileSystem)
        with fileSystem:
            assert fileSystem.file_count() == len(RAR_MEMBERS)

    @staticmethod
    def test_open_invalid():
        with tempfile.TemporaryDirectory() as folder:
            path = os.path.join(folder, "broken.obb")
            with open(path, 'wb') as file:
                file.write(b'\0' * 1000)
            assert open_virtual_file_system(path) is None

            rarPath = os.path.join(folder, "broken.rar")
            with open(rarPath, 'wb') as file:
                file.write(b'Rar!\x1a\x07\x01\x00' + b'\xff' * 100)
            assert open_virtual_file_system(rarPath) is None

            assert open_virtual_file_system(os.path.join(folder, "missing.obb")) is None
            assert open_virtual_file_system(os.path.join(folder, "level.upk")) is None
