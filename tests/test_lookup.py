# pylint: disable=wrong-import-position

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest  # noqa: E402
from gamefscore.lookup import LookupEngine  # noqa: E402
from gamefscore.registry import FileEntry, FileRegistry  # noqa: E402


def create_registry(names):
    registry = FileRegistry()
    for name in names:
        extension = name.rsplit('.', 1)[-1].lower()
        registry.add(FileEntry(name, isPackage=extension in ('upk', 'u', 'xxx', 'umap')))
    return registry


class TestFindFile:
    @staticmethod
    def test_short_name():
        engine = LookupEngine(create_registry(["System/Core.u", "System/Engine.u", "Maps/DM-Deck.umap"]))
        assert engine.find_file("Engine").relativeName == "System/Engine.u"
        assert engine.find_file("engine").relativeName == "System/Engine.u"
        assert engine.find_file("DM-Deck").relativeName == "Maps/DM-Deck.umap"
        assert engine.find_file("Eng") is None
        assert engine.find_file("Engine2") is None

    @staticmethod
    def test_relative_name():
        engine = LookupEngine(create_registry(["System/Core.u", "Maps/Core.u"]))
        assert engine.find_file("Maps/Core").relativeName == "Maps/Core.u"
        assert engine.find_file("Maps\\Core").relativeName == "Maps/Core.u"
        assert engine.find_file("Core").relativeName == "System/Core.u"
        assert engine.find_file("Other/Core") is None

    @staticmethod
    def test_first_match_wins():
        engine = LookupEngine(create_registry(["a/Engine.u", "b/Engine.upk", "c/Engine.u"]))
        assert engine.find_file("Engine").relativeName == "a/Engine.u"
        assert engine.find_file("Engine", "upk").relativeName == "b/Engine.upk"

    @staticmethod
    def test_extension():
        engine = LookupEngine(create_registry(["CookedPC/Textures.tfc", "CookedPC/Textures.upk"]))

        # Without extension, only packages match.
        assert engine.find_file("Textures").relativeName == "CookedPC/Textures.upk"

        assert engine.find_file("Textures", "tfc").relativeName == "CookedPC/Textures.tfc"
        assert engine.find_file("Textures", "TFC").relativeName == "CookedPC/Textures.tfc"
        assert engine.find_file("Textures.tfc").relativeName == "CookedPC/Textures.tfc"
        assert engine.find_file("Textures.TFC").relativeName == "CookedPC/Textures.tfc"
        assert engine.find_file("Textures", "bin") is None

    @staticmethod
    def test_non_package_without_extension():
        engine = LookupEngine(create_registry(["CookedPC/Textures.tfc"]))
        assert engine.find_file("Textures") is None

    @staticmethod
    def test_extension_with_dotted_name():
        engine = LookupEngine(create_registry(["Core.u"]))
        with pytest.raises(AssertionError):
            engine.find_file("Core.u", "u")

    @staticmethod
    def test_startup_package():
        # Localized variants are only a fallback.
        engine = LookupEngine(create_registry(["x/startup_de.upk", "x/startup_int.upk"]))
        assert engine.find_file("startup").relativeName == "x/startup_int.upk"

        engine = LookupEngine(create_registry(["x/startup_de.upk", "x/Startup.upk", "x/startup_int.upk"]))
        assert engine.find_file("startup").relativeName == "x/Startup.upk"

        engine = LookupEngine(create_registry(["x/startup_fr.xxx", "x/Startup_INT.xxx"]))
        assert engine.find_file("startup").relativeName == "x/Startup_INT.xxx"

        engine = LookupEngine(create_registry(["x/startup_de.upk", "x/startupmovies.upk"]))
        assert engine.find_file("startup").relativeName == "x/startup_de.upk"

        engine = LookupEngine(create_registry(["x/startupmovies.upk"]))
        assert engine.find_file("startup") is None

    @staticmethod
    def test_custom_startup_package():
        engine = LookupEngine(create_registry(["startup_de.xxx", "startup_int.xxx"]), startupPackage="startup_xxx")
        assert engine.find_file("startup") is None
        assert engine.find_file("startup_xxx") is None
        assert engine.find_file("startup_int").relativeName == "startup_int.xxx"

    @staticmethod
    def test_empty_registry():
        engine = LookupEngine(FileRegistry())
        assert engine.find_file("Engine") is None
        assert engine.find_file("startup") is None


class TestEnumerate:
    @staticmethod
    def test_packages():
        engine = LookupEngine(create_registry(["a.upk", "b.tfc", "c.u", "d.bin"]))
        visited = []
        engine.enumerate(lambda entry: visited.append(entry.relativeName))
        assert visited == ["a.upk", "c.u"]

    @staticmethod
    def test_extension_filter():
        engine = LookupEngine(create_registry(["a.upk", "b.tfc", "c.u", "d.TFC"]))
        visited = []
        engine.enumerate(lambda entry: visited.append(entry.relativeName), "tfc")
        assert visited == ["b.tfc", "d.TFC"]
        assert [entry.relativeName for entry in engine.iter_files("u")] == ["c.u"]
        assert [entry.relativeName for entry in engine.iter_files()] == ["a.upk", "c.u"]

    @staticmethod
    def test_stop():
        engine = LookupEngine(create_registry([f"{i}.upk" for i in range(10)]))
        visited = []

        def visit(entry):
            visited.append(entry.relativeName)
            return len(visited) < 3

        engine.enumerate(visit)
        assert visited == ["0.upk", "1.upk", "2.upk"]
