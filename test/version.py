"""
Version helper tests.

Scope
- the nearest pyproject.toml above a module wins.
- relative specifiers resolve against a base package.
- missing modules and missing versions fail loudly.
"""

from __future__ import annotations

import asyncio
import doctest
import importlib
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import TestCase

from portolan import getversion


class TestGetVersion(TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.root = Path(self.directory.name)
        sys.path.insert(0, str(self.root / "src"))
        importlib.invalidate_caches()

    def tearDown(self):
        sys.path.remove(str(self.root / "src"))
        for name in [name for name in sys.modules if name.startswith("sampleapp")]:
            del sys.modules[name]
        self.directory.cleanup()

    def package(self, manifest):
        package = self.root / "src" / "sampleapp"
        package.mkdir(parents=True)
        (package / "__init__.py").write_text("")
        (package / "cli.py").write_text("")
        if manifest is not None:
            (self.root / "pyproject.toml").write_text(manifest)
        importlib.invalidate_caches()

    def testReadsNearestManifest(self):
        self.package('[project]\nname = "sampleapp"\nversion = "2.4.1"\n')
        self.assertEqual(asyncio.run(getversion("sampleapp")), "2.4.1")

    def testResolvesSubmodules(self):
        self.package('[project]\nname = "sampleapp"\nversion = "2.4.1"\n')
        self.assertEqual(asyncio.run(getversion(".cli", "sampleapp")), "2.4.1")

    def testMissingVersionRaisesLookupError(self):
        self.package('[project]\nname = "sampleapp"\n')
        with self.assertRaises(LookupError):
            asyncio.run(getversion("sampleapp"))

    def testMissingModule(self):
        with self.assertRaises(ModuleNotFoundError):
            asyncio.run(getversion("sampleapp_that_does_not_exist"))

    def testModuleExampleRuns(self):
        import portolan.version

        self.assertEqual(doctest.testmod(portolan.version).failed, 0)

    def testArgumentValidation(self):
        with self.assertRaises(TypeError):
            asyncio.run(getversion(""))
        with self.assertRaises(TypeError):
            asyncio.run(getversion("sampleapp", 1))


if __name__ == "__main__":
    unittest.main()
