"""
Tests for the internal utilities.

This module verifies:
- Unset singleton semantics (identity, falsiness, representation, copy/pickle).
- coalesce() only replaces Unset.
- rename() renames closures and keeps their enclosing scope.
- mirror() read-only properties.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from portolan.utils import *


class UnsetTest(TestCase):
    """
    Test suite for the `UnsetType` singleton.
    """

    def testSingleton(self) -> None:
        """
        The constructor returns the same object reference on every call.
        """
        self.assertIs(UnsetType(), Unset)

    def testFalsely(self) -> None:
        self.assertFalse(Unset)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testNotEqualToNoneOrFalse(self) -> None:
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testCopyDeepcopyPickleKeepIdentity(self) -> None:
        """
        copy(), deepcopy() and pickle round-trips preserve the identity of the singleton.
        """
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})


class CoalesceTest(TestCase):

    def testReplacesUnset(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")

    def testDefaultsToNone(self) -> None:
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalseyValues(self) -> None:
        # None, 0 and "" are legitimate values, not “unset”.
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertEqual(coalesce("", "fallback"), "")


def _task():
    pass


class RenameTest(TestCase):

    def testKeepsEnclosingScope(self) -> None:
        def outer():
            @rename("resolve")
            def first(value):
                return value

            return first

        function = outer()
        self.assertEqual(function.__name__, "resolve")
        self.assertEqual(function.__qualname__, "RenameTest.testKeepsEnclosingScope.<locals>.outer.<locals>.resolve")

    def testTopLevelName(self) -> None:
        function = rename("work")(_task)
        self.assertEqual(function.__qualname__, "work")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("")
        with self.assertRaises(TypeError):
            rename("work")(1)


class MirrorTest(TestCase):

    def testReadOnly(self) -> None:
        class Holder:
            prog = mirror("prog")

            def __init__(self):
                self._prog = "tool"

        holder = Holder()
        self.assertEqual(holder.prog, "tool")
        with self.assertRaises(AttributeError):
            holder.prog = "other"

    def testRejectsNonString(self) -> None:
        with self.assertRaises(TypeError):
            mirror(1)


if __name__ == '__main__':
    unittest.main()
