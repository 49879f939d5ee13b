"""
Handler registry tests.

Scope
- keyword keys are stored dashed; pairs alias one handler.
- positional slots increment for fixed arities and freeze after a variadic one.
- lookups of unknown keys return None.
- key validation.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from portolan.actions import Count, Flag, Value
from portolan.registry import Handler, Registry


class TestRegistry(TestCase):

    def setUp(self):
        self.registry = Registry()

    def testKeywordKeysAreDashed(self):
        handler = Handler(Flag("strict"), False)
        self.registry.register("--strict", handler)
        self.assertIs(self.registry.lookup("--strict"), handler)
        self.assertIsNone(self.registry.lookup("strict"))

    def testPairAliasesOneHandler(self):
        handler = Handler(Count("bar"), False)
        self.registry.register(("-b", "--bar"), handler)
        self.assertIs(self.registry.lookup("-b"), self.registry.lookup("--bar"))
        self.assertEqual(len(self.registry.entries), 1)

    def testPositionalSlotsIncrement(self):
        first = Handler(Value("src"), True)
        second = Handler(Value("pair", 2), True)
        self.registry.register("src", first)
        self.registry.register("pair", second)
        self.assertIs(self.registry.lookup(0), first)
        self.assertIs(self.registry.lookup(1), second)
        self.assertEqual(self.registry.slot, 2)

    def testVariadicPositionalFreezesSlots(self):
        files = Handler(Value("files", "+"), True)
        late = Handler(Value("late"), True)
        self.registry.register("files", files)
        self.assertEqual(self.registry.slot, math.inf)

        # still registered, but no integer cursor will ever reach it
        self.registry.register("late", late)
        self.assertIs(self.registry.lookup(0), files)
        self.assertIsNone(self.registry.lookup(1))
        self.assertEqual(len(self.registry.positionals), 2)

    def testPositionalRequiresValueAction(self):
        with self.assertRaises(TypeError):
            self.registry.register("src", Handler(Flag("src"), True))

    def testUnknownLookupIsNone(self):
        self.assertIsNone(self.registry.lookup("--missing"))
        self.assertIsNone(self.registry.lookup(0))

    def testOverwriteReportsKeys(self):
        self.registry.register("--foo", Handler(Flag("foo"), False))
        overwritten = self.registry.register(("-f", "--foo"), Handler(Count("foo"), False))
        self.assertEqual(overwritten, ["--foo"])
        self.assertIsInstance(self.registry.lookup("--foo").action, Count)
        # the replaced help entry is gone
        self.assertEqual([(entry.short, entry.long) for entry in self.registry.entries], [("-f", "--foo")])

    def testKeyValidation(self):
        for keys, error in (
                ("-ab", ValueError),
                ("--", ValueError),
                (("--foo", "-f"), ValueError),
                (("-f",), TypeError),
                (["-f", "--foo"], TypeError),
        ):
            with self.subTest(keys=keys), self.assertRaises(error):
                self.registry.register(keys, Handler(Flag("x"), False))


if __name__ == "__main__":
    unittest.main()
