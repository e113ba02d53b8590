# python
"""
Utilities behavioral tests (Unset, coalesce, rename, mirror, ordinal).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from types import MappingProxyType
from unittest import TestCase

from argonaut.utils import Unset, UnsetType, coalesce, rename, mirror, ordinal


class TestUnset(TestCase):

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestRename(TestCase):

    def testRenameInPlace(self):
        def function():
            pass

        self.assertIs(rename(function, "renamed"), function)
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecorator(self):
        @rename("getter")
        def function():
            pass

        self.assertEqual(function.__name__, "getter")

    def testRenameRejectsBadArguments(self):
        with self.assertRaises(TypeError):
            rename(1, "name")
        with self.assertRaises(TypeError):
            rename(len, "name")
        with self.assertRaises(TypeError):
            rename()


class TestMirror(TestCase):

    def testContainersAreFrozen(self):
        class Holder:
            items = mirror("items")
            table = mirror("table")
            missing = mirror("missing")

            def __init__(self):
                self._items = ["a", ["b"]]
                self._table = {"key": {"x"}}
                self._missing = Unset

        holder = Holder()
        self.assertEqual(holder.items, ("a", ("b",)))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.table["key"], frozenset({"x"}))
        self.assertIsNone(holder.missing)
        with self.assertRaises(AttributeError):
            holder.items = ()


class TestOrdinal(TestCase):

    def testWords(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(3), "third")
        self.assertEqual(ordinal(10), "tenth")

    def testSuffixes(self):
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(103), "103rd")
        self.assertEqual(ordinal(112), "112th")


if __name__ == "__main__":
    unittest.main()
