# python
"""
ParsedArguments behavioral tests.

Scope
- Mapping behavior (keys, defaults, immutability).
- Exact mapping keys; typed accessors by name, flag token, long name and short character.
- Access errors: unknown names and wrong kinds.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argonaut import (
    AccessError,
    ArgumentKind,
    NamedAccess,
    ParsedArguments,
    Registry,
    UnknownNameError,
    WrongKindError,
    parse,
    positional,
    trail,
    interrupt,
    switch,
    single,
    zero_or_more,
    one_or_more,
    passalong,
)


class TestParsedArguments(TestCase):

    def setUp(self):
        self.registry = Registry([
            positional("src"),
            trail("rest", required=False),
            interrupt("help", "h"),
            switch("verbose", "v"),
            single("exclude", "x"),
            zero_or_more(short="e"),
            one_or_more("add"),
            passalong("exec"),
        ])
        self.arguments = parse(self.registry, ["a", "-v", "-x", "pat", "-e", "1", "2", "--exec", "ls", "-l"]).arguments

    def testIsAnImmutableMapping(self):
        self.assertIsInstance(self.arguments, ParsedArguments)
        self.assertEqual(
            dict(self.arguments),
            {
                "src": "a",
                "rest": (),
                "--verbose": True,
                "--exclude": "pat",
                "-e": ("1", "2"),
                "--add": None,
                "--exec": ("ls", "-l"),
            },
        )
        with self.assertRaises(TypeError):
            self.arguments["src"] = "b"

    def testInterruptsAreAbsent(self):
        self.assertNotIn("help", self.arguments)
        self.assertIsNone(self.arguments.get("help"))

    def testTypedAccessors(self):
        self.assertEqual(self.arguments.positional("src"), "a")
        self.assertEqual(self.arguments.trail(), ())
        self.assertEqual(self.arguments.trail("rest"), ())
        self.assertTrue(self.arguments.switch("verbose"))
        self.assertEqual(self.arguments.single("exclude"), "pat")
        self.assertEqual(self.arguments.multiple("e"), ("1", "2"))
        self.assertIsNone(self.arguments.multiple("add"))
        self.assertEqual(self.arguments.passalong(), ("ls", "-l"))

    def testShortCharacterLookup(self):
        self.assertTrue(self.arguments.switch("v"))
        self.assertTrue(self.arguments.switch("-v"))
        self.assertEqual(self.arguments.single("x"), "pat")
        self.assertEqual(self.arguments.multiple("-e"), ("1", "2"))

    def testKeysAreExact(self):
        self.assertEqual(self.arguments["--exclude"], "pat")
        self.assertIn("--exclude", self.arguments)
        for alias in ("x", "-x", "exclude"):
            with self.subTest(alias=alias):
                self.assertNotIn(alias, self.arguments)
                self.assertIsNone(self.arguments.get(alias))
                with self.assertRaises(UnknownNameError):
                    self.arguments[alias]

    def testContainsAgreesWithKeys(self):
        keys = list(self.arguments)
        self.assertEqual(keys, list(self.arguments.keys()))
        for key in keys:
            self.assertIn(key, self.arguments)
        self.assertEqual(len(keys), len(self.arguments))

    def testKind(self):
        self.assertIs(self.arguments.kind("x"), ArgumentKind.SINGLE)
        self.assertIs(self.arguments.kind("rest"), ArgumentKind.TRAIL)

    def testNamedAccess(self):
        access = self.arguments.named("x")
        self.assertIsInstance(access, NamedAccess)
        self.assertIs(access.kind, ArgumentKind.SINGLE)
        self.assertEqual(access.single(), "pat")
        self.assertTrue(self.arguments.named("verbose").switch())
        self.assertEqual(self.arguments.named("e").multiple(), ("1", "2"))
        self.assertEqual(self.arguments.named("exec").passalong(), ("ls", "-l"))

    def testNamedAccessRejectsPositionals(self):
        with self.assertRaises(WrongKindError):
            self.arguments.named("src")

    def testUnknownName(self):
        with self.assertRaises(UnknownNameError) as context:
            self.arguments.single("nothing")
        self.assertEqual(context.exception.name, "nothing")
        with self.assertRaises(KeyError):
            self.arguments["nothing"]

    def testWrongKind(self):
        with self.assertRaises(WrongKindError) as context:
            self.arguments.single("verbose")
        self.assertIs(context.exception.kind, ArgumentKind.SWITCH)
        self.assertEqual(context.exception.expected, (ArgumentKind.SINGLE,))
        with self.assertRaises(WrongKindError):
            self.arguments.named("verbose").single()

    def testAccessErrorsAreLookupErrors(self):
        self.assertTrue(issubclass(UnknownNameError, LookupError))
        self.assertTrue(issubclass(WrongKindError, AccessError))

    def testImplicitTrailNeedsATrail(self):
        arguments = parse(Registry([switch("verbose")]), []).arguments
        with self.assertRaises(UnknownNameError):
            arguments.trail()
        with self.assertRaises(UnknownNameError):
            arguments.passalong()

    def testRepr(self):
        arguments = parse(Registry([positional("src")]), ["a"]).arguments
        self.assertEqual(repr(arguments), "parsed-arguments('src': 'a')")


class TestSeparateNamespaces(TestCase):
    """Named specs and positionals never share a result key."""

    def testPositionalAndSwitchWithTheSameName(self):
        registry = Registry([positional("verbose"), switch("verbose")])
        arguments = parse(registry, ["loud", "--verbose"]).arguments
        self.assertEqual(dict(arguments), {"verbose": "loud", "--verbose": True})
        self.assertEqual(arguments.positional("verbose"), "loud")
        self.assertTrue(arguments.switch("verbose"))
        self.assertIs(arguments.kind("verbose"), ArgumentKind.POSITIONAL)
        self.assertIs(arguments.kind("--verbose"), ArgumentKind.SWITCH)

    def testLongAndShortOnlyWithTheSameCharacter(self):
        registry = Registry([switch("v"), switch(short="v")])
        arguments = parse(registry, ["--v"]).arguments
        self.assertEqual(dict(arguments), {"--v": True, "-v": False})
        self.assertTrue(arguments.switch("v"))
        self.assertTrue(arguments.switch("--v"))
        self.assertFalse(arguments.switch("-v"))
        self.assertFalse(arguments.named("-v").switch())


if __name__ == "__main__":
    unittest.main()
