# python
"""
Registry behavioral tests.

Scope
- Registration invariants: unique long/short names, one trail, one pass-along,
  missing names, result-name uniqueness.
- Batch atomicity of register_many().
- Read access used by help generators, flag resolution and snapshots.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argonaut import (
    ArgumentBuilder,
    ArgumentKind,
    FaultCode,
    Registry,
    RegistrationError,
    DuplicateLongNameError,
    DuplicateShortNameError,
    DuplicateNameError,
    MultipleTrailsError,
    MultiplePassAlongsError,
    MissingLongNameError,
    Repeats,
    SpecId,
    positional,
    trail,
    interrupt,
    switch,
    single,
    zero_or_more,
    one_or_more,
    passalong,
)


class TestRegistration(TestCase):
    """Single registrations and their invariants."""

    def testWellFormedRegistrySucceeds(self):
        registry = Registry()
        ids = registry.register_many([
            positional("src"),
            positional("dst"),
            trail("rest"),
            interrupt("help", "h"),
            switch("verbose", "v"),
            single("exclude", "x"),
            zero_or_more(short="e"),
            one_or_more("add"),
            passalong(""),
        ])
        self.assertEqual(len(registry), 9)
        self.assertEqual(ids[0], SpecId(0, "src"))
        self.assertEqual(ids[-1], SpecId(8, ""))

    def testRegisterReturnsSpecId(self):
        registry = Registry()
        self.assertEqual(registry.register(switch("verbose")), SpecId(0, "verbose"))
        self.assertEqual(registry.register(positional("foo")), SpecId(1, "foo"))

    def testDuplicateLongNameAlwaysFails(self):
        for second in (switch("verbose"), single("verbose", "x"), one_or_more("verbose"), interrupt("verbose")):
            registry = Registry([switch("verbose", "v")])
            with self.subTest(second=second):
                with self.assertRaises(DuplicateLongNameError) as context:
                    registry.register(second)
                self.assertEqual(context.exception.name, "verbose")
                self.assertEqual(context.exception.code, FaultCode.DUPLICATE_LONG_NAME)
                self.assertEqual(len(registry), 1)

    def testDuplicateShortNameFails(self):
        registry = Registry([switch("verbose", "v")])
        with self.assertRaises(DuplicateShortNameError) as context:
            registry.register(single("version", "v"))
        self.assertEqual(context.exception.name, "v")
        self.assertEqual(context.exception.conflict, switch("verbose", "v"))

    def testSecondTrailFails(self):
        registry = Registry([trail("rest")])
        with self.assertRaises(MultipleTrailsError):
            registry.register(trail("more"))

    def testSecondPassAlongFails(self):
        registry = Registry([passalong("")])
        with self.assertRaises(MultiplePassAlongsError):
            registry.register(passalong("exec"))

    def testNamedSpecWithoutAnyNameFails(self):
        with self.assertRaises(MissingLongNameError):
            Registry().register(switch())

    def testPassAlongWithoutLongNameFails(self):
        with self.assertRaises(MissingLongNameError):
            Registry().register(passalong())

    def testShortOnlySpecIsAccepted(self):
        registry = Registry()
        self.assertEqual(registry.register(zero_or_more(short="e")), SpecId(0, "e"))

    def testPositionalNamesAreUnique(self):
        registry = Registry([positional("foo")])
        with self.assertRaises(DuplicateNameError):
            registry.register(trail("foo"))

    def testPositionalNameMayMatchAFlagName(self):
        registry = Registry([switch("verbose")])
        self.assertEqual(registry.register(positional("verbose")), SpecId(1, "verbose"))
        self.assertIs(registry.find("verbose").kind, ArgumentKind.POSITIONAL)
        self.assertIs(registry.find("--verbose").kind, ArgumentKind.SWITCH)

    def testShortOnlySpecMayMatchALongName(self):
        registry = Registry([switch("v"), switch(short="v")])
        self.assertEqual(registry.resolve("--v").flags, ("--v",))
        self.assertEqual(registry.resolve("-v").flags, ("-v",))

    def testRegistrationErrorsAreValueErrors(self):
        with self.assertRaises(ValueError):
            Registry([switch("verbose"), switch("verbose")])
        self.assertTrue(issubclass(MissingLongNameError, RegistrationError))

    def testBuildersAreAccepted(self):
        registry = Registry()
        registry.register(ArgumentBuilder.named("exclude", "x").single())
        self.assertEqual(registry.find("x"), single("exclude", "x"))

    def testNonArgumentsAreRejected(self):
        with self.assertRaises(TypeError):
            Registry().register("--verbose")


class TestBatchRegistration(TestCase):
    """register_many() is all-or-nothing."""

    def testFailingBatchLeavesRegistryUnchanged(self):
        registry = Registry([positional("foo")])
        with self.assertRaises(DuplicateLongNameError):
            registry.register_many([switch("verbose"), trail("rest"), switch("verbose")])
        self.assertEqual(registry.specs, (positional("foo"),))
        self.assertIsNone(registry.trail)
        self.assertIsNone(registry.find("verbose"))

    def testBatchIsCheckedAgainstItself(self):
        with self.assertRaises(MultipleTrailsError):
            Registry([trail("one"), trail("two")])

    def testSuccessfulBatchKeepsOrder(self):
        registry = Registry()
        registry.register_many([positional("a"), switch("verbose"), positional("b")])
        self.assertEqual([spec.name for spec in registry], ["a", "verbose", "b"])
        self.assertEqual([spec.name for spec in registry.positionals], ["a", "b"])


class TestReadAccess(TestCase):
    """Queries used by help generators and the match engine."""

    def setUp(self):
        self.registry = Registry([
            positional("foo"),
            trail("rest"),
            interrupt("help", "h"),
            single("exclude", "x", metavar="PATTERN", descr="skip matching files"),
            passalong(""),
        ])

    def testFindByNameLongOrShort(self):
        self.assertEqual(self.registry.find("foo"), positional("foo"))
        self.assertEqual(self.registry.find("exclude").metavar, "PATTERN")
        self.assertIs(self.registry.find("x"), self.registry.find("exclude"))
        self.assertIsNone(self.registry.find("nothing"))

    def testContains(self):
        self.assertIn("help", self.registry)
        self.assertIn("h", self.registry)
        self.assertIn(positional("foo"), self.registry)
        self.assertNotIn(positional("bar"), self.registry)

    def testGetItem(self):
        self.assertEqual(self.registry[SpecId(1, "rest")], trail("rest"))
        self.assertEqual(self.registry[0], positional("foo"))
        with self.assertRaises(KeyError):
            self.registry[SpecId(1, "other")]
        with self.assertRaises(TypeError):
            self.registry["foo"]

    def testKindGroups(self):
        self.assertEqual(self.registry.trail, trail("rest"))
        self.assertEqual(self.registry.passalong, passalong(""))
        self.assertEqual([spec.name for spec in self.registry.named], ["help", "exclude", ""])

    def testResolve(self):
        self.assertEqual(self.registry.resolve("--help").name, "help")
        self.assertEqual(self.registry.resolve("-x").name, "exclude")
        self.assertEqual(self.registry.resolve("--"), passalong(""))
        self.assertIsNone(self.registry.resolve("--nothing"))
        self.assertIsNone(self.registry.resolve("-hx"))
        self.assertIsNone(self.registry.resolve("-"))
        self.assertIsNone(self.registry.resolve("help"))

    def testSnapshotIsCachedAndFrozen(self):
        snapshot = self.registry.snapshot()
        self.assertIs(self.registry.snapshot(), snapshot)
        with self.assertRaises(TypeError):
            snapshot.longs["verbose"] = switch("verbose")
        self.registry.register(switch("verbose"))
        self.assertIsNot(self.registry.snapshot(), snapshot)
        self.assertIsNone(snapshot.find("verbose"))

    def testRepeatsPolicy(self):
        self.assertIs(Registry().repeats, Repeats.OVERWRITE)
        self.assertIs(Registry(repeats="forbid").repeats, Repeats.FORBID)
        with self.assertRaises(ValueError):
            Registry(repeats="ignore")


if __name__ == "__main__":
    unittest.main()
