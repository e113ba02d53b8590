"""
Argonaut specification registry.

What this module provides
- Registry: the set of declared argument specs, validated against each other on
  insertion. Registration order is the fill order of positionals and the
  iteration order offered to help generators.
- SpecId: the stable identity handed back by register().
- Repeats: policy for named flags given more than once on a command line.
- Snapshot: the immutable view a match engine scans against.

Invariants (checked on registration, violations raise RegistrationError)
- no two specs share a long name (DuplicateLongNameError);
- no two specs share a short character (DuplicateShortNameError);
- at most one trail (MultipleTrailsError) and one pass-along (MultiplePassAlongsError);
- a named spec needs a long name, unless it has a short one; a pass-along always
  needs one (MissingLongNameError);
- positional and trail names are unique among themselves (DuplicateNameError);
  named specs are told apart by their flags, so `--v` and a short-only `-v`, or a
  positional "verbose" and `--verbose`, coexist.

register_many() is all-or-nothing: the batch is staged on a copy of the tables
and committed only when every spec was admitted.

Quick start
    >>> from argonaut import Registry, positional, trail, switch
    >>> registry = Registry()
    >>> registry.register_many([positional("foo"), trail("rest"), switch("verbose", "v")])
    (SpecId(index=0, name='foo'), SpecId(index=1, name='rest'), SpecId(index=2, name='verbose'))
"""
from enum import StrEnum
from types import MappingProxyType
from typing import NamedTuple

from .arguments import ArgumentKind, ArgumentSpec
from .faults import *


class Repeats(StrEnum):
    """
    policy for a named flag matched more than once.

    - OVERWRITE: last occurrence wins, silently.
    - WARN: last occurrence wins, a RepeatedFlagWarning is emitted.
    - FORBID: the second occurrence is a DuplicatedFlagError.
    """
    OVERWRITE = "overwrite"
    WARN = "warn"
    FORBID = "forbid"


class SpecId(NamedTuple):
    index: int
    name: str


def _resolve(longs, shorts, token, /):
    """
    map a flag token to its named spec, or None.

    - '--name' looks up long names ('--' alone is the empty long name).
    - '-c' looks up short characters; clustered shorts ('-vx') never resolve.
    """
    if token.startswith("--"):
        return longs.get(token[2:])
    if token.startswith("-") and len(token) == 2:
        return shorts.get(token[1])
    return None


class Snapshot(NamedTuple):
    """
    immutable view of a registry, taken once per scan.
    """
    specs: tuple
    names: MappingProxyType
    longs: MappingProxyType
    shorts: MappingProxyType
    positionals: tuple
    trail: ArgumentSpec | None
    passalong: ArgumentSpec | None
    required: tuple
    repeats: Repeats

    def resolve(self, token, /):
        return _resolve(self.longs, self.shorts, token)

    def find(self, name, /):
        """
        the spec known by this name (or None).

        lookup order: flag token ('--long', '-c'), positional or trail name,
        long name, short character.
        """
        if not isinstance(name, str):
            return None
        if name.startswith("-"):
            return self.resolve(name)
        return self.names.get(name) or self.longs.get(name) or self.shorts.get(name)

    def find_named(self, name, /):
        """
        the named spec known by this flag token, long name or short character (or None).
        """
        if not isinstance(name, str):
            return None
        if name.startswith("-"):
            return self.resolve(name)
        return self.longs.get(name) or self.shorts.get(name)

    def find_positional(self, name, /):
        """
        the positional or trail spec known by this name (or None).
        """
        if not isinstance(name, str):
            return None
        return self.names.get(name)


class _Tables:
    __slots__ = ("specs", "names", "longs", "shorts", "trail", "passalong")

    def __init__(self):
        self.specs = []
        self.names = {}
        self.longs = {}
        self.shorts = {}
        self.trail = None
        self.passalong = None

    def copy(self):
        tables = _Tables()
        tables.specs = self.specs.copy()
        tables.names = self.names.copy()
        tables.longs = self.longs.copy()
        tables.shorts = self.shorts.copy()
        tables.trail = self.trail
        tables.passalong = self.passalong
        return tables


def _resolve_argument(x, /):
    """
    Return the concrete ArgumentSpec from anything exposing __argument__().
    """
    if not hasattr(x, "__argument__") or not callable(x.__argument__):
        raise TypeError("registry argument must be argument-resoluble")
    spec = x.__argument__()
    if not isinstance(spec, ArgumentSpec):
        raise TypeError("__argument__() non-argument-spec returned")
    return spec


def _admit(tables, spec, /):
    """
    validate one spec against the tables and insert it; the tables are left
    untouched when a RegistrationError is raised.
    """
    kind = spec.kind
    shown = " | ".join(spec.flags) or repr(spec.name)

    if kind.named and spec.long is None and (spec.short is None or kind is ArgumentKind.PASSALONG):
        raise MissingLongNameError(
            "%s argument has no long name" % kind.label,
            title="missing long name",
            code=FaultCode.MISSING_LONG_NAME,
            hint="give it a long name (for example: --name)%s" % (
                "" if kind is ArgumentKind.PASSALONG else " or at least a short one"
            ),
            spec=spec,
            docs=getdoc(FaultCode.MISSING_LONG_NAME),
        )

    if spec.long is not None and (conflict := tables.longs.get(spec.long)) is not None:
        raise DuplicateLongNameError(
            "long name '--%s' is already registered" % spec.long,
            title="duplicate long name",
            code=FaultCode.DUPLICATE_LONG_NAME,
            hint="rename one of the two arguments; each long name can be registered only once",
            name=spec.long,
            spec=spec,
            conflict=conflict,
            docs=getdoc(FaultCode.DUPLICATE_LONG_NAME),
        )

    if spec.short is not None and (conflict := tables.shorts.get(spec.short)) is not None:
        raise DuplicateShortNameError(
            "short name '-%s' is already registered" % spec.short,
            title="duplicate short name",
            code=FaultCode.DUPLICATE_SHORT_NAME,
            hint="pick another character; each short name can be registered only once",
            name=spec.short,
            spec=spec,
            conflict=conflict,
            docs=getdoc(FaultCode.DUPLICATE_SHORT_NAME),
        )

    if kind is ArgumentKind.TRAIL and tables.trail is not None:
        raise MultipleTrailsError(
            "trail %r cannot be added, %r is already the trail" % (spec.name, tables.trail.name),
            title="multiple trails",
            code=FaultCode.MULTIPLE_TRAILS,
            hint="keep a single trail; it always collects the remaining input",
            spec=spec,
            conflict=tables.trail,
            docs=getdoc(FaultCode.MULTIPLE_TRAILS),
        )

    if kind is ArgumentKind.PASSALONG and tables.passalong is not None:
        raise MultiplePassAlongsError(
            "pass-along %s cannot be added, %s is already the pass-along" % (shown, " | ".join(tables.passalong.flags)),
            title="multiple pass-alongs",
            code=FaultCode.MULTIPLE_PASSALONGS,
            hint="keep a single pass-along; it always collects the remaining input",
            spec=spec,
            conflict=tables.passalong,
            docs=getdoc(FaultCode.MULTIPLE_PASSALONGS),
        )

    if kind.positional and (conflict := tables.names.get(spec.name)) is not None:
        raise DuplicateNameError(
            "name %r of %s argument is already used by a %s argument" % (spec.name, kind.label, conflict.kind.label),
            title="duplicate name",
            code=FaultCode.DUPLICATE_NAME,
            hint="rename one of the two arguments; positional results are looked up by name",
            name=spec.name,
            spec=spec,
            conflict=conflict,
            docs=getdoc(FaultCode.DUPLICATE_NAME),
        )

    tables.specs.append(spec)
    if kind.positional:
        tables.names[spec.name] = spec
    if spec.long is not None:
        tables.longs[spec.long] = spec
    if spec.short is not None:
        tables.shorts[spec.short] = spec
    if kind is ArgumentKind.TRAIL:
        tables.trail = spec
    if kind is ArgumentKind.PASSALONG:
        tables.passalong = spec

    return SpecId(len(tables.specs) - 1, spec.name)


class Registry:
    """
    Validated set of argument specs.

    Parameters
    - specs: Iterable of specs (or builders) registered at once, all-or-nothing.
    - repeats: Repeats policy (or its string value) applied by match engines.

    Read access (help generators, callers)
    - iteration and specs: registration order.
    - len(registry), spec in registry, name in registry.
    - registry[spec_id] / registry[index].
    - find(name): by flag token, positional or trail name, long name or short character.
    - positionals, trail, passalong, named.
    - resolve(token): the named spec selected by '--long' / '-c', or None.

    The registry is meant to be finalized before parsing; scans work on a
    snapshot() taken when they start, so later registrations never leak into a
    running scan.
    """

    def __init__(self, specs=(), /, *, repeats=Repeats.OVERWRITE):
        self._repeats = Repeats(repeats)
        self._tables = _Tables()
        self._snapshot = None
        if specs:
            self.register_many(specs)

    @property
    def repeats(self):
        return self._repeats

    @property
    def specs(self):
        return tuple(self._tables.specs)

    @property
    def positionals(self):
        return tuple(spec for spec in self._tables.specs if spec.kind is ArgumentKind.POSITIONAL)

    @property
    def named(self):
        return tuple(spec for spec in self._tables.specs if spec.kind.named)

    @property
    def trail(self):
        return self._tables.trail

    @property
    def passalong(self):
        return self._tables.passalong

    def register(self, spec, /):
        """
        validate and add one spec; returns its SpecId.

        raises RegistrationError (registry unchanged) or TypeError for objects
        that are not argument-resoluble.
        """
        staged = self._tables.copy()
        spec_id = _admit(staged, _resolve_argument(spec))
        self._commit(staged)
        return spec_id

    def register_many(self, specs, /):
        """
        validate and add every spec, or none of them; returns their SpecIds.
        """
        staged = self._tables.copy()
        spec_ids = tuple(_admit(staged, _resolve_argument(spec)) for spec in specs)
        self._commit(staged)
        return spec_ids

    def _commit(self, tables, /):
        self._tables = tables
        self._snapshot = None

    def find(self, name, /):
        return self.snapshot().find(name)

    def resolve(self, token, /):
        return _resolve(self._tables.longs, self._tables.shorts, token)

    def snapshot(self):
        """
        the immutable view scanned by the match engine (cached until the next registration).
        """
        if self._snapshot is None:
            tables = self._tables
            self._snapshot = Snapshot(
                specs=tuple(tables.specs),
                names=MappingProxyType(tables.names.copy()),
                longs=MappingProxyType(tables.longs.copy()),
                shorts=MappingProxyType(tables.shorts.copy()),
                positionals=tuple(spec for spec in tables.specs if spec.kind is ArgumentKind.POSITIONAL),
                trail=tables.trail,
                passalong=tables.passalong,
                required=tuple(spec for spec in tables.specs if spec.kind.named and spec.required),
                repeats=self._repeats,
            )
        return self._snapshot

    def __len__(self):
        return len(self._tables.specs)

    def __iter__(self):
        return iter(tuple(self._tables.specs))

    def __contains__(self, item, /):
        if isinstance(item, ArgumentSpec):
            return item in self._tables.specs
        return self.find(item) is not None

    def __getitem__(self, key, /):
        if isinstance(key, SpecId):
            spec = self._tables.specs[key.index]
            if spec.name != key.name:
                raise KeyError(key)
            return spec
        if isinstance(key, int) and not isinstance(key, bool):
            return self._tables.specs[key]
        raise TypeError("registry indices must be spec-ids or integers")

    def __repr__(self):
        return "registry(specs=%r, repeats=%r)" % (self.specs, self._repeats)

    def __rich_repr__(self):
        yield "specs", self.specs
        yield "repeats", self._repeats


__all__ = (
    "Registry",
    "Repeats",
    "SpecId",
    "Snapshot",
)
