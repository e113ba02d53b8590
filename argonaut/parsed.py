"""
Argonaut parse results.

ParsedArguments is the immutable mapping produced by a successful,
non-interrupted parse. Every registered spec (except interrupts) has an entry:

- positional    -> str
- trail         -> tuple[str, ...]  (empty when an optional trail was not entered)
- switch        -> bool
- single        -> str | None
- zero-or-more,
  one-or-more   -> tuple[str, ...] | None
- pass-along    -> tuple[str, ...] | None

Mapping keys are exact: the name of positionals and of the trail, the primary
flag of named specs ('--verbose', or '-e' for a short-only spec). Named and
positional specs never share a key, so a positional "verbose" and a switch
--verbose coexist.

Typed accessors are lenient: positional() and trail() take the declared name;
switch(), single(), multiple(), passalong() and named() take a flag token, a
long name or a short character (long names win, '-v' reaches a short-only -v).
Unknown names raise UnknownNameError, asking a spec for the wrong kind of value
raises WrongKindError (both are AccessError, a KeyError).

    >>> arguments["--verbose"]
    True
    >>> arguments.switch("verbose")
    True
    >>> arguments.named("x").single()
    'val'
"""
from collections.abc import Mapping
from types import MappingProxyType

from .arguments import ArgumentKind
from .faults import *
from .utils import *

_DEFAULTS = {
    ArgumentKind.TRAIL: (),
    ArgumentKind.SWITCH: False,
}

_NAMED = tuple(kind for kind in ArgumentKind if kind.named)


def _unknown(name, /):
    return UnknownNameError(
        "no argument is registered as %r" % (name,),
        title="unknown name",
        code=FaultCode.UNKNOWN_NAME,
        hint="query a registered name, flag, long name or short character",
        name=name,
        docs=getdoc(FaultCode.UNKNOWN_NAME),
    )


class ParsedArguments(Mapping):
    """
    Read-only view over the values of one parse, keyed by ArgumentSpec.key.

    Built by parse() from a registry snapshot and the values matched by the
    scan (keyed the same way); unmatched specs get their default (False for
    switches, () for trails, None otherwise).
    """

    def __init__(self, snapshot, values, /):
        self._snapshot = snapshot
        self._values = MappingProxyType({
            spec.key: values.get(spec.key, _DEFAULTS.get(spec.kind))
            for spec in snapshot.specs
            if spec.kind is not ArgumentKind.INTERRUPT
        })

    def __getitem__(self, key, /):
        try:
            return self._values[key]
        except (KeyError, TypeError):
            raise _unknown(key) from None

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "parsed-arguments(%s)" % ", ".join("%r: %r" % item for item in self._values.items())

    def __rich_repr__(self):
        yield from self._values.items()

    def spec(self, name, /):
        """
        the spec known by this key or name (see Snapshot.find for the lookup order).
        """
        spec = self._snapshot.find(name)
        if spec is None or spec.kind is ArgumentKind.INTERRUPT:
            raise _unknown(name)
        return spec

    def kind(self, name, /):
        return self.spec(name).kind

    def _lookup(self, name, expected, /):
        if all(kind.named for kind in expected):
            spec = self._snapshot.find_named(name)
        else:
            spec = self._snapshot.find_positional(name)
        if spec is None:
            spec = self.spec(name)
        if spec.kind not in expected:
            raise WrongKindError(
                "%r is a %s argument, not a %s one" % (
                    spec.name,
                    spec.kind.label,
                    " or ".join(kind.label for kind in expected) if len(expected) < 3 else "named",
                ),
                title="wrong kind",
                code=FaultCode.WRONG_KIND,
                hint="use the %s accessor instead" % spec.kind.label,
                name=spec.name,
                kind=spec.kind,
                expected=tuple(expected),
                docs=getdoc(FaultCode.WRONG_KIND),
            )
        return spec

    def _only(self, spec, kind, /):
        if spec is None:
            raise UnknownNameError(
                "no %s argument is registered" % kind.label,
                title="unknown name",
                code=FaultCode.UNKNOWN_NAME,
                hint="pass the name explicitly, or register a %s" % kind.label,
                name=None,
                docs=getdoc(FaultCode.UNKNOWN_NAME),
            )
        return spec

    def _value(self, name, *expected):
        return self._values[self._lookup(name, expected).key]

    def positional(self, name, /):
        return self._value(name, ArgumentKind.POSITIONAL)

    def trail(self, name=Unset, /):
        """the trail's tokens; the name may be omitted since a registry has at most one trail."""
        if name is Unset:
            return self._values[self._only(self._snapshot.trail, ArgumentKind.TRAIL).key]
        return self._value(name, ArgumentKind.TRAIL)

    def switch(self, name, /):
        return self._value(name, ArgumentKind.SWITCH)

    def single(self, name, /):
        return self._value(name, ArgumentKind.SINGLE)

    def multiple(self, name, /):
        return self._value(name, ArgumentKind.ZERO_OR_MORE, ArgumentKind.ONE_OR_MORE)

    def passalong(self, name=Unset, /):
        if name is Unset:
            return self._values[self._only(self._snapshot.passalong, ArgumentKind.PASSALONG).key]
        return self._value(name, ArgumentKind.PASSALONG)

    def named(self, name, /):
        """
        NamedAccess bound to a named spec (switch, single, multiple or pass-along).
        """
        return NamedAccess(self, self._lookup(name, _NAMED))


class NamedAccess:
    """typed view over one named spec of a ParsedArguments."""

    __slots__ = ("_arguments", "_spec")

    def __init__(self, arguments, spec, /):
        self._arguments = arguments
        self._spec = spec

    @property
    def spec(self):
        return self._spec

    @property
    def kind(self):
        return self._spec.kind

    def switch(self):
        return self._arguments.switch(self._spec.key)

    def single(self):
        return self._arguments.single(self._spec.key)

    def multiple(self):
        return self._arguments.multiple(self._spec.key)

    def passalong(self):
        return self._arguments.passalong(self._spec.key)

    def __repr__(self):
        return "named-access(key=%r, kind=%r)" % (self._spec.key, self._spec.kind)


__all__ = (
    "ParsedArguments",
    "NamedAccess",
)
