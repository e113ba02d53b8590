r"""
Argonaut argument specifications and builders.

Overview
- ArgumentKind: closed set of argument kinds, each carrying its arity semantics.
  • POSITIONAL: exactly one token, filled in declaration order.
  • TRAIL: the remaining tokens once every positional is filled (one-or-more when
    required, zero-or-more otherwise).
  • INTERRUPT, SWITCH, SINGLE, ZERO_OR_MORE, ONE_OR_MORE, PASSALONG: named kinds,
    reachable through a long form (--name) and/or a short form (-c).

- ArgumentSpec: the immutable, validated description of one argument. Specs are
  borrowed by registries (never consumed), so callers can keep inspecting them
  after parsing, e.g. to generate help.

- ArgumentBuilder: mutable, chainable builder finalized into an ArgumentSpec.
    >>> exclude = ArgumentBuilder.named("exclude", "x").single().param("PATTERN").build()

- Factories: positional(), trail(), interrupt(), switch(), single(),
  zero_or_more(), one_or_more() and passalong() build a spec in one call.
    >>> verbose = switch("verbose", "v", descr="print more")

Metadata (sanitized on construction)
- name: result key. Given for positional-like kinds; derived for named kinds
  (the long name when present, otherwise the short character).
- long: letters/digits separated by single hyphens, without leading dashes.
  The empty string is reserved for PASSALONG, where it spells the bare "--".
- short: a single non-space character other than '-'. PASSALONG has no short form.
- required: positionals are always required; trails default to required;
  SINGLE/ZERO_OR_MORE/ONE_OR_MORE may opt in; presence-only kinds never are.
- metavar: parameter label for help generators (value-bearing kinds only).
- descr: non-empty free text (str or rich Text) for help generators.

Missing names (a named spec with neither long nor short form, or a pass-along
without a long form) are not rejected here: they are registration errors
reported by Registry.register().
"""
import functools
import operator
import re
from enum import IntEnum

from rich.text import Text

from .utils import *


class ArgumentKind(IntEnum):
    """
    closed set of argument kinds.

    helpers
    - named: reachable through a flag (--long / -s).
    - positional: filled from unflagged tokens (POSITIONAL, TRAIL).
    - parametric: carries value(s) taken from the token stream.
    - multiple: greedy, flag-terminated value lists (ZERO_OR_MORE, ONE_OR_MORE).
    """
    POSITIONAL = 1
    TRAIL = 2
    INTERRUPT = 3
    SWITCH = 4
    SINGLE = 5
    ZERO_OR_MORE = 6
    ONE_OR_MORE = 7
    PASSALONG = 8

    @property
    def named(self):
        return self not in (ArgumentKind.POSITIONAL, ArgumentKind.TRAIL)

    @property
    def positional(self):
        return not self.named

    @property
    def parametric(self):
        return self not in (ArgumentKind.INTERRUPT, ArgumentKind.SWITCH)

    @property
    def multiple(self):
        return self in (ArgumentKind.ZERO_OR_MORE, ArgumentKind.ONE_OR_MORE)

    @property
    def label(self):
        """lowercase, hyphenated label used in messages ("zero-or-more")."""
        return self.name.lower().replace("_", "-")


class ArgumentType(type):
    """
    Metaclass giving specs stable, introspectable representations.

    Responsibilities
    - Expose the fields listed in __introspectable__ as read-only properties
      (mirror() over the "_field" backing storage).
    - Provide __repr__/__rich_repr__ built from __displayable__ (or
      __introspectable__ when unset).
    - Derive __typename__ from the class name (camel-case split with hyphens)
      for consistent messages.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - argument-spec(kind=<ArgumentKind.SWITCH: 4>, name='verbose', ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


_LONG = re.compile(r"[^\W_]+(-[^\W_]+)*")


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every kind.

    - kind: must be an ArgumentKind (plain ints are converted).
    - descr: Unset | non-empty str | Text. Unset becomes None.
    - metavar: Unset | non-empty str, only for value-bearing kinds. Unset becomes None.

    Raises
    - TypeError: wrong types, or metavar on a presence-only kind.
    - ValueError: empty strings after trimming, unknown kind values.
    """
    if isinstance(kind := metadata["kind"], bool) or not isinstance(kind, int):
        raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")
    metadata["kind"] = kind = ArgumentKind(kind)

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str):
        if not kind.parametric:
            raise TypeError(f"{kind.label} {cls.__typename__} cannot have a 'metavar'")
        if not (metavar := metavar.strip()):
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)


def _sanitize_positional_metadata(cls, metadata, /):
    """
    Internal: validate metadata for POSITIONAL and TRAIL specs.

    - name: required, non-empty string (trimmed).
    - long/short: forbidden (positionals are not reachable through flags).
    - required: positionals are always required; trails default to required.
    """
    kind = metadata["kind"]

    if metadata["name"] is Unset:
        raise TypeError(f"{kind.label} {cls.__typename__} must specify a name")
    elif not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif name.startswith("-"):
        raise ValueError(f"{kind.label} {cls.__typename__} 'name' cannot start with '-'")
    metadata["name"] = name

    if metadata["long"] is not Unset or metadata["short"] is not Unset:
        raise TypeError(f"{kind.label} {cls.__typename__} cannot have flag names")
    metadata["long"] = metadata["short"] = None

    required = coalesce(metadata["required"], True)
    if kind is ArgumentKind.POSITIONAL and not required:
        raise TypeError(f"{kind.label} {cls.__typename__} is always required")
    metadata["required"] = bool(required)


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate metadata for named (flag-reachable) specs.

    - name: derived, cannot be given (long name when present, otherwise the short char).
    - long: Unset | str matching letters/digits separated by single hyphens; given
      without leading dashes. The empty string is only valid for PASSALONG.
    - short: Unset | single non-space character other than '-'; forbidden for PASSALONG.
    - required: only SINGLE, ZERO_OR_MORE and ONE_OR_MORE may be required.
    """
    kind = metadata["kind"]

    if metadata["name"] is not Unset:
        raise TypeError(f"{kind.label} {cls.__typename__} takes its name from its flags")

    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'long' must be a string")
    elif isinstance(long, str):
        if long.startswith("-"):
            raise ValueError(f"{cls.__typename__} 'long' must be given without leading hyphens")
        if not long and kind is not ArgumentKind.PASSALONG:
            raise ValueError(f"{kind.label} {cls.__typename__} 'long' cannot be empty")
        if long and not _LONG.fullmatch(long):
            raise ValueError(f"{cls.__typename__} 'long' must be a valid shell-style flag name (unicodes are allowed)")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str):
        if kind is ArgumentKind.PASSALONG:
            raise TypeError(f"{kind.label} {cls.__typename__} cannot have a short name")
        if len(short) != 1 or short.isspace() or short == "-":
            raise ValueError(f"{cls.__typename__} 'short' must be a single non-space character other than '-'")

    metadata["long"] = coalesce(long)
    metadata["short"] = coalesce(short)
    metadata["name"] = coalesce(long, coalesce(short))

    required = coalesce(metadata["required"], False)
    if required and not (kind is ArgumentKind.SINGLE or kind.multiple):
        raise TypeError(f"{kind.label} {cls.__typename__} cannot be required")
    metadata["required"] = bool(required)


class ArgumentSpec(metaclass=ArgumentType):
    """
    Immutable description of one argument.

    Construction validates the combination of kind and metadata; registries
    validate specs against each other. Two specs with the same metadata are
    equal (and hash alike) but remain independent objects.

    Properties
    - kind, name, long, short, required, metavar, descr (see module docs).
    - flags: the literal tokens that select this spec, short form first
      (e.g. ("-x", "--exclude")); empty for positional-like kinds.
    """

    __introspectable__ = (
        "kind",
        "name",
        "long",
        "short",
        "required",
        "metavar",
        "descr",
    )

    __displayable__ = (
        "kind",
        "name",
        "long",
        "short",
        "required",
    )

    __slots__ = tuple("_" + name for name in __introspectable__) + ("__weakref__",)

    def __new__(
            cls,
            kind,
            /,
            name=Unset,
            *,
            long=Unset,
            short=Unset,
            required=Unset,
            metavar=Unset,
            descr=Unset
    ):
        """
        Construct an ArgumentSpec.

        Parameters
        - kind: ArgumentKind
        - name: str (POSITIONAL and TRAIL only)
        - long: Unset | str (named kinds only; without dashes)
        - short: Unset | str (named kinds only; one character)
        - required: Unset | bool (kind-dependent default, see module docs)
        - metavar: Unset | str (value-bearing kinds only)
        - descr: Unset | str | Text

        Raises
        - TypeError/ValueError on invalid combinations (see the _sanitize_* helpers).
        """
        metadata = {
            "kind": kind,
            "name": name,
            "long": long,
            "short": short,
            "required": required,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)
        if metadata["kind"].named:
            _sanitize_named_metadata(cls, metadata)
        else:
            _sanitize_positional_metadata(cls, metadata)

        self = super().__new__(cls)
        # bypass the immutability guard while the backing fields are written
        for field, value in metadata.items():
            object.__setattr__(self, "_" + field, value)
        return self

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    @property
    def flags(self):
        flags = ()
        if self._short is not None:
            flags += ("-" + self._short,)
        if self._long is not None:
            flags += ("--" + self._long,)
        return flags

    @property
    def key(self):
        """
        result key of a registered spec: the name of positional-like specs, the
        primary flag (long form when present) of named ones.
        """
        if self._kind.named:
            return self.flags[-1] if self.flags else None
        return self._name

    def _key(self):
        return tuple(getattr(self, "_" + name) for name in type(self).__introspectable__)

    def __eq__(self, other, /):
        if not isinstance(other, ArgumentSpec):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __argument__(self):
        """
        Introspection hook: registries accept anything exposing __argument__().
        """
        return self


class ArgumentBuilder(metaclass=ArgumentType):
    """
    Mutable, chainable builder finalized into an immutable ArgumentSpec.

    Entry points
    - ArgumentBuilder.positional(name)
    - ArgumentBuilder.trail(name)
    - ArgumentBuilder.named(long=Unset, short=Unset), followed by exactly one kind
      selector: single(), zero_or_more(), one_or_more(), switch(), interrupt(), passalong().

    Decorators (any order, last call wins)
    - param(metavar), help(descr), required(flag=True), optional().

    Validation happens in build(); a builder can be built several times and
    yields equal, independent specs.
    """

    __introspectable__ = (
        "kind",
        "name",
        "long",
        "short",
    )

    def __init__(self, kind=Unset, /, name=Unset, *, long=Unset, short=Unset):
        self._kind = kind
        self._name = name
        self._long = long
        self._short = short
        self._required = Unset
        self._metavar = Unset
        self._descr = Unset

    @classmethod
    def positional(cls, name, /):
        return cls(ArgumentKind.POSITIONAL, name)

    @classmethod
    def trail(cls, name, /):
        return cls(ArgumentKind.TRAIL, name)

    @classmethod
    def named(cls, long=Unset, short=Unset, /):
        return cls(long=long, short=short)

    def _select(self, kind, /):
        if self._kind is not Unset:
            raise TypeError(f"{type(self).__typename__} kind is already {ArgumentKind(self._kind).label}")
        self._kind = kind
        return self

    def single(self):
        return self._select(ArgumentKind.SINGLE)

    def zero_or_more(self):
        return self._select(ArgumentKind.ZERO_OR_MORE)

    def one_or_more(self):
        return self._select(ArgumentKind.ONE_OR_MORE)

    def switch(self):
        return self._select(ArgumentKind.SWITCH)

    def interrupt(self):
        return self._select(ArgumentKind.INTERRUPT)

    def passalong(self):
        return self._select(ArgumentKind.PASSALONG)

    def param(self, metavar, /):
        self._metavar = metavar
        return self

    def help(self, descr, /):
        self._descr = descr
        return self

    def required(self, flag=True, /):
        self._required = bool(flag)
        return self

    def optional(self):
        return self.required(False)

    def build(self):
        if self._kind is Unset:
            raise TypeError(f"{type(self).__typename__} must select a kind before building")
        return ArgumentSpec(
            self._kind,
            self._name,
            long=self._long,
            short=self._short,
            required=self._required,
            metavar=self._metavar,
            descr=self._descr,
        )

    def __argument__(self):
        """
        Introspection hook: registries build the spec on registration.
        """
        return self.build()


def positional(name, /, *, metavar=Unset, descr=Unset):
    """exactly one token, filled in declaration order."""
    return ArgumentSpec(ArgumentKind.POSITIONAL, name, metavar=metavar, descr=descr)


def trail(name, /, *, required=True, metavar=Unset, descr=Unset):
    """the remaining tokens after every positional (one-or-more unless required=False)."""
    return ArgumentSpec(ArgumentKind.TRAIL, name, required=required, metavar=metavar, descr=descr)


def interrupt(long=Unset, short=Unset, *, descr=Unset):
    """stops parsing successfully as soon as it is seen (help, version...)."""
    return ArgumentSpec(ArgumentKind.INTERRUPT, long=long, short=short, descr=descr)


def switch(long=Unset, short=Unset, *, descr=Unset):
    """boolean presence."""
    return ArgumentSpec(ArgumentKind.SWITCH, long=long, short=short, descr=descr)


def single(long=Unset, short=Unset, *, required=False, metavar=Unset, descr=Unset):
    """exactly one parameter: the next token, verbatim."""
    return ArgumentSpec(ArgumentKind.SINGLE, long=long, short=short, required=required, metavar=metavar, descr=descr)


def zero_or_more(long=Unset, short=Unset, *, required=False, metavar=Unset, descr=Unset):
    """every following token up to the next declared flag; may be empty."""
    return ArgumentSpec(ArgumentKind.ZERO_OR_MORE, long=long, short=short, required=required, metavar=metavar, descr=descr)


def one_or_more(long=Unset, short=Unset, *, required=False, metavar=Unset, descr=Unset):
    """like zero_or_more(), with at least one parameter."""
    return ArgumentSpec(ArgumentKind.ONE_OR_MORE, long=long, short=short, required=required, metavar=metavar, descr=descr)


def passalong(long=Unset, *, metavar=Unset, descr=Unset):
    """every remaining token, verbatim; passalong("") is the bare "--" marker."""
    return ArgumentSpec(ArgumentKind.PASSALONG, long=long, metavar=metavar, descr=descr)


__all__ = (
    # Kinds and specifications
    "ArgumentKind",
    "ArgumentSpec",
    "ArgumentBuilder",

    # Factories
    "positional",
    "trail",
    "interrupt",
    "switch",
    "single",
    "zero_or_more",
    "one_or_more",
    "passalong",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ArgumentType
