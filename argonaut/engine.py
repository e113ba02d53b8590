"""
Argonaut match engine.

Scope
- scan(registry, tokens): lazy, left-to-right classification of raw tokens
  against a registry snapshot, yielding one StructuredResult per matched argument.
- parse(registry, tokens): folds a scan into a terminal status, Parsed(arguments)
  or Interrupted(name, spec); parse errors propagate as exceptions.

Algorithm (per token, at 0-based index i)
1. the token resolves to a declared flag:
   - interrupt: yield it, stop (no further checks).
   - pass-along: run the end-of-input check, yield tokens[i+1:] verbatim, stop.
   - switch: yield True.
   - single: take the very next token verbatim, even when it looks like a flag.
   - zero-or-more / one-or-more: greedily take tokens up to the next declared flag.
   repeated flags follow the registry's Repeats policy.
2. otherwise, the next unfilled positional takes the token.
3. otherwise, the trail (if declared) swallows every remaining token, flags included.
4. otherwise, the token is unexpected.
Past the end, every required argument must have been filled.

Only declared flags are flags: an undeclared "--thing" is an ordinary value.

Termination is observable through Scanner.state (ScanState); a failed scan keeps
its error in Scanner.fault and stops on later next() calls.
"""
import shlex
from collections import deque
from collections.abc import Iterable
from enum import IntEnum
from typing import NamedTuple

from .arguments import ArgumentKind, ArgumentSpec
from .faults import *
from .parsed import ParsedArguments
from .registry import Registry, Repeats, Snapshot
from .utils import *


class ScanState(IntEnum):
    RUNNING = 1
    EXHAUSTED = 2
    INTERRUPTED = 3
    PASSED_ALONG = 4
    FAILED = 5


class StructuredResult(NamedTuple):
    """
    one matched argument.

    - kind: the ArgumentKind of the spec that matched.
    - name: the spec's declared name (spec.key is the ParsedArguments key).
    - value: str (positional, single), True (switch), None (interrupt),
      tuple[str, ...] (trail, zero-or-more, one-or-more, pass-along).
    - index: 0-based position of the token that produced the result.
    - spec: the matched ArgumentSpec.
    """
    kind: ArgumentKind
    name: str
    value: object
    index: int
    spec: ArgumentSpec


class Parsed(NamedTuple):
    arguments: ParsedArguments


class Interrupted(NamedTuple):
    name: str
    spec: ArgumentSpec


def _tokenize(tokens, /):
    """
    Internal: materialize the token sequence.

    - str: split with shell rules (shlex.split).
    - any other iterable: every item must be a string; tokens are kept verbatim.
    """
    if isinstance(tokens, str):
        return tuple(shlex.split(tokens))
    if isinstance(tokens, bytes | bytearray) or not isinstance(tokens, Iterable):
        raise TypeError("scan() tokens must be a string or an iterable of strings")
    tokens = tuple(tokens)
    for index, token in enumerate(tokens):
        if not isinstance(token, str):
            raise TypeError("scan() token at index %d must be a string, not %s" % (index, type(token).__name__))
    return tokens


def _snapshot(registry, /):
    if isinstance(registry, Registry):
        return registry.snapshot()
    if isinstance(registry, Snapshot):
        return registry
    raise TypeError("scan() registry must be a registry or a registry snapshot")


class Scanner:
    """
    Lazy iterator of StructuredResult over one token sequence.

    The registry snapshot and the tokens are captured at construction; each
    scanner owns its cursor, so any number of scanners may run over the same
    registry. Abandoning a scanner midway needs no cleanup.

    Attributes
    - state: ScanState, RUNNING until the scan terminates.
    - fault: the ParseError that ended the scan, when state is FAILED.
    - snapshot, tokens: what is being scanned.
    """

    def __init__(self, registry, tokens, /):
        self._snapshot = _snapshot(registry)
        self._tokens = _tokenize(tokens)
        self._state = ScanState.RUNNING
        self._fault = None
        self._steps = self._walk()

    state = mirror("state")
    fault = mirror("fault")
    tokens = mirror("tokens")

    @property
    def snapshot(self):
        return self._snapshot

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return next(self._steps)
        except ParseError as fault:
            self._state = ScanState.FAILED
            self._fault = fault
            raise

    def __repr__(self):
        return "scanner(tokens=%r, state=%r)" % (self._tokens, self._state)

    def _walk(self):
        snapshot = self._snapshot
        tokens = self._tokens
        positionals = deque(snapshot.positionals)
        seen = set()
        index = 0

        while index < len(tokens):
            token = tokens[index]
            spec = snapshot.resolve(token)

            if spec is None:
                if positionals:
                    spec = positionals.popleft()
                    yield StructuredResult(spec.kind, spec.name, token, index, spec)
                    index += 1
                    continue
                if snapshot.trail is not None:
                    spec = snapshot.trail
                    yield StructuredResult(spec.kind, spec.name, tokens[index:], index, spec)
                    seen.add(spec.key)
                    break
                raise self._unexpected(token, index)

            self._repeat(spec, token, index, seen)
            seen.add(spec.key)

            match spec.kind:
                case ArgumentKind.INTERRUPT:
                    self._state = ScanState.INTERRUPTED
                    yield StructuredResult(spec.kind, spec.name, None, index, spec)
                    return
                case ArgumentKind.PASSALONG:
                    self._finish(positionals, seen)
                    self._state = ScanState.PASSED_ALONG
                    yield StructuredResult(spec.kind, spec.name, tokens[index + 1:], index, spec)
                    return
                case ArgumentKind.SWITCH:
                    yield StructuredResult(spec.kind, spec.name, True, index, spec)
                    index += 1
                case ArgumentKind.SINGLE:
                    if index + 1 >= len(tokens):
                        raise self._missing_parameter(spec, token, index)
                    yield StructuredResult(spec.kind, spec.name, tokens[index + 1], index, spec)
                    index += 2
                case _:
                    end = index + 1
                    while end < len(tokens) and snapshot.resolve(tokens[end]) is None:
                        end += 1
                    if spec.kind is ArgumentKind.ONE_OR_MORE and end == index + 1:
                        raise self._missing_parameter(spec, token, index)
                    yield StructuredResult(spec.kind, spec.name, tokens[index + 1:end], index, spec)
                    index = end

        self._finish(positionals, seen)
        self._state = ScanState.EXHAUSTED

    def _repeat(self, spec, token, index, seen, /):
        if spec.key not in seen:
            return
        match self._snapshot.repeats:
            case Repeats.FORBID:
                raise DuplicatedFlagError(
                    "%s flag '%s' is given again" % (ordinal(index + 1), token),
                    title="duplicated flag",
                    code=FaultCode.DUPLICATED_FLAG,
                    hint="give %s only once" % " | ".join(spec.flags),
                    name=spec.name,
                    flag=token,
                    index=index,
                    docs=getdoc(FaultCode.DUPLICATED_FLAG),
                )
            case Repeats.WARN:
                trigger(RepeatedFlagWarning(
                    "%s flag '%s' is given again, the last occurrence wins" % (ordinal(index + 1), token),
                    title="repeated flag",
                    code=FaultCode.REPEATED_FLAG,
                    hint="drop the earlier occurrence of %s" % " | ".join(spec.flags),
                    name=spec.name,
                    flag=token,
                    index=index,
                    docs=getdoc(FaultCode.REPEATED_FLAG),
                ))

    def _finish(self, positionals, seen, /):
        """
        end-of-input check: unfilled positionals, then an unentered required
        trail, then required named specs never matched.
        """
        snapshot = self._snapshot
        missing = [spec for spec in positionals]
        if snapshot.trail is not None and snapshot.trail.required and snapshot.trail.key not in seen:
            missing.append(snapshot.trail)
        missing.extend(spec for spec in snapshot.required if spec.key not in seen)
        if not missing:
            return

        first = missing[0]
        shown = " | ".join(first.flags) or first.name
        if len(missing) == 1:
            message = "missing required %s argument '%s'" % (first.kind.label, shown)
        else:
            message = "missing required %s argument '%s' (and %d more: %s)" % (
                first.kind.label,
                shown,
                len(missing) - 1,
                ", ".join(repr(spec.name) for spec in missing[1:]),
            )
        raise MissingRequiredArgumentError(
            message,
            title="missing required argument",
            code=FaultCode.MISSING_REQUIRED_ARGUMENT,
            hint="add a value for '%s'" % first.name if first.kind.positional else "add %s to the command line" % shown,
            name=first.name,
            names=tuple(spec.name for spec in missing),
            index=len(self._tokens),
            docs=getdoc(FaultCode.MISSING_REQUIRED_ARGUMENT),
        )

    @staticmethod
    def _missing_parameter(spec, token, index, /):
        return MissingParameterError(
            "%s flag '%s' expects %s" % (
                ordinal(index + 1),
                token,
                "a parameter" if spec.kind is ArgumentKind.SINGLE else "at least one parameter",
            ),
            title="missing parameter",
            code=FaultCode.MISSING_PARAMETER,
            hint="follow '%s' with %s" % (token, spec.metavar or "a value"),
            name=spec.name,
            flag=token,
            index=index,
            docs=getdoc(FaultCode.MISSING_PARAMETER),
        )

    @staticmethod
    def _unexpected(token, index, /):
        return UnexpectedArgumentError(
            "%s argument %r is not expected here" % (ordinal(index + 1), token),
            title="unexpected argument",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            hint="remove it, or check for a typo in a flag name",
            token=token,
            index=index,
            docs=getdoc(FaultCode.UNEXPECTED_ARGUMENT),
        )


def scan(registry, tokens, /):
    """
    lazily match tokens against a registry (or a registry snapshot).

    returns a Scanner yielding StructuredResult; ParseError subclasses are
    raised from next() at the point the scan fails.
    """
    return Scanner(registry, tokens)


def parse(registry, tokens, /):
    """
    match tokens against a registry and fold the results into a terminal status.

    returns
    - Interrupted(name, spec) as soon as an interrupt flag is seen;
    - Parsed(arguments) otherwise, arguments being a ParsedArguments mapping.

    raises ParseError subclasses on failure.
    """
    scanner = scan(registry, tokens)
    values = {}
    for result in scanner:
        if result.kind is ArgumentKind.INTERRUPT:
            return Interrupted(result.name, result.spec)
        values[result.spec.key] = result.value
    return Parsed(ParsedArguments(scanner.snapshot, values))


__all__ = (
    "ScanState",
    "StructuredResult",
    "Parsed",
    "Interrupted",
    "Scanner",
    "scan",
    "parse",
)
