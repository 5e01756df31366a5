"""
Pennant flag sets: declare typed flags, parse arguments, resolve fallbacks.

What this module provides
- Flag: a registered flag (name, usage, default, Value, extractors), read-only.
- FlagSet: the registry plus the two parse phases.
  • tokenizer   parse_next() consumes one flag token (and its value) at a time,
                collecting positional arguments on the way.
  • resolution  after tokenizing, every flag the command line did not set is
                filled by its first matching extractor, else by its default.
  • usage       print_usage()/print_defaults() render a plain or styled summary
                through rich.

Quick start
    from pennant import FlagSet, Env, JSON, EnvPrefix, JSONSource, ExitOnError

    flags = FlagSet("server", "serves things", ExitOnError())
    port = flags.int("port", 8080, "listen port", Env("PORT"), JSON("port"))
    debug = flags.bool("debug", "verbose logging", Env("DEBUG"))
    flags.parse(sys.argv[1:], EnvPrefix("SERVER_"), JSONSource("server.json"))
    print(port.value, debug.value, flags.args)

Token grammar
- "-name" and "--name" are equivalent; "-name=value" carries an inline value.
- a bare boolean flag means true and never consumes the next token.
- other flags take the next token as their value; it must not start with "-".
- "--" ends flag scanning; everything after it is positional.
- "-h", "-help", "--h" and "--help" raise HelpRequested.

Assignment rules
- the first value a scalar flag receives wins; later command-line occurrences
  are ignored without error.
- list flags append one item per command-line occurrence; values from sources
  and defaults replace the whole list.

Failures are handed to the flag set's error-handling policy (see
pennant.policies); the default re-raises them.
"""
import difflib
import logging
from collections import defaultdict, deque
from contextlib import ExitStack

from rich.console import Console
from rich.text import Text

from .faults import *
from .policies import ContinueOnError
from .utils import *
from .values import Kind, Slot, Value, pretty

logger = logging.getLogger(__name__)

_HELP = frozenset(("h", "help"))


class Flag:
    """
    a registered flag. every field is read-only; only the Slot behind `value`
    changes during a parse.
    """
    __slots__ = ("_name", "_usage", "_default", "_value", "_extractors")

    name = mirror("name")
    usage = mirror("usage")
    default = mirror("default")
    value = mirror("value")
    extractors = mirror("extractors")

    def __init__(self, name, default, usage, value, extractors=(), /):
        self._name = name
        self._usage = usage
        self._default = default
        self._value = value
        self._extractors = tuple(extractors)

    @property
    def kind(self):
        return self._value.kind

    def __repr__(self):
        return "Flag(%r, %s, default=%r)" % (self._name, self._value.kind.value, self._default)


class FlagSet:
    """
    an ordered collection of uniquely named flags and the state of one parse.

    construction
    - name, description: shown in the usage header.
    - errorhandling: policy called with (flagset, fault) when parse() fails;
      defaults to ContinueOnError (the fault is raised to the caller).
    - console: rich Console for usage and faults (stderr by default).
    - usage: callable replacing the default usage printer.
    - colorful / fancy: styling of usage and fault output.
    """
    name = mirror("name")
    description = mirror("description")
    args = mirror("args")
    flags = mirror("flags")
    found = mirror("found")

    def __init__(
            self,
            name="",
            description="",
            /,
            errorhandling=Unset,
            *,
            console=Unset,
            usage=Unset,
            colorful=False,
            fancy=False,
    ):
        if not isinstance(name, str):
            raise TypeError("FlagSet() name must be a string")
        if not isinstance(description, str):
            raise TypeError("FlagSet() description must be a string")
        if errorhandling is not Unset and not callable(errorhandling):
            raise TypeError("FlagSet() errorhandling must be callable")

        self._name = name
        self._description = description
        self._errorhandling = coalesce(errorhandling, ContinueOnError())
        self._console = console
        self._colorful = colorful
        self._fancy = fancy
        self.usage = coalesce(usage, None)

        self._flags = {}
        self._found = {}
        self._args = []
        self._parsed = False

    @property
    def console(self):
        if self._console is Unset:
            self._console = Console(stderr=True)
        return self._console

    @console.setter
    def console(self, console):
        self._console = console

    @property
    def errorhandling(self):
        return self._errorhandling

    @property
    def parsed(self):
        return self._parsed

    @property
    def nflags(self):
        """number of flags that received a value."""
        return len(self._found)

    @property
    def narg(self):
        """number of positional arguments collected."""
        return len(self._args)

    def arg(self, index, /):
        """the index-th positional argument, or "" when out of range."""
        if not 0 <= index < len(self._args):
            return ""
        return self._args[index]

    def lookup(self, name, /):
        return self._flags.get(name)

    def add(self, name, default, usage, value, extractors=(), /):
        """
        register a flag writing through `value`.

        a name registered twice is a programming error and raises ValueError
        right away, before any parsing can happen.
        """
        if not isinstance(name, str):
            raise TypeError("flag name must be a string")
        if not name or name.startswith("-") or "=" in name:
            raise ValueError("flag name %r must be non-empty, not start with '-' and not contain '='" % name)
        if name in self._flags:
            raise ValueError("flag %s was already defined" % name)
        if not isinstance(value, Value):
            raise TypeError("flag value must be a Value")
        if not isinstance(usage, str):
            raise TypeError("flag usage must be a string")

        self._flags[name] = flag = Flag(name, default, usage, value, extractors)
        return flag

    def parse(self, args, /, *sources):
        """
        fill every flag from `args`, then from `sources`, then from defaults.

        runs once: later calls return immediately and change nothing. every
        source is closed on the way out, whatever happened. failures go to the
        error-handling policy.
        """
        if isinstance(args, str):
            raise TypeError("parse() arguments must be a sequence of strings, not a string")
        if self._parsed:
            return
        self._parsed = True

        try:
            with ExitStack() as stack:
                for source in sources:
                    stack.callback(source.close)

                tokens = list(args)
                while tokens:
                    tokens = self.parse_next(tokens)

                self._resolve(sources)
        except (FlagSetException, HelpRequested) as fault:
            self._errorhandling(self, fault)

    def parse_next(self, args, /):
        """
        consume tokens until one flag has been handled and return the rest.

        positional tokens met on the way are collected into `args`. callers may
        drive the loop themselves to handle tokens between flags.
        """
        tokens = deque(args)
        while tokens:
            token = tokens.popleft()

            if len(token) < 2 or not token.startswith("-"):
                self._args.append(token)
                continue

            if token == "--":
                self._args.extend(tokens)
                return []

            name = token[2:] if token.startswith("--") else token[1:]
            if not name or name[0] in ("-", "="):
                raise InvalidSyntaxError(
                    "invalid flag syntax: %s" % token,
                    title="invalid flag syntax",
                    code=FaultCode.INVALID_SYNTAX,
                    hint="write flags as -name, -name value or -name=value",
                    token=token
                )

            if name in _HELP:
                raise HelpRequested(token=token)

            name, separator, value = name.partition("=")
            if separator:
                if not value:
                    raise InvalidSyntaxError(
                        "invalid flag syntax: %s" % token,
                        title="invalid flag syntax",
                        code=FaultCode.INVALID_SYNTAX,
                        hint="add a value after '=' (for example: -%s=<value>)" % name,
                        token=token
                    )
                self._assign(name, value)
                return list(tokens)

            if (flag := self._flags.get(name)) is None:
                raise self._unknown(name)

            if flag.value.boolean:
                self._assign(name, True)
                return list(tokens)

            if not tokens or tokens[0].startswith("-"):
                raise MissingValueError(
                    "expecting value for flag: %s" % name,
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    hint="pass a value after the flag (for example: -%s <value> or -%s=<value>)" % (name, name),
                    flag=name
                )

            self._assign(name, tokens.popleft())
            return list(tokens)

        return []

    def _unknown(self, name, /):
        suggestions = difflib.get_close_matches(name, self._flags.keys(), 5)
        try:
            hint = "did you mean -%s?" % suggestions[0]
        except IndexError:
            hint = "try -help to see all available flags"
        return UnknownFlagError(
            "unknown flag %s" % name,
            title="unknown flag",
            code=FaultCode.UNKNOWN_FLAG,
            hint=hint,
            flag=name,
            suggestions=suggestions
        )

    def _assign(self, name, value, /):
        if (flag := self._flags.get(name)) is None:
            raise self._unknown(name)

        found = name in self._found
        if found and not flag.value.sequential:
            # first value wins for scalars
            return

        try:
            # the first occurrence replaces what the slot held before the parse
            flag.value.set(value, append=found)
        except CoercionError as fault:
            raise CoercionError(
                "invalid value %s for flag %s: %s" % (pretty(value), name, fault),
                **(fault.options | {"flag": name})
            ) from fault

        self._found[name] = flag

    def _resolve(self, sources, /):
        for source in sources:
            source.open()

        for name, flag in self._flags.items():
            if name in self._found:
                continue

            for extractor in flag.extractors:
                try:
                    hit = extractor.extract(sources, flag.value)
                except CoercionError as fault:
                    raise CoercionError(
                        "invalid value for flag %s from %r: %s" % (name, extractor, fault),
                        **(fault.options | {"flag": name, "extractor": extractor})
                    ) from fault
                if hit:
                    logger.debug("flag %s resolved by %r", name, extractor)
                    break
            else:
                try:
                    flag.value.set(flag.default)
                except CoercionError as fault:
                    raise CoercionError(
                        "invalid default value for flag %s: %s" % (name, fault),
                        **(fault.options | {"flag": name})
                    ) from fault
                logger.debug("flag %s set to its default %s", name, pretty(flag.default))

            self._found[name] = flag

    def _styles(self):
        return defaultdict(str, {
            "usage-title": "bold #E6E6F0",  # near-white header
            "description": "#C8C8D0",  # soft light gray description
            "flag-name": "bold #00E5FF",  # neon cyan flag
            "flag-kind": "italic #FFB400",  # amber kind label
            "flag-usage": "#D6D6DE",  # lighter gray usage text
            "flag-default": "dim #9CE19C",  # gentle green default
        } | getattr(__import__("__main__"), "__styles__", {}))

    def _print(self, text, /):
        self.console.print(text, end="", soft_wrap=True, highlight=False)

    def print_usage(self):
        """print the usage text, or call the custom `usage` callable when set."""
        if self.usage is not None:
            return self.usage()

        styles = self._styles() if self._colorful else defaultdict(str)
        text = Text()
        text.append("Usage of %s:\n" % self._name if self._name else "Usage:\n", styles["usage-title"])
        if self._description:
            text.append("\n  %s\n" % self._description.replace("\n", "\n  "), styles["description"])
        text.append("\n")
        self._print(text)
        self.print_defaults()

    def print_defaults(self):
        """print every flag with its kind, usage text and default value."""
        styles = self._styles() if self._colorful else defaultdict(str)
        text = Text()
        for name, flag in self._flags.items():
            text.append("  ")
            text.append("-" + name, styles["flag-name"])
            text.append(" ")
            text.append(flag.kind.value, styles["flag-kind"])
            text.append("\n")

            parts = []
            if flag.usage:
                parts.append((flag.usage.replace("\n", "\n      "), styles["flag-usage"]))
            if not (isinstance(flag.default, str) and not flag.default):
                parts.append(("(default value: %s)" % pretty(flag.default), styles["flag-default"]))
            if parts:
                text.append("      ")
                for index, (fragment, style) in enumerate(parts):
                    if index:
                        text.append(" ")
                    text.append(fragment, style)
                text.append("\n")
        self._print(text)

    def print_fault(self, fault, /):
        """print a fault on the console, styled like the rest of the output."""
        if isinstance(fault, FlagSetException):
            fault = replace(fault, prog=self._name or None, colorful=self._colorful, fancy=self._fancy)
            return self.console.print(fault, soft_wrap=True, highlight=False)
        self.console.print(Text(str(fault)), soft_wrap=True, highlight=False)

    def __repr__(self):
        return "FlagSet(%r, flags=%r)" % (self._name, list(self._flags))


def _default(kind, default, /):
    if default is not Unset:
        return default
    return () if kind.sequential else kind.zero


def _registrar(kind, /):
    """
    build FlagSet.<kind>(name, default, usage, *extractors) -> Slot.

    bool flags take no default (they start as False).
    """
    if kind is Kind.BOOL:
        def register(self, name, usage="", /, *extractors):
            slot = Slot(kind.zero)
            self.add(name, False, usage, Value(slot, kind), extractors)
            return slot
    else:
        def register(self, name, default=Unset, usage="", /, *extractors):
            slot = Slot(kind.zero)
            self.add(name, _default(kind, default), usage, Value(slot, kind), extractors)
            return slot

    register.__doc__ = "add a %s flag and return the Slot filled by parse()." % kind.value
    return rename(register, kind.name.lower(), FlagSet)


def _binder(kind, /):
    """
    build FlagSet.<kind>_var(slot, name, default, usage, *extractors).
    """
    if kind is Kind.BOOL:
        def bind(self, slot, name, usage="", /, *extractors):
            self.add(name, False, usage, Value(slot, kind), extractors)
    else:
        def bind(self, slot, name, default=Unset, usage="", /, *extractors):
            self.add(name, _default(kind, default), usage, Value(slot, kind), extractors)

    bind.__doc__ = "add a %s flag writing into the given Slot when parse() runs." % kind.value
    return rename(bind, kind.name.lower() + "_var", FlagSet)


for _kind in Kind:
    setattr(FlagSet, _kind.name.lower(), _registrar(_kind))
    setattr(FlagSet, _kind.name.lower() + "_var", _binder(_kind))

del _kind


__all__ = (
    "Flag",
    "FlagSet",
)
