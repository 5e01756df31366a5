"""
Pennant faults (errors and signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so logs and searches stay predictable.
- FlagSetException: base type carrying a message + read-only options that knows
  how to render itself through rich (header, message, hint).
- Concrete faults, one per failure class of a parse:
  • InvalidSyntaxError   malformed flag token ("-x=", "---x", "-=")
  • UnknownFlagError     a flag name with no registry entry
  • MissingValueError    a non-boolean flag without a following value token
  • CoercionError        a value that cannot be converted to the flag's kind
  • SourceError          an unreadable/undecodable source or failing extractor
- HelpRequested: control signal raised for -h/-help/--h/--help. It is not a
  FlagSetException, so `except FlagSetException` never swallows it.
- Panic: raised by the PanicOnError policy; a BaseException so that ordinary
  `except Exception` handlers let it through.

Host customization
- __main__.__styles__: mapping of style names to rich styles.
- __main__.__codes__: mapping of FaultCode to custom labels (see normalize()).

Options understood by the renderer
- prog: program name shown in the header (the flag set's name).
- code, title, hint: header code, header title and the one-line hint.
- colorful: apply styles; fancy: wrap the message in a rounded panel.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text


class FaultCode(IntEnum):
    """
    canonical fault codes used across the package (stable identifiers).

    grouping (by high-level domain)
    - tokens (2111x)
      • INVALID_SYNTAX, UNKNOWN_FLAG, MISSING_VALUE
    - values (2112x)
      • UNCOERCIBLE_VALUE
    - sources (2113x)
      • SOURCE_FAILURE
    - signals (2210x)
      • HELP_REQUESTED
    """
    # --- token errors (211xx) ---
    INVALID_SYNTAX              = 21111
    UNKNOWN_FLAG                = 21112
    MISSING_VALUE               = 21117

    # --- value errors (211xx) ---
    UNCOERCIBLE_VALUE           = 21121

    # --- source errors (211xx) ---
    SOURCE_FAILURE              = 21131

    # --- signals (221xx) ---
    HELP_REQUESTED              = 22101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class FlagSetException(Exception):
    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        header = [text(self.options.get("prog") or "flags", "prog-name")]
        if (code := self.options.get("code")) is not None:
            header += [" — ", text(code.normalize(), "code")]
        if title := self.options.get("title"):
            header += [" | ", text(title, "error-title")]
        header = Text.assemble("[ ", *header, " ]")

        message = text(self.message, "error-message")

        if not (hint := self.options.get("hint")):
            body = [message]
        else:
            body = [message, Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint"))]

        if self.options.get("fancy", False):
            return Panel(Group(*body), title=header, title_align="left")

        return Group(header, *body)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class InvalidSyntaxError(FlagSetException): ...
class UnknownFlagError(FlagSetException): ...
class MissingValueError(FlagSetException): ...
class CoercionError(FlagSetException, ValueError): ...
class SourceError(FlagSetException): ...


class HelpRequested(Exception):
    """
    signal raised when one of the help aliases is found among the arguments.

    the flag set stops tokenizing immediately; the installed error-handling
    policy decides whether this becomes a raised signal, a usage print followed
    by an exit, or an abort.
    """
    code = FaultCode.HELP_REQUESTED

    def __init__(self, message="help requested", /, **options):
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message


class Panic(BaseException):
    """
    unrecoverable parse failure raised by the PanicOnError policy.

    the original fault (or help signal) is kept in `fault` and chained as the
    exception's cause.
    """

    def __init__(self, fault, /):
        super().__init__(str(fault))
        self.fault = fault


def replace(fault, /, **options):
    """
    return a copy of `fault` with its options merged with `options`.

    contract
    - fault must provide a __replace__ method (see FlagSetException).
    - used by reporters to attach presentation context (prog, colorful, fancy)
      without mutating the fault that was raised.
    """
    if not hasattr(fault, "__replace__") or not callable(fault.__replace__):
        raise TypeError("replace() argument must have a __replace__ method")
    return fault.__replace__(**options)


__all__ = (
    "FlagSetException",
    "InvalidSyntaxError",
    "UnknownFlagError",
    "MissingValueError",
    "CoercionError",
    "SourceError",
    "HelpRequested",
    "Panic",
    "FaultCode",
    "replace",
)
