"""
Argwright faults (parse errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by the phase that raises them (matching, pipeline, warnings).
- ParseError and its subclasses: the error taxonomy of a parse. Each one carries
  the display name of the failing parameter and a fixed-format message; str()
  renders the full line (e.g. 'Invalid value for "--xx": 0 is smaller than the
  minimum valid value of 1.'). That text is a compatibility surface.
- BadValue / OutOfRange: raised by validators; the pipeline translates them into
  ValidationError / RangeError once it knows which parameter failed.
- ParameterWarning: soft issues (deprecations), routed through `warnings`.
- trigger(): central entry point to surface a fault (raise it, or print it with
  rich and exit when running as a shell tool).

Integration
- The matcher and the pipeline raise ParseError directly (fail-fast).
- The command runner catches it and calls trigger(fault, shell=..., usage=...).
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - matching (211xx): UNKNOWN_PARAMETER, MISSING_VALUE, UNEXPECTED_ARGUMENT,
      UNEXPECTED_VALUE, DUPLICATE_OPTION
    - pipeline (221xx): CONVERSION, VALIDATION, RANGE
    - warnings (231xx): DEPRECATED_PARAMETER

    normalize() allows host remapping to custom labels while the numbers stay stable.
    """
    # --- matching errors (211xx) ---
    UNKNOWN_PARAMETER    = 21101
    MISSING_VALUE        = 21102
    UNEXPECTED_ARGUMENT  = 21103
    UNEXPECTED_VALUE     = 21104
    DUPLICATE_OPTION     = 21105

    # --- pipeline errors (221xx) ---
    CONVERSION           = 22101
    VALIDATION           = 22102
    RANGE                = 22103

    # --- warnings (231xx) ---
    DEPRECATED_PARAMETER = 23101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _program(options):
    return options.get("prog") or getattr(__import__("__main__"), "__prog__", None) or "cli"


class ParseError(Exception):
    """
    base of every failure a parse can end with.

    attributes
    - message: the fixed-format body ("0 is not in the valid range of 1 to 2.").
    - name: display name of the failing parameter (the token used on the command
      line when known, otherwise the primary declared name or the metavar).
    - parameter: the descriptor that failed, when there is one.
    - hint: one short actionable sentence (not part of str()).
    - options: rendering context merged in by trigger() (shell, colorful, usage...).
    """
    code = FaultCode.VALIDATION
    title = "invalid value"
    template = 'Invalid value for "{name}": {message}'

    def __init__(self, message=Unset, /, *, name=Unset, parameter=Unset, hint=Unset, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.name = name
        self.parameter = parameter
        self.hint = hint
        self.options = MappingProxyType(options)
        super().__init__(self.format())

    def format(self):
        return self.template.format(name=self.name, message=self.message)

    def __str__(self):
        return self.format()

    def __rich__(self):
        styles = _styles({
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "usage": "#9CA3AF",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(_program(self.options), "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        renders = [header]
        if usage := self.options.get("usage"):
            renders.append(text(usage, "usage"))
        renders.append(text(self.format(), "error-message"))
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))
        return Group(*renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        options = dict(self.options)
        fields = {
            "name": overrides.pop("name", self.name),
            "parameter": overrides.pop("parameter", self.parameter),
            "hint": overrides.pop("hint", self.hint),
        }
        fault = type(self)(self.message, **fields, **{**options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class ConversionError(ParseError):
    """raw text is not representable as the declared type."""
    code = FaultCode.CONVERSION
    title = "conversion error"


class ValidationError(ParseError):
    """a converted value was rejected by an attached validator."""
    code = FaultCode.VALIDATION
    title = "invalid value"


class RangeError(ValidationError):
    """a converted value lies outside the bounds declared with restrict_to()."""
    code = FaultCode.RANGE
    title = "value out of range"


class MissingValueError(ParseError):
    code = FaultCode.MISSING_VALUE
    title = "missing value"
    template = 'Missing value for "{name}": {message}'


class UnknownParameterError(ParseError):
    code = FaultCode.UNKNOWN_PARAMETER
    title = "unknown option"
    template = 'No such option "{name}".'


class UnexpectedArgumentError(ParseError):
    code = FaultCode.UNEXPECTED_ARGUMENT
    title = "unexpected argument"
    template = 'Unexpected argument "{name}".'


class UnexpectedValueError(ParseError):
    code = FaultCode.UNEXPECTED_VALUE
    title = "unexpected value"


class DuplicateOptionError(ParseError):
    code = FaultCode.DUPLICATE_OPTION
    title = "duplicated option"
    template = 'Duplicated option "{name}": {message}'


class BadValue(Exception):
    """
    raised by validators to reject a value.

    the message is the exact body the user will read; the pipeline wraps it into
    a ValidationError together with the display name of the parameter.
    """

    def __init__(self, message, /):
        if not isinstance(message, str):
            raise TypeError("BadValue() argument must be a string")
        super().__init__(message)
        self.message = message


class OutOfRange(BadValue):
    """range flavour of BadValue; surfaces as RangeError."""


class ParameterWarning(Warning):
    code = FaultCode.DEPRECATED_PARAMETER
    title = "warning"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        styles = _styles({
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
        })
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(_program(self.options), "prog-name"),
            " — ",
            text(self.code.normalize(), "code"),
            " | ",
            text(self.title.title(), "warning-title"),
            " ]"
        )
        return Group(header, text(self.message, "warning-message"))

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DeprecatedParameterWarning(ParameterWarning):
    code = FaultCode.DEPRECATED_PARAMETER
    title = "deprecated parameter"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - errors are raised unless shell=True, in which case they are printed on stderr
      (with the usage line when one is given) and the process exits with status 1.
    - warnings go through warnings.warn unless shell=True, in which case they are printed.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseError",
    "ConversionError",
    "ValidationError",
    "RangeError",
    "MissingValueError",
    "UnknownParameterError",
    "UnexpectedArgumentError",
    "UnexpectedValueError",
    "DuplicateOptionError",
    "BadValue",
    "OutOfRange",
    "ParameterWarning",
    "DeprecatedParameterWarning",
    "trigger",
)
