"""
Argwright value pipeline: conversion → validation → multiplicity collection.

Entry point
- process(parameter, occurrences, input=Unset) turns every Occurrence routed to a
  parameter into its bound value. The matcher calls it once per parameter after a
  successful match; alternate value sources (environment, config files) can build
  Occurrence records themselves and call it the same way.

Per occurrence
1. convert: parameter.type(raw) for each raw string. A BadValue raised by the
   converter becomes the ConversionError message verbatim; any other exception
   becomes "<raw> is not a valid <typename>." (chained as __cause__).
2. validate: each validator in attachment order, on each element (each component
   of a pair). The first BadValue raises ValidationError, OutOfRange raises
   RangeError. Clamping validators return the substituted value and never fail.
3. shape: one raw value binds the value itself, nargs > 1 binds a tuple.

Collection
- LIST: every occurrence, in command-line order (zero occurrences → []).
- SCALAR / OPTIONAL: the last occurrence wins.
- nothing routed: the default (when declared) goes through step 2 and is bound
  as if the user had typed it; otherwise the value is absent (None) and no
  validator runs. A required parameter without default is a MissingValueError.
- Flag: True when present, its default otherwise (flags carry no pipeline).

Display names
- the token used on the command line (Occurrence.input) when there is one,
  otherwise the primary declared name (longest option name, or the metavar).
"""
from collections import namedtuple

from .faults import *
from .parameters import Argument, Flag
from .utils import Unset, coalesce

Occurrence = namedtuple("Occurrence", ("input", "values", "index"), defaults=(Unset, (), -1))
Occurrence.__doc__ = """
one match of a parameter on the command line.

- input: the token naming the parameter ("-x", "--xx") or the argument metavar.
- values: the raw strings consumed by this occurrence (empty for flags).
- index: position of the naming token (or the first value) in argv; -1 when the
  occurrence does not come from argv.
"""


def _typename(converter, /):
    return getattr(converter, "__typename__", None) or getattr(converter, "__name__", None) or "value"


def convert(parameter, raw, input, /):
    """
    run the converter of `parameter` on one raw string.
    """
    converter = parameter.transforms[0].function
    try:
        return converter(raw)
    except BadValue as exception:
        raise ConversionError(
            exception.message,
            name=input,
            parameter=parameter,
            hint="use a valid %s" % _typename(converter),
        ) from exception
    except Exception as exception:
        raise ConversionError(
            "%s is not a valid %s." % (raw, _typename(converter)),
            name=input,
            parameter=parameter,
            hint="use a valid %s" % _typename(converter),
        ) from exception


def validate(parameter, value, input, /):
    """
    run the validators of `parameter`, in attachment order, on one typed element.
    """
    for transform in parameter.validators:
        try:
            value = transform.function(value)
        except OutOfRange as exception:
            raise RangeError(
                exception.message,
                name=input,
                parameter=parameter,
                hint="pass a value inside the accepted range",
            ) from exception
        except BadValue as exception:
            raise ValidationError(
                exception.message,
                name=input,
                parameter=parameter,
                hint="check the value given to %s" % input,
            ) from exception
    return value


def _shape(parameter, values, /):
    return values[0] if parameter.nargs == 1 else tuple(values)


def _transform(parameter, occurrence, /):
    input = coalesce(occurrence.input, parameter.name)
    if len(occurrence.values) != parameter.nargs:
        raise MissingValueError(
            _arity_message(parameter),
            name=input,
            parameter=parameter,
            hint=(
                "add both values of the pair" if parameter.paired
                else "add the missing value%s" % ("" if parameter.nargs == 1 else "s")
            ),
        )
    values = [convert(parameter, raw, input) for raw in occurrence.values]
    return _shape(parameter, [validate(parameter, value, input) for value in values])


def _default(parameter, /):
    """
    validate and shape the declared default as if the user supplied it.
    """
    input = parameter.name

    def element(value):
        if parameter.nargs == 1:
            return validate(parameter, value, input)
        return tuple(validate(parameter, component, input) for component in value)

    if parameter.many:
        return [element(value) for value in parameter.default]
    return element(parameter.default)


def _arity_message(parameter, /):
    kind = "argument" if isinstance(parameter, Argument) else "option"
    if parameter.nargs == 1:
        return "%s requires a value." % kind
    return "%s requires %d values." % (kind, parameter.nargs)


def process(parameter, occurrences=(), input=Unset, /):
    """
    compute the bound value of `parameter` from its occurrences.

    parameters
    - parameter: Option | Flag | Argument
    - occurrences: Iterable[Occurrence], in command-line order.
    - input: display name used when reporting a missing required value
      (defaults to the parameter's primary name).

    returns
    - the BoundValue (shape depends on multiplicity and nargs).

    raises
    - ConversionError, ValidationError, RangeError, MissingValueError.
    """
    occurrences = list(occurrences)

    if isinstance(parameter, Flag):
        return True if occurrences else parameter.default

    if not occurrences:
        if parameter.default is not Unset:
            return _default(parameter)
        if parameter.required:
            kind = "argument" if isinstance(parameter, Argument) else "option"
            raise MissingValueError(
                "%s is required." % kind,
                name=coalesce(input, parameter.name),
                parameter=parameter,
                hint="provide a value for %s" % coalesce(input, parameter.name),
            )
        return [] if parameter.many else None

    values = [_transform(parameter, occurrence) for occurrence in occurrences]
    if parameter.many:
        return values
    return values[-1]


__all__ = (
    "Occurrence",
    "convert",
    "validate",
    "process",
)
