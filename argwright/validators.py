"""
Argwright validators: the steps that follow conversion in a value pipeline.

A validator is a callable taking the typed value and returning the value to keep
(usually the same one). It rejects a value by raising BadValue; range validators
raise OutOfRange so the failure surfaces as RangeError.

Every step of a pipeline is recorded as a Transform(name, function) on the
parameter, in attachment order. The converter is always the first step.

Range messages (exact text, part of the public surface)
- both bounds:  "<value> is not in the valid range of <min> to <max>."
- only min:     "<value> is smaller than the minimum valid value of <min>."
- only max:     "<value> is larger than the maximum valid value of <max>."
"""
from collections import namedtuple

from .faults import BadValue, OutOfRange
from .utils import Unset, rename

Transform = namedtuple("Transform", ("name", "function"))


def restrict_to(min=Unset, max=Unset, clamp=False):
    """
    Build a validator that keeps values inside [min, max].

    Parameters
    - min, max: either may be omitted, but not both. Bounds are inclusive.
    - clamp: when True, out-of-range values are replaced by the nearest bound
      and the validator never fails.

    Raises
    - TypeError when no bound is given.
    - ValueError when min is greater than max.
    """
    if min is Unset and max is Unset:
        raise TypeError("restrict_to() requires at least one of 'min' or 'max'")
    if min is not Unset and max is not Unset and min > max:
        raise ValueError("restrict_to() 'min' cannot be greater than 'max'")
    clamp = bool(clamp)

    @rename("restrict_to")
    def validator(value, /):
        if min is not Unset and value < min:
            if clamp:
                return min
            if max is not Unset:
                raise OutOfRange("%s is not in the valid range of %s to %s." % (value, min, max))
            raise OutOfRange("%s is smaller than the minimum valid value of %s." % (value, min))
        if max is not Unset and value > max:
            if clamp:
                return max
            if min is not Unset:
                raise OutOfRange("%s is not in the valid range of %s to %s." % (value, min, max))
            raise OutOfRange("%s is larger than the maximum valid value of %s." % (value, max))
        return value

    validator.min = min
    validator.max = max
    validator.clamp = clamp
    return validator


def check(predicate, message=Unset):
    """
    Build a validator from a predicate.

    `message` is either a string (may reference the value as {value}) or a callable
    receiving the value and returning the message. Defaults to "<value> is invalid.".
    """
    if not callable(predicate):
        raise TypeError("check() 'predicate' must be callable")
    if not isinstance(message, str | Unset) and not callable(message):
        raise TypeError("check() 'message' must be a string or a callable")

    @rename("check")
    def validator(value, /):
        if predicate(value):
            return value
        if message is Unset:
            raise BadValue("%s is invalid." % (value,))
        if isinstance(message, str):
            raise BadValue(message.format(value=value))
        raise BadValue(message(value))

    return validator


__all__ = (
    "Transform",
    "restrict_to",
    "check",
)
