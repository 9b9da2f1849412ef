"""
Argwright converters: the first step of every value pipeline.

A converter is any callable taking the raw command-line string and returning the
typed value. Failures are reported by the pipeline as ConversionError:
- a BadValue raised by the converter is used verbatim as the message;
- any other exception becomes "<text> is not a valid <typename>.", where the
  typename is the converter's __typename__ (falling back to __name__).

The converters below cover the common scalar types and set a friendly
__typename__ for those messages. Plain callables such as int or pathlib.Path
work too.
"""
from .faults import BadValue
from .utils import rename


def converter(typename, /):
    """
    Decorator that tags a converter with the typename used in conversion errors.
    """
    if not isinstance(typename, str) or not typename.strip():
        raise TypeError("converter() argument must be a non-empty string")

    def wrapper(function, /):
        if not callable(function):
            raise TypeError("@converter() must be applied to a callable")
        function.__typename__ = typename.strip()
        return function

    return rename(wrapper, "converter")


@converter("text")
def text(value, /):
    return value


@converter("integer")
def integer(value, /):
    # int() would accept "1_000" and surrounding whitespace
    if value != value.strip() or "_" in value:
        raise ValueError(value)
    return int(value, 10)


@converter("float")
def decimal(value, /):
    if value != value.strip() or "_" in value:
        raise ValueError(value)
    return float(value)


_TRUTHY = frozenset(("true", "t", "yes", "y", "on", "1"))
_FALSY = frozenset(("false", "f", "no", "n", "off", "0"))


@converter("boolean")
def boolean(value, /):
    """
    Accepts the usual spellings (true/false, yes/no, on/off, 1/0), case-insensitive.
    """
    if (lowered := value.lower()) in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ValueError(value)


def choice(*choices, ignore_case=False):
    """
    Build a converter restricted to a fixed set of strings.

    A mapping may be given as the single argument to translate each accepted
    string into another value:

        choice("fast", "safe")
        choice({"one": 1, "two": 2})
    """
    if len(choices) == 1 and isinstance(choices[0], dict):
        mapping = dict(choices[0])
    else:
        mapping = {choice: choice for choice in choices}
    if not mapping:
        raise TypeError("choice() requires at least one choice")
    for key in mapping:
        if not isinstance(key, str):
            raise TypeError("choice() keys must be strings")

    listing = ", ".join(mapping)
    lookup = {key.lower() if ignore_case else key: value for key, value in mapping.items()}

    @converter("choice")
    @rename("choice")
    def convert(value, /):
        try:
            return lookup[value.lower() if ignore_case else value]
        except KeyError:
            raise BadValue("invalid choice: %s. (choose from %s)" % (value, listing)) from None

    convert.choices = tuple(mapping)
    return convert


__all__ = (
    "converter",
    "text",
    "integer",
    "decimal",
    "boolean",
    "choice",
)
