r"""
Argwright parameter descriptors.

Overview
- Descriptors
  • Option[_T]: named, value-bearing parameter with one or more aliases (-x/--xx).
  • Flag: named, presence-only parameter (bound True when given).
  • Argument[_T]: positional, value-bearing parameter with a display name (metavar).

- Fluent chaining (Option/Argument)
  Each call returns a NEW descriptor carrying one more pipeline step or a new
  multiplicity; the receiver is never modified:

      x = Option("-x", "--xx", type=integer).restrict_to(min=1)
      y = Option("-y", "--yy", type=integer).restrict_to(3, 4).pair()
      files = Argument("FILE").multiple()

  • restrict_to(min, max, clamp=False): range validator (see validators).
  • check(predicate, message): predicate validator.
  • validate(function): arbitrary validator (value -> value, BadValue to reject).
  • optional(): absent allowed; bound None when not given.
  • multiple(required=False): every occurrence collected, in command-line order.
  • pair(): two values per occurrence, bound as a 2-tuple.

- Handles
  The descriptor itself is the handle: after a parse, Bindings[descriptor]
  returns its bound value.

Immutability
- Descriptors are frozen once built: assignment and deletion raise AttributeError,
  and every container field is exposed as a read-only snapshot. A descriptor can
  therefore be shared by any number of commands and concurrent parses.

Metadata (sanitized on construction)
- names: str..., must match r"--?[^\W\d_](-?[^\W_]+)*" and be unique.
- metavar: Unset | str (non-empty). Arguments without one get their name later
  from @command (the upper-cased Python parameter name).
- type: callable converter (see converters).
- nargs: positive int, values consumed per occurrence (1 unless pair()/nargs=).
- default: any value; its shape is checked against nargs/many and it is stored
  as a read-only snapshot at declaration, then validated (not converted) when used.
- required / many: set through the constructor, optional() and multiple(); they
  decide the multiplicity policy.
- descr: Unset | str | Text (short help), non-empty when provided.
- hidden / deprecated: bool.
"""
import enum
import functools
import operator
import re
from collections.abc import Iterable

from rich.text import Text

from .converters import text
from .utils import *
from .utils import _freeze
from .validators import Transform, restrict_to, check


class Multiplicity(enum.Enum):
    """
    how the occurrences of a parameter are collected into its bound value.

    - SCALAR: required single value; the last occurrence wins.
    - OPTIONAL: single value that may be absent (bound None, or the default).
    - LIST: every occurrence, in command-line order; absent → empty list.

    Arity is orthogonal and is not a member: a parameter with nargs == 2 (see
    Valued.paired) binds a 2-tuple per occurrence under any of these policies.
    """
    SCALAR = "scalar"
    OPTIONAL = "optional"
    LIST = "list"


class ParameterType(type):
    """
    Metaclass giving descriptors a stable typename, read-only properties and reprs.

    Responsibilities
    - __typename__ is derived from the class name ("Option" -> "option") and used
      in declaration errors.
    - Every name listed in __introspectable__ becomes a read-only property mirroring
      the private "_name" field (see utils.mirror).
    - __repr__ and __rich_repr__ list the __displayable__ fields (falling back to
      __introspectable__).
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


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate the fields shared by every descriptor (descr, hidden, deprecated).

    Raises
    - TypeError: 'descr' is not a string/Text.
    - ValueError: 'descr' is an empty string after trimming.
    """
    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)
    metadata["hidden"] = bool(metadata["hidden"])
    metadata["deprecated"] = bool(metadata["deprecated"])


def _sanitize_named_metadata(cls, metadata, /):
    r"""
    Internal: validate the names of an option or flag.

    Accepted forms: "-x", "-long", "-long-name", "--long", "--long-name".
    Order is preserved (the longest name becomes the primary display name).
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_valued_metadata(cls, metadata, /):
    """
    Internal: validate the fields of value-bearing descriptors (Option, Argument).

    - metavar: Unset or a non-empty string.
    - type: callable converter; becomes the first pipeline step.
    - nargs: positive integer.
    - transforms: ordered Transform steps; the converter step is kept in sync with 'type'.
    - many / required: booleans.
    - default: shape-checked and frozen (see _sanitize_default).
    """
    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = metavar

    if not callable(metadata["type"]):
        raise TypeError(f"{cls.__typename__} 'type' must be callable")

    if not isinstance(nargs := metadata["nargs"], int) or isinstance(nargs, bool):
        raise TypeError(f"{cls.__typename__} 'nargs' must be an integer")
    if nargs < 1:
        raise ValueError(f"{cls.__typename__} 'nargs' must be a positive integer")

    validators = []
    for transform in metadata["transforms"][1:]:
        if not isinstance(transform, Transform) or not callable(transform.function):
            raise TypeError(f"{cls.__typename__} transforms must be callable steps")
        validators.append(transform)
    metadata["transforms"] = (Transform("convert", metadata["type"]), *validators)

    metadata["many"] = bool(metadata["many"])
    metadata["required"] = bool(metadata["required"])
    _sanitize_default(cls, metadata)


def _sanitize_default(cls, metadata, /):
    """
    Internal: check the shape of a declared default against nargs/many and store
    it as a read-only snapshot, so later changes to the caller's object are not seen.

    - many: a non-string iterable of elements.
    - nargs > 1: every element is an iterable of exactly nargs values (a tuple).
    - nargs == 1: every element is frozen as-is (see utils._freeze).

    Raises
    - TypeError: a list default that is a string or not iterable, or a
      multi-value element that is not iterable.
    - ValueError: a multi-value element with the wrong number of values.
    """
    if (default := metadata["default"]) is Unset:
        return
    nargs = metadata["nargs"]

    def element(value):
        if nargs == 1:
            return _freeze(value)
        if isinstance(value, str | bytes) or not isinstance(value, Iterable):
            raise TypeError(f"{cls.__typename__} 'default' must hold tuples of {nargs} values")
        if len(value := tuple(value)) != nargs:
            raise ValueError(f"{cls.__typename__} 'default' must hold tuples of {nargs} values")
        return value

    if metadata["many"]:
        if isinstance(default, str | bytes) or not isinstance(default, Iterable):
            raise TypeError(f"{cls.__typename__} 'default' must be a non-string iterable")
        metadata["default"] = tuple(map(element, default))
    else:
        metadata["default"] = element(default)


class Parameter(metaclass=ParameterType):
    """
    Base of every descriptor: frozen storage, chaining plumbing and shared metadata.

    Subclasses declare __fields__ (the constructor metadata, in order) and implement
    _sanitize(metadata). __replace__(**overrides) builds a fresh descriptor from the
    current metadata; it is the only way to "change" one.
    """
    __fields__ = ()

    @classmethod
    def _build(cls, metadata, /):
        cls._sanitize(metadata)
        self = object.__new__(cls)
        for name, value in metadata.items():
            object.__setattr__(self, "_" + name, value)
        object.__setattr__(self, "_Parameter__frozen", True)
        return self

    @classmethod
    def _sanitize(cls, metadata, /):
        _sanitize_metadata(cls, metadata)

    def __setattr__(self, name, value, /):
        if getattr(self, "_Parameter__frozen", False):
            raise AttributeError(f"{type(self).__typename__} is immutable")
        object.__setattr__(self, name, value)

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__typename__} is immutable")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        unknown = overrides.keys() - set(type(self).__fields__)
        if unknown:
            raise TypeError(f"{type(self).__typename__} has no field {sorted(unknown)[0]!r}")
        return type(self)._build({
            name: overrides.get(name, object.__getattribute__(self, "_" + name))
            for name in type(self).__fields__
        })

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    @property
    def validators(self):
        """the validator steps (every transform after the converter)."""
        return self.transforms[1:]

    @property
    def multiplicity(self):
        if self.many:
            return Multiplicity.LIST
        return Multiplicity.SCALAR if self.required else Multiplicity.OPTIONAL


class Valued(Parameter):
    """
    Shared behavior of value-bearing descriptors: fluent validator attachment and
    multiplicity wrappers.
    """

    def _attach(self, name, function, /):
        return self.__replace__(transforms=self.transforms + (Transform(name, function),))

    def restrict_to(self, min=Unset, max=Unset, clamp=False):
        """
        Attach a range validator; with clamp=True out-of-range values become the
        nearest bound instead of failing. Runs on each element of lists and pairs.
        """
        return self._attach("restrict_to", restrict_to(min, max, clamp))

    def check(self, predicate, message=Unset):
        """
        Attach a predicate validator (see validators.check for the message forms).
        """
        return self._attach("check", check(predicate, message))

    def validate(self, function, /):
        """
        Attach an arbitrary validator: function(value) returns the value to keep
        and raises BadValue to reject it.
        """
        if not callable(function):
            raise TypeError("validate() argument must be callable")
        return self._attach("validate", function)

    def optional(self):
        return self.__replace__(required=False, many=False)

    def multiple(self, required=False):
        return self.__replace__(many=True, required=bool(required))

    def pair(self):
        return self.__replace__(nargs=2)

    @property
    def paired(self):
        return self.nargs == 2


class Option[_T](Valued):
    """
    Named, value-bearing parameter.

    Highlights
    - Aliases via names ("-x", "--xx", "-long"); the longest is the primary name.
    - Consumes `nargs` values per occurrence (attached "-xV"/"--xx=V" counts as
      the first one).
    - Optional unless required=True; absent and without default → bound None.
    - Repeated occurrences: the last wins, unless multiple() collects them all.
    """

    __introspectable__ = (
        "names",
        "metavar",
        "type",
        "nargs",
        "default",
        "required",
        "many",
        "transforms",
        "descr",
        "hidden",
        "deprecated",
    )
    __displayable__ = (
        "names",
        "type",
        "nargs",
        "default",
        "required",
        "many",
        "transforms",
    )
    __fields__ = __introspectable__

    def __new__(
            cls,
            *names,
            type=text,
            default=Unset,
            metavar=Unset,
            nargs=1,
            required=False,
            descr=Unset,
            hidden=False,
            deprecated=False
    ):
        """
        Construct an Option.

        Parameters
        - names: one or more option names.
        - type: converter applied to each raw value.
        - default: value bound when the option is absent (validated, not converted).
        - metavar: label of the value in help output.
        - nargs: values consumed per occurrence (2 is what pair() sets).
        - required: absence without default is a MissingValueError.
        - descr / hidden / deprecated: help metadata; a deprecated option warns when used.
        """
        return cls._build({
            "names": names,
            "metavar": metavar,
            "type": type,
            "nargs": nargs,
            "default": default,
            "required": required,
            "many": False,
            "transforms": (),
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        })

    @classmethod
    def _sanitize(cls, metadata, /):
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)
        _sanitize_valued_metadata(cls, metadata)

    @property
    def name(self):
        """primary display name: the longest declared name (first one on ties)."""
        return max(self.names, key=len)


class Flag(Parameter):
    """
    Named, presence-only parameter.

    Bound True when given on the command line, its default (False unless stated)
    otherwise. Flags take no value: "--flag=x" is an error. Short flags can be
    clustered ("-ab").
    """

    __introspectable__ = (
        "names",
        "default",
        "descr",
        "hidden",
        "deprecated",
    )
    __fields__ = __introspectable__

    nargs = 0
    type = None
    transforms = ()
    required = False
    many = False

    def __new__(cls, *names, default=False, descr=Unset, hidden=False, deprecated=False):
        return cls._build({
            "names": names,
            "default": default,
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        })

    @classmethod
    def _sanitize(cls, metadata, /):
        _sanitize_metadata(cls, metadata)
        _sanitize_named_metadata(cls, metadata)

    @property
    def name(self):
        return max(self.names, key=len)


class Argument[_T](Valued):
    """
    Positional, value-bearing parameter.

    Highlights
    - Display name is the metavar ("X", "FILE").
    - Required by default; optional() binds None when no token is left for it,
      multiple() takes every token that is not reserved by the required arguments
      declared after it.
    - A default makes the argument optional.
    """

    __introspectable__ = (
        "metavar",
        "type",
        "nargs",
        "default",
        "required",
        "many",
        "transforms",
        "descr",
        "hidden",
        "deprecated",
    )
    __displayable__ = (
        "metavar",
        "type",
        "nargs",
        "default",
        "required",
        "many",
        "transforms",
    )
    __fields__ = __introspectable__

    def __new__(
            cls,
            metavar=Unset,
            /,
            type=text,
            default=Unset,
            nargs=1,
            descr=Unset,
            *,
            hidden=False,
            deprecated=False
    ):
        """
        Construct an Argument.

        Parameters
        - metavar: display name; may be left out when declared through @command.
        - type: converter applied to each raw value.
        - default: value bound when no token is assigned; makes the argument optional.
        - nargs: tokens consumed per occurrence.
        - descr / hidden / deprecated: help metadata.
        """
        return cls._build({
            "metavar": metavar,
            "type": type,
            "nargs": nargs,
            "default": default,
            "required": default is Unset,
            "many": False,
            "transforms": (),
            "descr": descr,
            "hidden": hidden,
            "deprecated": deprecated,
        })

    @classmethod
    def _sanitize(cls, metadata, /):
        _sanitize_metadata(cls, metadata)
        _sanitize_valued_metadata(cls, metadata)
        if metadata["default"] is not Unset:
            metadata["required"] = False

    @property
    def name(self):
        return coalesce(self.metavar, None)


__all__ = (
    "Multiplicity",
    "Parameter",
    "Option",
    "Flag",
    "Argument",
)

# Keep the metaclass and the shared base out of star-imports.
del ParameterType
