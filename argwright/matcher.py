"""
Argwright tokenizer/matcher: assign the tokens of one invocation to parameters.

Phases (one Session per parse, discarded afterwards)
- tokenizing/matching: walk argv left to right.
  • "--name=value" / "-x=value": value attached after '='.
  • "-xVALUE": short option with attached value.
  • "-abc": cluster of short flags; the last member may be a short option
    taking the rest of the token as its value ("-abVALUE").
  • "--name V..." / "-x V...": the option consumes its nargs values from the
    following tokens, whatever they look like ("--xx -123").
    An attached value counts as the first one ("-y10 1").
  • "--": every following token is positional. A lone "-" is positional.
  • anything else not starting with '-' is positional.
- distributing: positional tokens are handed to arguments in declaration order.
  Required arguments reserve their arity first: an optional argument binds
  nothing when the tokens left would not cover the required arguments declared
  after it, and a variadic argument leaves those tokens alone.

Faults raised here (first one wins)
- UnknownParameterError: option-shaped token matching no declared name.
- MissingValueError: option without enough values, required argument without tokens.
- UnexpectedValueError: "--flag=value".
- UnexpectedArgumentError: positional tokens left after distribution.
- DuplicateOptionError: repeated non-list option when strict=True (otherwise the
  last occurrence wins in the pipeline).

Output
- dict[parameter, list[Occurrence]] for every parameter that was matched.
"""
import difflib
from collections import deque

from .faults import *
from .parameters import Flag
from .pipeline import Occurrence
from .utils import Unset, ordinal


def _shaped(token, /):
    return token.startswith("-") and token != "-"


class Session:
    """
    per-invocation matching state.

    parameters
    - switches: Mapping[str, Option | Flag], every declared option name.
    - arguments: Sequence[Argument], in declaration order.
    - strict: reject repeated non-list options.
    - context: rendering options forwarded to warnings (shell, prog, colorful).
    """

    def __init__(self, switches, arguments, *, strict=False, **context):
        self._switches = switches
        self._arguments = tuple(arguments)
        self._strict = strict
        self._context = context
        self._tokens = deque()
        self._index = 0
        self._occurrences = {}
        self._positionals = []

    def match(self, tokens, /):
        """
        match every token; return the occurrences keyed by parameter.
        """
        self._tokens = deque(enumerate(tokens))
        ended = False

        while self._tokens:
            self._index, token = self._tokens.popleft()
            if ended or not _shaped(token):
                self._positionals.append((self._index, token))
            elif token == "--":
                ended = True
            elif token.startswith("--"):
                self._match_long(token)
            else:
                self._match_short(token)

        self._distribute()
        return self._occurrences

    def _unknown(self, input, /):
        suggestions = difflib.get_close_matches(input, self._switches.keys(), 5)
        if suggestions:
            hint = "did you mean %r?" % suggestions[0]
        else:
            hint = "check the spelling of the option at %s position" % ordinal(self._index + 1)
        return UnknownParameterError(
            "no such option.",
            name=input,
            hint=hint,
            suggestions=suggestions,
            index=self._index,
        )

    def _match_long(self, token, /):
        input, separator, value = token.partition("=")
        try:
            parameter = self._switches[input]
        except KeyError:
            raise self._unknown(input) from None
        self._consume(parameter, input, value if separator else Unset)

    def _match_short(self, token, /):
        input, separator, value = token.partition("=")
        if input in self._switches:
            # "-x", "-x=value" and single-dash long names ("-long")
            return self._consume(self._switches[input], input, value if separator else Unset)

        for position in range(1, len(token)):
            input = "-" + token[position]
            try:
                parameter = self._switches[input]
            except KeyError:
                raise self._unknown(token.partition("=")[0] if position == 1 else input) from None
            if not isinstance(parameter, Flag):
                rest = token[position + 1:]
                return self._consume(parameter, input, rest if rest else Unset)
            if token[position + 1:position + 2] == "=":
                return self._consume(parameter, input, token[position + 2:])
            self._consume(parameter, input, Unset)

    def _consume(self, parameter, input, attached, /):
        start = self._index

        if isinstance(parameter, Flag):
            if attached is not Unset:
                raise UnexpectedValueError(
                    "%s option does not take a value." % input,
                    name=input,
                    parameter=parameter,
                    hint="remove everything from '=' (for example: %s)" % input,
                    index=start,
                )
            return self._record(parameter, Occurrence(input, (), start))

        values = [] if attached is Unset else [attached]
        while len(values) < parameter.nargs and self._tokens:
            self._index, token = self._tokens.popleft()
            values.append(token)

        if len(values) < parameter.nargs:
            if parameter.nargs == 1:
                message = "option requires a value."
            else:
                message = "option requires %d values." % parameter.nargs
            raise MissingValueError(
                message,
                name=input,
                parameter=parameter,
                hint=(
                    "add both values of the pair after %s" % input if parameter.paired
                    else "add the missing value%s after %s" % ("" if parameter.nargs == 1 else "s", input)
                ),
                index=start,
            )
        self._record(parameter, Occurrence(input, tuple(values), start))

    def _record(self, parameter, occurrence, /):
        if parameter.deprecated:
            trigger(DeprecatedParameterWarning(
                "option %r at %s position is deprecated" % (occurrence.input, ordinal(occurrence.index + 1)),
                parameter=parameter,
            ), **self._context)

        occurrences = self._occurrences.setdefault(parameter, [])
        if occurrences and self._strict and not parameter.many:
            raise DuplicateOptionError(
                "option cannot be given more than once.",
                name=occurrence.input,
                parameter=parameter,
                hint="keep a single %s" % occurrence.input,
                index=occurrence.index,
            )
        occurrences.append(occurrence)

    def _distribute(self):
        """
        hand positional tokens to the arguments, in declaration order.
        """
        positionals = self._positionals
        cursor = 0

        for position, argument in enumerate(self._arguments):
            remaining = len(positionals) - cursor
            reserved = sum(following.nargs for following in self._arguments[position + 1:] if following.required)
            available = remaining - reserved

            if argument.many:
                count = max(available, 0) // argument.nargs * argument.nargs
            elif argument.required:
                count = argument.nargs if remaining >= argument.nargs else Unset
            else:
                count = argument.nargs if available >= argument.nargs else 0

            if count is Unset or (argument.many and argument.required and not count):
                raise MissingValueError(
                    "argument is required.",
                    name=argument.name,
                    parameter=argument,
                    hint="add the missing %s" % argument.name,
                )

            if argument.deprecated and count:
                trigger(DeprecatedParameterWarning(
                    "argument %r at %s position is deprecated" % (
                        argument.name, ordinal(positionals[cursor][0] + 1)
                    ),
                    parameter=argument,
                ), **self._context)

            for offset in range(cursor, cursor + count, argument.nargs):
                chunk = positionals[offset:offset + argument.nargs]
                self._occurrences.setdefault(argument, []).append(
                    Occurrence(argument.name, tuple(token for _, token in chunk), chunk[0][0])
                )
            cursor += count

        if cursor < len(positionals):
            index, token = positionals[cursor]
            raise UnexpectedArgumentError(
                "got an unexpected extra argument.",
                name=token,
                hint="remove the extra value at %s position" % ordinal(index + 1),
                index=index,
            )


def match(switches, arguments, tokens, /, *, strict=False, **context):
    """
    convenience wrapper: run a fresh Session over `tokens`.
    """
    return Session(switches, arguments, strict=strict, **context).match(tokens)


__all__ = (
    "Session",
    "match",
)
