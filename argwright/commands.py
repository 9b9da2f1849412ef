"""
Argwright command layer: declare parameters once, parse any number of times.

What this module provides
- Command: an immutable set of parameters with
  • parse(argv) → Bindings: one fresh result per call, no shared mutable state,
    so a command can be parsed from several threads at once.
  • usage: the one-line usage summary (see usage.format_usage).
  • __invoke__(prompt): runner used by invoke(); reports faults in shell mode.
- Bindings: read-only mapping from parameter handle to bound value; option
  names and argument metavars are accepted as keys too.
- command(...): build a Command from a callable whose defaults are descriptors
  (signature-driven), or return a decorator that does so.
- invoke(obj, prompt): convenience runner for commands or plain callables.

Quick start
    from argwright import command, invoke, Argument, Option, Flag
    from argwright.converters import integer

    @command(shell=True)
    def tool(
        path=Argument(),                                    # positional → PATH
        /,
        count=Option("-c", "--count", type=integer, default=1).restrict_to(min=1),
        *,
        verbose=Flag("-v", "--verbose"),
    ):
        print(path, count, verbose)

    if __name__ == "__main__":
        invoke(tool)

Or without a callback:
    x = Option("-x", "--xx", type=integer).restrict_to(min=1)
    tool = Command(x, name="tool")
    tool.parse(["-x1"])[x]  # 1
"""
import inspect
import os.path
import re
import shlex
import sys
from collections.abc import Iterable, Mapping

from .faults import *
from .matcher import Session
from .parameters import Parameter, Argument
from .pipeline import process
from .usage import format_usage, render_usage
from .utils import *


class Bindings(Mapping):
    """
    result of one parse: parameter handle → BoundValue.

    lookups
    - by handle: bindings[option]
    - by name:   bindings["--xx"], bindings["-x"], bindings["X"]

    iteration yields the handles in declaration order.
    """

    def __init__(self, values, aliases, /):
        self._values = dict(values)
        self._aliases = aliases

    def __getitem__(self, key, /):
        if isinstance(key, str):
            try:
                key = self._aliases[key]
            except KeyError:
                raise KeyError(key) from None
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def asdict(self):
        """plain dict keyed by each parameter's primary name."""
        return {parameter.name: value for parameter, value in self._values.items()}

    def __rich_repr__(self):
        yield from self.asdict().items()

    def __repr__(self):
        return "bindings(%s)" % ", ".join("%s=%r" % item for item in self.asdict().items())


def _discover(callback, /):
    """
    map a callable's signature to descriptors.

    rules
    - every parameter must default to an Option, Flag or Argument.
    - arguments must be positional-only; an argument without metavar is named
      after the parameter (upper-cased, underscores turned into hyphens).
    - options and flags must not be positional-only.

    returns
    - tuple of (parameter-name, positional, descriptor)
    """
    routes = []
    for name, parameter in inspect.signature(callback).parameters.items():
        descriptor = parameter.default
        if not isinstance(descriptor, Parameter):
            raise TypeError(f"command parameter {name!r} must default to an Option, Flag or Argument")
        positional = parameter.kind is inspect.Parameter.POSITIONAL_ONLY
        if isinstance(descriptor, Argument):
            if not positional:
                raise TypeError(f"command argument {name!r} must be a positional-only parameter")
            if descriptor.metavar is Unset:
                descriptor = descriptor.__replace__(metavar=re.sub(r"_+", "-", name.strip("_")).upper())
        elif positional:
            raise TypeError(f"command option {name!r} cannot be a positional-only parameter")
        routes.append((name, positional, descriptor))
    return tuple(routes)


class Command:
    """
    Immutable parser for one command line shape.

    Lifecycle
    - built once from parameters (or a callback's signature); cross-parameter
      constraints are checked eagerly (duplicated names, two variadic arguments,
      unnamed arguments).
    - parse()/__invoke__ may run any number of times; each run uses its own
      matching session and returns a new Bindings.

    Options
    - name: program name shown in usage (defaults to the callback name or argv[0]).
    - strict: a non-list option given twice is a DuplicateOptionError instead of
      "last one wins".
    - shell: faults are printed on stderr (with the usage line) and the process
      exits with status 1, instead of being raised.
    - colorful: styled output in shell mode.
    """

    __introspectable__ = (
        "name",
        "parameters",
        "options",
        "arguments",
        "strict",
        "shell",
        "colorful",
    )

    name = mirror("name")
    parameters = mirror("parameters")
    options = mirror("options")
    arguments = mirror("arguments")
    strict = mirror("strict")
    shell = mirror("shell")
    colorful = mirror("colorful")

    def __new__(cls, *parameters, name=Unset, callback=Unset, strict=False, shell=False, colorful=True):
        """
        Construct a Command.

        Parameters
        - parameters: Option | Flag | Argument, in declaration order. Must be empty
          when a callback is given (they are discovered from its signature).
        - name: Unset | str, non-empty program name.
        - callback: Unset | callable invoked with the bound values by __invoke__.
        - strict / shell / colorful: see class docstring.
        """
        if callback is not Unset:
            if not callable(callback):
                raise TypeError("command 'callback' must be callable")
            if parameters:
                raise TypeError("command cannot take both a callback and explicit parameters")
            routes = _discover(callback)
            parameters = tuple(descriptor for _, _, descriptor in routes)
        else:
            routes = ()

        if not isinstance(name, str | Unset):
            raise TypeError("command 'name' must be a string")
        elif isinstance(name, str) and not (name := name.strip()):
            raise ValueError("command 'name' cannot be empty")
        if name is Unset:
            if callback is not Unset:
                name = re.sub(r"_+", "-", getattr(callback, "__name__", "").strip("_"))
            name = name or os.path.basename(sys.argv[0]) or "cli"

        switches = {}
        arguments = []
        seen = set()
        for parameter in parameters:
            if not isinstance(parameter, Parameter):
                raise TypeError("command parameters must be Option, Flag or Argument instances")
            if parameter in seen:
                raise ValueError("command parameters cannot contain duplicates")
            seen.add(parameter)
            if isinstance(parameter, Argument):
                if parameter.name is None:
                    raise TypeError("command arguments must have a metavar")
                if parameter.many and any(argument.many for argument in arguments):
                    raise ValueError("command cannot have more than one variadic argument")
                arguments.append(parameter)
                continue
            for alias in parameter.names:
                if alias in switches:
                    raise ValueError(f"command option name {alias!r} is declared twice")
                switches[alias] = parameter

        aliases = dict(switches)
        for argument in arguments:
            aliases.setdefault(argument.name, argument)

        self = super().__new__(cls)
        self._name = name
        self._parameters = tuple(parameters)
        self._options = tuple(parameter for parameter in parameters if not isinstance(parameter, Argument))
        self._arguments = tuple(arguments)
        self._switches = switches
        self._aliases = aliases
        self._routes = routes
        self._callback = callback
        self._strict = bool(strict)
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._frozen = True
        return self

    def __setattr__(self, name, value, /):
        if getattr(self, "_frozen", False):
            raise AttributeError("command is immutable")
        object.__setattr__(self, name, value)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "command(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())

    @property
    def usage(self):
        return format_usage(self._parameters, self._name)

    def render_usage(self):
        return render_usage(self._parameters, self._name, colorful=self._colorful)

    def parse(self, argv, /):
        """
        parse the invocation arguments (program name excluded).

        returns
        - Bindings with one entry per declared parameter.

        raises
        - ParseError subclasses, fail-fast: matching faults first, then the
          pipeline of each parameter in declaration order.
        """
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be an iterable of strings")

        session = Session(
            self._switches,
            self._arguments,
            strict=self._strict,
            shell=self._shell,
            colorful=self._colorful,
            prog=self._name,
        )
        occurrences = session.match(tokens)

        values = {}
        for parameter in self._parameters:
            values[parameter] = process(parameter, occurrences.get(parameter, ()))
        return Bindings(values, self._aliases)

    def __call__(self, *args, **kwargs):
        if self._callback is Unset:
            raise TypeError("command without callback is not callable")
        return self._callback(*args, **kwargs)

    def __invoke__(self, prompt=Unset):
        """
        Execute this command with a token stream.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Behavior
        - parses the tokens; on a fault, hands it to faults.trigger() together
          with the usage line (raised, or printed then exit(1) in shell mode).
        - calls the callback with the bound values when there is one and returns
          its result; returns the Bindings otherwise.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        try:
            bindings = self.parse(tokens)
        except ParseError as fault:
            trigger(fault, shell=self._shell, colorful=self._colorful, prog=self._name, usage=self.usage)
            raise

        if self._callback is Unset:
            return bindings

        args = ()
        kwargs = {}
        for name, positional, descriptor in self._routes:
            if positional:
                args += (bindings[descriptor],)
            else:
                kwargs[name] = bindings[descriptor]
        return self._callback(*args, **kwargs)


def command(source=Unset, /, **options):
    """
    Create a Command from a callable, or return a decorator to build it later.

    Invocation modes
    - Direct:     tool = command(func, strict=True)
    - Decorator:  @command(name="tool")
                  def func(...): ...
    - Bare:       @command
                  def func(...): ...

    Options are forwarded to Command (name, strict, shell, colorful).
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        return Command(callback=source, **options)

    return wrapper(source) if source is not Unset else wrapper


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for commands or callables.

    - object implementing __invoke__: called with prompt.
    - plain callable: wrapped with command() first.
    - prompt: Unset (sys.argv[1:]), a shell string, or an iterable of strings.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    if callable(object):
        return invoke(command(object), prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method") from None


__all__ = (
    "Bindings",
    "Command",
    "command",
    "invoke",
)
