"""
Argwright usage formatter.

format_usage(parameters, prog) builds the one-line summary from parameter
metadata alone (no parsed values):

    Usage: <prog> [OPTIONS] X Y [Z] FILES...

- "[OPTIONS]" appears once when any option or flag is declared.
- arguments follow in declaration order: "[NAME]" when optional, a trailing
  "..." when they collect a list ("[NAME]..." when the list may be empty).

The string is part of the public surface and is reused verbatim in error output.
render_usage() returns the same text as a styled rich Text for terminals.
"""
from collections import defaultdict

from rich.text import Text

from .parameters import Argument


def _labels(parameters, /):
    parameters = tuple(parameters)
    arguments = [parameter for parameter in parameters if isinstance(parameter, Argument)]
    options = len(arguments) != len(parameters)

    labels = []
    for argument in arguments:
        if argument.name is None:
            raise TypeError("usage cannot be formatted for an argument without a metavar")
        label = argument.name
        if not argument.required:
            label = "[%s]" % label
        if argument.many:
            label += "..."
        labels.append(label)
    return options, labels


def format_usage(parameters, prog, /):
    """
    return the usage line for `parameters` under the program name `prog`.
    """
    if not isinstance(prog, str) or not prog.strip():
        raise TypeError("format_usage() 'prog' must be a non-empty string")
    options, labels = _labels(parameters)
    parts = ["Usage:", prog.strip()]
    if options:
        parts.append("[OPTIONS]")
    parts.extend(labels)
    return " ".join(parts)


def render_usage(parameters, prog, /, *, colorful=True, styles=None):
    """
    same content as format_usage(), styled for a rich console.
    """
    if not isinstance(prog, str) or not prog.strip():
        raise TypeError("render_usage() 'prog' must be a non-empty string")
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",
        "program-name": "bold #E6E6F0",
        "options": "#F6C177",
        "argument": "#C4A7E7",
    } | (styles or {}))

    def styler(style):
        return styles[style] if colorful else ""

    options, labels = _labels(parameters)
    usage = Text()
    usage.append("Usage:", styler("usage-label"))
    usage.append(" ")
    usage.append(prog.strip(), styler("program-name"))
    if options:
        usage.append(" ")
        usage.append("[OPTIONS]", styler("options"))
    for label in labels:
        usage.append(" ")
        usage.append(label, styler("argument"))
    return usage


__all__ = (
    "format_usage",
    "render_usage",
)
