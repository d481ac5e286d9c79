"""
Icicle help generator: render a command's usage and sections.

Layout (fixed order; empty sections keep their header)

    usage: <route> [--options] [<arguments>] [<command>]
    <description>

    arguments:
      <descr>
      optional: <descr>
      all arguments: <descr>

    options:
      -x, --x: <descr>
      -v, --verbose (flag): <descr>

    commands:
      <name>[, <alias>...]: <descr>

render_help() is pure: it reads the tree and returns a rich Text. Styling is
applied only when colorful=True; any palette entry can be overridden through a
__styles__ mapping in __main__.
"""
from collections import defaultdict

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .utils import *


def _palette():
    return defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Sections ===
        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-label": "bold #FFD600",  # AMBER for positional labels
        "argument-description": "#9CA3AF",  # Muted gray
        "option-name": "bold #00E6FF",  # CYAN for options
        "switch-name": "bold #22C55E",  # GREEN for valueless options
        "children": "bold #36C5F0",  # Sky-blue subcommands
        "children-description": "#9CA3AF",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__('__main__'), "__styles__", {}))


def render_help(command, route=Unset, /, *, colorful=False):
    """
    Render help for `command` as a rich Text.

    Parameters
    - command: the node to describe.
    - route: the commands from the root down to `command` (as carried by a
      Resolution); defaults to the command alone. Only names are used, for
      the usage line.
    - colorful: apply the palette; plain text otherwise.
    """
    route = coalesce(route, (command,))
    styles = _palette()

    def styler(style):
        return styles[style] if colorful else ""

    help = Text()

    # usage line
    help.append("usage", styler("usage-label")).append(": ")
    help.append(" ".join(step.name for step in route), styler("program-name"))
    for present, label in (
            (command.options, "[--options]"),
            (command.arguments, "[<arguments>]"),
            (command.children, "[<command>]"),
    ):
        if present:
            help.append(" ").append(label, styler("usage-section"))
    help.append("\n")

    if command.descr:
        help.append(command.descr, styler("description-section")).append("\n")

    # arguments
    help.append("\n").append("arguments", styler("group-label")).append(":\n")
    for index, argument in enumerate(command.arguments, 1):
        help.append("  ")
        if argument.array:
            help.append("all arguments", styler("argument-label")).append(": ")
            help.append(argument.descr or "...", styler("argument-description"))
        elif not argument.required:
            help.append("optional", styler("argument-label")).append(": ")
            help.append(argument.descr or "argument %d" % index, styler("argument-description"))
        else:
            help.append(argument.descr or "argument %d" % index, styler("argument-description"))
        help.append("\n")

    # options
    help.append("\n").append("options", styler("group-label")).append(":\n")
    for option in command.options:
        style = styler("option-name" if option.valued else "switch-name")
        help.append("  ").append(Text(", ").join(Text(name, style) for name in option.names))
        if not option.valued:
            help.append(" (flag)", styler("argument-description"))
        if option.descr:
            help.append(": ").append(option.descr, styler("argument-description"))
        help.append("\n")

    # commands
    help.append("\n").append("commands", styler("group-label")).append(":\n")
    for child in command.children:
        help.append("  ").append(", ".join(child.names), styler("children"))
        if child.descr:
            help.append(": ").append(child.descr, styler("children-description"))
        help.append("\n")

    help.rstrip()
    return help


def format_help(command, route=Unset, /):
    """
    Plain-text help, the same layout as render_help() without styles.
    """
    return render_help(command, route).plain


def print_help(command, route=Unset, /, *, colorful=False, fancy=False):
    """
    Print help for `command` on stdout (wrapped in a panel when fancy).
    """
    console = Console()
    renderable = render_help(command, route, colorful=colorful)
    if fancy:
        title = Text.assemble("[ ", f"{command.name} HELP".upper(), " ]", style=_palette()["panel-title"] if colorful else "")
        console.print(Panel(renderable, title=title, title_align="left"))
    else:
        console.print(renderable, soft_wrap=True)


__all__ = (
    "render_help",
    "format_help",
    "print_help",
)
