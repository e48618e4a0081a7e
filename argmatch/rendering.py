"""
Argmatch help rendering.

HelpRenderer lays out the help of ONE Command level (its own args and its
direct subcommands, never the whole tree) in two passes:

1. measure: the widest "-x, --long <value>" spelling among flags/options and
   the longest subcommand name give the padding of each column.
2. render: emit the sections with those fixed widths, so a given declaration
   always produces byte-identical text.

Layout
    <description>
    Usage: <name> <required>... [optional]... <COMMAND> [OPTIONS]

    Commands:
        <name>    <description>

    Options:
        <spelling>    <about> (default: <value>)

The result is a rich Text: `.plain` is the exact text, styles are only
attached when `colorful` is enabled. Palette entries can be overridden with
a mapping named __styles__ in __main__.
"""
from collections import defaultdict

from rich.text import Text

from .utils import *

GUTTER = " " * 4


class HelpRenderer:
    """
    Two-pass, column-aligned help formatter for a Command.

    Parameters
    - command: the Command whose own declarations are rendered.
    - colorful: bool | Unset, overrides command.colorful when given.

    Palette keys
    - description, usage, program, positional, placeholder, section,
      subcommand, subcommand-about, option, flag, about, default
    """

    def __init__(self, command, /, colorful=Unset):
        self.command = command
        self.colorful = bool(coalesce(colorful, command.colorful))
        self.option_width = 0
        self.command_width = 0

    def measure(self):
        """
        First pass: compute the padding widths of the Options and Commands columns.
        """
        self.option_width = max(
            (len(arg.spelling()) for arg in self.command.args if not arg.is_positional), default=0
        )
        self.command_width = max((len(child.name) for child in self.command.subcommands), default=0)
        return self

    def render(self):
        """
        Second pass: emit the help text using the measured widths.
        """
        self.measure()
        command = self.command

        styles = defaultdict(str, {
            "description": "italic #A8A8A8",
            "usage": "bold #5FD7FF",
            "program": "bold #FF5F87",
            "positional": "bold #FFD75F",
            "placeholder": "#8A8A8A",
            "section": "bold",
            "subcommand": "bold #5FAFFF",
            "subcommand-about": "#A8A8A8",
            "option": "bold #5FD7FF",
            "flag": "bold #5FD75F",
            "about": "#A8A8A8",
            "default": "dim",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        lines = []

        if command.descr:
            lines.append(Text(command.descr, styler("description")))

        usage = Text.assemble(("Usage", styler("usage")), ": ", (command.name, styler("program")))
        positionals = [arg for arg in command.args if arg.is_positional]
        # required positionals first, then optional ones, each in declaration order
        for arg in sorted(positionals, key=lambda x: not x.is_required):
            usage.append(" ").append(arg.spelling(), styler("positional"))
        if command.subcommands:
            usage.append(" ").append("<COMMAND>", styler("placeholder"))
        if len(positionals) < len(command.args):
            usage.append(" ").append("[OPTIONS]", styler("placeholder"))
        lines.append(usage)

        if command.subcommands:
            lines.append(Text())
            lines.append(Text.assemble(("Commands", styler("section")), ":"))
            for child in command.subcommands:
                line = Text(GUTTER)
                line.append(child.name.ljust(self.command_width), styler("subcommand"))
                line.append(GUTTER).append(child.descr, styler("subcommand-about"))
                line.rstrip()
                lines.append(line)

        options = [arg for arg in command.args if not arg.is_positional]
        if options:
            lines.append(Text())
            lines.append(Text.assemble(("Options", styler("section")), ":"))
            for arg in options:
                line = Text(GUTTER)
                line.append(arg.spelling().ljust(self.option_width), styler("flag" if arg.is_flag else "option"))
                line.append(GUTTER).append(arg.descr, styler("about"))
                if arg.has_default:
                    line.append(" (default: %s)" % arg.render_default(), styler("default"))
                line.rstrip()
                lines.append(line)

        return Text("\n").join(lines)


__all__ = (
    "HelpRenderer",
)
