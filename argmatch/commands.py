"""
Argmatch command layer: declare, compose, and match CLI commands.

What this module provides
- Command: a named node owning an ordered list of Args and an ordered list of
  child Commands (subcommands), plus matching policies.
  • arg(a) / subcommand(c) / subcommand_required(b) declare and return the
    same Command, so declarations chain.
  • get_matches(argv) runs the matcher over the process arguments and returns
    an (ArgMatches, error) pair.
  • render_help() / print_help() lay out the help of this level.

Quick start
    from argmatch import Arg, Command, arg

    cli = (
        Command("gz", "Git helpers")
        .subcommand(
            Command("sync", "Sync current branch with origin/main")
            .arg(Arg.flag("force").short_alias("f").about("Force reset instead of pull"))
        )
        .subcommand(Command("branch", "Create a branch").arg(arg("<name>")))
    )

    matches, error = cli.get_matches()
    if error.has_error():
        print(error.message)

Design notes
- The implicit help flag (-h/--help) is always the first declared Arg.
- subcommand() stores a deep copy: a parent exclusively owns its subtree, so
  later changes to the original object do not leak into the tree (and a
  Command can never become its own ancestor).
- Invariant violations (duplicate names/aliases, misplaced multiple positional)
  are programmer errors and raise ValueError immediately.
- Matching never changes the declarations; the tree can be matched repeatedly.

See also
- argmatch.matcher for the token state machine.
- argmatch.faults for the error taxonomy returned by get_matches().
"""
import copy
import re
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .arguments import Arg
from .faults import NoError
from .logs import get_logger
from .matcher import Matcher
from .rendering import HelpRenderer
from .utils import *

logger = get_logger(__name__)

HELP = "help"


class Command:
    """
    Named node of a command tree.

    Read-only properties
    - name, descr: identity and help text.
    - args: tuple of declared Args (help flag first).
    - subcommands: tuple of child Commands.
    - requires_subcommand: a subcommand must be given at this level.
    - allows_extra_positionals: plain tokens beyond the declared positionals
      are ignored (True) or reported as UnexpectedPositionalError (False).
    - auto_help: get_matches() prints help when the help flag was matched.
    - colorful: help output is styled.
    """

    name = mirror("name")
    descr = mirror("descr")
    requires_subcommand = mirror("requires_subcommand")
    allows_extra_positionals = mirror("allows_extra_positionals")
    auto_help = mirror("auto_help")
    colorful = mirror("colorful")

    def __init__(
            self,
            name,
            descr="",
            /,
            *,
            subcommand_required=False,
            allow_extra_positionals=True,
            auto_help=True,
            colorful=False,
    ):
        """
        Parameters
        - name: str, non-empty, no whitespace. Used in usage lines and messages,
          and as the token that selects this command under a parent.
        - descr: str, one-line description shown on top of the help and in the
          parent's Commands block.
        - subcommand_required: bool, see subcommand_required().
        - allow_extra_positionals: bool, policy for surplus positional tokens.
        - auto_help: bool, print help from get_matches() when -h/--help is given.
        - colorful: bool, style the help output.

        Raises
        - TypeError/ValueError on malformed name/descr.
        """
        if not isinstance(name, str):
            raise TypeError("command 'name' must be a string")
        elif not re.fullmatch(r"[^\s\-][^\s]*", name := name.strip()):
            raise ValueError(f"command 'name' {name!r} is not a valid command name")
        if not isinstance(descr, str):
            raise TypeError("command 'descr' must be a string")

        self._name = name
        self._descr = descr.strip()
        self._args = []
        self._subcommands = []
        self._requires_subcommand = bool(subcommand_required)
        self._allows_extra_positionals = bool(allow_extra_positionals)
        self._auto_help = bool(auto_help)
        self._colorful = bool(colorful)

        self.arg(Arg.flag(HELP).short_alias("h").about("Show this help message"))

    @property
    def args(self):
        return tuple(self._args)

    @property
    def subcommands(self):
        return tuple(self._subcommands)

    # ── Declaration ─────────────────────────────────────────────────────────────

    def arg(self, arg, /):
        """
        Append an Arg and return this Command.

        Raises
        - TypeError: not an Arg.
        - ValueError: the name, short alias or long alias is already declared;
          or a positional would follow a multiple positional.
        """
        if not isinstance(arg, Arg):
            raise TypeError("arg() argument must be an argument")

        for declared in self._args:
            if declared.name == arg.name:
                raise ValueError(f"command {self._name!r} already declares an argument named {arg.name!r}")
            if arg.short and declared.short == arg.short:
                raise ValueError(f"command {self._name!r} already declares the short alias '-{arg.short}'")
            if arg.long and declared.long == arg.long:
                raise ValueError(f"command {self._name!r} already declares the long alias '--{arg.long}'")
            if arg.is_positional and declared.is_positional and declared.is_multiple:
                raise ValueError(
                    f"command {self._name!r} cannot declare positional {arg.name!r} "
                    f"after the multiple positional {declared.name!r}"
                )

        self._args.append(arg)
        return self

    def subcommand(self, command, /):
        """
        Append a (deep copy of a) child Command and return this Command.

        Raises
        - TypeError: not a Command.
        - ValueError: a subcommand with the same name already exists.
        """
        if not isinstance(command, Command):
            raise TypeError("subcommand() argument must be a command")
        if any(child.name == command.name for child in self._subcommands):
            raise ValueError(f"command {self._name!r} already declares a subcommand named {command.name!r}")

        self._subcommands.append(copy.deepcopy(command))
        return self

    def subcommand_required(self, required=True, /):
        """
        Require (or stop requiring) a subcommand at this level; returns this Command.
        """
        self._requires_subcommand = bool(required)
        return self

    def find(self, *path):
        """
        Return the descendant reached by following subcommand names, or None.

        find() with no names returns this Command.
        """
        command = self
        for name in path:
            command = next((child for child in command._subcommands if child.name == name), None)
            if command is None:
                return None
        return command

    # ── Matching ────────────────────────────────────────────────────────────────

    def get_matches(self, argv=Unset, /):
        """
        Match process arguments against this (root) Command.

        Parameters
        - argv:
          • Unset: read sys.argv.
          • str: shell-like string; split via shlex.split.
          • Iterable[str]: pre-tokenized argument vector.
          In every form, the first element is the program name and is discarded.

        Returns
        - (ArgMatches, error): error is NoError on success, otherwise a
          CommandException subclass (returned, never raised) next to the
          best-effort matches.

        Behavior
        - When auto_help is enabled and -h/--help was matched without any
          error, the help of the deepest Command that matched it is printed to
          standard output.

        Raises
        - TypeError: argv is not Unset/str/Iterable[str].
        """
        if argv is Unset:
            tokens = list(sys.argv)
        elif isinstance(argv, str):
            tokens = shlex.split(argv)
        elif isinstance(argv, Iterable):
            tokens = list(argv)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("get_matches() argument must be a string or an iterable of strings")
        else:
            raise TypeError("get_matches() argument must be a string or an iterable of strings")

        logger.debug("get matches", command=self._name, tokens=tokens[1:])
        matches, error = Matcher(self, tokens[1:]).run()

        if self._auto_help and not error and matches.help_requested:
            self._helped(matches).print_help()
            return matches, NoError
        return matches, error

    def _helped(self, matches):
        """
        Return the deepest Command along the matched path whose help flag is set.
        """
        command, helped = self, self if matches.get_flag(HELP) else None
        while (pair := matches.subcommand()) is not None:
            name, matches = pair
            command = command.find(name)
            if matches.get_flag(HELP):
                helped = command
        return helped or self

    # ── Help ────────────────────────────────────────────────────────────────────

    def render_help(self, *, colorful=Unset):
        """
        Return the help of this level as a rich Text (`.plain` is the exact text).
        """
        return HelpRenderer(self, colorful=colorful).render()

    def print_help(self, *, colorful=Unset):
        """
        Write the help of this level to standard output.
        """
        console = Console(highlight=False, soft_wrap=True)
        console.print(self.render_help(colorful=colorful))

    # ── Introspection ───────────────────────────────────────────────────────────

    def __repr__(self):
        return f"command(name={self._name!r}, args={len(self._args)}, subcommands={len(self._subcommands)})"

    def __rich_repr__(self):
        yield "name", self._name
        yield "descr", self._descr
        yield "args", self.args
        yield "subcommands", self.subcommands
        yield "requires_subcommand", self._requires_subcommand
        yield "allows_extra_positionals", self._allows_extra_positionals


__all__ = (
    "Command",
)
