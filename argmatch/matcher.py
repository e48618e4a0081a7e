"""
Argmatch matcher: the token-consumption state machine.

One Matcher walks the remaining tokens against ONE Command level and
recurses into a subcommand when a plain token names one. It is a pure
function of (Command tree, token list): declarations are only read, and
every run builds a fresh ArgMatches.

State per level
- cursor: index of the next unconsumed token.
- positional: index of the next unfilled positional (a multiple positional
  keeps the index, absorbing every later plain token).
- literal: set once a bare '--' is seen; from then on every token is a
  positional value, whatever it looks like.
- matches: the ArgMatches being populated for this level.

Token classification (before literal mode)
1. '--name' / '--name=value'   → long alias lookup (exact, case-sensitive)
2. '--'                         → enter literal mode (token is dropped)
3. '-x', '-xvalue', '-xyz'      → short alias lookup; clustered flags and
                                  attached option values are accepted
4. plain token naming a child   → dispatch; the rest belongs to the child
5. any other plain token        → next unfilled positional

Errors are returned, not raised; the first one stops matching at its level
and bubbles up unchanged, next to a best-effort ArgMatches.
"""
from .faults import *
from .logs import get_logger
from .matches import ArgMatches

logger = get_logger(__name__)


def _looks_like_switch(token, /):
    return len(token) >= 2 and token.startswith("-")


class Matcher:
    """
    Match `tokens` against the declarations of `command` (one level).

    Usage
        matches, error = Matcher(command, ["-v", "file.txt"]).run()
    """

    def __init__(self, command, tokens, /):
        self.command = command
        self.tokens = list(tokens)
        self.cursor = 0
        self.positional = 0
        self.literal = False
        self.matches = ArgMatches(command.args)

        args = command.args
        self._positionals = [arg for arg in args if arg.is_positional]
        self._longs = {arg.long: arg for arg in args if not arg.is_positional}
        self._shorts = {arg.short: arg for arg in args if arg.short}
        self._children = {child.name: child for child in command.subcommands}

    def run(self):
        """
        Consume every token, validate this level and return (ArgMatches, error).
        """
        error = self._scan()
        if not error and not self.matches.help_requested:
            error = self._validate()
        if error:
            logger.debug("match failed", command=self.command.name, code=error.code, reason=error.message)
        return self.matches, error

    # ── Scanning ────────────────────────────────────────────────────────────────

    def _scan(self):
        while self.cursor < len(self.tokens):
            token = self._next()

            if self.literal:
                error = self._bind_positional(token)
            elif token == "--":
                logger.debug("literal mode", command=self.command.name, index=self.cursor - 1)
                self.literal = True
                continue
            elif token.startswith("--"):
                error = self._match_long(token)
            elif _looks_like_switch(token):
                error = self._match_short(token)
            elif token in self._children:
                return self._dispatch(token)
            else:
                error = self._bind_positional(token)

            if error:
                return error
        return NoError

    def _next(self):
        token = self.tokens[self.cursor]
        self.cursor += 1
        return token

    def _match_long(self, token):
        name, separator, value = token[2:].partition("=")
        spelled = "--" + name
        try:
            arg = self._longs[name]
        except KeyError:
            return self._unknown(spelled)

        logger.debug("long switch", command=self.command.name, token=token, arg=arg.name)
        if separator:
            return self._bind_switch(arg, spelled, value)
        return self._bind_switch(arg, spelled)

    def _match_short(self, token):
        # '-vq' sets both flags; '-ofile' / '-o=file' attaches 'file' to option 'o'.
        index = 1
        while index < len(token):
            spelled = "-" + token[index]
            try:
                arg = self._shorts[token[index]]
            except KeyError:
                return self._unknown(spelled)

            logger.debug("short switch", command=self.command.name, token=token, arg=arg.name)
            rest = token[index + 1:]
            if not arg.is_flag:
                if rest:
                    return self._bind_switch(arg, spelled, rest.removeprefix("="))
                return self._bind_switch(arg, spelled)

            self.matches.set_flag(arg.name)
            if rest.startswith("="):
                return self._flag_value(arg, spelled)
            index += 1
        return NoError

    def _bind_switch(self, arg, spelled, inline=None, /):
        """
        Bind a matched flag/option, consuming value tokens as its kind requires.

        - flag: set to True; an inline value is an error.
        - option: an inline value is its (single) value for this occurrence;
          otherwise a non-multiple option takes exactly the next token and a
          multiple option greedily takes every following token up to the next
          switch-looking token, '--', or the end of input.
        """
        if arg.is_flag:
            if inline is not None:
                return self._flag_value(arg, spelled)
            self.matches.set_flag(arg.name)
            return NoError

        if inline is not None:
            self._store(arg, inline)
            return NoError

        if not arg.is_multiple:
            if self.cursor >= len(self.tokens):
                return self._missing_value(arg, spelled)
            self._store(arg, self._next())
            return NoError

        taken = 0
        while self.cursor < len(self.tokens):
            token = self.tokens[self.cursor]
            if token == "--" or _looks_like_switch(token):
                break
            self._store(arg, self._next())
            taken += 1
        if not taken:
            return self._missing_value(arg, spelled)
        return NoError

    def _store(self, arg, value):
        if arg.is_multiple:
            self.matches.add_value(arg.name, value)
        else:
            # a repeated single-value option keeps the last occurrence
            self.matches.set_value(arg.name, value)

    def _bind_positional(self, token):
        if self.positional < len(self._positionals):
            arg = self._positionals[self.positional]
            self.matches.add_value(arg.name, token)
            if not arg.is_multiple:
                self.positional += 1
            return NoError

        if self.command.allows_extra_positionals:
            logger.debug("extra positional ignored", command=self.command.name, token=token)
            return NoError
        return UnexpectedPositionalError(
            "Unexpected positional argument '%s' for command '%s'" % (token, self.command.name),
            command=self.command.name,
            token=token,
            hint="remove this extra value or run '%s --help' to see the expected usage" % self.command.name,
        )

    def _dispatch(self, name):
        child = self._children[name]
        rest = self.tokens[self.cursor:]
        self.cursor = len(self.tokens)

        logger.debug("dispatch", command=self.command.name, subcommand=name, tokens=len(rest))
        matches, error = type(self)(child, rest).run()
        self.matches.set_subcommand(name, matches)
        return error

    # ── Validation ──────────────────────────────────────────────────────────────

    def _validate(self):
        for arg in self.command.args:
            if arg.is_required and not self.matches.contains(arg.name):
                return MissingRequiredArgumentError(
                    "Missing required argument '%s' for command '%s'" % (arg.name, self.command.name),
                    command=self.command.name,
                    argument=arg.name,
                    hint="add %s or run '%s --help' to see the expected usage" % (
                        arg.spelling(), self.command.name
                    ),
                )

        if self.command.requires_subcommand and self.matches.subcommand() is None:
            return MissingRequiredSubcommandError(
                "Missing required subcommand for command '%s'" % self.command.name,
                command=self.command.name,
                hint="run '%s --help' to see available commands" % self.command.name,
            )
        return NoError

    # ── Fault builders ──────────────────────────────────────────────────────────

    def _unknown(self, spelled):
        return UnknownArgumentError(
            "Unknown argument '%s' for command '%s'" % (spelled, self.command.name),
            command=self.command.name,
            token=spelled,
            hint="use '--' before values that start with '-', or run '%s --help' to see all options" % (
                self.command.name
            ),
        )

    def _missing_value(self, arg, spelled):
        return MissingValueError(
            "Missing value for argument '%s' for command '%s'" % (arg.name, self.command.name),
            command=self.command.name,
            token=spelled,
            argument=arg.name,
            hint="pass a value after %s (for example: %s <%s>)" % (spelled, spelled, arg.metavar or arg.name),
        )

    def _flag_value(self, arg, spelled):
        return FlagValueError(
            "Flag '%s' does not take a value for command '%s'" % (arg.name, self.command.name),
            command=self.command.name,
            token=spelled,
            argument=arg.name,
            hint="remove everything from '=' (for example: %s)" % spelled,
        )


__all__ = (
    "Matcher",
)
