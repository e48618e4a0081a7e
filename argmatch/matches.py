"""
Argmatch results: the populated outcome of matching one Command level.

An ArgMatches maps argument names to value slots:
- flags:   name → bool
- values:  name → list[str] (raw tokens, in the order they were matched)
- at most one nested (subcommand name, ArgMatches) pair.

Lookups fall back to the declared defaults of the Command the matches were
produced for; a bare ArgMatches() (no declarations) simply has no defaults.

Typed lookups
- get_one(name, int) / get_many(name, float) convert raw strings with the given
  callable. bool is special-cased so that "false" converts to False.
- Conversion failures raise ConversionError (a ValueError). They indicate a
  mismatch between how the program declared and how it reads an argument,
  never bad user input, so they are not silently defaulted.
"""
from .faults import ConversionError

_BOOLEANS = {
    "true": True, "yes": True, "on": True, "1": True,
    "false": False, "no": False, "off": False, "0": False,
}


def _convert(name, value, type, /):
    """
    Convert one raw string with `type`, wrapping failures in ConversionError.
    """
    if type is str:
        return value
    if type is bool:
        try:
            return _BOOLEANS[value.strip().lower()]
        except KeyError:
            raise ConversionError(name, value, type) from None
    try:
        return type(value)
    except (TypeError, ValueError) as error:
        raise ConversionError(name, value, type) from error


class ArgMatches:
    """
    Typed result container populated by the matcher.

    Public API
    - get_flag(name) -> bool
    - get_one(name, type=str) -> value | None
    - get_many(name, type=str) -> list
    - subcommand() -> (name, ArgMatches) | None
    - contains(name) / `name in matches`: whether a value or flag was supplied

    Low-level population (used by the matcher, handy in tests)
    - set_flag(name, value=True), add_value(name, value), set_value(name, value),
      set_subcommand(name, matches)
    """

    def __init__(self, args=()):
        self._args = {arg.name: arg for arg in args}
        self._flags = {}
        self._values = {}
        self._subcommand = None

    # ── Population ──────────────────────────────────────────────────────────────

    def set_flag(self, name, value=True, /):
        self._flags[name] = bool(value)

    def add_value(self, name, value, /):
        self._values.setdefault(name, []).append(value)

    def set_value(self, name, value, /):
        """
        Replace every stored value of `name` with the single `value`.
        """
        self._values[name] = [value]

    def set_subcommand(self, name, matches, /):
        self._subcommand = (name, matches)

    # ── Lookup ──────────────────────────────────────────────────────────────────

    def contains(self, name, /):
        return name in self._flags or bool(self._values.get(name))

    def __contains__(self, name):
        return self.contains(name)

    def get_flag(self, name, /):
        """
        Return whether flag `name` was given.

        Falls back to a declared boolean default; anything that is not a flag
        (or is not declared at all) reads as False.
        """
        try:
            return self._flags[name]
        except KeyError:
            pass
        arg = self._args.get(name)
        if arg is not None and arg.is_flag and arg.has_default:
            return bool(arg.default)
        return False

    def get_one(self, name, /, type=str):
        """
        Return the first stored value of `name`, else its declared default
        (as a raw string), else None. With `type`, the raw string is converted.
        """
        if values := self._values.get(name):
            return _convert(name, values[0], type)
        arg = self._args.get(name)
        if arg is not None and not arg.is_flag and arg.has_default:
            return _convert(name, arg.raw_default(), type)
        return None

    def get_many(self, name, /, type=str):
        """
        Return every stored value of `name` (converted with `type`); [] when none.
        """
        return [_convert(name, value, type) for value in self._values.get(name, ())]

    def subcommand(self):
        """
        Return the matched (subcommand name, ArgMatches) pair, or None.

        The nested ArgMatches is owned by this one; it is not copied.
        """
        return self._subcommand

    @property
    def subcommand_name(self):
        return self._subcommand[0] if self._subcommand else None

    @property
    def help_requested(self):
        """
        True when the help flag was matched at this level or any nested level.
        """
        if self._flags.get("help", False):
            return True
        return self._subcommand is not None and self._subcommand[1].help_requested

    # ── Value semantics ─────────────────────────────────────────────────────────

    def __eq__(self, other):
        if not isinstance(other, ArgMatches):
            return NotImplemented
        return (
            self._flags == other._flags
            and self._values == other._values
            and self._subcommand == other._subcommand
        )

    __hash__ = None

    def __repr__(self):
        parts = [f"{name}={value!r}" for name, value in self._flags.items()]
        parts.extend(f"{name}={values!r}" for name, values in self._values.items())
        if self._subcommand:
            parts.append(f"subcommand={self._subcommand!r}")
        return f"ArgMatches({', '.join(parts)})"

    def __rich_repr__(self):
        yield from self._flags.items()
        yield from self._values.items()
        if self._subcommand:
            yield "subcommand", self._subcommand


__all__ = (
    "ArgMatches",
)
