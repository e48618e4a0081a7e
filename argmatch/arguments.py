r"""
Argmatch argument descriptors.

Overview
- Arg: immutable descriptor of one declared argument.
  • Flag: presence-only switch (e.g., -v/--verbose); never carries a value.
  • Option: named switch that consumes the following token(s) as its value(s).
  • Positional: identified by position rather than a leading marker.
- arg(spec): compact-spec parser ("-v --verbose", "<file>", "[count]", ...).
- Char: one-character string default, rendered in single quotes by help.

Builder
- Arg.flag(name) / Arg.option(name) / Arg.positional(name) create a descriptor;
  configuration methods return a NEW descriptor (the receiver is never changed):

    >>> verbose = Arg.flag("verbose").short_alias("v").about("Enable verbose mode")
    >>> fps = Arg.option("fps").short_alias("f").value_name("fps").default_value(60)
    >>> files = Arg.positional("files").multiple()

- Values are read back through read-only properties:
  kind, name, short, long, descr, metavar, default, is_required, is_multiple.

Defaults (tagged by Python type)
- absent (Unset), bool, int, float, str and Char. Anything else is rejected.
- Flags only accept bool defaults.

Validation highlights (programmer errors, raised immediately)
- name: non-empty, no whitespace, must not start with '-' and must not contain '='.
- short alias: exactly one ASCII letter.
- Positionals never carry short/long aliases; Flags never carry a value name.

Cross-argument rules (unique names/aliases, last multiple positional) belong to
the owning Command and are checked when the Arg is attached to it.
"""
import copy
import enum
import functools
import operator
import re

from .utils import *


class ArgKind(enum.Enum):
    """
    Discriminates how an Arg binds tokens.

    - FLAG: boolean, present or absent.
    - OPTION: named, consumes following token(s).
    - POSITIONAL: bound by declaration order.
    """
    FLAG = "flag"
    OPTION = "option"
    POSITIONAL = "positional"

    def __repr__(self):
        return f"{type(self).__name__}.{self.name}"


class Char(str):
    """
    One-character string default.

    Behaves as a plain str everywhere, but help renders it in single quotes
    ('x') instead of the double quotes used for ordinary strings ("x").
    """
    __slots__ = ()

    def __new__(cls, value):
        if not isinstance(value, str):
            raise TypeError("char default must be a string")
        if len(value) != 1:
            raise ValueError("char default must be exactly one character")
        return super().__new__(cls, value)

    def __repr__(self):
        return f"Char({str(self)!r})"


def _render_default(value, /):
    """
    Help-text form of a default: strings in double quotes, chars in single quotes,
    booleans lowercased, everything else unquoted.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Char):
        return f"'{value}'"
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def _raw_default(value, /):
    """
    Raw-token form of a default, as if it had been typed on the command line.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ArgumentType(type):
    """
    Metaclass that turns the descriptor class into an introspectable, read-only type.

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private backing field ("_" + name), see mirror().
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics (rich.pretty understands __rich_repr__).
    - __typename__ is derived from the class name and used in messages.
    """
    __introspectable__ = ()

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
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_identity(cls, metadata, /):
    """
    Internal: validate kind/name/aliases.

    Rules
    - kind must be an ArgKind.
    - name must be a non-empty string (trimmed) without whitespace or '=',
      and must not start with '-'.
    - short: None or exactly one ASCII letter.
    - long: None or a valid name; defaults to `name` for flags and options.
    - positionals cannot have any alias.
    """
    if not isinstance(kind := metadata["kind"], ArgKind):
        raise TypeError(f"{cls.__typename__} 'kind' must be an argument kind")

    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\s=\-][^\s=]*", name):
        raise ValueError(f"{cls.__typename__} 'name' {name!r} is not a valid argument name")
    metadata["name"] = name

    short = coalesce(metadata["short"])
    long = coalesce(metadata["long"])

    if kind is ArgKind.POSITIONAL:
        if short is not None or long is not None:
            raise TypeError(f"positional {cls.__typename__} {name!r} cannot have aliases")
        metadata["short"] = metadata["long"] = None
        return

    if short is not None:
        if not isinstance(short, str):
            raise TypeError(f"{cls.__typename__} short alias must be a string")
        if not re.fullmatch(r"[A-Za-z]", short):
            raise ValueError(f"{cls.__typename__} short alias {short!r} must be a single letter")

    long = name if long is None else long
    if not isinstance(long, str):
        raise TypeError(f"{cls.__typename__} long alias must be a string")
    elif not re.fullmatch(r"[^\s=\-][^\s=]*", long := long.strip()):
        raise ValueError(f"{cls.__typename__} long alias {long!r} is not a valid alias")

    metadata["short"] = short
    metadata["long"] = long


def _sanitize_payload(cls, metadata, /):
    """
    Internal: validate descr/metavar/default/required/multiple.

    Rules
    - descr: string (may be empty).
    - metavar: None or non-empty string; forbidden on flags.
    - default: Unset or one of bool/int/float/str (Char included); flags accept bool only.
    - required/multiple: coerced to bool.
    """
    if not isinstance(descr := metadata["descr"], str):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = descr.strip()

    kind = metadata["kind"]
    metavar = coalesce(metadata["metavar"])
    if metavar is not None:
        if kind is ArgKind.FLAG:
            raise TypeError(f"flag {cls.__typename__} {metadata['name']!r} cannot have a value name")
        if not isinstance(metavar, str):
            raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
        elif not (metavar := metavar.strip()):
            raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = metavar

    default = metadata["default"]
    if default is not Unset:
        if kind is ArgKind.FLAG and not isinstance(default, bool):
            raise TypeError(f"flag {cls.__typename__} {metadata['name']!r} default must be a boolean")
        if not isinstance(default, bool | int | float | str):
            raise TypeError(
                f"{cls.__typename__} default must be a bool, int, float, str or char, not {type(default).__name__}"
            )

    metadata["required"] = bool(metadata["required"])
    metadata["multiple"] = bool(metadata["multiple"])


class Arg(metaclass=ArgumentType):
    """
    Immutable descriptor of one declared argument.

    Fields (read-only properties)
    - kind: ArgKind
    - name: str, unique within the owning Command.
    - short: str | None, single-letter alias (flags/options only).
    - long: str | None, long alias; defaults to name for flags/options, None for positionals.
    - descr: str, help text ("about").
    - metavar: str | None, value display hint for options/positionals.
    - default: Unset | bool | int | float | str | Char.
    - is_required: bool
    - is_multiple: bool

    Construction
    - Prefer the named factories Arg.flag/option/positional or arg(spec).
    - Every configuration method returns a new Arg via copy.replace().
    """

    __introspectable__ = (
        "kind",
        "name",
        "short",
        "long",
        "descr",
        "metavar",
        "default",
        "is_required",
        "is_multiple",
    )

    def __new__(
            cls,
            kind,
            name,
            /,
            short=Unset,
            long=Unset,
            descr="",
            metavar=Unset,
            default=Unset,
            required=False,
            multiple=False,
    ):
        metadata = {
            "kind": kind,
            "name": name,
            "short": short,
            "long": long,
            "descr": descr,
            "metavar": metavar,
            "default": default,
            "required": required,
            "multiple": multiple,
        }
        _sanitize_identity(cls, metadata)
        _sanitize_payload(cls, metadata)

        self = super().__new__(cls)
        self._kind = metadata["kind"]
        self._name = metadata["name"]
        self._short = metadata["short"]
        self._long = metadata["long"]
        self._descr = metadata["descr"]
        self._metavar = metadata["metavar"]
        self._default = metadata["default"]
        self._is_required = metadata["required"]
        self._is_multiple = metadata["multiple"]
        return self

    # ── Named factories ─────────────────────────────────────────────────────────

    @classmethod
    def flag(cls, name, /):
        return cls(ArgKind.FLAG, name)

    @classmethod
    def option(cls, name, /):
        return cls(ArgKind.OPTION, name)

    @classmethod
    def positional(cls, name, /):
        return cls(ArgKind.POSITIONAL, name)

    # ── Value-returning configuration ───────────────────────────────────────────

    def short_alias(self, alias, /):
        return copy.replace(self, short=alias)

    def long_alias(self, alias, /):
        return copy.replace(self, long=alias)

    def about(self, text, /):
        return copy.replace(self, descr=text)

    def value_name(self, name, /):
        return copy.replace(self, metavar=name)

    def default_value(self, value, /):
        return copy.replace(self, default=value)

    def required(self, required=True, /):
        return copy.replace(self, required=required)

    def multiple(self, multiple=True, /):
        return copy.replace(self, multiple=multiple)

    # ── Derived views ───────────────────────────────────────────────────────────

    @property
    def is_flag(self):
        return self._kind is ArgKind.FLAG

    @property
    def is_option(self):
        return self._kind is ArgKind.OPTION

    @property
    def is_positional(self):
        return self._kind is ArgKind.POSITIONAL

    @property
    def has_default(self):
        return self._default is not Unset

    def render_default(self):
        """
        Return the help-text rendering of the default value, or None when absent.
        """
        return _render_default(self._default) if self.has_default else None

    def raw_default(self):
        """
        Return the default as a raw token string, or None when absent.
        """
        return _raw_default(self._default) if self.has_default else None

    def spelling(self):
        """
        Return the "-x, --long <value>" rendering used by help and diagnostics.

        Positionals render as their usage form ("<name>", "[name]", with a
        trailing "..." when multiple).
        """
        if self.is_positional:
            label = f"<{self._name}>" if self._is_required else f"[{self._name}]"
            return label + "..." * self._is_multiple
        parts = []
        if self._short:
            parts.append("-" + self._short)
        parts.append("--" + self._long)
        spelling = ", ".join(parts)
        if self._metavar:
            spelling += f" <{self._metavar}>"
        return spelling

    # ── Value semantics ─────────────────────────────────────────────────────────

    def _fields(self):
        return tuple(getattr(self, "_" + name) for name in type(self).__introspectable__)

    def __eq__(self, other):
        if not isinstance(other, Arg):
            return NotImplemented
        # bool/int and str/Char compare equal in Python; keep the tag distinct.
        return self._fields() == other._fields() and type(self._default) is type(other._default)

    def __hash__(self):
        return hash(self._fields())

    def __replace__(self, **changes):
        fields = {
            "short": self._short,
            "long": self._long if not self.is_positional else None,
            "descr": self._descr,
            "metavar": self._metavar,
            "default": self._default,
            "required": self._is_required,
            "multiple": self._is_multiple,
        } | changes
        return type(self)(self._kind, changes.get("name", self._name), **{
            name: value for name, value in fields.items() if name != "name"
        })

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


# Compact-spec grammar pieces (see arg()).
_POSITIONAL = re.compile(r"(?:<(?P<required>[^\s<>\[\]]+)>|\[(?P<optional>[^\s<>\[\]]+)\])(?P<multiple>\.\.\.)?")
_SHORT = re.compile(r"-(?P<alias>[A-Za-z])")
_LONG = re.compile(r"--(?P<alias>[^\s=\-][^\s=]*)")
_VALUE = re.compile(r"<(?P<metavar>[^\s<>]+)>")


def arg(spec, /):
    """
    Build an Arg from a compact, usage-like spec string.

    Forms
    - "-v --verbose"        → Flag 'verbose' (short 'v', long 'verbose')
    - "-v" / "--verbose"    → Flag named after the only alias
    - "-o --output <file>"  → Option 'output' with value name 'file'
    - "<name>"              → required Positional 'name'
    - "[name]"              → optional Positional 'name'
    - "<files>..."          → Positional 'files' accepting multiple values

    Raises
    - TypeError: spec is not a string.
    - ValueError: malformed spec (unknown token, repeated alias, missing alias,
      value placeholder not last, ...). These are programmer errors.
    """
    if not isinstance(spec, str):
        raise TypeError("arg() argument must be a string")
    if not (tokens := spec.split()):
        raise ValueError("arg() argument cannot be empty")

    if len(tokens) == 1 and (match := _POSITIONAL.fullmatch(tokens[0])):
        return Arg(
            ArgKind.POSITIONAL,
            match["required"] or match["optional"],
            required=match["required"] is not None,
            multiple=match["multiple"] is not None,
        )

    short = long = metavar = Unset
    for index, token in enumerate(tokens):
        if match := _SHORT.fullmatch(token):
            if short is not Unset:
                raise ValueError(f"arg() spec {spec!r} declares more than one short alias")
            short = match["alias"]
        elif match := _LONG.fullmatch(token):
            if long is not Unset:
                raise ValueError(f"arg() spec {spec!r} declares more than one long alias")
            long = match["alias"]
        elif (match := _VALUE.fullmatch(token)) and index == len(tokens) - 1 and index > 0:
            metavar = match["metavar"]
        else:
            raise ValueError(f"arg() spec {spec!r} has a malformed token {token!r}")

    if short is Unset and long is Unset:
        raise ValueError(f"arg() spec {spec!r} must declare a short or a long alias")

    return Arg(
        ArgKind.OPTION if metavar is not Unset else ArgKind.FLAG,
        coalesce(long, short),
        short=short,
        long=long,
        metavar=metavar,
    )


__all__ = (
    "ArgKind",
    "Arg",
    "Char",
    "arg",
)

# The metaclass is an implementation detail of Arg.
del ArgumentType
