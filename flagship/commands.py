"""
Flagship command layer: declare a CLI surface, parse tokens, query results.

What this module provides
- Scope: everything one command level owns (flags, positionals, subcommands,
  examples) plus the token scanner shared by both levels.
- Parser: the top-level dispatcher. Entry points parse() and parse_argv().
- Subcommand: a nested scope selected by a bare token matching its name.

Parsing in one paragraph
- Tokens are scanned left to right in NORMAL state. A literal "--" switches the
  scope to AFTER_DOUBLE_DASH for the rest of its tokens, where everything is a
  positional. A token not starting with "-" either selects a subcommand (the
  child then scans the remaining tokens) or fills the next positional slot.
  Anything else is a flag: --name, --name=value or -s. A non-boolean flag takes
  the next token as its value unless that token starts with "-"; a boolean flag
  takes it only when it is a boolean literal and defaults to "true" otherwise.
- The first failure aborts the pass and is returned untouched as Result.err.
- After the scan, required flags and positionals are checked. A requested
  --help or --version skips those checks.

Quick start
    from flagship import Parser, Result, Error

    parser = Parser("serve", "1.2.0", "Tiny file server")
    parser.add_help_flag().add_version_flag()
    parser.flag("port", "Port to listen on", type=int).set_short_name("p").set_default(8080)
    parser.positional("root", "Directory to serve", required=False)

    result = parser.parse(["-p", "9000", "./public"])
    if not result:
        print(result.error.message)
    parser.get("port", int)   # 9000

Design notes
- Every parse resets the whole tree first: values go back to their defaults,
  selections and help/version markers are cleared.
- The short-name index is rebuilt at the start of each scan, so short names may
  be assigned fluently after a flag was declared.
- Subcommands hold no reference to their parent; help for a nested scope is
  rendered with the name chain passed down as a value (see Parser.format_help).
"""
import enum
import logging
import re
import shlex
import sys
from collections.abc import Iterable

from . import rendering
from .converters import BOOLEAN_LITERALS
from .descriptors import Flag, Positional
from .faults import Error
from .registry import Entry
from .results import Result
from .utils import *

logger = logging.getLogger(__name__)

_NAME = re.compile(r"[^\W_][\w-]*")


class _State(enum.Enum):
    NORMAL = "normal"
    AFTER_DOUBLE_DASH = "after-double-dash"


class Scope:
    """
    one command level: declarations, scanner and query interface.

    read-only properties
    - name, descr: identity used by help output.
    - flags: mapping long name → Entry, in declaration order.
    - positionals: tuple of Entry, in declaration order.
    - subcommands: mapping name → Subcommand, in declaration order.
    - examples: tuple of (description, command) pairs.
    - required_subcommands: 0 (optional) or -1 (exactly one required).
    - selected: name of the selected subcommand, or None.
    - parsed, help_requested, version_requested: markers of the last parse.
    """
    _help_descr = "Display this help message"

    name = mirror("name")
    descr = mirror("descr")
    flags = mirror("flags")
    positionals = mirror("positionals")
    subcommands = mirror("subcommands")
    examples = mirror("examples")
    required_subcommands = mirror("required_subcommands")
    selected = mirror("selected")
    parsed = mirror("parsed")
    help_requested = mirror("help_requested")
    version_requested = mirror("version_requested")

    def __init__(self, name, descr=""):
        typename = type(self).__name__.lower()
        if not isinstance(name, str):
            raise TypeError(f"{typename} 'name' must be a string")
        if not name.strip():
            raise ValueError(f"{typename} 'name' cannot be empty")
        if not isinstance(descr, str):
            raise TypeError(f"{typename} 'descr' must be a string")

        self._name = name
        self._descr = descr.strip()
        self._flags = {}
        self._shorts = {}
        self._positionals = []
        self._subcommands = {}
        self._examples = []
        self._required_subcommands = 0
        self._fallthrough = False
        self._selected = None
        self._parsed = False
        self._help_requested = False
        self._version_requested = False

    def __repr__(self):
        return f"{type(self).__name__}({self._name!r})"

    def __rich_repr__(self):
        yield self._name
        yield "flags", tuple(self._flags)
        yield "positionals", tuple(entry.name for entry in self._positionals)
        yield "subcommands", tuple(self._subcommands)
        yield "selected", self._selected, None

    # --- declaration ---

    def flag(self, long_name, descr="", /, type=str, **fields):
        """
        declare a flag and return its descriptor for fluent configuration.

        fields: short_name, required, default, choices, validator, long_descr

        raises
        - ValueError: the long name (or the given short name) is already in use.
        """
        if long_name in self._flags:
            raise ValueError(f"flag name '--{long_name}' is already in use")
        flag = Flag(long_name, descr, type=type, **fields)
        if flag.short_name is not Unset:
            for entry in self._flags.values():
                if entry.get_short_name() == flag.short_name:
                    raise ValueError(f"flag short name '-{flag.short_name}' is already in use by '--{entry.name}'")
        self._flags[long_name] = Entry(flag)
        return flag

    def positional(self, name, descr="", /, required=True, type=str, **fields):
        """
        declare the next positional and return its descriptor.

        positionals are filled strictly in declaration order.
        """
        if any(entry.name == name for entry in self._positionals):
            raise ValueError(f"positional name {name!r} is already in use")
        positional = Positional(name, descr, required, type=type, **fields)
        self._positionals.append(Entry(positional))
        return positional

    def subcommand(self, name, descr="", /):
        """
        declare a nested subcommand and return it.
        """
        if not isinstance(name, str):
            raise TypeError("subcommand 'name' must be a string")
        if not _NAME.fullmatch(name):
            raise ValueError(f"subcommand 'name' must be a bare word without leading dashes, got {name!r}")
        if name in self._subcommands:
            raise ValueError(f"subcommand name {name!r} is already in use")
        self._subcommands[name] = subcommand = Subcommand(name, descr)
        return subcommand

    def example(self, descr, command, /):
        """
        add a usage example shown at the bottom of the help output.
        """
        if not isinstance(descr, str) or not isinstance(command, str):
            raise TypeError("example 'descr' and 'command' must be strings")
        self._examples.append((descr, command))
        return self

    def add_help_flag(self):
        self.flag("help", self._help_descr, type=bool, short_name="h")
        return self

    def require_subcommand(self, count=-1, /):
        """
        require a subcommand to be selected (-1 means exactly one).

        0 makes subcommands optional again.
        """
        if not isinstance(count, int) or isinstance(count, bool):
            raise TypeError("required subcommand count must be an integer")
        if count not in (-1, 0):
            raise ValueError(f"required subcommand count must be -1 or 0, got {count}")
        self._required_subcommands = count
        return self

    # --- queries ---

    def get(self, name, type=Unset, /):
        """
        return the value of flag `name`, or None.

        when `type` is given and differs from the declared value type, None is
        returned as well.
        """
        entry = self._flags.get(name)
        if entry is None or not entry.has_value():
            return None
        if type is not Unset and entry.descriptor.type is not type:
            return None
        return entry.descriptor.value

    def has(self, name, /):
        entry = self._flags.get(name)
        return entry is not None and entry.has_value()

    def get_positional(self, key, type=Unset, /):
        """
        return a positional value by zero-based index or by declared name.
        """
        if isinstance(key, int) and not isinstance(key, bool):
            entry = self._positionals[key] if 0 <= key < len(self._positionals) else None
        elif isinstance(key, str):
            entry = next((entry for entry in self._positionals if entry.name == key), None)
        else:
            raise TypeError("get_positional() key must be an index or a name")
        if entry is None or not entry.has_value():
            return None
        if type is not Unset and entry.descriptor.type is not type:
            return None
        return entry.descriptor.value

    def get_subcommand(self, name, /):
        return self._subcommands.get(name)

    # --- parsing ---

    def _reset(self):
        for entry in self._flags.values():
            entry.reset()
        for entry in self._positionals:
            entry.reset()
        self._selected = None
        self._parsed = False
        self._help_requested = False
        self._version_requested = False
        for subcommand in self._subcommands.values():
            subcommand._reset()

    def _index_short_names(self):
        self._shorts.clear()
        for name, entry in self._flags.items():
            if (short := entry.get_short_name()) is None:
                continue
            if short in self._shorts:
                raise ValueError(f"flag short name '-{short}' is used by both '--{self._shorts[short]}' and '--{name}'")
            self._shorts[short] = name

    def _scan(self, tokens, start):
        """
        scan tokens[start:] against this scope.

        returns
        - Result.ok(index): index of the first token this scope did not consume.
          equals len(tokens) unless a fallthrough subcommand handed control back.
        - Result.err(error): the first failure met.
        """
        self._index_short_names()
        state = _State.NORMAL
        cursor = 0
        descended = False
        index = start

        while index < len(tokens):
            token = tokens[index]

            if state is _State.NORMAL and token == "--":
                state = _State.AFTER_DOUBLE_DASH
                index += 1
                continue

            # Positionals and subcommands. Empty tokens land here as text values.
            if state is _State.AFTER_DOUBLE_DASH or not token.startswith("-"):
                if state is _State.NORMAL and not descended and token in self._subcommands:
                    result = self._descend(token, tokens, index + 1)
                    if not result:
                        return result
                    descended = True
                    index = result.value
                    continue

                if cursor >= len(self._positionals):
                    if self._fallthrough:
                        logger.debug("%s hands %r back to its parent", self, token)
                        return Result.ok(index)
                    return Result.err(Error.too_many_positionals(token))

                result = self._positionals[cursor].set_value(token)
                if not result:
                    return result
                cursor += 1
                index += 1
                continue

            # Flags
            if token.startswith("--"):
                name, separator, inline = token[2:].partition("=")
                inline = inline if separator else None
                entry = self._flags.get(name)
            else:
                name = self._shorts.get(token[1:])
                inline = None
                entry = self._flags.get(name) if name is not None else None

            if entry is None:
                if self._fallthrough:
                    logger.debug("%s hands %r back to its parent", self, token)
                    return Result.ok(index)
                return Result.err(Error.unknown_flag(token))

            if entry.name == "help":
                self._help_requested = True
            elif entry.name == "version":
                self._version_requested = True

            index += 1
            value = inline
            if value is None and index < len(tokens) and not tokens[index].startswith("-"):
                if not entry.is_boolean() or tokens[index] in BOOLEAN_LITERALS:
                    value = tokens[index]
                    index += 1

            if value is None:
                if not entry.is_boolean():
                    return Result.err(Error.missing_flag_value(entry.name))
                value = "true"

            result = entry.set_value(value)
            if not result:
                return result

        return Result.ok(index)

    def _descend(self, name, tokens, index):
        subcommand = self._subcommands[name]
        self._selected = name
        logger.debug("%s selects subcommand %r at token %d", self, name, index)
        result = subcommand._scan(tokens, index)
        if not result:
            return result
        subcommand._parsed = True
        return result

    def _validate_requirements(self):
        for entry in self._flags.values():
            if entry.is_required() and not entry.has_value():
                return Result.err(Error.missing_required_flag(entry.name))
        for entry in self._positionals:
            if entry.is_required() and not entry.has_value():
                return Result.err(Error.missing_required_positional(entry.name))
        return Result.ok()

    def _validate(self):
        if self._help_requested or self._version_requested:
            return Result.ok()
        if self._required_subcommands and self._selected is None:
            return Result.err(Error.missing_subcommand())
        return self._validate_requirements()

    def _finish(self):
        """
        settle the selected subcommand path below this scope.

        deepest scope first: a requested help propagates upward and ends
        settlement successfully; otherwise each selected subcommand validates
        its own requirements and then runs its callback.
        """
        if self._help_requested or self._version_requested:
            return Result.ok()

        subcommand = self._subcommands[self._selected]
        if subcommand._selected is not None:
            result = subcommand._finish()
            if not result:
                return result

        if subcommand._help_requested:
            self._help_requested = True
            return Result.ok()

        result = subcommand._validate()
        if not result:
            return result
        subcommand._run_callback()
        return Result.ok()

    def _parse_tokens(self, tokens):
        logger.debug("%s parsing %d token(s)", self, len(tokens))
        self._reset()

        result = self._scan(tokens, 0)
        if not result:
            logger.debug("%s parse failed: %s", self, result.error)
            return Result.err(result.error)
        self._parsed = True

        if self._selected is not None:
            result = self._finish()
        else:
            result = self._validate()

        if result:
            logger.debug("%s parse succeeded", self)
        else:
            logger.debug("%s parse failed: %s", self, result.error)
        return result


class Subcommand(Scope):
    """
    nested scope selected by a bare token matching its name.

    extras over Scope
    - set_callback(fn): fn(subcommand) runs once the subcommand's own
      requirements validated after a successful parse.
    - set_fallthrough(): unknown flags and surplus positionals are handed back
      to the parent scope instead of failing here.
    """
    _help_descr = "Display help for this subcommand"

    fallthrough = mirror("fallthrough")

    def __init__(self, name, descr=""):
        super().__init__(name, descr)
        self._callback = Unset

    def set_callback(self, callback, /):
        if not callable(callback):
            raise TypeError("subcommand callback must be callable")
        self._callback = callback
        return self

    def set_fallthrough(self, fallthrough=True, /):
        if not isinstance(fallthrough, bool):
            raise TypeError("subcommand 'fallthrough' must be a boolean")
        self._fallthrough = fallthrough
        return self

    def _run_callback(self):
        if self._callback is not Unset:
            logger.debug("%s running callback", self)
            self._callback(self)


class Parser(Scope):
    """
    top-level dispatcher for one application.

    parameters
    - name: program name used in help, version and error output.
    - version: version string shown by format_version() (optional).
    - descr: one-line description shown under the help header.
    - colorful / fancy: presentation switches forwarded to flagship.rendering.
    """
    version = mirror("version")
    colorful = mirror("colorful")
    fancy = mirror("fancy")

    def __init__(self, name, version=None, descr="", *, colorful=False, fancy=False):
        super().__init__(name, descr)
        if version is not None and not isinstance(version, str):
            raise TypeError("parser 'version' must be a string")
        if not isinstance(colorful, bool) or not isinstance(fancy, bool):
            raise TypeError("parser 'colorful' and 'fancy' must be booleans")
        self._version = version
        self._colorful = colorful
        self._fancy = fancy

    def add_version_flag(self):
        self.flag("version", "Display version information", type=bool, short_name="V")
        return self

    def parse(self, prompt=Unset, /):
        """
        parse a command line and return Result.ok() or Result.err(error).

        prompt
        - Unset: read sys.argv[1:].
        - str: split with shlex.split.
        - Iterable[str]: used verbatim as the token sequence.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("parse() tokens must be strings")
        else:
            raise TypeError("parse() argument must be a string or an iterable of strings")
        return self._parse_tokens(tokens)

    def parse_argv(self, argv, /):
        """
        parse a raw process argument vector; argv[0] (the program path) is dropped.
        """
        argv = list(argv)
        return self.parse(argv[1:])

    def chain(self):
        """
        return the selected path from this parser down, as a tuple of scopes.
        """
        scopes = [self]
        while (selected := scopes[-1].selected) is not None:
            scopes.append(scopes[-1].get_subcommand(selected))
        return tuple(scopes)

    def _locate(self, path):
        scopes = [self]
        for name in path:
            subcommand = scopes[-1].get_subcommand(name)
            if subcommand is None:
                raise LookupError(f"no subcommand {name!r} under {' '.join(scope.name for scope in scopes)!r}")
            scopes.append(subcommand)
        return scopes

    def render_help(self, *path):
        """
        rich renderable with the help of the scope at `path` (subcommand names).
        """
        scopes = self._locate(path)
        return rendering.render_help(
            scopes[-1],
            tuple(scope.name for scope in scopes),
            colorful=self._colorful,
            fancy=self._fancy,
        )

    def format_help(self, *path):
        """
        plain-text help of the scope at `path`; colour follows `colorful`.
        """
        scopes = self._locate(path)
        return rendering.format_help(
            scopes[-1],
            tuple(scope.name for scope in scopes),
            colorful=self._colorful,
            fancy=self._fancy,
        )

    def format_version(self):
        return rendering.format_version(self, colorful=self._colorful)


__all__ = (
    "Scope",
    "Parser",
    "Subcommand",
)
