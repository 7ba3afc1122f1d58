"""
Flagship rendering: help, version and error output built with rich.

Scope
- describe_flag / describe_positional: one help entry per argument.
- render_help(scope, chain): full help block for a Parser or Subcommand.
- render_version(parser): "<name> v<version>".
- render_error(error, prog): header + message + hint, mirroring the help palette.
- format_help / format_version / format_error: the same, as plain strings.

Rendering reads the declared schema only; it never influences parsing.

Colour
- colorful is an explicit argument everywhere. Nothing here probes the terminal;
  callers (see flagship.runner) decide, which keeps output testable.
- The palette can be overridden with a __styles__ mapping in __main__.
- fancy=True wraps help and errors in a rich Panel.
"""
import io
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .faults import ErrorKind

INDENT = " " * 4
DETAIL_INDENT = " " * 8


def _stylist(colorful):
    """
    build the (styler, text) helper pair for one render.

    palette keys
    - program-name, program-version, description-section
    - section-label, usage-section
    - flag-name, positional-name, required-marker, argument-description, argument-meta
    - subcommand-name, subcommand-description, footer
    - example-description, example-command
    - code, error-title, error-message, hint-arrow, hint
    - panel-title
    """
    styles = defaultdict(str, {
        # === Head ===
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "program-version": "bold #00E6FF",  # CYAN version
        "description-section": "italic #A3A3A3",

        # === Sections ===
        "section-label": "bold #FFFFFF",
        "usage-section": "bold #36C5F0",

        # === Arguments ===
        "flag-name": "bold #00E6FF",
        "positional-name": "bold #FFD600",
        "required-marker": "bold #EF4444",
        "argument-description": "#9CA3AF",
        "argument-meta": "#737373",

        # === Subcommands / examples ===
        "subcommand-name": "bold #36C5F0",
        "subcommand-description": "#9CA3AF",
        "footer": "#737373",
        "example-description": "#E5E7EB",
        "example-command": "#22C55E",

        # === Errors ===
        "code": "bold #00E5FF",
        "error-title": "bold #FF4DA6",
        "error-message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _console(colorful, width):
    return Console(
        file=io.StringIO(),
        width=width,
        color_system="truecolor" if colorful else None,
        force_terminal=colorful,
        highlight=False,
        emoji=False,
    )


def _capture(renderable, colorful, width):
    console = _console(colorful, width)
    console.print(renderable)
    return console.file.getvalue()


def describe_flag(flag, /, colorful=False):
    """
    help entry for a flag.

    layout
        -p, --port (required)
            Port to listen on
            <long description, when set>
            [default: 8080] [choices: 80, 8080]
    """
    styler, text = _stylist(colorful)

    line = Text(INDENT)
    if flag.short_name:
        line.append(text("-" + flag.short_name, styler("flag-name"))).append(", ")
    line.append(text("--" + flag.long_name, styler("flag-name")))
    if not flag.is_boolean:
        line.append(" ").append(text(f"<{flag.type.__name__}>", styler("argument-meta")))
    if flag.required:
        line.append(" ").append(text("(required)", styler("required-marker")))

    details = []
    if flag.descr:
        details.append(text(flag.descr, styler("argument-description")))
    if flag.long_descr:
        details.append(text(flag.long_descr, styler("argument-description")))

    meta = []
    if flag.has_default and not flag.is_boolean:
        meta.append(f"[default: {flag.default}]")
    if flag.choices:
        meta.append(f"[choices: {', '.join(map(str, flag.choices))}]")
    if meta:
        details.append(text(" ".join(meta), styler("argument-meta")))

    for detail in details:
        line.append("\n").append(DETAIL_INDENT).append(detail)
    return line


def describe_positional(positional, /, colorful=False):
    """
    help entry for a positional: <name> when required, [name] otherwise.
    """
    styler, text = _stylist(colorful)

    label = f"<{positional.name}>" if positional.required else f"[{positional.name}]"
    line = Text(INDENT).append(text(label, styler("positional-name")))
    if positional.descr:
        line.append("\n").append(DETAIL_INDENT).append(text(positional.descr, styler("argument-description")))
    return line


def _usage(scope, chain, styler, text):
    usage = Text(INDENT)
    usage.append(text(" ".join(chain), styler("program-name")))
    if scope.flags:
        usage.append(" ").append(text("[OPTIONS]", styler("usage-section")))
    for entry in scope.positionals:
        label = f"<{entry.name}>" if entry.is_required() else f"[{entry.name}]"
        usage.append(" ").append(text(label, styler("positional-name")))
    if scope.subcommands:
        label = "<SUBCOMMAND>" if scope.required_subcommands else "[SUBCOMMAND]"
        usage.append(" ").append(text(label, styler("usage-section")))
    return usage


def render_help(scope, chain=(), /, *, colorful=False, fancy=False):
    """
    build the help block for a Parser or Subcommand.

    parameters
    - chain: names from the root down to scope (e.g. ("git", "remote", "add")).
      defaults to (scope.name,); passed as a plain value so subcommands never
      need a reference to their parent.
    """
    styler, text = _stylist(colorful)
    chain = tuple(chain) or (scope.name,)
    renders = []

    # Header: root gets "name vX.Y.Z"; subcommands show their full chain.
    header = Text()
    header.append(text(" ".join(chain), styler("program-name")))
    if len(chain) == 1 and getattr(scope, "version", None):
        header.append(" ").append(text("v" + scope.version, styler("program-version")))
    renders.append(header)

    if scope.descr:
        renders.append(text(scope.descr, styler("description-section")))

    renders.append(Text())
    renders.append(Text.assemble(text("USAGE", styler("section-label")), ":"))
    renders.append(_usage(scope, chain, styler, text))

    if scope.flags:
        renders.append(Text())
        renders.append(Text.assemble(text("OPTIONS", styler("section-label")), ":"))
        for entry in scope.flags.values():
            renders.append(entry.render(colorful))

    if scope.positionals:
        renders.append(Text())
        renders.append(Text.assemble(text("ARGUMENTS", styler("section-label")), ":"))
        for entry in scope.positionals:
            renders.append(entry.render(colorful))

    if scope.subcommands:
        renders.append(Text())
        renders.append(Text.assemble(text("SUBCOMMANDS", styler("section-label")), ":"))
        for name, subcommand in scope.subcommands.items():
            line = Text(INDENT).append(text(name, styler("subcommand-name")))
            if subcommand.descr:
                line.append(" - ").append(text(subcommand.descr, styler("subcommand-description")))
            renders.append(line)
        renders.append(Text())
        renders.append(text(
            f"Use '{' '.join(chain)} <SUBCOMMAND> --help' for more information on a subcommand.",
            styler("footer"),
        ))

    if scope.examples:
        renders.append(Text())
        renders.append(Text.assemble(text("EXAMPLES", styler("section-label")), ":"))
        for descr, command in scope.examples:
            renders.append(Text("  ").append(text(descr, styler("example-description"))))
            renders.append(Text(INDENT).append(text("$ " + command, styler("example-command"))))

    renderable = Group(*renders)

    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[ ", f"{' '.join(chain)} HELP".upper(), " ]", style=styler("panel-title")),
            title_align="left",
        )

    return renderable


def render_version(parser, /, *, colorful=False):
    styler, text = _stylist(colorful)
    return Text.assemble(
        text(parser.name, styler("program-name")),
        " ",
        text("v" + (parser.version or "0.0.0"), styler("program-version")),
    )


_HINTS = {
    ErrorKind.UNKNOWN_FLAG: "run '{prog} --help' to list the accepted flags",
    ErrorKind.MISSING_REQUIRED_FLAG: "supply the missing argument; '{prog} --help' lists what is required",
    ErrorKind.MISSING_REQUIRED_POSITIONAL: "supply the missing argument; '{prog} --help' lists what is required",
    ErrorKind.INVALID_FLAG_VALUE: "check the value type expected by the argument",
    ErrorKind.TOO_MANY_POSITIONALS: "remove the extra argument or separate flags with '--'",
    ErrorKind.MISSING_FLAG_VALUE: "pass a value after the flag, or use --flag=value",
    ErrorKind.VALIDATION_FAILED: "pick one of the accepted values listed in '{prog} --help'",
}


def render_error(error, prog, /, *, colorful=False, fancy=False):
    """
    render an Error as "[ prog — code | title ]", the message and a one-line hint.
    """
    styler, text = _stylist(colorful)

    header = Text.assemble(
        "[ ",
        text(prog, styler("program-name")),
        " — ",
        text(error.kind.normalize(), styler("code")),
        " | ",
        text(error.kind.title.title(), styler("error-title")),
        " ]",
    )
    message = text(error.message, styler("error-message"))
    parts = [message]
    if hint := _HINTS.get(error.kind, "").format(prog=prog):
        parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*parts), title=header, title_align="left")
    return Group(header, *parts)


def format_help(scope, chain=(), /, *, colorful=False, fancy=False, width=100):
    return _capture(render_help(scope, chain, colorful=colorful, fancy=fancy), colorful, width)


def format_version(parser, /, *, colorful=False, width=100):
    return _capture(render_version(parser, colorful=colorful), colorful, width)


def format_error(error, prog, /, *, colorful=False, fancy=False, width=100):
    return _capture(render_error(error, prog, colorful=colorful, fancy=fancy), colorful, width)


__all__ = (
    "describe_flag",
    "describe_positional",
    "render_help",
    "render_version",
    "render_error",
    "format_help",
    "format_version",
    "format_error",
)
