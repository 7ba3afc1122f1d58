"""
Flagship runner: the caller-side glue between a Parser and a process.

invoke() parses, prints what the outcome calls for and returns an exit status.
It never exits the process itself; scripts do that:

    if __name__ == "__main__":
        sys.exit(invoke(parser))

Outcomes
- --help anywhere on the selected path: help of the deepest selected scope → 0
- --version: "<name> v<version>" → 0
- parse failure: error block plus usage hint on stderr → 2
- success: nothing printed → 0
"""
from rich.console import Console

from . import rendering
from .utils import Unset

EXIT_OK = 0
EXIT_USAGE = 2


def invoke(parser, prompt=Unset, /, *, console=Unset, stderr=Unset):
    """
    run parser.parse(prompt) and report the outcome.

    parameters
    - parser: a flagship Parser.
    - prompt: forwarded to Parser.parse (Unset reads sys.argv[1:]).
    - console / stderr: rich Consoles for regular and error output; fresh
      terminal consoles are used when omitted.

    returns
    - int exit status (EXIT_OK or EXIT_USAGE).
    """
    if not hasattr(parser, "parse") or not hasattr(parser, "chain"):
        raise TypeError("invoke() first argument must be a Parser")

    console = Console() if console is Unset else console
    stderr = Console(stderr=True) if stderr is Unset else stderr

    result = parser.parse(prompt)
    scopes = parser.chain()
    path = tuple(scope.name for scope in scopes[1:])

    if not result:
        stderr.print(rendering.render_error(
            result.error,
            " ".join(scope.name for scope in scopes),
            colorful=parser.colorful,
            fancy=parser.fancy,
        ))
        return EXIT_USAGE

    if parser.help_requested:
        console.print(parser.render_help(*path))
        return EXIT_OK

    if parser.version_requested:
        console.print(rendering.render_version(parser, colorful=parser.colorful))
        return EXIT_OK

    return EXIT_OK


__all__ = (
    "EXIT_OK",
    "EXIT_USAGE",
    "invoke",
)
