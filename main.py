import sys

from rich.pretty import pprint

from flagship import *

parser = Parser("convert", "1.0.0", "Convert data files between formats", colorful=True)
parser.add_help_flag().add_version_flag()
parser.flag("verbose", "Print every step", type=bool, short_name="v")
parser.flag("threads", "Worker threads", type=int, short_name="t", default=4)
parser.flag("format", "Output format", choices=("json", "xml", "yaml"), short_name="f", default="json")
parser.positional("input", "File to read", required=False)
parser.positional("output", "File to write", required=False)
parser.example("Convert a CSV file to JSON", "convert -f json -t 8 -v input.csv output.json")
parser.example("Inspect a file", "convert inspect --depth=2 data.xml")

inspector = parser.subcommand("inspect", "Print the structure of a file")
inspector.add_help_flag()
inspector.flag("depth", "Maximum nesting shown", type=int, short_name="d", default=3)
inspector.positional("file", "File to inspect")
inspector.set_callback(pprint)


if __name__ == '__main__':
    if status := invoke(parser):
        sys.exit(status)
    if parser.selected is None and not (parser.help_requested or parser.version_requested):
        pprint({name: parser.get(name) for name in parser.flags} | {
            entry.name: parser.get_positional(entry.name) for entry in parser.positionals
        })
