"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["put", "get", "list", "delete", "exists", "sweep", "help", "exit"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E8B57 bold",
    }
)

WELCOME_TITLE = "GridStore shell - chunked file storage"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "gridstore> "

HELP_TEXT = """Available commands:
  put <local> [remote] [--chunk-size N]   Store a local file as a new version
  get <remote> [local] [--version N]      Download a version (default: newest)
  list [filename]                         List stored versions
  delete <filename>                       Delete every version of a file
  exists <filename>                       Check whether a file is stored
  sweep [--grace SECONDS]                 Remove chunks of abandoned uploads
  help                                    Show this help
  exit                                    Exit shell

Versions: 1 is the oldest, 2 the next; -1 is the newest, -2 the one before; 0 is any.
Examples:
  put report.pdf
  put build/out.bin nightly.bin --chunk-size 1048576
  get nightly.bin --version 1
  delete nightly.bin"""
