"""Interactive shell with prompt_toolkit."""

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_delete,
    handle_exists,
    handle_get,
    handle_list,
    handle_put,
    handle_sweep,
)
from cli.constants import (
    COMMANDS,
    HELP_TEXT,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    DeleteCommand,
    ExistsCommand,
    GetCommand,
    ListCommand,
    PutCommand,
    SweepCommand,
)
from cli.parser import ParseError, parse_command


def dispatch_command(cmd_obj, store=None) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, PutCommand):
        return handle_put(cmd_obj, store=store)
    elif isinstance(cmd_obj, GetCommand):
        return handle_get(cmd_obj, store=store)
    elif isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj, store=store)
    elif isinstance(cmd_obj, DeleteCommand):
        return handle_delete(cmd_obj, store=store)
    elif isinstance(cmd_obj, ExistsCommand):
        return handle_exists(cmd_obj, store=store)
    elif isinstance(cmd_obj, SweepCommand):
        return handle_sweep(cmd_obj, store=store)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def repl_loop() -> None:
    """Start interactive shell with prompt_toolkit."""
    completer = WordCompleter(COMMANDS, ignore_case=True)
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    print(WELCOME_TITLE)
    print(WELCOME_HELP)

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            cmd_obj = parse_command(user_input)
            result = dispatch_command(cmd_obj)
            print(result)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
