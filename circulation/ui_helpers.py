import os

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape

from circulation.config import settings

# Environment variable that controls how narration is printed
# Allowed values: 'plain' (default), 'rich'
OUTPUT_MODE_ENV = "LIBRARY_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode
    # Invalid values are ignored; keep the current mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()

def print_narration(text: str) -> None:
    """Print the narration of one command in the current output mode.
    - plain: the narration text followed by a newline
    - rich: reports (text starting with '#') rendered as Markdown, other lines highlighted
    """
    if get_output_mode() == "rich":
        if text.startswith("#"):
            _console.print(Markdown(text))
        else:
            _console.print(f"[cyan]{escape(text)}[/]")
    else:
        print(text)
