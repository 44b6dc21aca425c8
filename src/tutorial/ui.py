"""Rich output helpers for the walkthrough"""

from typing import Any, Optional

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.text import Text

console = Console()


def print_part(title: str, out: Optional[Console] = None):
    """Heading for one part of the walkthrough"""
    (out or console).print(Rule(f"[bold cyan]{title}[/bold cyan]"))


def print_step(narration: str, out: Optional[Console] = None):
    (out or console).print(Text(narration, style="italic"))


def print_result(expression: str, value: Any, out: Optional[Console] = None):
    """
    Show an expression and what it returned

    Reprs go through Text so their brackets are not read as markup.
    """
    body = Text()
    body.append(expression, style="bold")
    body.append("\n# => ", style="dim")
    body.append(repr(value), style="green")
    (out or console).print(Panel(body, expand=False))


def print_error(message: str, out: Optional[Console] = None):
    (out or console).print(Text.assemble(("Error: ", "bold red"), message))
