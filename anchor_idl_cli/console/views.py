from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

_console: Optional[Console] = None
_err_console: Optional[Console] = None


def _out() -> Console:
    global _console
    if _console is None:
        _console = Console(highlight=False)
    return _console


def _err() -> Console:
    global _err_console
    if _err_console is None:
        _err_console = Console(stderr=True, highlight=False)
    return _err_console


def lines(text_lines: Iterable[str]) -> None:
    """Print report lines verbatim (no markup, no highlighting)."""
    cn = _out()
    for line in text_lines:
        cn.print(line, markup=False, highlight=False, soft_wrap=True)


def panel(title: str, body: str) -> None:
    _out().print(Panel(Text(body), title=title, border_style="cyan", expand=False))


def kv_table(title: str, data: Dict[str, Any]) -> None:
    t = Table(title=title, box=box.SIMPLE, expand=False)
    t.add_column("Key", style="bold cyan")
    t.add_column("Value")
    for k, v in data.items():
        # IDL names and paths may contain [brackets]
        t.add_row(Text(str(k)), Text(str(v)))
    _out().print(t)


def failure(stage: str, message: str) -> None:
    _err().print(f"[bold red]✖ {stage} failed:[/bold red] ", end="")
    _err().print(message, markup=False, highlight=False, soft_wrap=True)
