"""Line-oriented request logger for non-interactive runs."""

from rich.console import Console
from rich.markup import escape

from ui.log_utils import write_cli_log


class ConsoleLogger:
    """Print one line per proxy event and mirror it to the CLI log."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def log_request(self, method: str, url: str) -> None:
        self.console.print(f"[bold]Proxy Request Over:[/bold] {escape(method)} - {escape(url)}")
        write_cli_log("REQUEST", f"Proxy Request Over: {method} - {url}")

    def log_forward(self, method: str, host: str) -> None:
        self.console.print(f"[dim]UserClient --> bypass-cors --> {escape(host)}[/dim]")
        write_cli_log("FORWARD", f"UserClient --> bypass-cors --> {host}", method=method)

    def log_served(self, status: int, reason: str) -> None:
        style = "green" if status < 400 else "yellow" if status < 500 else "red"
        self.console.print(f"[{style}]Served with: {status}-{reason}[/{style}]")
        write_cli_log("SERVED", f"Served with: {status}-{reason}")

    def log_error(self, status: int, message: str) -> None:
        self.console.print(f"[red][ERROR][/red] {status}: {escape(message)}")
        write_cli_log("ERROR", message[:200], status=status)
