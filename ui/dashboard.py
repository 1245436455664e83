"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import write_cli_log

console = Console()

STATUS_CLASSES = ("2xx", "3xx", "4xx", "5xx")


class RequestInfo:
    """Info about a single proxied request."""

    def __init__(self, method: str, path: str, timestamp: datetime):
        self.method = method
        self.path = path[:80] + "..." if len(path) > 80 else path
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent proxy requests and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._requests: list[RequestInfo] = []
        self._max_requests = 10
        self._status_count = {name: 0 for name in STATUS_CLASSES}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_request(self, method: str, url: str) -> None:
        """Log an inbound proxy request."""
        with self._lock:
            self._requests.insert(0, RequestInfo(method, url, datetime.now()))
            self._requests = self._requests[: self._max_requests]
            write_cli_log("REQUEST", f"Proxy Request Over: {method} - {url}")
            self._refresh()

    def log_forward(self, method: str, host: str) -> None:
        write_cli_log("FORWARD", f"UserClient --> bypass-cors --> {host}", method=method)

    def log_served(self, status: int, reason: str) -> None:
        """Count a served response by status class."""
        with self._lock:
            name = f"{status // 100}xx"
            if name in self._status_count:
                self._status_count[name] += 1
            write_cli_log("SERVED", f"Served with: {status}-{reason}")
            self._refresh()

    def log_error(self, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:60] + "..." if len(message) > 60 else message
            self._errors.insert(0, f"{status}: {truncated}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        styles = {"2xx": "green", "3xx": "cyan", "4xx": "yellow", "5xx": "red"}
        stats = Text()
        stats.append("bypass-cors", style="bold cyan")
        for name in STATUS_CLASSES:
            stats.append("  |  ")
            stats.append(f"{name}: {self._status_count[name]}", style=styles[name])
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build recent requests panel."""
        if self._requests:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=8)
            table.add_column("Target", ratio=1)

            for info in self._requests:
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    escape(info.method),
                    escape(info.path),
                )
            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Requests[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Request http://localhost:{self.config.proxy.port}/<url> to proxy <url>",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
