"""CLI entry point for bypass-cors."""

import argparse
import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, apply_environment, load_config
from core.protocols import RequestLogger
from ui.console import ConsoleLogger
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, clear_logs, write_cli_log

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bypass-cors",
        description="Proxy /<url> to <url> and add the CORS headers browsers require.",
    )
    parser.add_argument(
        "-p",
        "-port",
        "--port",
        type=int,
        default=None,
        help="PORT at which the server will run (env: PORT, default: 8080)",
    )
    parser.add_argument("--host", default=None, help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument(
        "--landing-page",
        default=None,
        help="HTML file served for / instead of the 'URL not provided' error",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait on the target before failing with 422",
    )
    parser.add_argument(
        "--forward-headers",
        choices=["none", "end-to-end"],
        default=None,
        help="Which inbound headers reach the target (default: none)",
    )
    parser.add_argument("--debug", action="store_true", help="Write each request to logs/incoming")
    parser.add_argument("--plain", action="store_true", help="Print log lines instead of the dashboard")
    parser.add_argument("--config", action="store_true", help="Show config and log locations")
    return parser


def resolve_config(args: argparse.Namespace, config: Config) -> Config:
    """Overlay CLI flags onto the file and environment configuration."""
    proxy_updates = {}
    if args.port is not None:
        proxy_updates["port"] = args.port
    if args.host is not None:
        proxy_updates["host"] = args.host
    if args.landing_page is not None:
        proxy_updates["landing_page"] = args.landing_page
    if args.forward_headers is not None:
        proxy_updates["forward_headers"] = args.forward_headers
    if args.debug:
        proxy_updates["debug"] = True

    data = config.model_dump()
    data["proxy"].update(proxy_updates)
    if args.timeout is not None:
        data["limits"]["upstream_timeout"] = args.timeout
    return Config.model_validate(data)


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.config:
        console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
        console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")
        return

    try:
        config = resolve_config(args, apply_environment(load_config()))
    except ValueError as e:
        console.print(f"[red][ERROR][/red] Invalid configuration: {e}")
        sys.exit(1)

    clear_logs()
    if args.plain:
        logger: RequestLogger = ConsoleLogger(console)
        dashboard = None
    else:
        dashboard = Dashboard(config)
        logger = dashboard

    import uvicorn

    app = create_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    console.print(f"\nRunning Proxy ByPass Cors Server at port = {config.proxy.port}...\n")
    if dashboard:
        dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        if not server.started:
            write_cli_log("ERROR", "Listener failed to start", port=config.proxy.port)
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        if dashboard:
            dashboard.stop()

    if not server.started:
        sys.exit(1)


if __name__ == "__main__":
    main()
