"""Server mode for widgetbridge.

Runs the WebSocket bridge host. The first client to connect is treated as
the embedded widget; see widgetbridge.rpc.websocket.

Example:
    widgetbridge serve --port 8787 -v
"""

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from widgetbridge.config.loader import load_config
from widgetbridge.config.schema import Config
from widgetbridge.core.errors import BridgeError
from widgetbridge.rpc.bootstrap import configure_bridge_logging
from widgetbridge.rpc.websocket import BridgeServer

console = Console()

# Load .env file if present
load_dotenv()


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def resolve_config(
    config_path: Path | None = None,
    host: str | None = None,
    port: int | None = None,
) -> Config:
    """Load config and apply command-line overrides.

    Raises:
        ConfigError: If the config file is missing or invalid.
    """
    config = load_config(config_path)
    overrides: dict[str, object] = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if not overrides:
        return config
    server = config.server.model_validate({**config.server.model_dump(), **overrides})
    return config.model_copy(update={"server": server})


async def run_serve(
    config_path: Path | None = None,
    host: str | None = None,
    port: int | None = None,
    verbose: bool = False,
    log_dir: Path | None = None,
) -> int:
    """Run the bridge server until cancelled.

    Args:
        config_path: Explicit config file.
        host: Bind address override.
        port: Port override.
        verbose: Enable DEBUG output on the console.
        log_dir: Directory for bridge.log.

    Returns:
        Process exit code.
    """
    try:
        config = resolve_config(config_path, host, port)
    except BridgeError as e:
        print_error(f"Configuration error: {e.message}")
        return 1
    except ValueError as e:
        print_error(f"Invalid option: {e}")
        return 1

    console_level = logging.DEBUG if verbose else logging.WARNING
    log_file = configure_bridge_logging(
        log_dir or Path(".widgetbridge/logs"),
        level=logging.DEBUG if verbose else logging.INFO,
        console_level=console_level,
    )

    server = BridgeServer(config)
    server_task = asyncio.create_task(server.serve())
    started = asyncio.create_task(server.started.wait())

    try:
        # Whichever comes first: a successful bind, or serve() failing to bind
        await asyncio.wait(
            {server_task, started}, timeout=5.0, return_when=asyncio.FIRST_COMPLETED
        )
        if server_task.done() and not started.done():
            error = server_task.exception() or "server stopped before binding"
            print_error(f"Server failed to start: {error}")
            return 1
        if not started.done():
            server_task.cancel()
            try:
                await server_task
            except asyncio.CancelledError:
                pass
            print_error("Server failed to start (bind timeout)")
            return 1

        console.print("[bold]Widget Bridge Server[/bold]")
        console.print(f"Server: ws://{config.server.host}:{config.server.port}")
        console.print(f"Widget: {config.widget.url}")
        console.print(f"Account: {config.session.account}")
        console.print(f"Chain id: {config.session.chain_id}")
        console.print(f"Log: {log_file}")
        console.print("[dim]Press Ctrl+C to stop[/dim]")

        await server_task
        return 0

    except asyncio.CancelledError:
        server_task.cancel()
        try:
            await server_task
        except asyncio.CancelledError:
            pass
        raise

    except OSError as e:
        print_error(f"Server failed: {e}")
        return 1

    finally:
        started.cancel()


def run_show_config(config_path: Path | None = None) -> int:
    """Print the effective configuration as JSON."""
    try:
        config = load_config(config_path)
    except BridgeError as e:
        print_error(f"Configuration error: {e.message}")
        return 1
    console.print_json(config.model_dump_json(), highlight=False)
    return 0
