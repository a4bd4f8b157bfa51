"""``nmeastat [SOURCE]``: live GNSS status from an NMEA 0183 stream.

Reads NMEA sentences from standard input (or a file), shows the merged state
on a terminal dashboard and, with ``--web``, serves it to browsers.

Exit codes: 0 at end of input or on Ctrl+C, 1 when the input cannot be read,
2 when the display cannot be opened or an option value is invalid.
"""

import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import BinaryIO

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from nmeastat.config import Settings
from nmeastat.errors import InputStreamError, RendererResourceError
from nmeastat.pipeline import Pipeline
from nmeastat.tui import Dashboard

__all__ = ["app"]

logger = logging.getLogger(__name__)

EXIT_INPUT_ERROR = 1
EXIT_RENDERER_ERROR = 2
EXIT_USAGE_ERROR = 2

_STDIN = "-"
# Longest wait for the final snapshot after Ctrl+C
_SHUTDOWN_TIMEOUT_SECONDS = 2.0

app = typer.Typer(
    name="nmeastat",
    help="Live GNSS status from an NMEA 0183 stream.",
    add_completion=False,
)

err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _open_source(source: str, stack: ExitStack) -> BinaryIO:
    if source == _STDIN:
        return sys.stdin.buffer
    try:
        return stack.enter_context(Path(source).open("rb"))
    except OSError as e:
        err_console.print(f"[bold red]Cannot open input:[/bold red] {e}")
        raise typer.Exit(code=EXIT_INPUT_ERROR) from e


@app.command()
def main(
    source: str = typer.Argument(
        _STDIN,
        help="NMEA input file; '-' reads standard input.",
    ),
    web: bool = typer.Option(
        False,
        "--web",
        "-w",
        help="Also serve the state as JSON and over WebSocket.",
    ),
    port: int | None = typer.Option(None, "--port", "-p", help="Web exporter port."),
    host: str | None = typer.Option(None, "--host", help="Web exporter bind address."),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="Print one status line per update instead of the live dashboard.",
    ),
    staleness: float | None = typer.Option(
        None,
        "--staleness",
        "-s",
        help="Seconds after which a value is shown as stale.",
    ),
    gsv_timeout: float | None = typer.Option(
        None,
        "--gsv-timeout",
        help="Seconds to wait for the rest of a satellites-in-view group.",
    ),
    refresh_hz: float | None = typer.Option(
        None,
        "--refresh-hz",
        "-r",
        help="Dashboard refresh rate in Hz.",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Logging level: DEBUG, INFO, WARNING, ERROR or CRITICAL.",
    ),
) -> None:
    """Show the live GNSS state decoded from an NMEA 0183 stream."""
    options = {
        "web_port": port,
        "web_host": host,
        "staleness_seconds": staleness,
        "gsv_timeout_seconds": gsv_timeout,
        "refresh_hz": refresh_hz,
        "log_level": log_level,
    }
    overrides = {key: value for key, value in options.items() if value is not None}
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        err_console.print(f"[bold red]Invalid settings:[/bold red] {e}")
        raise typer.Exit(code=EXIT_USAGE_ERROR) from e
    _configure_logging(settings.log_level)

    with ExitStack() as stack:
        stream = _open_source(source, stack)
        pipeline = Pipeline(stream, settings)
        dashboard = Dashboard(pipeline.publisher, settings, plain=plain)

        server = None
        if web:
            from nmeastat_server import create_app, serve_in_background

            server = serve_in_background(
                create_app(pipeline.publisher), settings.web_host, settings.web_port
            )

        pipeline.start()
        try:
            dashboard.run()
        except KeyboardInterrupt:
            logger.info("interrupted")
        except RendererResourceError as e:
            err_console.print(f"[bold red]Display unavailable:[/bold red] {e}")
            raise typer.Exit(code=EXIT_RENDERER_ERROR) from e
        finally:
            pipeline.stop()
            pipeline.join(_SHUTDOWN_TIMEOUT_SECONDS)
            if server is not None:
                server.should_exit = True

    if isinstance(pipeline.error, InputStreamError):
        err_console.print(f"[bold red]Input failed:[/bold red] {pipeline.error}")
        raise typer.Exit(code=EXIT_INPUT_ERROR)
