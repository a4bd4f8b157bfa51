"""Terminal dashboard for the current GNSS state.

Turns ``GnssState`` into Rich renderables: a value table (one row per field
group, with its age) and a satellites-in-view table. Values whose group has
not been refreshed within the staleness threshold are dimmed; values never
received render as ``-``.

Two modes:

- live   : ``rich.live.Live`` panel redrawn on every new snapshot and on its
           own tick, so ages keep counting while input is quiet.
- plain  : one status line per new snapshot. Used when requested, when the
           console is not a terminal, and as the fallback when the live
           display fails mid-run.
"""

import logging
import time
from collections.abc import Callable, Iterator

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from nmeastat.config import Settings
from nmeastat.errors import RendererResourceError
from nmeastat.publisher import SnapshotPublisher, Subscription
from nmeastat.state import FieldGroup, GnssState

__all__ = ["Dashboard", "format_plain", "render_state"]

logger = logging.getLogger(__name__)

_UNKNOWN = "-"

_FIX_STYLES = {
    "NoFix": "bold red",
    "GPS": "green",
    "DGPS": "green",
    "PPS": "green",
    "RTK": "bold green",
    "FloatRTK": "yellow",
    "Estimated": "yellow",
    "Manual": "magenta",
    "Simulation": "magenta",
}


def _number(value: float | int | None, format_spec: str = "") -> str:
    if value is None:
        return _UNKNOWN
    return format(value, format_spec)


def _fix_label(state: GnssState) -> str:
    if state.fix_quality is None:
        return "Unknown"
    return state.fix_quality.label


def _dop(state: GnssState) -> str:
    return "/".join(_number(value, ".1f") for value in (state.pdop, state.hdop, state.vdop))


def _timestamp(state: GnssState) -> str:
    if state.utc_timestamp is None:
        return _UNKNOWN
    return state.utc_timestamp.strftime("%Y-%m-%d %H:%M:%S UTC")


def _rows(state: GnssState) -> list[tuple[str, FieldGroup, str]]:
    return [
        ("Fix", FieldGroup.FIX, f"{_fix_label(state)} (mode {_number(state.fix_mode)})"),
        ("Latitude", FieldGroup.POSITION, _number(state.latitude, ".6f")),
        ("Longitude", FieldGroup.POSITION, _number(state.longitude, ".6f")),
        ("Altitude", FieldGroup.ALTITUDE, f"{_number(state.altitude_meters, '.1f')} m"),
        ("Speed", FieldGroup.VELOCITY, f"{_number(state.speed_knots, '.1f')} kn"),
        ("Course", FieldGroup.VELOCITY, f"{_number(state.course_degrees, '.1f')} deg"),
        ("Satellites used", FieldGroup.SATELLITES_USED, _number(state.satellites_used)),
        ("DOP p/h/v", FieldGroup.DOP, _dop(state)),
        ("UTC", FieldGroup.TIME, _timestamp(state)),
    ]


def _age_text(state: GnssState, group: FieldGroup, now: float) -> str:
    age = state.age(group, now)
    if age is None:
        return "never"
    return f"{age:.0f}s ago"


def _value_table(state: GnssState, now: float, staleness: float) -> Table:
    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Value", min_width=16)
    table.add_column("Reading", min_width=24)
    table.add_column("Age", justify="right", width=10)

    for label, group, reading in _rows(state):
        style = "dim" if state.is_stale(group, now, staleness) else ""
        if label == "Fix" and not style:
            style = _FIX_STYLES.get(_fix_label(state), "")
        table.add_row(label, Text(reading, style=style), _age_text(state, group, now))
    return table


def _satellite_table(state: GnssState, now: float, staleness: float) -> Table:
    title = f"Satellites in view: {len(state.satellites_in_view)}"
    if state.satellites_incomplete:
        title += " (incomplete)"
    stale = state.is_stale(FieldGroup.SATELLITES_IN_VIEW, now, staleness)

    table = Table(title=title, header_style="bold cyan", expand=True, style="dim" if stale else "")
    table.add_column("Talker", width=6)
    table.add_column("PRN", justify="right")
    table.add_column("Elev", justify="right")
    table.add_column("Az", justify="right")
    table.add_column("SNR", justify="right")
    for sat in state.satellites_in_view:
        table.add_row(
            sat.talker,
            str(sat.prn),
            _number(sat.elevation_degrees),
            _number(sat.azimuth_degrees),
            _number(sat.snr_db),
        )
    return table


def render_state(state: GnssState, now: float, staleness: float) -> Panel:
    """Render *state* as a Rich panel.

    Args:
        state: Snapshot to show.
        now: Wall-clock seconds used to compute ages.
        staleness: Seconds after which a group is shown as stale.
    """
    d = state.diagnostics
    footer = Text(
        f"sentences {d.sentences}  framing {d.framing_errors}  "
        f"checksum {d.checksum_mismatches}  unsupported {d.unsupported}  "
        f"field {d.field_errors}  gsv timeouts {d.gsv_timeouts}",
        style="dim",
    )
    return Panel(
        Group(
            _value_table(state, now, staleness),
            _satellite_table(state, now, staleness),
            footer,
        ),
        title="[bold]nmeastat[/bold]",
        subtitle="Ctrl+C to exit",
        border_style="blue",
    )


def format_plain(state: GnssState, now: float, staleness: float) -> str:
    """One-line summary of *state*; stale groups are listed at the end.

    Example:
        >>> format_plain(state, now, 5.0)
        'fix=GPS lat=48.117300 lon=11.516667 alt=545.4 sog=- cog=- sats=8 ...'
    """
    parts = [
        f"fix={_fix_label(state)}",
        f"lat={_number(state.latitude, '.6f')}",
        f"lon={_number(state.longitude, '.6f')}",
        f"alt={_number(state.altitude_meters, '.1f')}",
        f"sog={_number(state.speed_knots, '.1f')}",
        f"cog={_number(state.course_degrees, '.1f')}",
        f"sats={_number(state.satellites_used)}",
        f"view={len(state.satellites_in_view)}",
        f"hdop={_number(state.hdop, '.1f')}",
        f"utc={state.utc_timestamp.isoformat() if state.utc_timestamp else _UNKNOWN}",
    ]
    stale = [group.value for group in FieldGroup if state.is_stale(group, now, staleness)]
    if stale:
        parts.append(f"stale={','.join(stale)}")
    return " ".join(parts)


class Dashboard:
    """Shows published snapshots until the publisher closes.

    Args:
        publisher: Source of snapshots.
        settings: Supplies ``staleness_seconds`` and ``refresh_hz``.
        console: Rich console to draw on; stdout when omitted.
        plain: Force plain line output.
        clock: Wall-clock source for ages.
    """

    def __init__(
        self,
        publisher: SnapshotPublisher,
        settings: Settings,
        console: Console | None = None,
        plain: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._publisher = publisher
        self._staleness = settings.staleness_seconds
        self._interval = 1.0 / settings.refresh_hz
        self._console = console or Console()
        self._plain = plain
        self._clock = clock

    def run(self) -> None:
        """Render until the publisher closes.

        Raises:
            RendererResourceError: If the live display cannot be started.
        """
        subscription = self._publisher.subscribe()
        try:
            if self._plain or not self._console.is_terminal:
                self._run_plain(subscription, self._publisher.latest())
            else:
                self._run_live(subscription)
        finally:
            subscription.close()

    def _updates(self, subscription: Subscription) -> Iterator[tuple[GnssState, bool]]:
        """Yield ``(snapshot, is_new)`` on every publish and every tick."""
        while True:
            snapshot = subscription.get(timeout=self._interval)
            if snapshot is not None:
                yield snapshot, True
            elif subscription.closed:
                return
            else:
                yield self._publisher.latest(), False

    def _run_plain(self, subscription: Subscription, first: GnssState) -> None:
        self._print_line(first)
        for snapshot, is_new in self._updates(subscription):
            if is_new:
                self._print_line(snapshot)

    def _print_line(self, snapshot: GnssState) -> None:
        line = format_plain(snapshot, self._clock(), self._staleness)
        self._console.print(line, markup=False, highlight=False, soft_wrap=True)

    def _render(self, snapshot: GnssState) -> Panel:
        return render_state(snapshot, self._clock(), self._staleness)

    def _run_live(self, subscription: Subscription) -> None:
        latest = self._publisher.latest()
        live = Live(
            self._render(latest),
            console=self._console,
            auto_refresh=False,
            transient=False,
        )
        try:
            live.start(refresh=True)
        except OSError as e:
            raise RendererResourceError(f"cannot start live display: {e}") from e

        degraded = False
        try:
            for latest, _ in self._updates(subscription):
                try:
                    live.update(self._render(latest), refresh=True)
                except OSError as e:
                    logger.warning("live display failed (%s), switching to plain output", e)
                    degraded = True
                    break
        finally:
            live.stop()

        if degraded:
            self._run_plain(subscription, latest)
