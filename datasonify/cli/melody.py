"""
Melody CLI commands.

Commands that turn one CSV column into a sequence of notes: preview the
mapping, render it to WAV or play it live. Two columns can also be
rendered together as an interleaved duet.
"""

import time
from pathlib import Path
from typing import List, Optional
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..audio import LiveEmitter, RecordingEmitter, SynthEmitter, ToneSynthesizer, get_audio_output
from ..config import get_config
from ..exceptions import SonificationError
from ..io import Record, select_records
from ..narration import CaptionBackend, Narrator
from ..session import PlaybackScheduler, SonificationSession
from .errors import InputError, handle_cli_error, validate_csv_file

console = Console()
logger = logging.getLogger(__name__)

melody_app = typer.Typer(
    name="melody",
    help="Turn a CSV column into a melody"
)

LABEL_OPTION = typer.Option(None, "--label", "-l", help="Label column (repeat to join several)")
KEY_OPTION = typer.Option(None, "--key", "-k", help="Numeric column to filter on, e.g. Year")
FROM_OPTION = typer.Option(None, "--from", help="Keep rows with key >= this value")
TO_OPTION = typer.Option(None, "--to", help="Keep rows with key <= this value")
SORT_OPTION = typer.Option(None, "--sort", help="Sort values: asc or desc")
TOP_OPTION = typer.Option(None, "--top", help="Keep only the first N rows after sorting")
LOW_OPTION = typer.Option(None, "--low", help="Lowest MIDI pitch (default from config, 48 = C3)")
HIGH_OPTION = typer.Option(None, "--high", help="Highest MIDI pitch (default from config, 72 = C5)")
NATURAL_OPTION = typer.Option(False, "--natural", help="Use only natural notes C D E F G A B")
GROUP_OPTION = typer.Option(None, "--group-by", "-g", help="Combine rows sharing this column, e.g. Month or date")
AGGREGATE_OPTION = typer.Option("sum", "--aggregate", help="How grouped values combine: sum, mean, count, min or max")
PERIOD_OPTION = typer.Option(None, "--period", help="Read the group column as dates and group by month or year")


def _load(csv_file: Path, column: str, labels: Optional[List[str]], key: Optional[str],
          start: Optional[float], end: Optional[float], sort: Optional[str],
          top: Optional[int], group_by: Optional[str] = None,
          aggregate: str = "sum", period: Optional[str] = None) -> List[Record]:
    validate_csv_file(csv_file)
    records = select_records(
        csv_file, column,
        label_columns=labels or (),
        key_column=key, start=start, end=end, order=sort, top=top,
        group_by=group_by, aggregate=aggregate, period=period
    )
    if not records:
        raise InputError(
            f"No rows to sonify in column '{column}'",
            suggestions=["Widen the --from/--to range", "Check that the column is numeric"]
        )
    return records


def _pitch_range(low: Optional[float], high: Optional[float]):
    return (get_config('mapping', 'target_min') if low is None else low,
            get_config('mapping', 'target_max') if high is None else high)


@melody_app.command("notes")
def show_notes(
    csv_file: Path = typer.Argument(..., help="CSV dataset with a header row"),
    column: str = typer.Argument(..., help="Numeric column to sonify"),
    labels: Optional[List[str]] = LABEL_OPTION,
    key: Optional[str] = KEY_OPTION,
    start: Optional[float] = FROM_OPTION,
    end: Optional[float] = TO_OPTION,
    sort: Optional[str] = SORT_OPTION,
    top: Optional[int] = TOP_OPTION,
    low: Optional[float] = LOW_OPTION,
    high: Optional[float] = HIGH_OPTION,
    natural: bool = NATURAL_OPTION,
    group_by: Optional[str] = GROUP_OPTION,
    aggregate: str = AGGREGATE_OPTION,
    period: Optional[str] = PERIOD_OPTION,
    narrate: bool = typer.Option(False, "--narrate", help="Print a spoken-style caption per row"),
    unit: str = typer.Option("", "--unit", help="Unit appended to narrated values")
):
    """
    Show which note each value maps to.
    
    Examples:
    ```
    datasonify melody notes pizza.csv Total --low 48 --high 72
    datasonify melody notes pizza_orders.csv price -g date --period month
    datasonify melody notes cars.csv Time -l Manufacturer -l Model --sort desc --top 10
    ```
    """
    try:
        records = _load(csv_file, column, labels, key, start, end, sort, top,
                        group_by, aggregate, period)
        
        session = SonificationSession(RecordingEmitter(), natural_only=natural)
        session.configure([r.value for r in records], _pitch_range(low, high))
        
        table = Table(title=f"{csv_file.name}: {column}")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Label")
        table.add_column("Value", justify="right")
        table.add_column("Pitch", justify="right")
        table.add_column("Note", style="bold cyan")
        table.add_column("Hz", justify="right")
        
        narrator = Narrator(CaptionBackend(console)) if narrate else None
        for i, record in enumerate(records):
            result = session.resolve(i)
            table.add_row(
                str(i), record.label, f"{record.value:g}",
                f"{result.pitch:.2f}", result.note, f"{result.frequency:.2f}"
            )
            if narrator is not None:
                narrator.announce(record.label or f"#{i}", record.value, unit)
        
        console.print(table)
        low_value, high_value = session.source_range
        console.print(f"[dim]Source range: {low_value:g} .. {high_value:g}[/dim]")
    
    except (SonificationError, InputError) as e:
        handle_cli_error(e, "melody notes")


@melody_app.command("render")
def render_melody(
    csv_file: Path = typer.Argument(..., help="CSV dataset with a header row"),
    column: str = typer.Argument(..., help="Numeric column to sonify"),
    output: Path = typer.Argument(..., help="WAV file to write"),
    labels: Optional[List[str]] = LABEL_OPTION,
    key: Optional[str] = KEY_OPTION,
    start: Optional[float] = FROM_OPTION,
    end: Optional[float] = TO_OPTION,
    sort: Optional[str] = SORT_OPTION,
    top: Optional[int] = TOP_OPTION,
    low: Optional[float] = LOW_OPTION,
    high: Optional[float] = HIGH_OPTION,
    natural: bool = NATURAL_OPTION,
    group_by: Optional[str] = GROUP_OPTION,
    aggregate: str = AGGREGATE_OPTION,
    period: Optional[str] = PERIOD_OPTION,
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between notes"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="Seconds per note"),
    waveform: Optional[str] = typer.Option(None, "--waveform", "-w", help="sine, square, sawtooth or triangle"),
    sample_rate: Optional[int] = typer.Option(None, "--sample-rate", help="Output sample rate in Hz")
):
    """
    Render a column as a melody into a WAV file.
    
    Examples:
    ```
    datasonify melody render pizza.csv Total pizza.wav
    datasonify melody render ghibli.csv Revenue ghibli.wav -k Year --from 1990 --to 2010 --natural
    ```
    """
    try:
        records = _load(csv_file, column, labels, key, start, end, sort, top,
                        group_by, aggregate, period)
        
        emitter = SynthEmitter(ToneSynthesizer(sample_rate=sample_rate, waveform=waveform))
        session = SonificationSession(emitter, natural_only=natural, note_duration=duration)
        session.configure([r.value for r in records], _pitch_range(low, high))
        results = session.play_all(interval)
        
        path = emitter.write(str(output))
        
        console.print(Panel.fit(
            f"[bold]Melody rendered[/bold]\n"
            f"Notes: {len(results)}\n"
            f"Melody: {' '.join(r.note for r in results if r.ok)}\n"
            f"Output: {path}",
            border_style="green"
        ))
    
    except (SonificationError, InputError) as e:
        handle_cli_error(e, "melody render")


@melody_app.command("duet")
def render_duet(
    first_csv: Path = typer.Argument(..., help="CSV with the lead series"),
    second_csv: Path = typer.Argument(..., help="CSV with the answering series"),
    column: str = typer.Argument(..., help="Numeric column to sonify in both files"),
    output: Path = typer.Argument(..., help="WAV file to write"),
    second_column: Optional[str] = typer.Option(None, "--second-column", help="Column of the second file, if named differently"),
    key: Optional[str] = KEY_OPTION,
    start: Optional[float] = FROM_OPTION,
    end: Optional[float] = TO_OPTION,
    low: Optional[float] = LOW_OPTION,
    high: Optional[float] = HIGH_OPTION,
    natural: bool = NATURAL_OPTION,
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between lead notes"),
    duration: Optional[float] = typer.Option(None, "--duration", "-d", help="Seconds per note"),
    lead_waveform: str = typer.Option("triangle", "--lead-waveform", help="Timbre of the first series"),
    answer_waveform: str = typer.Option("sine", "--answer-waveform", help="Timbre of the second series"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Most note pairs to play (default from config)"),
    sample_rate: Optional[int] = typer.Option(None, "--sample-rate", help="Output sample rate in Hz")
):
    """
    Render two series as an interleaved duet into a WAV file.
    
    Both series share one scale, so equal values sound the same pitch.
    Each answering note falls half an interval after its lead note.
    
    Examples:
    ```
    datasonify melody duet disney.csv ghibli.csv Revenue duet.wav -k Year --from 1995 --natural
    ```
    """
    try:
        lead_values = [r.value for r in _load(first_csv, column, None, key, start, end, None, None)]
        answer_values = [r.value for r in _load(second_csv, second_column or column, None,
                                                key, start, end, None, None)]
        everything = lead_values + answer_values
        shared = (min(everything), max(everything))
        pitch_range = _pitch_range(low, high)
        
        emitter = SynthEmitter(ToneSynthesizer(sample_rate=sample_rate))
        lead = SonificationSession(emitter, natural_only=natural, note_duration=duration,
                                   waveform=lead_waveform)
        answer = SonificationSession(emitter, natural_only=natural, note_duration=duration,
                                     waveform=answer_waveform)
        lead.configure(lead_values, pitch_range, source_range=shared)
        answer.configure(answer_values, pitch_range, source_range=shared)
        
        if interval is None:
            interval = get_config('playback', 'interval')
        results = PlaybackScheduler.duet(lead, answer, interval, limit).run()
        
        path = emitter.write(str(output))
        
        console.print(Panel.fit(
            f"[bold]Duet rendered[/bold]\n"
            f"Pairs: {len(results) // 2}\n"
            f"Lead ({lead_waveform}): {' '.join(r.note for r in results[0::2] if r.ok)}\n"
            f"Answer ({answer_waveform}): {' '.join(r.note for r in results[1::2] if r.ok)}\n"
            f"Output: {path}",
            border_style="green"
        ))
    
    except (SonificationError, InputError) as e:
        handle_cli_error(e, "melody duet")


@melody_app.command("play")
def play_melody(
    csv_file: Path = typer.Argument(..., help="CSV dataset with a header row"),
    column: str = typer.Argument(..., help="Numeric column to sonify"),
    labels: Optional[List[str]] = LABEL_OPTION,
    key: Optional[str] = KEY_OPTION,
    start: Optional[float] = FROM_OPTION,
    end: Optional[float] = TO_OPTION,
    sort: Optional[str] = SORT_OPTION,
    top: Optional[int] = TOP_OPTION,
    low: Optional[float] = LOW_OPTION,
    high: Optional[float] = HIGH_OPTION,
    natural: bool = NATURAL_OPTION,
    group_by: Optional[str] = GROUP_OPTION,
    aggregate: str = AGGREGATE_OPTION,
    period: Optional[str] = PERIOD_OPTION,
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between notes"),
    waveform: Optional[str] = typer.Option(None, "--waveform", "-w", help="sine, square, sawtooth or triangle")
):
    """
    Play a column as a melody on the default audio device.
    
    Requires the optional 'sounddevice' dependency.
    """
    output = get_audio_output()
    scheduler = None
    try:
        records = _load(csv_file, column, labels, key, start, end, sort, top,
                        group_by, aggregate, period)
        
        session = SonificationSession(LiveEmitter(ToneSynthesizer(waveform=waveform), output),
                                      natural_only=natural)
        session.configure([r.value for r in records], _pitch_range(low, high))
        
        if interval is None:
            interval = get_config('playback', 'interval')
        scheduler = PlaybackScheduler.for_indices(session, range(len(records)), interval)
        
        with console.status("Playing..."):
            for result in scheduler.run(realtime=True):
                logger.debug(f"Played {result.note} for value {result.value}")
            # let the last note ring out before the device is released
            time.sleep(session.note_duration)
    
    except KeyboardInterrupt:
        if scheduler is not None:
            scheduler.cancel()
        console.print("\n[yellow]Playback cancelled[/yellow]")
    except (SonificationError, InputError) as e:
        handle_cli_error(e, "melody play")
    finally:
        output.release()
