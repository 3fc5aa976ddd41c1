"""
Tone CLI commands.

Single-tone sonifications: a frequency sweep whose length encodes a value,
and categorical tones chosen by threshold bands.
"""

from pathlib import Path
from typing import List, Optional
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..audio import NoteEvent, ToneSynthesizer, write_wav
from ..config import get_config
from ..exceptions import SonificationError
from ..io import load_records
from ..mapping import CategoricalMapper, map_range, parse_bands
from ..quantize import hz_to_midi, quantize_pitch
from .errors import InputError, handle_cli_error, validate_csv_file

console = Console()
logger = logging.getLogger(__name__)

tone_app = typer.Typer(
    name="tone",
    help="Single-tone sonifications"
)


def sweep_duration(value: float, min_value: float, max_value: float,
                   max_seconds: Optional[float] = None) -> float:
    """Ramp length for value: the largest value gets the longest sweep."""
    if max_seconds is None:
        max_seconds = get_config('synth', 'max_sweep_seconds')
    return map_range(value, min_value, max_value, 0.0, max_seconds)


@tone_app.command("sweep")
def render_sweep(
    value: float = typer.Argument(..., help="Value to sonify"),
    output: Path = typer.Argument(..., help="WAV file to write"),
    min_value: float = typer.Option(..., "--min-value", help="Smallest value of the dataset"),
    max_value: float = typer.Option(..., "--max-value", help="Largest value of the dataset"),
    min_hz: Optional[float] = typer.Option(None, "--min-hz", help="Start frequency"),
    max_hz: Optional[float] = typer.Option(None, "--max-hz", help="End frequency"),
    max_seconds: Optional[float] = typer.Option(None, "--max-seconds", help="Ramp length for the largest value"),
    hold: Optional[float] = typer.Option(None, "--hold", help="Seconds at the start frequency before the ramp"),
    waveform: str = typer.Option("sawtooth", "--waveform", "-w", help="sine, square, sawtooth or triangle")
):
    """
    Render a rising sweep whose ramp length encodes a value.
    
    Larger values ramp more slowly from --min-hz to --max-hz.
    
    Examples:
    ```
    datasonify tone sweep 9.8 sweep.wav --min-value 6.7 --max-value 12.1
    ```
    """
    try:
        min_hz = min_hz if min_hz is not None else get_config('synth', 'sweep_min_hz')
        max_hz = max_hz if max_hz is not None else get_config('synth', 'sweep_max_hz')
        hold = hold if hold is not None else get_config('synth', 'sweep_delay')
        
        ramp = sweep_duration(value, min_value, max_value, max_seconds)
        synth = ToneSynthesizer(waveform=waveform)
        path = write_wav(str(output), synth.sweep(min_hz, max_hz, ramp, hold=hold), synth.sample_rate)
        
        console.print(Panel.fit(
            f"[bold]Sweep rendered[/bold]\n"
            f"{min_hz:g} Hz -> {max_hz:g} Hz over {ramp:.2f}s (after {hold:g}s)\n"
            f"Output: {path}",
            border_style="green"
        ))
    
    except SonificationError as e:
        handle_cli_error(e, "tone sweep")


@tone_app.command("bands")
def render_bands(
    csv_file: Path = typer.Argument(..., help="CSV dataset with a header row"),
    column: str = typer.Argument(..., help="Numeric column to classify"),
    output: Path = typer.Argument(..., help="WAV file to write"),
    bands: List[str] = typer.Option(
        ["3000=200", "1000=400"], "--band", "-b",
        help="THRESHOLD=HZ; values above THRESHOLD sound at HZ (repeatable)"
    ),
    default_hz: float = typer.Option(800.0, "--default", help="Frequency for values above no threshold"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Label column"),
    duration: float = typer.Option(0.3, "--duration", "-d", help="Seconds per tone"),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between tones")
):
    """
    Render one tone per row, pitched by threshold band.
    
    The defaults reproduce the volcano demo: above 3000 m sounds at 200 Hz,
    above 1000 m at 400 Hz, anything lower at 800 Hz.
    """
    try:
        validate_csv_file(csv_file)
        mapper = CategoricalMapper(parse_bands(bands), default=default_hz)
        records = load_records(csv_file, column, label_columns=[label] if label else ())
        if not records:
            raise InputError(f"No numeric rows in column '{column}'")
        
        if interval is None:
            interval = get_config('playback', 'interval')
        
        events = []
        table = Table(title=f"{csv_file.name}: {column}")
        table.add_column("Label")
        table.add_column("Value", justify="right")
        table.add_column("Hz", justify="right", style="bold cyan")
        table.add_column("Note")
        for i, record in enumerate(records):
            frequency = mapper.map(record.value)
            note = quantize_pitch(hz_to_midi(frequency))
            events.append(NoteEvent(note=note, frequency=frequency,
                                    delay=i * interval, duration=duration))
            table.add_row(record.label, f"{record.value:g}", f"{frequency:g}", note)
        
        synth = ToneSynthesizer(waveform='sine')
        path = write_wav(str(output), synth.render(events), synth.sample_rate)
        
        console.print(table)
        console.print(f"[green]Wrote {len(events)} tones to {path}[/green]")
        logger.debug(f"Rendered {len(events)} band tones with {len(mapper)} bands")
    
    except (SonificationError, InputError) as e:
        handle_cli_error(e, "tone bands")
