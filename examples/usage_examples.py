"""
Examples of using DataSonify.

Runs a few small sonifications end to end and writes the results into a
temporary directory.
"""

from pathlib import Path
import tempfile


def example_melody(out_dir: Path):
    """Monthly sales as a melody between C3 and C5."""
    from datasonify import SonificationSession
    from datasonify.audio import SynthEmitter
    
    print("Example: Sales melody")
    print("-" * 40)
    
    monthly_sales = [1200, 1850, 1600, 2400, 3100, 2900, 2200]
    
    emitter = SynthEmitter()
    session = SonificationSession(emitter)
    session.configure(monthly_sales, target_pitch_range=(48, 72))
    
    for result in session.play_all(interval=0.4):
        print(f"{result.value:>8g} -> {result.note:<4} ({result.frequency:.1f} Hz)")
    
    path = emitter.write(str(out_dir / "sales.wav"))
    print(f"Wrote {path}")
    print()


def example_filtered_slice(out_dir: Path):
    """Reconfigure the same session when the selected year range changes."""
    from datasonify import SonificationSession
    from datasonify.audio import RecordingEmitter
    
    print("Example: Changing the selected range")
    print("-" * 40)
    
    revenue_by_year = {1985: 7.4, 1989: 31.0, 1997: 159.0, 2001: 274.9, 2004: 236.0, 2008: 201.8}
    session = SonificationSession(RecordingEmitter(), natural_only=True)
    
    for start, end in [(1985, 2008), (1997, 2008)]:
        values = [v for year, v in sorted(revenue_by_year.items()) if start <= year <= end]
        session.configure(values, (48, 84))
        print(f"{start}-{end}: {' '.join(session.notes())}")
    print()


def example_ordered_playback():
    """Explicit task list with a failing index in the middle."""
    from datasonify import PlaybackScheduler, SonificationSession
    from datasonify.audio import RecordingEmitter
    
    print("Example: Ordered playback")
    print("-" * 40)
    
    session = SonificationSession(RecordingEmitter())
    session.configure([100, 200, 300])
    
    scheduler = PlaybackScheduler.for_indices(session, [0, 9, 2, 1], interval=0.6)
    for result in scheduler.run():
        status = result.note if result.ok else f"skipped ({result.error})"
        print(f"t={result.delay:.1f}s index {result.index}: {status}")
    print()


def example_duet(out_dir: Path):
    """Two studios on one scale, the second answering half a beat later."""
    from datasonify import PlaybackScheduler, SonificationSession
    from datasonify.audio import SynthEmitter
    
    print("Example: Revenue duet")
    print("-" * 40)
    
    disney = [1300, 2400, 4100, 3800]
    ghibli = [7, 31, 159]
    shared = (min(disney + ghibli), max(disney + ghibli))
    
    emitter = SynthEmitter()
    lead = SonificationSession(emitter, natural_only=True, waveform="triangle")
    answer = SonificationSession(emitter, natural_only=True, waveform="sine")
    lead.configure(disney, (48, 84), source_range=shared)
    answer.configure(ghibli, (48, 84), source_range=shared)
    
    results = PlaybackScheduler.duet(lead, answer, interval=0.6).run()
    print(" ".join(r.note for r in results))
    
    path = emitter.write(str(out_dir / "duet.wav"))
    print(f"Wrote {path}")
    print()


def example_volcano_bands(out_dir: Path):
    """Three elevation classes, three clearly different tones."""
    from datasonify.audio import NoteEvent, ToneSynthesizer, write_wav
    from datasonify.mapping import CategoricalMapper
    from datasonify.quantize import hz_to_midi, quantize_pitch
    
    print("Example: Volcano elevation bands")
    print("-" * 40)
    
    volcanoes = {"Fuji": 3776, "Aso": 1592, "Oshima": 758}
    bands = CategoricalMapper([(3000, 200.0), (1000, 400.0)], default=800.0)
    
    events = []
    for i, (name, elevation) in enumerate(volcanoes.items()):
        frequency = bands.map(elevation)
        note = quantize_pitch(hz_to_midi(frequency))
        events.append(NoteEvent(note, frequency, delay=i * 0.5, duration=0.3))
        print(f"{name:<8} {elevation:>5} m -> {frequency:g} Hz ({note})")
    
    synth = ToneSynthesizer()
    path = write_wav(str(out_dir / "volcanoes.wav"), synth.render(events), synth.sample_rate)
    print(f"Wrote {path}")
    print()


def example_narration():
    """Voice selection once the platform announces its voices."""
    from datasonify.narration import CaptionBackend, Narrator, Voice, VoiceRegistry
    
    print("Example: Narration")
    print("-" * 40)
    
    registry = VoiceRegistry()
    registry.when_ready(lambda voice: print(f"Voice ready: {voice.name if voice else 'default'}"))
    registry.announce([
        Voice("Microsoft Aria Online (Natural) - English (United States)", "en-US"),
        Voice("Microsoft Alvaro Online (Natural) - Spanish (Spain)", "es-ES"),
    ])
    
    narrator = Narrator(CaptionBackend(), registry)
    narrator.announce("Plataforma: PS4, Ventas", 35.5, "millones")
    print()


if __name__ == "__main__":
    print("DataSonify Usage Examples")
    print("=" * 50)
    print()
    
    with tempfile.TemporaryDirectory() as tmpdir:
        out_dir = Path(tmpdir)
        example_melody(out_dir)
        example_filtered_slice(out_dir)
        example_ordered_playback()
        example_duet(out_dir)
        example_volcano_bands(out_dir)
        example_narration()
    
    print("For the command line, run: datasonify --help")
