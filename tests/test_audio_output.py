"""
Tests for the shared audio output and live emitter.
"""

import pytest
import numpy as np

from datasonify.audio import (
    AudioOutput, LiveEmitter, NoteEvent, RecordingEmitter, SoundEmitter, ToneSynthesizer,
    get_audio_output, set_audio_output
)


class FakeBackend:
    """Device backend recording calls instead of producing sound."""
    
    instances = 0
    
    def __init__(self):
        FakeBackend.instances += 1
        self.played = []
        self.stops = 0
        self.closed = False
    
    def play(self, samples, sample_rate):
        self.played.append((len(samples), sample_rate))
    
    def stop(self):
        self.stops += 1
    
    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def reset_backend_count():
    FakeBackend.instances = 0
    yield
    set_audio_output(None)


@pytest.fixture
def output():
    return AudioOutput(backend_factory=FakeBackend)


class TestAudioOutput:
    
    def test_device_acquired_lazily(self, output):
        assert not output.ready()
        assert FakeBackend.instances == 0
        
        output.play(np.zeros(10), 8000)
        
        assert output.ready()
        assert FakeBackend.instances == 1
    
    def test_device_shared_across_plays(self, output):
        output.play(np.zeros(10), 8000)
        output.play(np.zeros(20), 8000)
        
        assert FakeBackend.instances == 1
        assert output._backend.played == [(10, 8000), (20, 8000)]
    
    def test_new_tone_stops_previous(self, output):
        output.play(np.zeros(10), 8000)
        assert output._backend.stops == 0
        
        output.play(np.zeros(10), 8000)
        assert output._backend.stops == 1
        assert output.active
    
    def test_stop_does_not_acquire(self, output):
        output.stop()
        assert not output.ready()
        assert not output.active
    
    def test_release_and_reacquire(self, output):
        output.play(np.zeros(10), 8000)
        backend = output._backend
        output.release()
        
        assert backend.closed
        assert not output.ready()
        
        output.play(np.zeros(10), 8000)
        assert FakeBackend.instances == 2
    
    def test_release_before_acquire_is_noop(self, output):
        output.release()
        assert FakeBackend.instances == 0


class TestSharedOutput:
    
    def test_get_audio_output_is_singleton(self):
        assert get_audio_output() is get_audio_output()
        assert not get_audio_output().ready()
    
    def test_set_audio_output_releases_previous(self):
        first = AudioOutput(backend_factory=FakeBackend)
        set_audio_output(first)
        first.acquire()
        
        second = AudioOutput(backend_factory=FakeBackend)
        set_audio_output(second)
        
        assert not first.ready()
        assert get_audio_output() is second


class TestEmitters:
    
    def test_live_emitter_plays_rendered_tone(self, output):
        synth = ToneSynthesizer(sample_rate=8000)
        emitter = LiveEmitter(synth, output)
        emitter.emit(NoteEvent("A4", 440.0, delay=3.0, duration=0.5))
        
        assert output._backend.played == [(4000, 8000)]
        
        emitter.stop()
        assert not output.active
    
    def test_live_emitter_defaults_to_shared_output(self):
        shared = AudioOutput(backend_factory=FakeBackend)
        set_audio_output(shared)
        
        assert LiveEmitter(ToneSynthesizer(sample_rate=8000)).output is shared
    
    def test_recording_emitter(self):
        emitter = RecordingEmitter()
        emitter.emit(NoteEvent("C4", 261.63))
        emitter.stop()
        
        assert emitter.notes == ["C4"]
        assert emitter.stop_count == 1
        
        emitter.clear()
        assert emitter.events == []
    
    def test_emitter_without_emit_cannot_be_created(self):
        class Silent(SoundEmitter):
            pass
        
        with pytest.raises(TypeError):
            Silent()
    
    def test_emitter_stop_is_optional(self):
        class Collecting(SoundEmitter):
            def emit(self, event):
                pass
        
        Collecting().stop()
