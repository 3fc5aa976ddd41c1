"""
Tests for configuration management system.
"""

import pytest

from datasonify.config import (
    ConfigManager, get_config, set_config, update_config,
    load_config_file, save_config_file,
    get_all_config, reset_config
)


def test_default_config():
    """Test that default configuration is loaded correctly."""
    assert get_config('mapping', 'target_min') == 48
    assert get_config('mapping', 'target_max') == 72
    assert get_config('mapping', 'natural_only') is False
    
    assert get_config('playback', 'interval') == 0.4
    assert get_config('synth', 'sample_rate') == 44100
    assert get_config('synth', 'waveform') == 'sine'
    assert get_config('narration', 'fallback_language') == 'es'


def test_get_config_section():
    """Test getting entire configuration sections."""
    synth_config = get_config('synth')
    assert isinstance(synth_config, dict)
    assert 'sample_rate' in synth_config
    assert 'amplitude' in synth_config


def test_set_config():
    """Test setting individual configuration values."""
    set_config('synth', 'sample_rate', 22050)
    assert get_config('synth', 'sample_rate') == 22050
    
    set_config('test_section', 'test_key', 'test_value')
    assert get_config('test_section', 'test_key') == 'test_value'


def test_update_config():
    """Test updating configuration with dictionary."""
    update_config({
        'playback': {'interval': 0.6, 'new_setting': True},
        'new_section': {'key1': 'value1'}
    })
    
    assert get_config('playback', 'interval') == 0.6
    assert get_config('playback', 'new_setting') is True
    assert get_config('new_section', 'key1') == 'value1'
    
    # Other values are preserved
    assert get_config('playback', 'note_duration') == 0.25


def test_config_file_operations(temp_dir):
    """Test saving and loading configuration files."""
    config_file = temp_dir / "nested" / "config.json"
    
    set_config('synth', 'sample_rate', 48000)
    set_config('test', 'value', 123)
    
    save_config_file(str(config_file))
    assert config_file.exists()
    
    reset_config()
    assert get_config('synth', 'sample_rate') == 44100
    assert get_config('test', 'value') is None
    
    load_config_file(str(config_file))
    assert get_config('synth', 'sample_rate') == 48000
    assert get_config('test', 'value') == 123


def test_get_all_config_is_a_copy():
    """Modifying the returned dictionary does not change the configuration."""
    all_config = get_all_config()
    
    assert {'mapping', 'playback', 'synth', 'narration', 'logging'} <= set(all_config)
    
    all_config['synth']['sample_rate'] = 99999
    assert get_config('synth', 'sample_rate') == 44100


def test_reset_restores_nested_defaults():
    """Reset undoes changes made inside default sections."""
    set_config('mapping', 'target_min', 30)
    set_config('custom', 'key', 'value')
    
    reset_config()
    
    assert get_config('mapping', 'target_min') == 48
    assert get_config('custom', 'key') is None


def test_invalid_config_file(temp_dir):
    """Test handling of invalid configuration files."""
    with pytest.raises(ValueError):
        load_config_file(str(temp_dir / "nonexistent.json"))
    
    invalid_file = temp_dir / "invalid.json"
    invalid_file.write_text("{ invalid json }")
    
    with pytest.raises(ValueError):
        load_config_file(str(invalid_file))


def test_environment_overrides(monkeypatch):
    """Environment variables override defaults; invalid values are ignored."""
    monkeypatch.setenv('DATASONIFY_SAMPLE_RATE', '22050')
    monkeypatch.setenv('DATASONIFY_WAVEFORM', 'triangle')
    monkeypatch.setenv('DATASONIFY_INTERVAL', 'fast')
    
    manager = ConfigManager()
    
    assert manager.get('synth', 'sample_rate') == 22050
    assert manager.get('synth', 'waveform') == 'triangle'
    assert manager.get('playback', 'interval') == 0.4


def test_config_file_from_environment(temp_dir, monkeypatch):
    """DATASONIFY_CONFIG points at a JSON file loaded on creation."""
    config_file = temp_dir / "config.json"
    config_file.write_text('{"mapping": {"natural_only": true}}')
    monkeypatch.setenv('DATASONIFY_CONFIG', str(config_file))
    
    manager = ConfigManager()
    
    assert manager.get('mapping', 'natural_only') is True
    assert manager.get('mapping', 'target_min') == 48
