"""Tests for audio encoder selection."""

from vencode.audio_processor import select_audio_options


def test_copy_when_bitrate_is_zero(backend):
    strategy = select_audio_options(backend, 0)
    assert strategy.is_copy
    assert strategy.options == {'c:a': 'copy'}


def test_prefers_audiotoolbox(backend):
    """aac_at wins over libfdk_aac when both are built in."""
    backend.encoders = {"aac", "aac_at", "libfdk_aac"}
    strategy = select_audio_options(backend, 256)
    assert strategy.codec == "aac_at"
    assert strategy.options == {'c:a': 'aac_at', 'b:a': '256k'}


def test_libfdk_aac(backend):
    backend.encoders = {"aac", "libfdk_aac"}
    assert select_audio_options(backend, 160).options == {'c:a': 'libfdk_aac', 'b:a': '160k'}


def test_fallback_to_builtin_aac(backend):
    """The built-in encoder needs the experimental flag."""
    backend.encoders = set()
    strategy = select_audio_options(backend, 256)
    assert not strategy.is_copy
    assert strategy.options == {'c:a': 'aac', 'b:a': '256k', 'strict': 'experimental'}
