"""Core media backend and video analysis."""

from .base import FFmpegBackend, MediaBackend

__all__ = ['FFmpegBackend', 'MediaBackend']
