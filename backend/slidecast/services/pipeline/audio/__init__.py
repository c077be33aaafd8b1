"""Audio generation - text-to-speech narration."""

from .tts_engine import TTSEngine

__all__ = ["TTSEngine"]
