"""
TTS Engine - narration track using Edge TTS (free, high quality)
"""

import os
from pathlib import Path
from typing import Optional

import edge_tts

from slidecast.core import get_logger, LogTimer, NarrationError

logger = get_logger(__name__, component="tts_engine")


class TTSEngine:
    """Text-to-Speech engine using Microsoft Edge TTS"""

    VOICES = {
        "en-US-GuyNeural": {"name": "Guy (US)", "gender": "male"},
        "en-US-JennyNeural": {"name": "Jenny (US)", "gender": "female"},
        "en-GB-RyanNeural": {"name": "Ryan (UK)", "gender": "male"},
        "en-GB-SoniaNeural": {"name": "Sonia (UK)", "gender": "female"},
    }

    DEFAULT_VOICE = "en-US-GuyNeural"
    DEFAULT_RATE = "+12%"  # newsreader pace

    def __init__(self, voice: Optional[str] = None, rate: Optional[str] = None):
        self.voice = voice or os.getenv("NARRATION_VOICE") or self.DEFAULT_VOICE
        self.rate = rate or os.getenv("NARRATION_RATE") or self.DEFAULT_RATE

    async def synthesize(
        self,
        text: str,
        output_path: Path,
        voice: Optional[str] = None,
        pitch: str = "+0Hz",
    ) -> Path:
        """
        Synthesize `text` to an MP3 file at `output_path`

        Raises:
            NarrationError: empty text, or the TTS service failed or wrote nothing
        """
        output_path = Path(output_path)
        if not text or not text.strip():
            raise NarrationError("Narration script is empty")

        voice = voice or self.voice
        try:
            with LogTimer(logger, f"synthesize narration ({len(text)} chars)"):
                communicate = edge_tts.Communicate(text, voice, rate=self.rate, pitch=pitch)
                await communicate.save(str(output_path))
        except Exception as e:
            raise NarrationError(f"Speech synthesis failed with voice {voice}: {e}") from e

        if not output_path.is_file() or output_path.stat().st_size == 0:
            raise NarrationError(f"Speech synthesis produced no audio: {output_path}")

        logger.info("Narration ready", extra={"voice": voice, "bytes": output_path.stat().st_size})
        return output_path

    @classmethod
    def get_available_voices(cls) -> dict:
        """Voices offered to API clients"""
        return {voice_id: info["name"] for voice_id, info in cls.VOICES.items()}
