"""
Segmenter - turns article text into an ordered list of timed segments

Plain mode:        title, hook, body..., cta[, closing]
Compilation mode:  title, hook, (numbering, subtitle, body, source) per article, cta[, closing]
"""

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from slidecast.config import SegmentTimings
from slidecast.core import get_logger, sanitize_display_text, SegmentationError

from ..models import CompilationArticle, Segment, SegmentKind

logger = get_logger(__name__, component="segmenter")

SENTENCE_TERMINATORS = re.compile(r"[.!?]+")
_HAS_ALNUM = re.compile(r"\w")

TITLE_SUBTITLE = "BREAKING NEWS"
CTA_TEXT = "What do you think?"
CTA_SUBTITLE = "Like & Subscribe for more news!"


def split_sentences(text: Optional[str], min_chars: int = 3) -> List[str]:
    """
    Split text on runs of `.`, `!` and `?`

    Fragments shorter than `min_chars` or without any letter/digit are
    treated as noise and dropped. Text without terminators is one sentence.
    """
    if not text:
        return []

    sentences = []
    for fragment in SENTENCE_TERMINATORS.split(text):
        fragment = fragment.strip()
        if len(fragment) < min_chars or not _HAS_ALNUM.search(fragment):
            continue
        sentences.append(fragment)
    return sentences


def batch_sentences(sentences: Sequence[str], size: int) -> List[str]:
    """Join consecutive sentences in groups of `size`, preserving order"""
    return [
        ". ".join(sentences[i:i + size])
        for i in range(0, len(sentences), size)
    ]


def word_count(text: str) -> int:
    return len(text.split())


def estimate_duration(text: str, timings: SegmentTimings) -> float:
    """
    Reading time for a body chunk, clamped to [body_min, body_max]

    Rounded to milliseconds, the resolution the encoder timeline is built at.
    """
    raw = word_count(text) / timings.words_per_second
    return round(max(timings.body_min, min(timings.body_max, raw)), 3)


class Segmenter:
    """Builds the segment sequence for one video"""

    def __init__(self, timings: Optional[SegmentTimings] = None, closing_text: Optional[str] = None):
        self.timings = timings or SegmentTimings()
        self.closing_text = closing_text

    def segment(
        self,
        title: str,
        hook: Optional[str] = None,
        body_text: Optional[str] = None,
        caption_text: Optional[str] = None,
    ) -> List[Segment]:
        """
        Segment a single article

        Args:
            title: Article title, used as fallback for caption and hook
            hook: Attention line shown second; defaults to "Breaking: <title>"
            body_text: Article body; may be empty or None
            caption_text: Thumbnail caption shown first; defaults to title

        Returns:
            Segments with contiguous `order` starting at 0
        """
        beats = self._opening(title, hook, caption_text)

        sentences = split_sentences(sanitize_display_text(body_text), self.timings.min_sentence_chars)
        for chunk in batch_sentences(sentences, self.timings.sentences_per_body):
            beats.append((SegmentKind.BODY, chunk, estimate_duration(chunk, self.timings), None))

        beats.extend(self._ending())

        segments = self._number(beats)
        logger.info("Segmented article", extra={
            "segment_count": len(segments),
            "sentence_count": len(sentences),
            "total_duration": sum(s.duration for s in segments),
        })
        return segments

    def segment_compilation(
        self,
        articles: Sequence[CompilationArticle],
        compilation_title: str,
        hook: Optional[str] = None,
        caption_text: Optional[str] = None,
    ) -> List[Segment]:
        """
        Segment a multi-article compilation

        Each article contributes numbering, headline, body and source beats in
        input order. The article body is its first sentence batch; an article
        without usable sentences shows its headline instead.
        """
        beats = self._opening(compilation_title, hook, caption_text)

        for index, article in enumerate(articles, start=1):
            headline = sanitize_display_text(article.title) or f"Story {index}"
            sentences = split_sentences(
                sanitize_display_text(article.content), self.timings.min_sentence_chars
            )
            chunks = batch_sentences(sentences, self.timings.sentences_per_body)
            body = chunks[0] if chunks else headline
            source = sanitize_display_text(article.source) or "Unknown"

            beats.append((SegmentKind.NUMBERING, f"#{index}", self.timings.numbering, None))
            beats.append((SegmentKind.SUBTITLE, headline, self.timings.subtitle, None))
            beats.append((SegmentKind.BODY, body, estimate_duration(body, self.timings), None))
            beats.append((SegmentKind.SOURCE, f"Source: {source}", self.timings.source, None))

        beats.extend(self._ending())

        segments = self._number(beats)
        logger.info("Segmented compilation", extra={
            "article_count": len(articles),
            "segment_count": len(segments),
            "total_duration": sum(s.duration for s in segments),
        })
        return segments

    def _opening(
        self,
        title: str,
        hook: Optional[str],
        caption_text: Optional[str],
    ) -> List[Tuple[SegmentKind, str, float, Optional[str]]]:
        title = sanitize_display_text(title)
        caption = sanitize_display_text(caption_text) or title
        hook = sanitize_display_text(hook) or (f"Breaking: {title}" if title else "Breaking news")

        return [
            (SegmentKind.TITLE, caption or TITLE_SUBTITLE, self.timings.title, TITLE_SUBTITLE),
            (SegmentKind.HOOK, hook, self.timings.hook, None),
        ]

    def _ending(self) -> List[Tuple[SegmentKind, str, float, Optional[str]]]:
        beats = [(SegmentKind.CTA, CTA_TEXT, self.timings.cta, CTA_SUBTITLE)]
        closing = sanitize_display_text(self.closing_text)
        if closing:
            beats.append((SegmentKind.CLOSING, closing, self.timings.closing, None))
        return beats

    @staticmethod
    def _number(beats: Iterable[Tuple[SegmentKind, str, float, Optional[str]]]) -> List[Segment]:
        segments = [
            Segment(kind=kind, text=text, order=order, duration=float(duration), subtitle=subtitle)
            for order, (kind, text, duration, subtitle) in enumerate(beats)
        ]
        if not segments:
            raise SegmentationError("Segment sequence is empty")
        for segment in segments:
            if segment.duration <= 0:
                raise SegmentationError(
                    f"Segment {segment.order} ({segment.kind.value}) has non-positive duration {segment.duration}"
                )
        return segments


def build_narration_script(title: str, content: Optional[str], hook: Optional[str]) -> str:
    """
    Spoken script for the optional narration track

    Hook, a bridge line, the article content and a fixed outro.
    """
    title = sanitize_display_text(title)
    hook = sanitize_display_text(hook) or (f"Breaking: {title}" if title else "")
    content = sanitize_display_text(content)

    parts = [
        hook,
        "Let me break this down for you.",
        content,
        "This is exactly why you need to stay informed about these developments.",
        "What do you think about this? Let me know in the comments below, "
        "and don't forget to subscribe for more breaking news and analysis.",
        "Thanks for watching, and I'll see you in the next video!",
    ]
    return "\n\n".join(part for part in parts if part)
