# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-11
# Updated: 2026-10-19
# Description: DocChunker
# -----------------------------------------------------------------------------
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from chunking.DocChunk import DocChunk
from utility.errors import ConfigurationError
from utility.logging_utils import get_class_logger

# Coarsest first: paragraph -> line -> word -> character (hard cut)
DEFAULT_SEPARATORS: Tuple[str, ...] = ("\n\n", "\n", " ", "")

Span = Tuple[int, int]
Piece = Tuple[int, int, bool]


class DocChunker:
    """
    Splits extracted document text into overlapping, bounded-size DocChunk objects.

    Works on character offsets into the original text so every chunk can be traced
    back to its position (charStart/charEnd) and order is always document order.
    """

    def __init__(
        self,
        *,
        chunk_size: int = 1000,
        overlap: int = 200,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
        logger: logging.Logger | None = None,
    ):
        self.chunk_size = chunk_size
        self.overlap = overlap
        self.separators = tuple(separators)
        self.logger = logger or get_class_logger(self.__class__)

        # guard against bad config that can cause infinite loops
        self._validate(self.chunk_size, self.overlap)

    @staticmethod
    def _validate(chunk_size: int, overlap: int) -> None:
        if chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be > 0, got {chunk_size}")
        if overlap < 0 or overlap >= chunk_size:
            raise ConfigurationError(
                f"overlap ({overlap}) must be >= 0 and < chunk_size ({chunk_size})"
            )

    def split(
        self,
        text: str,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
    ) -> List[str]:
        return [text[s:e] for s, e in self.split_spans(text, chunk_size, overlap)]

    def split_spans(
        self,
        text: str,
        chunk_size: Optional[int] = None,
        overlap: Optional[int] = None,
    ) -> List[Span]:
        """
        Returns (start, end) offsets of each chunk, in document order.
        Consecutive spans may overlap; together they cover the whole text.
        """
        size = self.chunk_size if chunk_size is None else chunk_size
        ov = self.overlap if overlap is None else overlap
        self._validate(size, ov)

        if not text:
            return []

        pieces = self._split_recursive(text, 0, len(text), self.separators, size)
        windows = self._merge(text, pieces, size, ov)

        # whitespace-only windows carry nothing retrievable
        return [(s, e) for s, e in windows if text[s:e].strip()]

    def _split_recursive(
        self,
        text: str,
        start: int,
        end: int,
        separators: Sequence[str],
        size: int,
    ) -> List[Piece]:
        """
        Returns contiguous (start, end, hard) pieces. A hard piece is a run with no
        usable separator left; _merge cuts it at any character.
        """
        if end - start <= size:
            return [(start, end, False)]

        for i, sep in enumerate(separators):
            if sep == "":
                return [(start, end, True)]

            pieces = self._split_on(text, start, end, sep)
            if len(pieces) < 2:
                continue

            out: List[Piece] = []
            rest = separators[i + 1:]
            for s, e in pieces:
                if e - s > size:
                    out.extend(self._split_recursive(text, s, e, rest, size))
                else:
                    out.append((s, e, False))
            return out

        # indivisible: no separator left that can shrink it
        return [(start, end, False)]

    @staticmethod
    def _split_on(text: str, start: int, end: int, sep: str) -> List[Span]:
        """Split [start, end) on sep, keeping the separator at the end of the left piece."""
        pieces: List[Span] = []
        pos = start
        idx = text.find(sep, pos, end)
        while idx != -1:
            cut = idx + len(sep)
            pieces.append((pos, cut))
            pos = cut
            idx = text.find(sep, pos, end)
        if pos < end:
            pieces.append((pos, end))
        return pieces

    def _merge(self, text: str, pieces: List[Piece], size: int, overlap: int) -> List[Span]:
        """
        Greedily merge contiguous pieces into windows of at most `size` chars.

        A hard piece fills the open window up to `size` and the rest carries on into
        the next window, so a long unbroken run becomes full windows that each repeat
        `overlap` trailing chars of the one before. Any other piece that does not fit
        opens a new window seeded with up to `overlap` trailing chars, limited to what
        still fits next to it.
        """
        windows: List[Span] = []
        ws: Optional[int] = None
        we = 0

        for s, e, hard in pieces:
            if ws is None:
                ws, we = s, s

            while hard and e - ws > size:
                we = ws + size
                windows.append((ws, we))
                ws = self._overlap_start(text, we - overlap, we) if overlap else we

            if e - ws <= size or we == ws:
                we = e
                continue

            windows.append((ws, we))

            seed = min(overlap, size - (e - s))
            new_ws = s
            if seed > 0:
                new_ws = self._overlap_start(text, max(ws, we - seed), we)
            ws, we = new_ws, e

        if ws is not None:
            windows.append((ws, we))
        return windows

    @staticmethod
    def _overlap_start(text: str, lo: int, hi: int) -> int:
        """Move the overlap start forward to a word boundary when one exists."""
        if lo == 0 or text[lo - 1].isspace():
            return lo
        for j in range(lo, hi):
            if text[j].isspace():
                return j + 1 if j + 1 < hi else lo
        return lo

    def chunk_document(
        self,
        text: str,
        *,
        source: str,
        doc_type: str,
        doc_metadata: Optional[Dict[str, Any]] = None,
    ) -> List[DocChunk]:

        # Work with a copy so we can safely mutate metadata
        base_metadata: Dict[str, Any] = dict(doc_metadata or {})
        base_metadata["source"] = source
        base_metadata["type"] = doc_type

        self.logger.info(
            "Chunking source=%r chars=%d chunk_size=%d overlap=%d",
            source,
            len(text),
            self.chunk_size,
            self.overlap,
        )

        chunks: List[DocChunk] = []
        for index, (start, end) in enumerate(self.split_spans(text)):
            metadata = dict(base_metadata)
            metadata.update({"chunkIndex": index, "charStart": start, "charEnd": end})
            chunks.append(DocChunk(text=text[start:end], metadata=metadata))

        # Summary
        total_chunks = len(chunks)
        if total_chunks:
            avg_len = sum(len(c.text) for c in chunks) / total_chunks
            self.logger.info(
                "Chunking Summary: source=%r chunks=%d | avg_len=%.1f chars",
                source,
                total_chunks,
                avg_len,
            )
        else:
            self.logger.warning("No chunks produced for source=%r", source)

        return chunks
