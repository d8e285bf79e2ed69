"""
linefeed.py — Line-ending normalization for raw XML bytes

Wraps a binary source and rewrites every CR LF pair as a single LF before the
tokenizer sees it. A CR that ends one read is held back until the next read
decides whether it was the first half of a CR LF pair, so the result does not
depend on how the source happens to chunk its bytes.
"""

from __future__ import annotations
from typing import BinaryIO

CR = b"\r"
LF = b"\n"
CRLF = b"\r\n"


class LineFeedNormalizer:
    """Binary reader that folds CR LF into LF.

    Rules:
      - CR LF becomes LF, including when the pair straddles two reads.
      - A lone CR followed by any other byte is passed through unchanged.
      - A CR that is the very last byte of the stream is dropped.

    I/O errors raised by the wrapped source propagate unchanged.
    """

    def __init__(self, source: BinaryIO):
        self._source = source
        self._pending_cr = False
        self._overflow = b""

    def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        if self._overflow:
            return self._take(self._overflow, size)

        while True:
            chunk = self._source.read(size)
            if not chunk:
                # End of stream: a held-back CR is a trailing lone CR.
                self._pending_cr = False
                return b""

            data = CR + chunk if self._pending_cr else chunk
            self._pending_cr = False
            data = data.replace(CRLF, LF)
            if data.endswith(CR):
                data = data[:-1]
                self._pending_cr = True

            # A chunk consisting of a single held-back CR yields nothing yet;
            # returning b"" here would signal end of stream.
            if data:
                return self._take(data, size)

    def _take(self, data: bytes, size: int) -> bytes:
        if size is None or size < 0 or len(data) <= size:
            self._overflow = b""
            return data
        self._overflow = data[size:]
        return data[:size]

    def close(self) -> None:
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "LineFeedNormalizer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def normalize_line_endings(data: bytes) -> bytes:
    """Return ``data`` with CR LF folded to LF and a trailing CR dropped."""
    data = data.replace(CRLF, LF)
    if data.endswith(CR):
        data = data[:-1]
    return data
