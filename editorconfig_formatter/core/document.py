"""
Document Model

This module turns raw file bytes into a line-oriented document carrying the
detected charset and the ending of every line, and turns such a document
back into bytes. The two operations are exact inverses for parsed input.
"""

import re
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass, field, replace
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when input cannot be interpreted as a document at all."""


class Charset(Enum):
    """Character encodings a document can be tagged with."""
    UTF_8 = "utf-8"
    UTF_8_BOM = "utf-8-bom"
    UTF_16LE = "utf-16le"
    UTF_16BE = "utf-16be"
    UTF_32LE = "utf-32le"
    UTF_32BE = "utf-32be"
    LATIN1 = "latin1"
    UNKNOWN = "unknown"

    @property
    def bom(self) -> bytes:
        return BOMS.get(self, b"")

    @property
    def codec(self) -> str:
        return _CODECS[self][0]

    @property
    def errors(self) -> str:
        return _CODECS[self][1]


class LineEnding(Enum):
    """Line terminators recognised by the parser."""
    NONE = ""
    LF = "\n"
    CRLF = "\r\n"
    CR = "\r"


# Longest prefixes first: FF FE 00 00 must win over FF FE.
BOMS = {
    Charset.UTF_32LE: b"\xff\xfe\x00\x00",
    Charset.UTF_32BE: b"\x00\x00\xfe\xff",
    Charset.UTF_8_BOM: b"\xef\xbb\xbf",
    Charset.UTF_16BE: b"\xfe\xff",
    Charset.UTF_16LE: b"\xff\xfe",
}

_CODECS = {
    Charset.UTF_8: ("utf-8", "surrogateescape"),
    Charset.UTF_8_BOM: ("utf-8", "surrogateescape"),
    Charset.UNKNOWN: ("utf-8", "surrogateescape"),
    Charset.UTF_16LE: ("utf-16-le", "replace"),
    Charset.UTF_16BE: ("utf-16-be", "replace"),
    Charset.UTF_32LE: ("utf-32-le", "replace"),
    Charset.UTF_32BE: ("utf-32-be", "replace"),
    Charset.LATIN1: ("latin-1", "replace"),
}

_LINE_PATTERN = re.compile(r"(\r\n|\r|\n)")
_ENDINGS = {ending.value: ending for ending in LineEnding}


@dataclass(frozen=True)
class Line:
    """A single line of a document, without its terminator."""
    number: int
    text: str
    ending: LineEnding = LineEnding.NONE

    def __str__(self) -> str:
        return self.text + self.ending.value


@dataclass(frozen=True)
class Document:
    """
    Immutable line-oriented view of a text file.

    Lines are numbered 1..n without gaps and only the last line may lack
    an ending. Rules never modify a document; they build a new one with
    ``with_lines`` or ``with_charset``.
    """
    lines: Tuple[Line, ...] = field(default_factory=lambda: (Line(1, ""),))
    charset: Charset = Charset.UTF_8

    def __post_init__(self):
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, "lines", tuple(self.lines))
        if not self.lines:
            raise ValueError("a document has at least one line")
        for index, line in enumerate(self.lines, start=1):
            if line.number != index:
                raise ValueError(f"line {line.number} found at position {index}")
            if line.ending is LineEnding.NONE and index != len(self.lines):
                raise ValueError(f"line {index} has no ending but is not the last line")

    @property
    def has_trailing_newline(self) -> bool:
        return self.lines[-1].ending is not LineEnding.NONE

    @property
    def is_empty(self) -> bool:
        return len(self.lines) == 1 and not self.lines[0].text and not self.has_trailing_newline

    @property
    def text(self) -> str:
        return "".join(str(line) for line in self.lines)

    def with_lines(self, lines: Sequence[Line]) -> "Document":
        """
        Build a document from edited lines.

        Lines are renumbered and a trailing empty, unterminated line is
        dropped so the result matches what ``parse`` would produce for its
        serialized form.
        """
        lines = list(lines)
        while len(lines) > 1 and not lines[-1].text and lines[-1].ending is LineEnding.NONE:
            lines.pop()
        if not lines:
            lines = [Line(1, "")]
        numbered = tuple(
            line if line.number == index else replace(line, number=index)
            for index, line in enumerate(lines, start=1)
        )
        return Document(lines=numbered, charset=self.charset)

    def with_charset(self, charset: Charset) -> "Document":
        return replace(self, charset=charset)

    def __str__(self) -> str:
        return self.text


def detect_bom(data: bytes) -> Optional[Charset]:
    """Return the charset whose byte-order mark prefixes ``data``, if any."""
    for charset, bom in BOMS.items():
        if data.startswith(bom):
            return charset
    return None


def split_lines(text: str) -> List[Line]:
    """Split decoded text into numbered lines, keeping each ending."""
    parts = _LINE_PATTERN.split(text)
    lines = []
    # split() with a capturing group alternates text and separator
    for index in range(0, len(parts) - 1, 2):
        lines.append(Line(len(lines) + 1, parts[index], _ENDINGS[parts[index + 1]]))
    tail = parts[-1]
    if tail or not lines:
        lines.append(Line(len(lines) + 1, tail))
    return lines


def parse(data: bytes, expected_charset: Optional[Charset] = None) -> Document:
    """
    Parse raw bytes into a Document.

    Args:
        data: Raw file content
        expected_charset: Charset the caller expects; only ``latin1`` changes
            how BOM-less content is decoded

    Returns:
        Document whose ``serialize`` output equals ``data``
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ParseError(f"expected bytes, got {type(data).__name__}")
    data = bytes(data)

    charset = detect_bom(data)
    text = None
    if charset is not None:
        strict = "strict" if charset.errors == "replace" else charset.errors
        try:
            text = data[len(charset.bom):].decode(charset.codec, strict)
        except UnicodeDecodeError:
            logger.debug(f"Content after {charset.value} BOM does not decode, treating as unknown")
            charset = Charset.UNKNOWN
            text = data.decode(charset.codec, charset.errors)
    elif expected_charset is Charset.LATIN1:
        charset = Charset.LATIN1
        text = data.decode(charset.codec)
    else:
        charset = Charset.UTF_8
        text = data.decode(charset.codec, charset.errors)

    return Document(lines=tuple(split_lines(text)), charset=charset)


def serialize(document: Document) -> bytes:
    """
    Encode a Document back to bytes using its charset tag.

    Characters the target encoding cannot represent are written as ``?`` and
    a warning is logged.
    """
    charset = document.charset
    text = document.text
    if charset.errors != "replace":
        return charset.bom + text.encode(charset.codec, charset.errors)
    try:
        return charset.bom + text.encode(charset.codec)
    except UnicodeEncodeError:
        logger.warning(f"Characters not representable in {charset.value} were replaced with '?'")
        return charset.bom + text.encode(charset.codec, charset.errors)
