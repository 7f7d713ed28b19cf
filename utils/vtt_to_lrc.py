import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

# C-locale isspace() set
WHITESPACE = " \t\n\v\f\r"

METADATA_MARKERS = ("NOTE", "STYLE", "REGION")

# Integer field: optional leading whitespace and plus sign
_FIELD = r"\s*(\+?\d+)"

# Tried in order, first match wins. Hour-less forms default hour to 0.
TIMESTAMP_PATTERNS = (
    (re.compile(rf"{_FIELD}:{_FIELD}:{_FIELD}\.{_FIELD}", re.ASCII), True),
    (re.compile(rf"{_FIELD}:{_FIELD}\.{_FIELD}", re.ASCII), False),
    (re.compile(rf"{_FIELD}:{_FIELD}:{_FIELD},{_FIELD}", re.ASCII), True),
    (re.compile(rf"{_FIELD}:{_FIELD},{_FIELD}", re.ASCII), False),
)

CUE_PREFIX_RE = re.compile(r"\d+[ \t]\s*", re.ASCII)
DIGITS_RE = re.compile(r"[0-9]+")
LINE_END_RE = re.compile(r"[\r\n]")


class ConversionError(OSError):
    """Base class for I/O failures while converting a single file."""

    def __init__(self, path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class SourceOpenError(ConversionError):
    def __init__(self, path):
        super().__init__(path, "Cannot open VTT file")


class DestOpenError(ConversionError):
    def __init__(self, path):
        super().__init__(path, "Cannot create LRC file")


@dataclass
class ParserState:
    """Per-file parser flags. A fresh instance is used for every conversion."""

    header_seen: bool = False
    timestamp_found: bool = False


def strip_line_ending(raw: str) -> str:
    """Cut a raw line at its first CR or LF."""
    return LINE_END_RE.split(raw, 1)[0]


def parse_timestamp(field: str) -> Optional[Tuple[int, int, int, int]]:
    """
    Parse a cue start time into (hour, minute, second, millisecond).

    Accepts `H:MM:SS.mmm`, `MM:SS.mmm` and the same two forms with a comma
    before the milliseconds. Anything after the millisecond digits is ignored.
    Returns None if no form matches.
    """
    for pattern, has_hour in TIMESTAMP_PATTERNS:
        match = pattern.match(field)
        if not match:
            continue
        values = [int(v) for v in match.groups()]
        if not has_hour:
            values.insert(0, 0)
        return tuple(values)
    return None


def format_tag(hour: int, minute: int, second: int, millisecond: int) -> str:
    total_seconds = hour * 3600 + minute * 60 + second
    # Half-up rounding; 995-999 ms gives 100, printed as-is without carry
    centiseconds = (millisecond + 5) // 10
    return f"[{total_seconds // 60:02d}:{total_seconds % 60:02d}.{centiseconds:02d}]"


def _timestamp_tag(line: str) -> Optional[str]:
    arrow_pos = line.find("-->")

    time_start = 0
    prefix = CUE_PREFIX_RE.match(line)
    if prefix:
        time_start = prefix.end()

    if time_start >= arrow_pos:
        return None

    start_time = line[time_start:arrow_pos].rstrip(WHITESPACE)
    if not start_time:
        return None

    parsed = parse_timestamp(start_time)
    if parsed is None:
        return None
    return format_tag(*parsed)


def strip_trailing_number(text: str) -> str:
    """Drop the last space-delimited token when it is made only of digits."""
    last_space = text.rfind(" ")
    if last_space != -1 and DIGITS_RE.fullmatch(text[last_space + 1 :]):
        return text[:last_space]
    return text


def convert_line(line: str, state: ParserState) -> Optional[str]:
    """
    Classify one source line and return the LRC text it produces, if any.

    Timestamp tags are returned without a newline so the following lyric
    line lands on the same output line. `state` is updated in place.
    """
    if not state.header_seen and (
        "WEBVTT" in line or not line or line.startswith("\r")
    ):
        if "WEBVTT" in line:
            state.header_seen = True
        return None

    if not line or any(marker in line for marker in METADATA_MARKERS):
        return None

    # Standalone cue number
    if DIGITS_RE.fullmatch(line.lstrip(WHITESPACE)):
        return None

    if "-->" in line:
        tag = _timestamp_tag(line)
        if tag is not None:
            state.timestamp_found = True
        return tag

    if state.timestamp_found:
        return strip_trailing_number(line) + "\n"

    return None


def vtt_to_lrc(vtt_path: Path, lrc_path: Path, encoding: str = "utf-8") -> int:
    """
    Convert a WebVTT file into an LRC file.

    Undecodable bytes are carried through unchanged. Returns the number of
    timestamp tags written. Raises SourceOpenError or DestOpenError when a
    file cannot be opened; the source is closed before DestOpenError is raised.
    """
    try:
        src = open(
            vtt_path, "r", encoding=encoding, errors="surrogateescape", newline="\n"
        )
    except OSError as e:
        raise SourceOpenError(vtt_path) from e

    with src:
        try:
            dest = open(
                lrc_path, "w", encoding=encoding, errors="surrogateescape", newline=""
            )
        except OSError as e:
            raise DestOpenError(lrc_path) from e

        tags = 0
        state = ParserState()
        with dest:
            for raw in src:
                out = convert_line(strip_line_ending(raw), state)
                if out is None:
                    continue
                if not out.endswith("\n"):
                    tags += 1
                dest.write(out)

    return tags
