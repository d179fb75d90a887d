"""
Error types raised by Sublinex.

Every error derives from SublinexError so the CLI can report any of them
with a single message and a non-zero exit code.
"""
from pathlib import Path


class SublinexError( Exception ):
    """Base class for all Sublinex errors."""


class MalformedTimestamp( SublinexError ):
    """A target timestamp string is not a valid hh:mm:ss:ms value."""

    def __init__( self, text: str, reason: str ):
        super().__init__( f"Malformed timestamp '{text}': {reason} (expected hh:mm:ss:ms)" );
        self.text = text;
        self.reason = reason;


class DegenerateTrack( SublinexError ):
    """The track cannot define a retiming ratio (empty, one entry, or zero duration)."""

    def __init__( self, detail: str ):
        super().__init__( f"Cannot retime track: {detail}" );
        self.detail = detail;


class OutOfRangeTimestamp( SublinexError ):
    """A computed timestamp would be negative."""

    def __init__( self, value_ms: int, detail: str = "" ):
        message = f"Timestamp out of range: {value_ms} ms";
        if detail:
            message += f" ({detail})";
        super().__init__( message );
        self.value_ms = value_ms;
        self.detail = detail;


class InvalidTargetRange( SublinexError ):
    """The last target time lies before the first target time."""

    def __init__( self, target_first_ms: int, target_last_ms: int ):
        super().__init__(
            f"Target last time ({target_last_ms} ms) is before target first time ({target_first_ms} ms)"
        );
        self.target_first_ms = target_first_ms;
        self.target_last_ms = target_last_ms;


class ParseError( SublinexError ):
    """The input subtitle file could not be read."""

    def __init__( self, path: Path, detail: str ):
        super().__init__( f"Cannot parse subtitle file '{path}': {detail}" );
        self.path = path;
        self.detail = detail;


class WriteError( SublinexError ):
    """The output subtitle file could not be written."""

    def __init__( self, path: Path, detail: str ):
        super().__init__( f"Cannot write subtitle file '{path}': {detail}" );
        self.path = path;
        self.detail = detail;


class BackupError( SublinexError ):
    """An existing output file could not be backed up before replacement."""

    def __init__( self, path: Path, detail: str ):
        super().__init__( f"Failed to back up '{path}': {detail}" );
        self.path = path;
        self.detail = detail;
