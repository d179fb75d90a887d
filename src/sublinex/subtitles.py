"""
SubRip subtitle loading and saving for retiming.
"""
import os
import stat
import tempfile
from pathlib import Path
from typing import List, Optional
import pysrt

from .errors import ParseError, WriteError
from .retime import CaptionEntry
from .timestamps import Timestamp, ms_to_timestamp, timestamp_to_ms


def srt_time_to_ms( srt_time: pysrt.SubRipTime ) -> int:
    """Convert a pysrt time to milliseconds."""
    return timestamp_to_ms( Timestamp(
        srt_time.hours,
        srt_time.minutes,
        srt_time.seconds,
        srt_time.milliseconds
    ) );


def ms_to_srt_time( ms: int ) -> pysrt.SubRipTime:
    """Convert milliseconds to a pysrt time."""
    return pysrt.SubRipTime( *ms_to_timestamp( ms ) );


class SubtitleTrack:
    """
    A parsed subtitle file and the caption entries retimed from it.

    The pysrt file is kept so numbering, text and line endings survive a
    load/save cycle untouched; only the timings flow back from entries.
    """

    def __init__( self, path: Path, subs: pysrt.SubRipFile, encoding: str ):
        self.path = path;
        self.subs = subs;
        self.encoding = encoding;
        self.entries: List[CaptionEntry] = [
            CaptionEntry(
                index=item.index,
                start_ms=srt_time_to_ms( item.start ),
                end_ms=srt_time_to_ms( item.end ),
                text=item.text
            )
            for item in subs
        ];

    def __len__( self ):
        return len( self.entries );

    def __repr__( self ):
        return f"SubtitleTrack(path='{self.path}', entries={len( self.entries )}, encoding='{self.encoding}')";

    def sync_items( self ):
        """Copy entry timings back into the pysrt items."""
        for item, entry in zip( self.subs, self.entries ):
            item.start = ms_to_srt_time( entry.start_ms );
            item.end = ms_to_srt_time( entry.end_ms );


def load_track( path: Path, encoding: Optional[str] = None ) -> SubtitleTrack:
    """
    Parse an SRT file into a SubtitleTrack.

    Args:
        path: Path to the .srt file
        encoding: Text encoding; detected from the BOM (UTF-8 otherwise) when None

    Returns:
        SubtitleTrack with one CaptionEntry per cue, in file order

    Raises:
        ParseError: if the file is missing, undecodable, malformed or empty
    """
    path = Path( path );

    if not path.is_file():
        raise ParseError( path, "file not found" );

    try:
        subs = pysrt.open(
            str( path ),
            encoding=encoding,
            error_handling=pysrt.SubRipFile.ERROR_RAISE
        );
    except LookupError as e:
        raise ParseError( path, f"unknown encoding '{encoding}'" ) from e;
    except UnicodeError as e:
        raise ParseError( path, f"cannot decode as {encoding or 'utf-8'}: {e}" ) from e;
    except ( OSError, pysrt.Error ) as e:
        raise ParseError( path, str( e ) or type( e ).__name__ ) from e;

    if len( subs ) == 0:
        raise ParseError( path, "no subtitle cues found" );

    return SubtitleTrack( path, subs, subs.encoding );


def save_track( track: SubtitleTrack, path: Path, encoding: Optional[str] = None ) -> Path:
    """
    Write a track to path atomically.

    The file is written next to its destination under a temporary name and
    renamed into place only once fully written, so a failed write never
    leaves a truncated output behind.

    Args:
        track: Track whose entry timings should be written
        path: Destination .srt path
        encoding: Output encoding; defaults to the source file's encoding

    Returns:
        The destination path

    Raises:
        WriteError: if the file cannot be written
    """
    path = Path( path );
    encoding = encoding or track.encoding;

    track.sync_items();

    directory = path.parent;
    if not directory.is_dir():
        raise WriteError( path, f"directory does not exist: {directory}" );

    try:
        fd, tmp_name = tempfile.mkstemp( prefix=f".{path.name}.", suffix=".tmp", dir=str( directory ) );
    except OSError as e:
        raise WriteError( path, str( e ) ) from e;

    os.close( fd );

    try:
        track.subs.save( tmp_name, encoding=encoding );
        os.chmod( tmp_name, _output_mode( path ) );
        os.replace( tmp_name, path );
    except LookupError as e:
        _remove_quietly( tmp_name );
        raise WriteError( path, f"unknown encoding '{encoding}'" ) from e;
    except ( OSError, UnicodeError ) as e:
        _remove_quietly( tmp_name );
        raise WriteError( path, str( e ) ) from e;

    return path;


def _output_mode( path: Path ) -> int:
    """Permissions for the written file: the replaced file's, else the umask default."""
    if path.exists():
        return stat.S_IMODE( path.stat().st_mode );

    umask = os.umask( 0 );
    os.umask( umask );
    return 0o666 & ~umask;


def _remove_quietly( name: str ):
    try:
        os.remove( name );
    except FileNotFoundError:
        pass;
