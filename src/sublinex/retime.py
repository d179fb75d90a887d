"""
Linear retiming of a caption track.

Shifts every caption so the first one starts at a target time, then scales
the spread of the track about that point so the last caption starts at a
second target time. Operates purely in memory on CaptionEntry objects and
reports what it did through RetimingReport; it does no logging or I/O.
"""
import math
from dataclasses import dataclass
from fractions import Fraction
from typing import List, MutableSequence

from .errors import DegenerateTrack, InvalidTargetRange, OutOfRangeTimestamp
from .timestamps import format_timestamp, parse_target_timestamp


@dataclass
class CaptionEntry:
    """One subtitle cue with millisecond timing."""

    index: int;       # Cue number from the source file
    start_ms: int;    # Start time in milliseconds
    end_ms: int;      # End time in milliseconds
    text: str = "";   # Cue text, never touched by retiming

    def __repr__( self ):
        return f"CaptionEntry(index={self.index}, start={self.start_ms}ms, end={self.end_ms}ms)";


@dataclass( frozen=True )
class RetimingSpec:
    """New start times for the first and last caption of a track."""

    target_first_ms: int;
    target_last_ms: int;

    @classmethod
    def from_strings( cls, first: str, last: str ) -> "RetimingSpec":
        """Build a spec from two hh:mm:ss:ms strings."""
        return cls(
            target_first_ms=parse_target_timestamp( first ),
            target_last_ms=parse_target_timestamp( last )
        );

    @property
    def target_duration_ms( self ) -> int:
        return self.target_last_ms - self.target_first_ms;

    def __str__( self ):
        return f"{format_timestamp( self.target_first_ms )} -> {format_timestamp( self.target_last_ms )}";


@dataclass
class RetimingReport:
    """Summary of a completed retiming pass."""

    entries: int;                # Number of captions retimed
    first_original_ms: int;      # Original start of the first caption
    last_original_ms: int;       # Original start of the last caption
    offset_ms: int;              # Shift applied before scaling
    original_duration_ms: int;   # last_original_ms - first_original_ms
    target_duration_ms: int;     # target_last_ms - target_first_ms
    scale: Fraction;             # target_duration_ms / original_duration_ms
    clamped: int = 0;            # Timestamps saturated at zero


def _saturate( value_ms: int, strict: bool, entry: CaptionEntry, field: str ):
    """Return (value, clamped) with negative values pinned to zero."""
    if value_ms >= 0:
        return value_ms, False;

    if strict:
        raise OutOfRangeTimestamp( value_ms, f"{field} of caption {entry.index}" );

    return 0, True;


def apply_offset( track: MutableSequence[CaptionEntry], offset_ms: int, strict: bool = False ) -> int:
    """
    Shift start and end of every caption by offset_ms.

    Caption durations are preserved unless a timestamp has to be saturated
    at zero. Order is never changed.

    Args:
        track: Captions to mutate in place
        offset_ms: Signed shift in milliseconds
        strict: Raise OutOfRangeTimestamp instead of saturating

    Returns:
        Number of timestamps that were saturated at zero
    """
    clamped = 0;

    for entry in track:
        entry.start_ms, start_clamped = _saturate( entry.start_ms + offset_ms, strict, entry, "start" );
        entry.end_ms, end_clamped = _saturate( entry.end_ms + offset_ms, strict, entry, "end" );
        clamped += start_clamped + end_clamped;

    return clamped;


def apply_ratio(
    track: MutableSequence[CaptionEntry],
    anchor_ms: int,
    original_duration_ms: int,
    target_duration_ms: int,
    strict: bool = False
) -> int:
    """
    Scale every timestamp about anchor_ms by target/original duration.

    Must run after apply_offset: anchor_ms is the first caption's start
    once shifted, so that caption stays put while the spread of the rest
    of the track is stretched or squeezed. Each result is truncated toward
    zero, which means retiming the same track twice is not guaranteed to
    give identical timestamps.

    Args:
        track: Captions to mutate in place
        anchor_ms: Fixed point of the scaling (shifted first start)
        original_duration_ms: Distance between first and last start before retiming
        target_duration_ms: Desired distance between first and last start
        strict: Raise OutOfRangeTimestamp instead of saturating

    Returns:
        Number of timestamps that were saturated at zero

    Raises:
        DegenerateTrack: if original_duration_ms is zero
    """
    if original_duration_ms == 0:
        raise DegenerateTrack( "first and last captions start at the same time" );

    scale = Fraction( target_duration_ms, original_duration_ms );
    clamped = 0;

    for entry in track:
        new_start = math.trunc( anchor_ms + ( entry.start_ms - anchor_ms ) * scale );
        new_end = math.trunc( anchor_ms + ( entry.end_ms - anchor_ms ) * scale );

        entry.start_ms, start_clamped = _saturate( new_start, strict, entry, "start" );
        entry.end_ms, end_clamped = _saturate( new_end, strict, entry, "end" );
        clamped += start_clamped + end_clamped;

    return clamped;


def retime_track( track: List[CaptionEntry], spec: RetimingSpec, strict: bool = False ) -> RetimingReport:
    """
    Retime a track so its first and last captions start at the target times.

    The anchors are the first and last captions by position, not the
    earliest and latest times. The offset pass always runs before the
    ratio pass.

    Raises:
        DegenerateTrack: if the track has fewer than two captions or the
            last caption does not start after the first
        InvalidTargetRange: if the last target precedes the first
        OutOfRangeTimestamp: in strict mode, if a result would be negative
    """
    if not track:
        raise DegenerateTrack( "track has no captions" );

    if len( track ) < 2:
        raise DegenerateTrack( "track needs at least two captions to define a ratio" );

    first_original = track[0].start_ms;
    last_original = track[-1].start_ms;
    original_duration = last_original - first_original;

    if original_duration == 0:
        raise DegenerateTrack( "first and last captions start at the same time" );

    if original_duration < 0:
        raise DegenerateTrack( "last caption starts before the first caption" );

    if spec.target_last_ms < spec.target_first_ms:
        raise InvalidTargetRange( spec.target_first_ms, spec.target_last_ms );

    offset = spec.target_first_ms - first_original;
    clamped = apply_offset( track, offset, strict=strict );

    target_duration = spec.target_duration_ms;
    clamped += apply_ratio(
        track,
        spec.target_first_ms,
        original_duration,
        target_duration,
        strict=strict
    );

    return RetimingReport(
        entries=len( track ),
        first_original_ms=first_original,
        last_original_ms=last_original,
        offset_ms=offset,
        original_duration_ms=original_duration,
        target_duration_ms=target_duration,
        scale=Fraction( target_duration, original_duration ),
        clamped=clamped
    );
