"""
Timestamp conversion between hh:mm:ss:ms components and millisecond counts.
"""
import re
from typing import NamedTuple

from .errors import MalformedTimestamp, OutOfRangeTimestamp


MS_PER_HOUR = 3600000;
MS_PER_MINUTE = 60000;
MS_PER_SECOND = 1000;

# Widest value each field may hold (8-bit h/m/s, 16-bit ms)
MAX_CLOCK_FIELD = 255;
MAX_MILLISECONDS_FIELD = 65535;

_FIELD_PATTERN = re.compile( r"[0-9]+" );


class Timestamp( NamedTuple ):
    """A point in a subtitle track as hours, minutes, seconds and milliseconds."""

    hours: int;
    minutes: int;
    seconds: int;
    milliseconds: int;


def timestamp_to_ms( ts: Timestamp ) -> int:
    """Flatten timestamp components into a millisecond count."""
    return (
        ts.hours * MS_PER_HOUR +
        ts.minutes * MS_PER_MINUTE +
        ts.seconds * MS_PER_SECOND +
        ts.milliseconds
    );


def ms_to_timestamp( ms: int ) -> Timestamp:
    """
    Split a millisecond count into timestamp components.

    Components are always recomputed with division and modulo, so a value
    built from non-canonical components (e.g. 1500 milliseconds) comes back
    normalized.

    Raises:
        OutOfRangeTimestamp: if ms is negative
    """
    if ms < 0:
        raise OutOfRangeTimestamp( ms, "millisecond counts cannot be negative" );

    return Timestamp(
        hours=ms // MS_PER_HOUR,
        minutes=( ms % MS_PER_HOUR ) // MS_PER_MINUTE,
        seconds=( ms % MS_PER_MINUTE ) // MS_PER_SECOND,
        milliseconds=ms % MS_PER_SECOND
    );


def parse_target_timestamp( text: str ) -> int:
    """
    Parse an hh:mm:ss:ms string into a millisecond count.

    Each field must be plain decimal digits. Hours, minutes and seconds
    must fit in 0-255 and milliseconds in 0-65535; values are not required
    to be canonical ("00:90:00:000" is 90 minutes).

    Args:
        text: Timestamp string such as "01:02:03:456"

    Returns:
        Millisecond count

    Raises:
        MalformedTimestamp: if the string is not four valid fields
    """
    if text is None:
        raise MalformedTimestamp( "", "no value given" );

    fields = text.strip().split( ":" );
    if len( fields ) != 4:
        raise MalformedTimestamp( text, f"expected 4 colon-separated fields, got {len( fields )}" );

    names = ( "hours", "minutes", "seconds", "milliseconds" );
    limits = ( MAX_CLOCK_FIELD, MAX_CLOCK_FIELD, MAX_CLOCK_FIELD, MAX_MILLISECONDS_FIELD );

    values = [];
    for name, limit, field in zip( names, limits, fields ):
        if not _FIELD_PATTERN.fullmatch( field ):
            raise MalformedTimestamp( text, f"{name} field '{field}' is not an unsigned integer" );

        # Leading zeros aside, more digits than the limit has cannot fit
        significant = field.lstrip( "0" );
        if len( significant ) > len( str( limit ) ):
            raise MalformedTimestamp( text, f"{name} field has too many digits (limit {limit})" );

        value = int( significant or "0" );
        if value > limit:
            raise MalformedTimestamp( text, f"{name} field {value} exceeds {limit}" );

        values.append( value );

    return timestamp_to_ms( Timestamp( *values ) );


def format_timestamp( ms: int ) -> str:
    """Render a millisecond count as hh:mm:ss:ms."""
    ts = ms_to_timestamp( ms );
    return f"{ts.hours:02d}:{ts.minutes:02d}:{ts.seconds:02d}:{ts.milliseconds:03d}";
