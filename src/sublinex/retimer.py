"""
Main retiming controller that runs a subtitle file through the engine.
"""
from pathlib import Path
from typing import Optional

from .backup import BackupManager
from .logging import get_logger
from .retime import RetimingReport, RetimingSpec, retime_track
from .subtitles import SubtitleTrack, load_track, save_track
from .timestamps import format_timestamp


class SubtitleRetimer:
    """
    Main controller for linear subtitle retiming.

    Orchestrates:
    1. Subtitle parsing
    2. Target timestamp parsing
    3. Offset and ratio passes
    4. Summary of the new timings
    5. Backup and atomic write of the output file
    """

    PREVIEW_ENTRIES = 3;

    def __init__(
        self,
        input_file: Path,
        output_file: Path,
        first: str,
        last: str,
        encoding: Optional[str] = None,
        output_encoding: Optional[str] = None,
        strict: bool = False,
        dry_run: bool = False,
        backup_dir: Optional[Path] = None,
        keep_backups: int = 10
    ):
        self.input_file = Path( input_file );
        self.output_file = Path( output_file );
        self.first = first;
        self.last = last;
        self.encoding = encoding;
        self.output_encoding = output_encoding;
        self.strict = strict;
        self.dry_run = dry_run;

        self.logger = get_logger();
        self.backup_manager = BackupManager( backup_dir, keep=keep_backups ) if backup_dir else None;

        # Results storage
        self.track: Optional[SubtitleTrack] = None;
        self.spec: Optional[RetimingSpec] = None;
        self.report: Optional[RetimingReport] = None;
        self.original_times = [];

    def load_subtitles( self ) -> SubtitleTrack:
        self.logger.info( "=== STEP 1: SUBTITLE PARSING ===" );

        self.track = load_track( self.input_file, encoding=self.encoding );
        self.original_times = [ ( entry.start_ms, entry.end_ms ) for entry in self.track.entries ];

        self.logger.info( f"Parsed {len( self.track )} captions from {self.input_file} ({self.track.encoding})" );
        return self.track;

    def parse_targets( self ) -> RetimingSpec:
        self.logger.info( "=== STEP 2: TARGET TIMES ===" );

        self.spec = RetimingSpec.from_strings( self.first, self.last );
        self.logger.info( f"First caption -> {format_timestamp( self.spec.target_first_ms )}" );
        self.logger.info( f"Last caption  -> {format_timestamp( self.spec.target_last_ms )}" );
        return self.spec;

    def retime( self ) -> RetimingReport:
        self.logger.info( "=== STEP 3: RETIMING ===" );

        if self.track is None or self.spec is None:
            raise RuntimeError( "Subtitles and targets must be loaded before retiming" );

        self.report = retime_track( self.track.entries, self.spec, strict=self.strict );

        if self.report.clamped:
            self.logger.warning( f"{self.report.clamped} timestamp(s) would be negative and were set to 00:00:00:000" );

        return self.report;

    def display_summary( self ):
        """Log the retiming parameters and the first few changed captions."""
        report = self.report;

        self.logger.info( "\n=== RETIMING SUMMARY ===" );
        self.logger.info( f"Captions: {report.entries}" );
        self.logger.info( f"Offset: {report.offset_ms:+d} ms" );
        self.logger.info( f"Span: {report.original_duration_ms} ms -> {report.target_duration_ms} ms " \
                         f"(ratio {float( report.scale ):.6f})" );

        for entry, ( old_start, old_end ) in list( zip( self.track.entries, self.original_times ) )[:self.PREVIEW_ENTRIES]:
            self.logger.debug( f"Caption {entry.index}: " \
                              f"{format_timestamp( old_start )} --> {format_timestamp( old_end )}  =>  " \
                              f"{format_timestamp( entry.start_ms )} --> {format_timestamp( entry.end_ms )}" );

    def write_output( self ) -> Path:
        self.logger.info( "=== STEP 4: OUTPUT ===" );

        if self.dry_run:
            self.logger.info( f"Dry run: Would save retimed subtitles to {self.output_file}" );
            return self.output_file;

        if self.backup_manager:
            self.backup_manager.backup_before_overwrite( self.output_file );

        save_track( self.track, self.output_file, encoding=self.output_encoding );
        self.logger.info( f"Saved retimed subtitles: {self.output_file}" );
        return self.output_file;

    def run( self ) -> RetimingReport:
        """
        Run the complete retiming process.

        Returns:
            The RetimingReport of the retiming pass

        Raises:
            SublinexError: on any parse, retiming or write failure
        """
        self.logger.info( f"Input: {self.input_file}" );
        self.logger.info( f"Output: {self.output_file}" );

        self.load_subtitles();
        self.parse_targets();
        self.retime();
        self.display_summary();
        self.write_output();

        return self.report;
