"""
CLI entry point for Sublinex with argument parsing and environment variable loading.
"""
import argparse
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

from . import __version__
from .errors import MalformedTimestamp, SublinexError
from .logging import LOG_LEVELS, setup_logging
from .timestamps import parse_target_timestamp


class SublinexCLI:
    """
    Command line interface for Sublinex linear subtitle retiming.

    Defaults for logging, encoding and backups can come from the
    environment (or a .env file); command line flags always win.
    """

    def __init__( self ):
        self.parser = self._create_parser();
        self.args = None;
        self.logger = None;

    def _create_parser( self ):
        """Create argument parser with all Sublinex options."""
        parser = argparse.ArgumentParser(
            prog="sublinex",
            description="Linearly retime a subtitle file so its first and last captions start at the given times",
            epilog="Environment variables: SUBLINEX_LOG_LEVEL, SUBLINEX_LOG_DIR, SUBLINEX_ENCODING, SUBLINEX_BACKUP_DIR"
        );

        parser.add_argument(
            "input",
            type=Path,
            help="SubRip subtitle file to retime (any extension)"
        );

        parser.add_argument(
            "output",
            type=Path,
            help="Where to write the retimed subtitles"
        );

        parser.add_argument(
            "--first", "-f",
            required=True,
            metavar="HH:MM:SS:MS",
            help="New start time of the first caption"
        );

        parser.add_argument(
            "--last", "-l",
            required=True,
            metavar="HH:MM:SS:MS",
            help="New start time of the last caption"
        );

        parser.add_argument(
            "--encoding", "-e",
            default=None,
            help="Input text encoding (default: $SUBLINEX_ENCODING, else detected from BOM, else utf-8)"
        );

        parser.add_argument(
            "--output-encoding",
            default=None,
            help="Output text encoding (default: same as input)"
        );

        parser.add_argument(
            "--log-level",
            type=str.upper,
            choices=LOG_LEVELS,
            default=None,
            help="Logging level (default: $SUBLINEX_LOG_LEVEL or INFO)"
        );

        parser.add_argument(
            "--log-dir",
            type=Path,
            default=None,
            help="Also write a rotating log file into this directory (default: $SUBLINEX_LOG_DIR)"
        );

        parser.add_argument(
            "--backup-dir",
            type=Path,
            default=None,
            help="Back up an existing output file here before replacing it (default: $SUBLINEX_BACKUP_DIR)"
        );

        parser.add_argument(
            "--keep-backups",
            type=int,
            default=10,
            help="Number of backups to keep per file (default: 10)"
        );

        # Mode flags
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug mode with verbose output (same as --log-level DEBUG)"
        );

        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Retime and report without writing the output file"
        );

        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail instead of clamping timestamps that would become negative"
        );

        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        );

        return parser;

    def _load_environment( self ):
        """Load environment variables from .env file and system."""
        env_file = Path( ".env" );
        if env_file.exists():
            load_dotenv( env_file );

        self.env_log_level = os.getenv( "SUBLINEX_LOG_LEVEL" );
        self.env_log_dir = os.getenv( "SUBLINEX_LOG_DIR" );
        self.env_encoding = os.getenv( "SUBLINEX_ENCODING" );
        self.env_backup_dir = os.getenv( "SUBLINEX_BACKUP_DIR" );

    def _apply_environment_defaults( self ):
        """Fill options not given on the command line from the environment."""
        if self.args.debug:
            self.args.log_level = "DEBUG";
        elif self.args.log_level is None:
            self.args.log_level = ( self.env_log_level or "INFO" ).upper();

        if self.args.log_dir is None and self.env_log_dir:
            self.args.log_dir = Path( self.env_log_dir );

        if self.args.encoding is None and self.env_encoding:
            self.args.encoding = self.env_encoding;

        if self.args.backup_dir is None and self.env_backup_dir:
            self.args.backup_dir = Path( self.env_backup_dir );

    def _validate_arguments( self ):
        """Validate parsed arguments and environment setup."""
        errors = [];

        if self.args.log_level not in LOG_LEVELS:
            errors.append( f"Unknown log level: {self.args.log_level}" );

        if not self.args.input.exists():
            errors.append( f"Subtitle file not found: {self.args.input}" );

        for name in ( "first", "last" ):
            try:
                parse_target_timestamp( getattr( self.args, name ) );
            except MalformedTimestamp as e:
                errors.append( f"--{name}: {e}" );

        if self.args.keep_backups < 1:
            errors.append( "Number of backups to keep must be at least 1" );

        return errors;

    def parse_args( self, argv=None ):
        """Parse command line arguments and validate configuration."""
        self.args = self.parser.parse_args( argv );

        self._load_environment();
        self._apply_environment_defaults();

        errors = self._validate_arguments();

        level = self.args.log_level if self.args.log_level in LOG_LEVELS else "INFO";
        try:
            self.logger = setup_logging( level=level, log_dir=self.args.log_dir );
        except OSError as e:
            self.logger = setup_logging( level=level );
            errors.append( f"Cannot use log directory {self.args.log_dir}: {e}" );

        if errors:
            self.logger.error( "Configuration errors:" );
            for error in errors:
                self.logger.error( f"  - {error}" );
            sys.exit( 1 );

        self.logger.debug( f"Sublinex v{__version__} starting..." );
        self.logger.debug( f"Targets: first={self.args.first} last={self.args.last}" );
        self.logger.debug( f"Encoding: {self.args.encoding or 'auto'}" );
        self.logger.debug( f"Strict: {self.args.strict}, dry run: {self.args.dry_run}" );

        return self.args;


def main( argv=None ):
    """Main entry point for the Sublinex CLI."""
    cli = SublinexCLI();
    args = cli.parse_args( argv );

    from .retimer import SubtitleRetimer;

    retimer = SubtitleRetimer(
        input_file=args.input,
        output_file=args.output,
        first=args.first,
        last=args.last,
        encoding=args.encoding,
        output_encoding=args.output_encoding,
        strict=args.strict,
        dry_run=args.dry_run,
        backup_dir=args.backup_dir,
        keep_backups=args.keep_backups
    );

    try:
        retimer.run();
        cli.logger.info( "Subtitle retiming completed successfully!" );
    except SublinexError as e:
        cli.logger.error( str( e ) );
        sys.exit( 1 );
    except KeyboardInterrupt:
        cli.logger.warning( "Interrupted by user" );
        sys.exit( 130 );
    except Exception as e:
        cli.logger.error( f"Unexpected error: {e}" );
        if args.debug:
            raise;
        sys.exit( 1 );

    return 0;


if __name__ == "__main__":
    sys.exit( main() );
