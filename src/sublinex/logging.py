"""
Logging system for Sublinex with Rich console output and optional file logging.
"""
import logging
import shutil
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union
from rich.console import Console
from rich.logging import RichHandler


LOG_LEVELS = ( "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "OFF" );

MAX_LOG_BYTES = 5 * 1024 * 1024;  # 5MB


def resolve_level( level: Union[str, int] ) -> int:
    """Map a level name (or OFF) to a logging level number."""
    if isinstance( level, int ):
        return level;

    name = str( level ).strip().upper();
    if name == "OFF":
        return logging.CRITICAL + 1;
    if name not in LOG_LEVELS:
        raise ValueError( f"Unknown log level: {level}" );

    return logging.getLevelName( name );


class SublinexLogger:
    """
    Logger for Sublinex with Rich display on stderr.

    Features:
    - Rich console output with colors, tracebacks at DEBUG
    - Optional file logging with rotation
    - 5MB size check on startup, moves an oversized log aside
    - Level names DEBUG..CRITICAL plus OFF
    """

    def __init__( self, name: str = "sublinex", level: Union[str, int] = "INFO", log_dir: Optional[Path] = None ):
        self.name = name;
        self.level = resolve_level( level );
        self.console = Console( stderr=True );

        self.log_dir = Path( log_dir ) if log_dir else None;
        self.log_file = None;
        if self.log_dir:
            self.log_dir.mkdir( parents=True, exist_ok=True );
            self.log_file = self.log_dir / f"{name}.log";
            self._check_and_rotate_on_startup();

        self.logger = self._setup_logger();

    @property
    def debug_mode( self ) -> bool:
        return self.level <= logging.DEBUG;

    def _check_and_rotate_on_startup( self ):
        """Move the log file aside if it is already over 5MB."""
        if self.log_file.exists() and self.log_file.stat().st_size > MAX_LOG_BYTES:
            timestamp = datetime.now().isoformat().replace( ":", "-" );
            backup_name = self.log_dir / f"{self.name}.{timestamp}.log";
            shutil.move( str( self.log_file ), str( backup_name ) );

    def _setup_logger( self ):
        """Setup logger with Rich console and optional file handlers."""
        logger = logging.getLogger( self.name );
        logger.setLevel( self.level );
        logger.propagate = False;

        for handler in list( logger.handlers ):
            handler.close();
        logger.handlers.clear();

        console_handler = RichHandler(
            console=self.console,
            rich_tracebacks=self.debug_mode,
            show_time=self.debug_mode,
            show_path=self.debug_mode
        );
        console_handler.setLevel( self.level );
        console_handler.setFormatter( logging.Formatter( "%(message)s" ) );
        logger.addHandler( console_handler );

        if self.log_file:
            file_handler = RotatingFileHandler(
                self.log_file,
                maxBytes=MAX_LOG_BYTES,
                backupCount=5,
                encoding="utf-8"
            );
            file_handler.setLevel( logging.DEBUG );
            file_handler.setFormatter( logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ) );
            logger.addHandler( file_handler );

        return logger;

    def debug( self, message, **kwargs ):
        self.logger.debug( message, **kwargs );

    def info( self, message, **kwargs ):
        self.logger.info( message, **kwargs );

    def warning( self, message, **kwargs ):
        self.logger.warning( message, **kwargs );

    def error( self, message, **kwargs ):
        self.logger.error( message, **kwargs );

    def critical( self, message, **kwargs ):
        self.logger.critical( message, **kwargs );


# Global logger instance
_logger = None;


def get_logger() -> SublinexLogger:
    """Get the global Sublinex logger, creating a default one if needed."""
    global _logger;
    if _logger is None:
        _logger = SublinexLogger();
    return _logger;


def setup_logging( level: Union[str, int] = "INFO", log_dir: Optional[Path] = None ) -> SublinexLogger:
    """(Re)configure the global logger for this process."""
    global _logger;
    _logger = SublinexLogger( level=level, log_dir=log_dir );
    return _logger;
