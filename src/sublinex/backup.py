"""
Timestamped backups of output files that are about to be overwritten.
"""
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .errors import BackupError
from .logging import get_logger


class BackupManager:
    """
    Copies a file aside before it is replaced and prunes old copies.

    Backups are named <stem>.<ISO-8601 timestamp><suffix> and only the
    newest `keep` copies of each file are retained.
    """

    def __init__( self, backup_dir: Path, keep: int = 10 ):
        if keep < 1:
            raise ValueError( "keep must be at least 1" );

        self.logger = get_logger();
        self.backup_dir = Path( backup_dir );
        self.keep = keep;

    def get_backup_filename( self, original_file: Path ) -> str:
        timestamp = datetime.now().strftime( "%Y-%m-%dT%H-%M-%S-%f" );
        return f"{original_file.stem}.{timestamp}{original_file.suffix}";

    def get_existing_backups( self, original_file: Path ) -> List[Path]:
        """Existing backups of original_file, oldest first."""
        if not self.backup_dir.is_dir():
            return [];

        pattern = f"{original_file.stem}.????-??-??T??-??-??-??????{original_file.suffix}";
        return sorted( self.backup_dir.glob( pattern ), key=lambda p: p.name );

    def apply_retention_policy( self, original_file: Path ) -> int:
        """Remove the oldest backups beyond the limit. Returns how many were removed."""
        backups = self.get_existing_backups( original_file );
        stale = backups[:-self.keep] if len( backups ) > self.keep else [];

        for backup_path in stale:
            try:
                backup_path.unlink();
                self.logger.debug( f"Removed old backup: {backup_path.name}" );
            except OSError as e:
                self.logger.warning( f"Could not remove backup {backup_path}: {e}" );

        if stale:
            self.logger.info( f"Removed {len( stale )} old backup(s) to enforce retention policy" );

        return len( stale );

    def create_backup( self, file_path: Path ) -> Path:
        """
        Copy file_path into the backup directory and prune old copies.

        Raises:
            BackupError: if the file is missing or cannot be copied
        """
        file_path = Path( file_path );
        if not file_path.is_file():
            raise BackupError( file_path, "file not found" );

        backup_path = self.backup_dir / self.get_backup_filename( file_path );

        try:
            self.backup_dir.mkdir( parents=True, exist_ok=True );
            shutil.copy2( file_path, backup_path );
        except OSError as e:
            raise BackupError( file_path, str( e ) ) from e;

        self.logger.info( f"Created backup: {backup_path}" );
        self.apply_retention_policy( file_path );

        return backup_path;

    def backup_before_overwrite( self, file_path: Path ) -> Optional[Path]:
        """Back up file_path if it exists; nothing to do for a new file."""
        file_path = Path( file_path );
        if not file_path.exists():
            self.logger.debug( f"No existing file at {file_path}, skipping backup" );
            return None;

        return self.create_backup( file_path );
