"""
Basic test cases for Sublinex CLI functionality.
"""
import pytest
from pathlib import Path
from unittest.mock import patch
import sys
import os

# Add src directory to path for testing
sys.path.insert( 0, str( Path( __file__ ).parent.parent / "src" ) );

from sublinex.cli import SublinexCLI, main
from sublinex.subtitles import load_track


SRT_CONTENT = """\
1
00:00:05,000 --> 00:00:06,000
One

2
00:00:15,000 --> 00:00:16,000
Two

""";


@pytest.fixture
def srt_file( tmp_path ):
    path = tmp_path / "input.srt";
    path.write_text( SRT_CONTENT, encoding="utf-8" );
    return path;


@pytest.fixture( autouse=True )
def clean_environment( tmp_path, monkeypatch ):
    """Run every test without SUBLINEX_* variables or a stray .env file."""
    monkeypatch.chdir( tmp_path );
    for key in [ k for k in os.environ if k.startswith( "SUBLINEX_" ) ]:
        monkeypatch.delenv( key );


class TestSublinexCLI:
    """Test cases for Sublinex CLI interface."""

    def test_cli_initialization( self ):
        """Test CLI object creation."""
        cli = SublinexCLI();
        assert cli.parser is not None;
        assert cli.args is None;
        assert cli.logger is None;

    def test_argument_parsing_missing_required( self ):
        """Test CLI with missing required arguments."""
        cli = SublinexCLI();

        with pytest.raises( SystemExit ):
            cli.parse_args( [] );

    def test_argument_parsing_missing_targets( self, srt_file, tmp_path ):
        """Test that both target flags are required."""
        cli = SublinexCLI();

        with pytest.raises( SystemExit ):
            cli.parse_args( [ str( srt_file ), str( tmp_path / "out.srt" ), "--first", "00:00:00:000" ] );

    def test_argument_parsing_valid( self, srt_file, tmp_path ):
        """Test CLI with valid arguments."""
        cli = SublinexCLI();
        args = cli.parse_args( [
            str( srt_file ),
            str( tmp_path / "out.srt" ),
            "--first", "00:00:01:000",
            "-l", "00:01:00:000",
            "--debug"
        ] );

        assert args.input == srt_file;
        assert args.output == tmp_path / "out.srt";
        assert args.first == "00:00:01:000";
        assert args.last == "00:01:00:000";
        assert args.log_level == "DEBUG";
        assert args.encoding is None;
        assert args.strict == False;
        assert args.keep_backups == 10;

    def test_log_level_case_insensitive( self, srt_file, tmp_path ):
        """Test that --log-level accepts lower case names."""
        cli = SublinexCLI();
        args = cli.parse_args( [
            str( srt_file ), str( tmp_path / "out.srt" ),
            "-f", "00:00:00:000", "-l", "00:00:10:000",
            "--log-level", "warning"
        ] );

        assert args.log_level == "WARNING";

    def test_malformed_target_validation( self, srt_file, tmp_path ):
        """Test that malformed target timestamps are configuration errors."""
        cli = SublinexCLI();

        with pytest.raises( SystemExit ) as excinfo:
            cli.parse_args( [
                str( srt_file ), str( tmp_path / "out.srt" ),
                "--first", "1:2:3", "--last", "aa:bb:cc:dd"
            ] );

        assert excinfo.value.code == 1;

    @patch( 'sublinex.cli.Path.exists' )
    def test_file_validation( self, mock_exists ):
        """Test input file existence validation."""
        mock_exists.return_value = False;
        cli = SublinexCLI();

        with pytest.raises( SystemExit ) as excinfo:
            cli.parse_args( [
                'nonexistent.srt', 'out.srt',
                '--first', '00:00:00:000', '--last', '00:00:10:000'
            ] );

        assert excinfo.value.code == 1;

    def test_any_extension_accepted( self, tmp_path ):
        """Test that SubRip content is retimed whatever the file is called."""
        source = tmp_path / "captions.txt";
        source.write_text( SRT_CONTENT, encoding="utf-8" );
        output = tmp_path / "captions.out.txt";

        result = main( [ str( source ), str( output ), "-f", "00:00:00:000", "-l", "00:00:20:000" ] );

        assert result == 0;
        assert [ e.start_ms for e in load_track( output ).entries ] == [ 0, 20000 ];

    def test_unusable_log_dir( self, srt_file, tmp_path ):
        """Test that a log directory that cannot be created is a configuration error."""
        blocker = tmp_path / "not_a_dir";
        blocker.write_text( "file in the way", encoding="utf-8" );
        cli = SublinexCLI();

        with pytest.raises( SystemExit ) as excinfo:
            cli.parse_args( [
                str( srt_file ), "out.srt", "-f", "00:00:00:000", "-l", "00:00:10:000",
                "--log-dir", str( blocker / "logs" )
            ] );

        assert excinfo.value.code == 1;
        assert cli.logger is not None;

    def test_keep_backups_validation( self, srt_file ):
        """Test that at least one backup must be kept."""
        cli = SublinexCLI();

        with pytest.raises( SystemExit ):
            cli.parse_args( [
                str( srt_file ), "out.srt", "-f", "00:00:00:000", "-l", "00:00:10:000",
                "--keep-backups", "0"
            ] );


class TestEnvironmentLoading:
    """Test environment variable loading."""

    @patch.dict( os.environ, {
        'SUBLINEX_LOG_LEVEL': 'error',
        'SUBLINEX_ENCODING': 'latin-1',
        'SUBLINEX_BACKUP_DIR': 'env_backups'
    } )
    def test_environment_defaults( self, srt_file ):
        """Test that environment variables fill unset options."""
        cli = SublinexCLI();
        args = cli.parse_args( [ str( srt_file ), "out.srt", "-f", "00:00:00:000", "-l", "00:00:10:000" ] );

        assert args.log_level == "ERROR";
        assert args.encoding == "latin-1";
        assert args.backup_dir == Path( "env_backups" );

    @patch.dict( os.environ, { 'SUBLINEX_ENCODING': 'latin-1' } )
    def test_flags_override_environment( self, srt_file ):
        """Test that command line flags win over the environment."""
        cli = SublinexCLI();
        args = cli.parse_args( [
            str( srt_file ), "out.srt", "-f", "00:00:00:000", "-l", "00:00:10:000",
            "--encoding", "utf-8"
        ] );

        assert args.encoding == "utf-8";

    def test_dotenv_file( self, srt_file, tmp_path ):
        """Test loading defaults from a .env file in the working directory."""
        ( tmp_path / ".env" ).write_text( "SUBLINEX_LOG_LEVEL=CRITICAL\n", encoding="utf-8" );

        with patch.dict( os.environ, {} ):
            cli = SublinexCLI();
            args = cli.parse_args( [ str( srt_file ), "out.srt", "-f", "00:00:00:000", "-l", "00:00:10:000" ] );

        assert args.log_level == "CRITICAL";

    @patch.dict( os.environ, {}, clear=True )
    def test_missing_environment_variables( self ):
        """Test handling of missing environment variables."""
        cli = SublinexCLI();
        cli._load_environment();

        assert cli.env_log_level is None;
        assert cli.env_encoding is None;
        assert cli.env_backup_dir is None;

    @patch.dict( os.environ, { 'SUBLINEX_LOG_LEVEL': 'LOUD' } )
    def test_invalid_environment_log_level( self, srt_file ):
        """Test that a bad log level from the environment is reported."""
        cli = SublinexCLI();

        with pytest.raises( SystemExit ):
            cli.parse_args( [ str( srt_file ), "out.srt", "-f", "00:00:00:000", "-l", "00:00:10:000" ] );


class TestMain:
    """Test cases for the CLI entry point."""

    def test_main_success( self, srt_file, tmp_path ):
        """Test that a successful run writes the output and returns 0."""
        output = tmp_path / "out.srt";

        result = main( [ str( srt_file ), str( output ), "--first", "00:00:00:000", "--last", "00:00:20:000" ] );

        assert result == 0;
        assert [ e.start_ms for e in load_track( output ).entries ] == [ 0, 20000 ];

    def test_main_log_dir( self, srt_file, tmp_path ):
        """Test that --log-dir writes a log file."""
        log_dir = tmp_path / "logs";

        main( [
            str( srt_file ), str( tmp_path / "out.srt" ),
            "-f", "00:00:00:000", "-l", "00:00:20:000",
            "--log-dir", str( log_dir )
        ] );

        assert ( log_dir / "sublinex.log" ).exists();

    def test_main_degenerate_track_exits( self, tmp_path ):
        """Test that engine errors exit with code 1 and write nothing."""
        source = tmp_path / "single.srt";
        source.write_text( "1\n00:00:01,000 --> 00:00:02,000\nOnly\n\n", encoding="utf-8" );
        output = tmp_path / "out.srt";

        with pytest.raises( SystemExit ) as excinfo:
            main( [ str( source ), str( output ), "-f", "00:00:00:000", "-l", "00:00:10:000" ] );

        assert excinfo.value.code == 1;
        assert not output.exists();

    def test_main_strict_exits( self, tmp_path ):
        """Test that --strict turns clamping into a failure."""
        source = tmp_path / "unordered.srt";
        source.write_text(
            "1\n00:00:10,000 --> 00:00:11,000\nA\n\n"
            "2\n00:00:02,000 --> 00:00:03,000\nB\n\n"
            "3\n00:00:20,000 --> 00:00:21,000\nC\n\n",
            encoding="utf-8"
        );
        output = tmp_path / "out.srt";

        with pytest.raises( SystemExit ) as excinfo:
            main( [ str( source ), str( output ), "-f", "00:00:00:000", "-l", "00:00:10:000", "--strict" ] );

        assert excinfo.value.code == 1;
        assert not output.exists();

    def test_main_interrupted( self, srt_file, tmp_path ):
        """Test that a keyboard interrupt exits with code 130."""
        with patch( 'sublinex.retimer.SubtitleRetimer.run', side_effect=KeyboardInterrupt ):
            with pytest.raises( SystemExit ) as excinfo:
                main( [ str( srt_file ), str( tmp_path / "out.srt" ), "-f", "00:00:00:000", "-l", "00:00:10:000" ] );

        assert excinfo.value.code == 130;


if __name__ == '__main__':
    pytest.main( [ __file__ ] );
