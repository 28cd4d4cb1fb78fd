"""
Tests for sysconftrack.logging module.
"""

from __future__ import annotations

from sysconftrack.logging import (
    Logger,
    DefaultLogger,
    SilentLogger,
    get_global_logger,
    get_logger,
    set_global_logger,
)


class TestLoggers:
    """Tests for logger output routing."""

    def test_default_logger_respects_verbosity(self, capsys):
        """Test that verbose and debug output is gated by flags."""
        quiet = DefaultLogger()
        quiet.verbose("STATE", "hidden")
        quiet.debug("STATE", "hidden")
        assert capsys.readouterr().out == ""

        loud = get_logger(debug=True)
        loud.verbose("STATE", "shown")
        loud.debug("STATE", "also shown")
        assert capsys.readouterr().out == "[STATE] shown\n[STATE] also shown\n"

    def test_errors_go_to_stderr(self, capsys):
        """Test that both loggers report errors on stderr."""
        DefaultLogger().error("STATE", "boom")
        SilentLogger().error("STATE", "bang")

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == "[STATE] boom\n[STATE] bang\n"

    def test_global_logger_roundtrip(self):
        """Test setting and getting the global logger."""
        logger = DefaultLogger(verbose=True)
        set_global_logger(logger)

        assert get_global_logger() is logger

    def test_loggers_implement_exactly_the_protocol(self):
        """Test that both loggers expose the protocol's channels and nothing else."""

        def channels(cls):
            return {name for name in vars(cls) if not name.startswith("_")}

        assert channels(Logger) == {"verbose", "debug", "error"}
        assert channels(DefaultLogger) == channels(Logger)
        assert channels(SilentLogger) == channels(Logger)
