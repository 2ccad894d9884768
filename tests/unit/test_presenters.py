"""Tests for progress callback implementations."""

import logging

from word_wizard.presenters import LoggingProgressCallback, NullProgressCallback


class TestLoggingProgressCallback:
    def test_counts_and_logs(self, caplog):
        progress = LoggingProgressCallback()

        with caplog.at_level(logging.INFO, logger="word_wizard.presenters.logging_presenter"):
            progress.on_start(3, "Processing 3 terms")
            progress.on_progress(1, "alpha")
            progress.on_error("beta", "offline")
            progress.on_progress(3, "gamma")
            progress.on_complete()

        assert progress.total == 3
        assert progress.current == 3
        assert progress.failed == 1
        assert "Processing 3 terms (3 terms)" in caplog.text
        assert "Failed beta: offline" in caplog.text
        assert "Batch complete: 2/3 succeeded" in caplog.text


class TestNullProgressCallback:
    def test_accepts_all_calls(self, null_progress):
        assert isinstance(null_progress, NullProgressCallback)
        null_progress.on_start(5, "batch")
        null_progress.on_progress(1, "alpha")
        null_progress.on_error("beta", "offline")
        null_progress.on_complete()
