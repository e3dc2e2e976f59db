"""Tests for loguru-based purge logging."""

from loguru import logger

from mlcp.config import PurgeConfig


class TestSetupLogging:
    def setup_method(self):
        logger.remove()

    def teardown_method(self):
        logger.remove()

    def test_no_file_sink_by_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("MLCP_LOG_FILE", raising=False)
        config = PurgeConfig(_env_file=None, library_path=tmp_path)
        config.setup_logging()
        logger.bind(stage="test").warning("console only")
        assert list(tmp_path.iterdir()) == []

    def test_setup_creates_log_dir(self, tmp_path):
        log_file = tmp_path / "logs" / "mlcp.log"
        config = PurgeConfig(_env_file=None, library_path=tmp_path, log_file=log_file)
        config.setup_logging()
        assert log_file.parent.exists()

    def test_file_sink_captures_debug(self, tmp_path):
        log_file = tmp_path / "logs" / "mlcp.log"
        config = PurgeConfig(_env_file=None, library_path=tmp_path, log_file=log_file)
        config.setup_logging()
        logger.bind(stage="test").debug("hello from test")
        assert log_file.exists()
        assert "hello from test" in log_file.read_text()

    def test_stage_context_in_output(self, tmp_path):
        log_file = tmp_path / "mlcp.log"
        config = PurgeConfig(_env_file=None, library_path=tmp_path, log_file=log_file)
        config.setup_logging()
        logger.bind(stage="purge").info("purging")
        assert "purge" in log_file.read_text()

    def test_default_stage_empty(self, tmp_path):
        log_file = tmp_path / "mlcp.log"
        config = PurgeConfig(_env_file=None, library_path=tmp_path, log_file=log_file)
        config.setup_logging()
        logger.info("no stage bound")
        assert "no stage bound" in log_file.read_text()
