"""
Unit Tests - Configuration
"""
import json
import logging

import pytest
import structlog

from multidim.config import Settings, configure_logging, get_settings
from multidim.config.logging import resolve_log_level
from multidim.config.settings import MonitoringSettings, TimeSettings


class TestSettings:
    """Tests for Settings"""
    
    def test_defaults(self, test_settings):
        """Test default dimension settings"""
        assert test_settings.app_env == "testing"
        assert test_settings.dimensions.time_dimension_id == "time"
        assert test_settings.dimensions.illegal_placeholder == "ILLEGAL"
        assert test_settings.dimensions.label_separator == ", "
        assert test_settings.time.default_granularity == "Month"
    
    def test_invalid_env(self):
        """Test environment validation"""
        with pytest.raises(ValueError):
            Settings(app_env="moon")
    
    def test_granularity_normalized(self):
        """Test granularity is capitalized and validated"""
        assert TimeSettings(default_granularity="quarter").default_granularity == "Quarter"
        with pytest.raises(ValueError):
            TimeSettings(default_granularity="fortnight")
    
    def test_cached(self):
        """Test settings are loaded once"""
        assert get_settings() is get_settings()


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it"""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
    structlog.contextvars.clear_contextvars()


class TestLogging:
    """Tests for logging configuration"""
    
    def test_level_resolution(self):
        """Test override beats debug, and debug beats LOG_LEVEL"""
        quiet = Settings(app_env="testing", monitoring=MonitoringSettings(log_level="warning"))
        loud = Settings(app_env="testing", debug=True, monitoring=MonitoringSettings(log_level="warning"))
        
        assert resolve_log_level(quiet) == logging.WARNING
        assert resolve_log_level(loud) == logging.DEBUG
        assert resolve_log_level(loud, "error") == logging.ERROR
        assert resolve_log_level(quiet, "chatty") == logging.INFO
    
    def test_configure_logging(self, restore_root_logger, test_settings):
        """Test the root logger gets a stdout handler at the requested level"""
        configure_logging("DEBUG", settings=test_settings)
        
        assert restore_root_logger.level == logging.DEBUG
        assert any(isinstance(handler, logging.StreamHandler) for handler in restore_root_logger.handlers)
    
    def test_application_context_bound(self, restore_root_logger, test_settings):
        """Test app name and environment are attached to every event"""
        configure_logging(settings=test_settings)
        
        context = structlog.contextvars.get_contextvars()
        assert context == {"app": "multidim-analytics", "env": "testing"}
    
    def test_file_handler_writes_json(self, restore_root_logger, tmp_path):
        """Test LOG_FILE mirrors events as JSON lines with the bound context"""
        log_file = tmp_path / "multidim.log"
        settings = Settings(
            app_env="staging",
            monitoring=MonitoringSettings(log_format="json", log_file=str(log_file)),
        )
        configure_logging("INFO", settings=settings)
        
        structlog.get_logger("tests.logging").warning("Unresolved ids seen", count=2)
        for handler in restore_root_logger.handlers:
            handler.flush()
        
        record = json.loads(log_file.read_text(encoding="utf-8").strip().splitlines()[-1])
        assert record["event"] == "Unresolved ids seen"
        assert record["count"] == 2
        assert record["level"] == "warning"
        assert record["env"] == "staging"
