import logging

import pytest

from forcegraph.logging_config import setup_logging


class TestSetupLogging:

    def test_level_by_name(self):
        setup_logging("debug")
        logger = logging.getLogger("forcegraph")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_repeated_setup_does_not_duplicate_handlers(self, tmp_path):
        setup_logging(logging.INFO, log_file=str(tmp_path / "graph.log"))
        setup_logging(logging.INFO, log_file=str(tmp_path / "graph.log"))
        assert len(logging.getLogger("forcegraph").handlers) == 2

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")
