import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from inctask.logging_config import configure_file_logging

def test_configure_file_logging_is_idempotent(tmp_path: Path):
    log_path = tmp_path / "logs" / "inctask.log"
    logger = configure_file_logging(str(log_path))
    configure_file_logging(str(log_path), verbose=True)
    try:
        handlers = [
            h for h in logger.handlers
            if isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_path
        ]
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG

        logging.getLogger("inctask.engine").debug("Nothing changed, skip task run")
        handlers[0].flush()
        assert "Nothing changed" in log_path.read_text(encoding="utf-8")
    finally:
        for h in list(logger.handlers):
            if isinstance(h, RotatingFileHandler):
                logger.removeHandler(h)
                h.close()
        logger.setLevel(logging.NOTSET)
