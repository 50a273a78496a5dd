"""Logging for the vault: console always, rotating file when configured."""

import logging
import logging.handlers
import os
from pathlib import Path

LOGGER_NAME = 'cipher_vault'


class RedactingFormatter(logging.Formatter):
    """Formatter that hides long strings and raw bytes passed as log args.

    Entry content and OAuth tokens are long strings, so they never end up in
    the log output verbatim. Exceptions are reduced to their class name.
    """

    max_arg_length = 64

    def format(self, record):
        if record.args and isinstance(record.args, tuple):
            safe = []
            for arg in record.args:
                if isinstance(arg, (bytes, bytearray)):
                    safe.append(f'<{len(arg)} bytes>')
                elif isinstance(arg, BaseException):
                    # Driver errors echo bound parameters, i.e. entry content
                    safe.append(f'<{type(arg).__name__}>')
                elif isinstance(arg, str) and len(arg) > self.max_arg_length:
                    safe.append(f'<{len(arg)} chars>')
                else:
                    safe.append(arg)
            record.args = tuple(safe)
        return super().format(record)


def setup_logging(level: str = 'INFO', log_dir: str | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    logger.propagate = False

    formatter = RedactingFormatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    # avoid duplicate handlers when the app is created more than once
    if not any(type(h) is logging.StreamHandler for h in logger.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        logger.addHandler(console)

    has_file = any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
    if log_dir and not has_file:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handler = logging.handlers.RotatingFileHandler(
            path / 'cipher_vault.log', maxBytes=10 * 1024 * 1024, backupCount=3, encoding='utf-8'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        try:
            os.chmod(path / 'cipher_vault.log', 0o600)
        except OSError:
            pass

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f'{LOGGER_NAME}.{name}')
