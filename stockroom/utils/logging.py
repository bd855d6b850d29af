"""
stockroom/utils/logging.py
──────────────────────────
Configures application logging: rotating file + stdout.
"""
import os
import logging
from logging.handlers import RotatingFileHandler
from flask import g, has_request_context, request

STDOUT_HANDLER = "stockroom-stdout"
FILE_HANDLER = "stockroom-file"


class RequestFormatter(logging.Formatter):
    """
    Custom formatter that injects request info (IP, URL, user id when
    signed in) into log records if a request context is available.
    """
    def format(self, record):
        if has_request_context():
            record.url = request.url
            record.remote_addr = request.remote_addr
            record.user_id = g.get('user_id')
        else:
            record.url = None
            record.remote_addr = None
            record.user_id = None
        return super().format(record)


def _has_handler(app, name):
    return any(h.get_name() == name for h in app.logger.handlers)


def setup_logging(app):
    """
    Configure rotating file logging: logs/app.log
    Max size: 5MB
    Backup count: 5 files
    Format: timestamp | level | module | ip | url | user | message
    """
    # app.logger is shared by every app built in this process, so each
    # handler is attached once.
    if app.config.get('LOG_TO_FILE', True) and not _has_handler(app, FILE_HANDLER):
        try:
            log_dir = os.path.join(app.root_path, '..', 'logs')
            os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'app.log'),
                maxBytes=5 * 1024 * 1024,
                backupCount=5
            )
            file_handler.set_name(FILE_HANDLER)
            file_handler.setFormatter(RequestFormatter(
                '%(asctime)s | %(levelname)s | %(name)s | %(remote_addr)s | %(url)s | '
                'user=%(user_id)s | %(message)s'
            ))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
        except OSError:
            app.logger.warning("File logging disabled: log directory is not writable")

    # Stdout (container / platform logs)
    if not _has_handler(app, STDOUT_HANDLER):
        stream_handler = logging.StreamHandler()
        stream_handler.set_name(STDOUT_HANDLER)
        stream_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s"
        ))
        stream_handler.setLevel(logging.INFO)
        app.logger.addHandler(stream_handler)

    app.logger.setLevel(logging.INFO)
    app.logger.info("Stockroom startup")
