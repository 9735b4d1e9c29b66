"""
app/utils/logging.py
───────────────────
Configures structured logging for production.
"""
import os
import logging
from logging.handlers import RotatingFileHandler
from flask import request

from app.cart.session import peek_session_id


class RequestFormatter(logging.Formatter):
    """
    Custom formatter that injects request info (IP, URL, guest session
    token) into logs if context is available.
    """
    def format(self, record):
        if request:
            record.url = request.url
            record.remote_addr = request.remote_addr
            record.guest = peek_session_id()
        else:
            record.url = None
            record.remote_addr = None
            record.guest = None
        if not hasattr(record, 'event'):
            record.event = '-'
        return super().format(record)


def setup_logging(app):
    """
    Configure rotating file logging: logs/app.log
    Max size: 5MB
    Backup count: 5 files
    Format: timestamp | level | module | ip | url | guest | event | message

    Handlers go on app.logger, which is the `app` logger, so module
    loggers under app.* (cart, orders, store) share them.
    """
    # 1. File Logger (skipped under test and on read-only filesystems)
    if not app.testing:
        try:
            log_dir = os.path.join(app.root_path, '..', 'logs')
            os.makedirs(log_dir, exist_ok=True)

            file_handler = RotatingFileHandler(
                os.path.join(log_dir, 'app.log'),
                maxBytes=5 * 1024 * 1024,
                backupCount=5
            )
            file_handler.setFormatter(RequestFormatter(
                '%(asctime)s | %(levelname)s | %(name)s | %(remote_addr)s | %(url)s'
                ' | %(guest)s | %(event)s | %(message)s'
            ))
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
        except OSError:
            pass

    # 2. Stdout Logger (Critical for container/cloud logs)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s'
    ))
    stream_handler.setLevel(logging.INFO)
    app.logger.addHandler(stream_handler)

    app.logger.setLevel(logging.INFO)
    app.logger.info("Menu ordering startup")
