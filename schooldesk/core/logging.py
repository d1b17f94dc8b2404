import inspect
import logging
import time
from logging.handlers import RotatingFileHandler
import os
import json
from datetime import datetime, timezone
from functools import wraps
from typing import Optional
import traceback

from schooldesk.core.config import get_logging_config

class CustomJsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""
    def __init__(self, **kwargs):
        super().__init__()
        self.kwargs = kwargs

    def format(self, record):
        json_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if hasattr(record, 'request_id'):
            json_record['request_id'] = record.request_id

        if record.exc_info:
            json_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'duration'):
            json_record['duration_ms'] = record.duration

        if self.kwargs.get('extra_fields'):
            for field in self.kwargs['extra_fields']:
                if hasattr(record, field):
                    json_record[field] = getattr(record, field)

        return json.dumps(json_record, default=str)

class LoggerFactory:
    """Factory class for creating and configuring loggers"""

    @staticmethod
    def create_logger(name: str, log_dir: Optional[str] = None, level: str = "INFO") -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level))

        # Remove existing handlers if any
        if logger.handlers:
            logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(getattr(logging, level))
        console.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(console)

        if log_dir is None:
            return logger

        os.makedirs(log_dir, exist_ok=True)

        file_handlers = {
            'app': RotatingFileHandler(
                os.path.join(log_dir, 'app.log'),
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5
            ),
            'error': RotatingFileHandler(
                os.path.join(log_dir, 'error.log'),
                maxBytes=10 * 1024 * 1024,
                backupCount=5
            ),
        }

        for handler_name, handler in file_handlers.items():
            if handler_name == 'error':
                handler.setLevel(logging.ERROR)
            else:
                handler.setLevel(getattr(logging, level))
            handler.setFormatter(CustomJsonFormatter(extra_fields=['expiration']))
            logger.addHandler(handler)

        return logger

def log_function_call(logger):
    """Decorator logging entry, exit and duration (ms) of sync or async callables at debug level"""
    def decorator(func):
        name = func.__qualname__

        def finished(start_time):
            duration = (time.perf_counter() - start_time) * 1000
            logger.debug(f"Exiting function: {name}", extra={"duration": round(duration, 2)})

        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.perf_counter()
                logger.debug(f"Entering function: {name}")
                try:
                    result = await func(*args, **kwargs)
                except Exception:
                    logger.debug(f"Error in function: {name}", exc_info=True)
                    raise
                finished(start_time)
                return result
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            logger.debug(f"Entering function: {name}")
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.debug(f"Error in function: {name}", exc_info=True)
                raise
            finished(start_time)
            return result
        return sync_wrapper
    return decorator

# Create default logger instance
_config = get_logging_config()
logger = LoggerFactory.create_logger("schooldesk", log_dir=_config["log_dir"], level=_config["log_level"])
