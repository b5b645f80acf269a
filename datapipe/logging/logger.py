import sys
from pathlib import Path
from typing import Optional
from loguru import logger
from datapipe.config import settings

class LogConfig:
    """Logging configuration for hosts that want datapipe's output via Loguru."""
    @classmethod
    def setup_logging(cls, level: Optional[str] = None, log_dir: Optional[str] = None):
        level = level or settings.LOG_LEVEL
        log_dir = log_dir or settings.LOG_DIR

        logger.remove()

        logger.add(
            sys.stdout,
            enqueue=True,
            backtrace=True,
            diagnose=True,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<magenta>Source:{extra[source]}</magenta> - <level>{message}</level>"
            ),
            level=level,
        )

        if log_dir:
            path = Path(log_dir)
            path.mkdir(parents=True, exist_ok=True)

            logger.add(
                path / "datapipe_{time:YYYY-MM-DD}.log",
                rotation="00:00",
                retention="30 days",
                compression="zip",
                enqueue=True,
                format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | Source:{extra[source]} - {message}",
                level="DEBUG",
            )

            logger.add(
                path / "datapipe_error_{time:YYYY-MM-DD}.log",
                level="ERROR",
                rotation="100 MB",
                enqueue=True,
            )

        logger.configure(extra={"source": "system"})
        logger.enable("datapipe")

def get_logger(name: Optional[str] = None, source: str = "system"):
    """Get logger instance bound to a data source label."""
    if name:
        return logger.bind(name=name, source=source)
    else:
        return logger.bind(source=source)
