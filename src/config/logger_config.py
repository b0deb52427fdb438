import os
import sys
from pathlib import Path

from loguru import logger

log_dir = Path(os.getenv("LOG_DIR", "logs"))
log_file = log_dir / "docnav_{time}.log"
log_level = os.getenv("LOG_LEVEL", "INFO").upper()

logger.remove()
logger.add(sys.stderr, level=log_level)
logger.add(
    log_file,
    rotation="256 MB",  # rotate once a file reaches 256MB
    retention="10 days",
    compression="zip",
    encoding="utf-8",
    level="DEBUG",
    delay=True,  # no file until the first message
    enqueue=True,
)

if __name__ == "__main__":
    logger.info("info message")
    logger.debug("debug message")
    logger.warning("warning message")
    logger.error("error message")
