import logging 

from core.config import LOG_LEVEL

logger = logging.getLogger("prompt_enhancer")
logger.setLevel(getattr(logging , LOG_LEVEL.upper() , logging.INFO))

handler = logging.StreamHandler()

formatter = logging.Formatter(
     "%(asctime)s | %(levelname)s | %(name)s | %(module)s | %(message)s"
)

handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)
