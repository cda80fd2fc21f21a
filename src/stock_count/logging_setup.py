import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Marks the handler we install so Streamlit reruns don't stack duplicates
_HANDLER_NAME = "stock_count"


def setup_logging(settings) -> logging.Logger:
    """Configure root logging once for the dashboard process."""
    level = logging.getLevelName(str(settings.log_level).upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger()
    logger.setLevel(level)

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(level)

    return logger
