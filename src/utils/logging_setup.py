import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def init_logging(level: int = logging.WARNING) -> None:
    """Configure the root logger to write to stderr at ``level``.

    Calling this more than once only updates the level, so repeated CLI runs in
    one process do not stack handlers.

    Args:
        level: Logging level for the root logger
    """
    root = logging.getLogger()
    root.setLevel(level)

    has_stream = any(isinstance(h, logging.StreamHandler) for h in root.handlers)
    if not has_stream:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(stream_handler)
