import logging
import sys

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"
_ROOT_NAME = "kidsdoku"


def get_logger(name=None, level=None):
    """
    Returns a logger under the ``kidsdoku`` namespace.

    The first call attaches a single stream handler to the package logger;
    later calls only adjust the level when one is given.
    """
    root = logging.getLogger(_ROOT_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    if level is not None:
        root.setLevel(level)

    if not name or name == _ROOT_NAME:
        return root
    if not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)
