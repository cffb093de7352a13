'''
Logging setup: colored logzero output, configured lazily on the first log call.

Environment variables:
- URLSHAPE_LOGS: overrides the level of every urlshape logger (e.g. URLSHAPE_LOGS=debug)
- URLSHAPE_COLLAPSE_DEBUG_LOGS: redraw consecutive debug lines in place instead of scrolling
'''
import logging
import os
from typing import Optional, Union, cast

import logzero # type: ignore[import]


Level = int
LevelIsh = Optional[Union[Level, str]]

LOGS_ENV = 'URLSHAPE_LOGS'
COLLAPSE_ENV = 'URLSHAPE_COLLAPSE_DEBUG_LOGS'

FORMAT = '%(color)s[%(levelname)-7s %(asctime)s %(name)s %(filename)s:%(lineno)d]%(end_color)s %(message)s'
DATEFMT = '%Y-%m-%d %H:%M:%S'

# marker attribute on the stdlib logger object
_init_done = 'urlshape_logger_ready'


def mklevel(level: LevelIsh) -> Level:
    level = os.environ.get(LOGS_ENV, level)
    if level is None:
        return logging.NOTSET
    if isinstance(level, int):
        return level
    if level.isdigit():
        return int(level)
    return getattr(logging, level.upper())


def setup_logger(logger: logging.Logger, level: LevelIsh) -> None:
    lvl = mklevel(level)
    formatter = logzero.LogFormatter(fmt=FORMAT, datefmt=DATEFMT)
    logger.addFilter(AddExceptionTraceback())

    if not os.environ.get(COLLAPSE_ENV):
        logzero.setup_logger(logger.name, level=lvl, formatter=formatter)
        return

    handler = CollapseDebugHandler()
    handler.setLevel(lvl)
    handler.setFormatter(formatter)
    logger.setLevel(lvl)
    logger.addHandler(handler)
    logger.propagate = False # the root handler would print everything twice


def _defer_setup(logger: logging.Logger, level: LevelIsh) -> None:
    # every logging call goes through isEnabledFor first, so the setup piggybacks on it once
    orig = logger.isEnabledFor

    def isEnabledFor(lvl: int) -> bool:
        if not getattr(logger, _init_done):
            setup_logger(logger, level=level)
            setattr(logger, _init_done, True)
            logger.isEnabledFor = orig # type: ignore[method-assign]
        return orig(lvl)

    setattr(logger, _init_done, False)
    logger.isEnabledFor = isEnabledFor # type: ignore[method-assign]


class LazyLogger(logging.Logger):
    '''
    A stdlib logger which sets up its handlers on first use rather than at import time.
    '''
    def __new__(cls, name: str, level: LevelIsh = 'INFO') -> 'LazyLogger':
        logger = logging.getLogger(name)
        if not hasattr(logger, _init_done):
            _defer_setup(logger, level)
        return cast(LazyLogger, logger)


class AddExceptionTraceback(logging.Filter):
    '''
    Makes logger.error(exc) print the traceback of exc, like logger.exception does inside an except block.
    '''
    def filter(self, record: logging.LogRecord) -> bool:
        if not super().filter(record):
            return False
        exc = record.msg
        if record.levelno == logging.ERROR and isinstance(exc, BaseException):
            if record.exc_info is None or record.exc_info == (None, None, None):
                record.exc_info = (type(exc), exc, exc.__traceback__)
        return True


class CollapseDebugHandler(logging.StreamHandler):
    '''
    Redraws consecutive single line debug messages on the same terminal line.
    Anything else is printed normally and starts on a fresh line.
    '''
    collapsing = False

    def columns(self) -> int:
        if not self.stream.isatty():
            return 0
        try:
            return os.get_terminal_size(self.stream.fileno()).columns
        except OSError:
            return 0

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            collapse = record.levelno == logging.DEBUG and '\n' not in msg
            if self.collapsing:
                # either wipe the previous debug line, or move past it
                self.stream.write('\033[K\r' if collapse else '\n')
            self.collapsing = collapse
            padded = msg.ljust(self.columns())
            self.stream.write(padded if collapse else padded + '\n')
            self.flush()
        except Exception:
            self.handleError(record)
