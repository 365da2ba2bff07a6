import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOGGER_NAME = "countdown"

# Library-side logger. Nothing is attached besides a NullHandler, so an app embedding the engine decides where (and
# whether) these records go. The CLI wires up its own handlers through configure_logging().
log = logging.getLogger(LOGGER_NAME)
log.addHandler(logging.NullHandler())


# Sets up the CLI's logging: one size-capped rotating file holding the timer's transitions across runs, plus an
# optional console echo for --verbose. Handlers are named so calling this again doesn't stack duplicates.
def configure_logging(
        log_dir: Path | None,
        level = logging.INFO,
        console = False,
        console_level = logging.DEBUG,
        max_bytes = 1024 * 1024,
        backup_count = 2,
) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    logger.setLevel(min(level, console_level) if console else level)

    fmt = logging.Formatter(LOG_FORMAT,LOG_DATE_FORMAT)

    file_handler_name = f"{LOGGER_NAME}:file"
    if log_dir is not None and not any(h.get_name() == file_handler_name for h in logger.handlers):
        log_dir.mkdir(parents=True,exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_dir / f"{LOGGER_NAME}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        file_handler.set_name(file_handler_name)
        logger.addHandler(file_handler)

    # stderr, so the clock line on stdout stays readable
    console_handler_name = f"{LOGGER_NAME}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    return logger
