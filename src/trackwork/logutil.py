import logging
from typing import Iterable, Union


def setup_logging(
    level: Union[int, str] = logging.WARNING,
    loggers: Iterable[str] = ("trackwork", "trackwork_cli"),
) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level, format="%(levelname)s %(name)s: %(message)s"
    )
    for name in loggers:
        logging.getLogger(name).setLevel(level)
