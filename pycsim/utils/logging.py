import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "pycsim") -> logging.Logger:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    return logging.getLogger(name)


def set_verbosity(verbose: bool):
    """Shows debug records from the pycsim loggers when running verbosely."""
    logging.getLogger("pycsim").setLevel(logging.DEBUG if verbose else logging.INFO)
