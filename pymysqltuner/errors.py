"""
Module to contain the exceptions raised while tuning
"""


class TunerError(Exception):
    """Base class for errors raised by PyMySQLTuner"""


class DataAccessError(TunerError):
    """Connectivity or query failure while talking to the server"""


class MissingPrecondition(TunerError):
    """Server facts required by the tuner were never loaded"""


class CancelledByCaller(TunerError):
    """The caller stopped listening before the scan finished"""
