"""Oracle error classes."""


class OracleError(Exception):
    """Base error for oracle queries."""

    pass


class OracleNotInitialized(OracleError):
    """Past queries need a fully written sample buffer."""

    pass


class OracleQueryTooOld(OracleError):
    """Query reaches further back than the oldest stored sample."""

    pass


class OracleInvalidSecondsQuery(OracleError):
    """Query window is zero or starts before the epoch."""

    pass
