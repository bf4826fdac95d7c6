"""Price oracle: ring buffer of time-integrated log samples."""

from .errors import (
    OracleError,
    OracleInvalidSecondsQuery,
    OracleNotInitialized,
    OracleQueryTooOld,
)
from .queries import (
    LARGEST_SAFE_QUERY_WINDOW,
    OracleAccumulatorQuery,
    OracleAverageQuery,
    get_largest_safe_query_window,
    get_latest,
    get_past_accumulators,
    get_time_weighted_average,
)
from .samples import BUFFER_SIZE, OracleVariable, Sample, SampleBuffer
from .sampler import (
    DEFAULT_ORACLE_SAMPLER,
    MAX_SAMPLE_DURATION,
    OracleSampler,
    OracleState,
    OracleUpdate,
    log_invariant_div_supply,
    log_spot_price,
    process_price_data,
)

__all__ = [
    # Samples
    "BUFFER_SIZE",
    "OracleVariable",
    "Sample",
    "SampleBuffer",
    # Sampler
    "MAX_SAMPLE_DURATION",
    "OracleSampler",
    "OracleState",
    "OracleUpdate",
    "DEFAULT_ORACLE_SAMPLER",
    "process_price_data",
    "log_spot_price",
    "log_invariant_div_supply",
    # Queries
    "LARGEST_SAFE_QUERY_WINDOW",
    "OracleAverageQuery",
    "OracleAccumulatorQuery",
    "get_latest",
    "get_time_weighted_average",
    "get_past_accumulators",
    "get_largest_safe_query_window",
    # Errors
    "OracleError",
    "OracleNotInitialized",
    "OracleQueryTooOld",
    "OracleInvalidSecondsQuery",
]
