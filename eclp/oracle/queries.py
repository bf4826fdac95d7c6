"""Time-weighted queries over the sample buffer.

Accumulators at arbitrary past times are found by binary search over the
buffer (ordered oldest to latest starting one past the latest index) and
linear interpolation between the two nearest samples. Times after the latest
sample are extrapolated from its instantaneous value.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from eclp.math.fixed_point import div_trunc
from eclp.math.log_compression import from_low_res_log

from .errors import OracleInvalidSecondsQuery, OracleNotInitialized, OracleQueryTooOld
from .samples import BUFFER_SIZE, OracleVariable, Sample, SampleBuffer, next_index, prev_index

# With 2 minute samples a full buffer spans about 34 hours
LARGEST_SAFE_QUERY_WINDOW = 34 * 3600


@dataclass(frozen=True)
class OracleAverageQuery:
    """Average of `variable` over [now - ago - secs, now - ago]."""

    variable: OracleVariable
    secs: int
    ago: int


@dataclass(frozen=True)
class OracleAccumulatorQuery:
    """Accumulator of `variable` at now - ago."""

    variable: OracleVariable
    ago: int


def get_largest_safe_query_window() -> int:
    return LARGEST_SAFE_QUERY_WINDOW


def get_latest(buffer: SampleBuffer, index: int, variable: OracleVariable) -> int:
    """Latest instantaneous value of `variable`, as an 18-decimal number.

    Raises:
        OracleNotInitialized: If no sample was ever written
    """
    sample = buffer[index]
    if sample.timestamp == 0:
        raise OracleNotInitialized("No oracle sample has been recorded")
    return from_low_res_log(sample.instant(variable))


def get_time_weighted_average(
    buffer: SampleBuffer, index: int, queries: Sequence[OracleAverageQuery], now: int
) -> list[int]:
    """Resolve average queries into 18-decimal values.

    Raises:
        OracleInvalidSecondsQuery: If a query has a zero window
    """
    results = []
    for query in queries:
        if query.secs == 0:
            raise OracleInvalidSecondsQuery("Average query window must be positive")
        begin = _past_accumulator(buffer, index, query.variable, query.ago + query.secs, now)
        end = _past_accumulator(buffer, index, query.variable, query.ago, now)
        results.append(from_low_res_log(div_trunc(end - begin, query.secs)))
    return results


def get_past_accumulators(
    buffer: SampleBuffer, index: int, queries: Sequence[OracleAccumulatorQuery], now: int
) -> list[int]:
    return [_past_accumulator(buffer, index, q.variable, q.ago, now) for q in queries]


def _past_accumulator(
    buffer: SampleBuffer, index: int, variable: OracleVariable, ago: int, now: int
) -> int:
    if ago > now:
        raise OracleInvalidSecondsQuery(f"Query {ago}s ago is before the epoch")
    look_up_time = now - ago

    latest = buffer[index]
    if latest.timestamp <= look_up_time:
        elapsed = look_up_time - latest.timestamp
        return latest.accumulator(variable) + latest.instant(variable) * elapsed

    oldest_index = next_index(index)
    oldest = buffer[oldest_index]
    # Past queries need a buffer that has wrapped around at least once
    if oldest.timestamp == 0:
        raise OracleNotInitialized("Oracle buffer is not fully initialized")
    if oldest.timestamp > look_up_time:
        raise OracleQueryTooOld(f"Query {ago}s ago is older than the oldest sample")

    prev, nxt = _find_nearest_sample(buffer, look_up_time, oldest_index)
    samples_time_diff = nxt.timestamp - prev.timestamp
    if samples_time_diff == 0:
        return prev.accumulator(variable)

    samples_acc_diff = nxt.accumulator(variable) - prev.accumulator(variable)
    elapsed = look_up_time - prev.timestamp
    return prev.accumulator(variable) + div_trunc(samples_acc_diff * elapsed, samples_time_diff)


def _find_nearest_sample(
    buffer: SampleBuffer, look_up_time: int, offset: int
) -> tuple[Sample, Sample]:
    """Samples bracketing `look_up_time`, found by binary search.

    `offset` is the index of the oldest sample, so index (i + offset) is the
    i-th oldest.
    """
    low = 0
    high = BUFFER_SIZE - 1
    mid = offset
    sample = buffer[mid]

    while low <= high:
        mid_without_offset = (low + high) // 2
        mid = mid_without_offset + offset
        sample = buffer[mid]

        if sample.timestamp < look_up_time:
            low = mid_without_offset + 1
        elif sample.timestamp > look_up_time:
            high = mid_without_offset - 1
        else:
            return sample, sample

    if sample.timestamp < look_up_time:
        return sample, buffer[next_index(mid)]
    return buffer[prev_index(mid)], sample
