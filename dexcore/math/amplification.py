"""Stableswap amplification schedule.

A stable pool's amplification coefficient A ramps linearly between two
configured values over a time window. The effective A at a given block time
is what the invariant computation must use.
"""

from dexcore.errors import InvalidSchedule
from dexcore.models.pool import AmplificationParams
from dexcore.safe_int import S


def compute_current_amp(params: AmplificationParams, block_time: int) -> int:
    """Effective amplification coefficient at ``block_time``.

    Algorithm:
        - at or after next_amp_time: next_amp
        - at or before init_amp_time: init_amp
        - otherwise: init_amp moved towards next_amp by
          ``|next_amp - init_amp| * elapsed // time_range``

    Ramp-down subtracts the floored delta from init_amp, matching the
    on-chain pair, so a ramp in either direction stays between its
    endpoints.

    Args:
        params: Ramp parameters (amplification scaled by AMP_PRECISION)
        block_time: Current block time in seconds

    Returns:
        Amplification coefficient scaled by AMP_PRECISION

    Raises:
        InvalidSchedule: If next_amp_time < init_amp_time, or the ramp has
            zero length and block_time precedes it
    """
    if params.next_amp_time < params.init_amp_time:
        raise InvalidSchedule(
            f"next_amp_time {params.next_amp_time} is before init_amp_time {params.init_amp_time}"
        )

    if block_time >= params.next_amp_time:
        return params.next_amp

    time_range = S(params.next_amp_time) - S(params.init_amp_time)
    if time_range == 0:
        raise InvalidSchedule(
            f"Zero-length ramp at {params.init_amp_time} queried at earlier time {block_time}"
        )

    if block_time <= params.init_amp_time:
        return params.init_amp

    elapsed = S(block_time) - S(params.init_amp_time)
    init_amp = S(params.init_amp)
    next_amp = S(params.next_amp)

    if next_amp > init_amp:
        amp_range = next_amp - init_amp
        return (init_amp + (amp_range * elapsed) // time_range).value

    amp_range = init_amp - next_amp
    return (init_amp - (amp_range * elapsed) // time_range).value
