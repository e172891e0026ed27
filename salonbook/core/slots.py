# salonbook/core/slots.py

DEFAULT_INTERVAL_MINUTES = 30


def generate_slots(open_start: int, open_end: int, interval: int = DEFAULT_INTERVAL_MINUTES) -> range:
    """Candidate start times from ``open_start`` stepping by ``interval``, all strictly before ``open_end``.

    A ``range`` is lazy, finite and can be iterated again. Whether the service
    actually fits before closing is decided by the availability filter.
    """
    if interval <= 0:
        raise ValueError("interval must be a positive number of minutes")
    return range(open_start, open_end, interval)
