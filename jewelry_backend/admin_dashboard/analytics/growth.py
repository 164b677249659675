from typing import Union

from .schemas import Growth

Number = Union[int, float]


def calculate_growth(current: Number, previous: Number) -> Growth:
    """
    Percentage change from the previous period to the current one.

    A zero baseline counts as 100% growth when there is any current value
    and as no change (0%, up) when both are zero. The percentage is always
    reported as a magnitude; the direction lives in `is_up` only.
    """
    if previous == 0:
        return Growth(percentage=100.0 if current > 0 else 0.0, is_up=True)

    change = (current - previous) / previous * 100
    return Growth(percentage=round(abs(change), 1), is_up=change >= 0)
