"""
Health classification of a vehicle's charging efficiency.

Bands (lower bound inclusive):

- ``>= 0.90``  EXCELLENT
- ``>= 0.85``  NORMAL
- ``>= 0.75``  WARNING (potential degradation)
- ``<  0.75``  CRITICAL (hardware fault likely)

Fewer than ``MIN_SAMPLES`` readings always yields INSUFFICIENT_DATA.

CHANGELOG:
- 2026-10-05: Initial creation (STORY-008)

TODO:
- None
"""

from decimal import Decimal
from enum import StrEnum

MIN_SAMPLES = 10

EXCELLENT_THRESHOLD = Decimal("0.90")
NORMAL_THRESHOLD = Decimal("0.85")
WARNING_THRESHOLD = Decimal("0.75")


class HealthStatus(StrEnum):
    """Health label reported alongside the efficiency ratio."""

    EXCELLENT = "EXCELLENT"
    NORMAL = "NORMAL"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"


def classify(efficiency_ratio: Decimal | float, sample_count: int) -> HealthStatus:
    """Map an efficiency ratio and sample count to a health status.

    The ratio is compared in decimal so that a float such as ``0.85`` lands
    exactly on its band boundary.

    Args:
        efficiency_ratio: DC delivered / AC consumed over the window.
        sample_count: Number of vehicle readings behind the ratio.

    Returns:
        HealthStatus: The classification.
    """
    if sample_count < MIN_SAMPLES:
        return HealthStatus.INSUFFICIENT_DATA

    ratio = Decimal(str(efficiency_ratio))
    if ratio >= EXCELLENT_THRESHOLD:
        return HealthStatus.EXCELLENT
    if ratio >= NORMAL_THRESHOLD:
        return HealthStatus.NORMAL
    if ratio >= WARNING_THRESHOLD:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL
