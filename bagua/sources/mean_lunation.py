"""Phase source based on the mean synodic month."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import ClassVar

from ..config import MEAN_SYNODIC_MONTH_DAYS, REFERENCE_NEW_MOON
from ..phases import MoonPhase, phase_from_elongation

__all__ = ["MeanLunationSource"]

SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class MeanLunationSource:
    """Estimate the phase from the time elapsed since a reference new moon.

    The mean lunation ignores the Moon's orbital anomaly, so octile
    boundaries may be off by up to about half a day.
    """

    source_id: ClassVar[str] = "mean_lunation"

    synodic_month_days: float = MEAN_SYNODIC_MONTH_DAYS
    reference_new_moon: datetime = REFERENCE_NEW_MOON

    def elongation_at(self, moment: datetime) -> float:
        """Return the mean Moon-Sun elongation in degrees at ``moment``."""

        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=UTC)
        days = (moment - self.reference_new_moon).total_seconds() / SECONDS_PER_DAY
        fraction = (days / self.synodic_month_days) % 1.0
        return fraction * 360.0

    def phase_at(self, moment: datetime) -> MoonPhase:
        return phase_from_elongation(self.elongation_at(moment))
