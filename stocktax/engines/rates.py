"""Date-indexed exchange-rate lookup.

Conversion uses the most recent rate published *before* the transaction
date, never the fixing of the date itself.
"""

from bisect import bisect_left
from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from stocktax.models.transactions import RateObservation

NO_RATE = Decimal("0")


class RateLookup(BaseModel):
    """Outcome of a rate lookup; ``rate`` is None when the table does not cover the date."""

    query_date: date
    rate: Decimal | None = None
    observed_on: date | None = None

    @property
    def available(self) -> bool:
        return self.rate is not None


class RateTable:
    """Sorted exchange-rate observations for one currency pair."""

    def __init__(self, observations: Iterable[RateObservation] = ()):
        by_date: dict[date, RateObservation] = {}
        for obs in observations:
            by_date[obs.rate_date] = obs  # last value for a date wins
        self._observations = sorted(by_date.values(), key=lambda o: o.rate_date)
        self._dates = [o.rate_date for o in self._observations]

    def __len__(self) -> int:
        return len(self._observations)

    @property
    def first_date(self) -> date | None:
        return self._dates[0] if self._dates else None

    @property
    def last_date(self) -> date | None:
        return self._dates[-1] if self._dates else None

    def merge(self, other: "RateTable") -> "RateTable":
        """Combine two tables; on duplicate dates ``other`` wins."""
        return RateTable([*self._observations, *other._observations])

    def lookup(self, query_date: date) -> RateLookup:
        """Find the observation immediately before the first one on/after ``query_date``."""
        idx = bisect_left(self._dates, query_date)
        # past the last observation there is no "first one on/after" to anchor on
        if idx == 0 or idx == len(self._dates):
            return RateLookup(query_date=query_date)
        prior = self._observations[idx - 1]
        return RateLookup(query_date=query_date, rate=prior.rate, observed_on=prior.rate_date)

    def rate_as_of(self, query_date: date) -> Decimal:
        """Rate for ``query_date``, or 0 when the table does not cover it."""
        found = self.lookup(query_date)
        return found.rate if found.rate is not None else NO_RATE
