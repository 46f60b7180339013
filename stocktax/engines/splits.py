"""Stock-split share-count normalization."""

from collections.abc import Mapping, Sequence
from datetime import date

from stocktax.models.transactions import SplitEvent


class SplitAdjuster:
    """Restates historical share counts in post-split units.

    Later statement lines already quote shares in current units, so a lot
    recorded before a split is multiplied by every split that happened
    after it.
    """

    def __init__(self, splits: Mapping[str, Sequence[SplitEvent]] | None = None):
        self._splits: dict[str, list[SplitEvent]] = {
            security: sorted(events, key=lambda e: e.effective_date)
            for security, events in (splits or {}).items()
        }

    def events_for(self, security_id: str) -> list[SplitEvent]:
        return list(self._splits.get(security_id, []))

    def multiplier(self, security_id: str, as_of: date) -> int:
        """Product of the ratios of all splits effective strictly after ``as_of``."""
        result = 1
        for event in self._splits.get(security_id, []):
            if event.effective_date > as_of:
                result *= event.ratio
        return result
