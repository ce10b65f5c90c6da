"""
Per-request overlay session.

One session holds the price history of a single analysis request and the
overlay last computed for it. Changing a window, the band multiplier or the
overlay visibility triggers a full recompute; asking again with the same
parameters returns the cached overlay. Loading a new history (a new ticker)
drops the cache.
"""

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Any, Optional

from advisor_chart.core.engine import OverlayEngine, OverlayParams, OverlayVisibility
from advisor_chart.core.types import ChartOverlay, PricePoint

__all__ = ["OverlaySession"]

logger = logging.getLogger(__name__)


class OverlaySession:
    """
    Caches the overlay of one price history.

    Example:
        >>> session = OverlaySession(points)
        >>> overlay = session.overlay(fast=10)
        >>> session.overlay(fast=10) is overlay
        True
    """

    def __init__(
        self,
        points: Sequence[PricePoint] = (),
        params: Optional[OverlayParams] = None,
    ):
        self._points: tuple[PricePoint, ...] = tuple(points)
        self._params = params or OverlayParams()
        self._cache_key: Optional[OverlayParams] = None
        self._cached: Optional[ChartOverlay] = None
        self.recomputations = 0

    @property
    def points(self) -> tuple[PricePoint, ...]:
        return self._points

    @property
    def params(self) -> OverlayParams:
        return self._params

    def load(self, points: Sequence[PricePoint]) -> None:
        """Replace the price history and drop the cached overlay."""
        self._points = tuple(points)
        self.clear()

    def clear(self) -> None:
        self._cache_key = None
        self._cached = None

    def overlay(self, **changes: Any) -> ChartOverlay:
        """
        Return the overlay for the current parameters updated with ``changes``.

        Keyword arguments are ``OverlayParams`` fields. Use ``toggle()`` to
        change single visibility flags.
        """
        if changes:
            self._params = replace(self._params, **changes)

        key = self._params.resolved()
        if self._cached is not None and key == self._cache_key:
            return self._cached

        self._cached = OverlayEngine(self._params).run(self._points)
        self._cache_key = key
        self.recomputations += 1
        logger.debug("Session recomputed overlay (%d so far)", self.recomputations)
        return self._cached

    def toggle(self, **flags: bool) -> ChartOverlay:
        """Change overlay visibility flags and return the updated overlay."""
        visible: OverlayVisibility = replace(self._params.visible, **flags)
        return self.overlay(visible=visible)
