"""Fit a native image size into a resizable container and track the scale."""
import logging
import math
from dataclasses import dataclass

from shapes.dimensions import Dimensions
from shapes.rectangle import round_half_away

LOGGER = logging.getLogger("BoxLab.Fit")


@dataclass(frozen=True)
class Fit:
    displayed: Dimensions
    scale: float


def compute_fit(native, container):
    """Largest aspect-preserving size of `native` inside `container`.

    Returns None while the container is unmeasured or has zero area.
    """
    if container is None or container.is_empty():
        return None
    # scale comes from the limiting axis, before any rounding
    scale = min(container.width / native.width, container.height / native.height)
    max_w = max(1, math.floor(container.width))
    max_h = max(1, math.floor(container.height))
    displayed = Dimensions(
        max(1, min(round_half_away(native.width * scale), max_w)),
        max(1, min(round_half_away(native.height * scale), max_h)),
    )
    return Fit(displayed, scale)


class ContainerFitResolver:
    """Keeps the fit of one image in sync with the latest container measurement.

    The container starts unmeasured; `observe` is the resize notification.
    Every notification recomputes the fit from scratch.
    """

    def __init__(self, native=None):
        self._native = native
        self._container = None
        self._fit = None
        self._listeners = []

    @property
    def container(self):
        return self._container

    @property
    def fit(self):
        return self._fit

    @property
    def dimensions(self):
        return self._fit.displayed if self._fit else None

    @property
    def scale(self):
        return self._fit.scale if self._fit else None

    def subscribe(self, callback):
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def observe(self, container):
        self._container = container
        return self._recompute()

    def set_native(self, native):
        self._native = native
        return self._recompute()

    def _recompute(self):
        if self._native is None:
            fit = None
        else:
            fit = compute_fit(self._native, self._container)
        if fit != self._fit:
            LOGGER.debug("Fit changed: native=%s container=%s -> %s", self._native, self._container, fit)
            self._fit = fit
            for callback in list(self._listeners):
                callback(fit)
        return self._fit
