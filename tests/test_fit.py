from __future__ import annotations

import pytest

from labeller.fit import ContainerFitResolver, Fit, compute_fit
from shapes.dimensions import Dimensions


def test_fit_limits_on_width():
    fit = compute_fit(Dimensions(1000, 500), Dimensions(400, 400))
    assert fit.displayed == Dimensions(400, 200)
    assert fit.scale == pytest.approx(0.4)


def test_fit_scales_up_small_images():
    fit = compute_fit(Dimensions(640, 480), Dimensions(1920, 1080))
    assert fit.displayed == Dimensions(1440, 1080)
    assert fit.scale == pytest.approx(2.25)


@pytest.mark.parametrize(
    "container",
    [None, Dimensions(0, 5), Dimensions(5, 0), Dimensions(0, 0)],
)
def test_unmeasured_or_empty_container_has_no_fit(container):
    assert compute_fit(Dimensions(100, 100), container) is None


@pytest.mark.parametrize(
    "native, container",
    [
        ((1000, 500), (400, 400)),
        ((640, 480), (1920, 1080)),
        ((333, 777), (200, 900)),
        ((1, 1), (50, 30)),
        ((4000, 3000), (801, 599)),
        ((123, 45), (1000, 1000)),
    ],
)
def test_fit_preserves_aspect_and_fits_tightly(native, container):
    w, h = native
    cw, ch = container
    fit = compute_fit(Dimensions(w, h), Dimensions(cw, ch))
    dw, dh = fit.displayed.width, fit.displayed.height
    assert dw <= cw and dh <= ch
    assert dw == cw or dh == ch
    # each displayed side is off by at most half a pixel
    assert abs(dw * h - dh * w) <= max(w, h)


def test_scale_is_monotonic_in_container_size():
    native = Dimensions(1000, 500)
    sizes = [(1600, 1600), (800, 800), (400, 400), (200, 200), (50, 50)]
    scales = [compute_fit(native, Dimensions(*size)).scale for size in sizes]
    assert all(a > b for a, b in zip(scales, scales[1:]))


def test_resolver_starts_unmeasured():
    resolver = ContainerFitResolver(Dimensions(1000, 500))
    assert resolver.fit is None
    assert resolver.dimensions is None
    assert resolver.scale is None
    assert resolver.container is None


def test_resolver_recomputes_on_every_resize():
    resolver = ContainerFitResolver(Dimensions(1000, 500))
    seen = []
    resolver.subscribe(seen.append)

    resolver.observe(Dimensions(400, 400))
    assert resolver.dimensions == Dimensions(400, 200)
    assert resolver.scale == pytest.approx(0.4)

    resolver.observe(Dimensions(800, 300))
    assert resolver.dimensions == Dimensions(600, 300)
    assert resolver.scale == pytest.approx(0.6)

    assert [fit.scale for fit in seen] == pytest.approx([0.4, 0.6])


def test_resolver_zero_area_resets_fit():
    resolver = ContainerFitResolver(Dimensions(100, 100))
    seen = []
    resolver.subscribe(seen.append)
    resolver.observe(Dimensions(50, 50))
    resolver.observe(Dimensions(0, 50))
    assert resolver.fit is None
    assert seen == [Fit(Dimensions(50, 50), 0.5), None]


def test_resolver_skips_notification_when_fit_unchanged():
    resolver = ContainerFitResolver(Dimensions(100, 100))
    seen = []
    resolver.subscribe(seen.append)
    resolver.observe(Dimensions(50, 50))
    resolver.observe(Dimensions(50, 50))
    assert len(seen) == 1


def test_resolver_native_change_recomputes():
    resolver = ContainerFitResolver()
    resolver.observe(Dimensions(400, 400))
    assert resolver.fit is None
    resolver.set_native(Dimensions(200, 400))
    assert resolver.dimensions == Dimensions(200, 400)
    assert resolver.scale == pytest.approx(1.0)


def test_unsubscribe_stops_notifications():
    resolver = ContainerFitResolver(Dimensions(100, 100))
    seen = []
    unsubscribe = resolver.subscribe(seen.append)
    unsubscribe()
    resolver.observe(Dimensions(10, 10))
    assert seen == []
