"""Derivations over resource timing entries: kind, duration, per-phase details and size.

All timings of a RumPerformanceResourceTiming are relative milliseconds. Every
derived duration is returned in integer nanoseconds, which is the wire unit.
"""

import re
from collections.abc import Callable
from typing import Final
from urllib.parse import urlsplit

from rum_core.common.pure import pure
from rum_core.data_types import RumPerformanceResourceTiming
from rum_core.primitives import ResourceKind
from rum_core.raw_events import PerformanceResourceDetails
from rum_core.raw_events import PerformanceTimingSpan

_CSS_PATH: Final[re.Pattern[str]] = re.compile(r"\.css$", re.IGNORECASE)
_JS_PATH: Final[re.Pattern[str]] = re.compile(r"\.js$", re.IGNORECASE)
_IMAGE_PATH: Final[re.Pattern[str]] = re.compile(r"\.(gif|jpg|jpeg|tiff|png|svg|ico)$", re.IGNORECASE)
_FONT_PATH: Final[re.Pattern[str]] = re.compile(r"\.(woff|eot|woff2|ttf)$", re.IGNORECASE)
_MEDIA_PATH: Final[re.Pattern[str]] = re.compile(r"\.(mp3|mp4)$", re.IGNORECASE)

# Checked in order, the first match wins
_RESOURCE_KIND_MATCHERS: Final[tuple[tuple[ResourceKind, Callable[[str, str], bool]], ...]] = (
    (ResourceKind.DOCUMENT, lambda initiator_type, path: initiator_type == "initial_document"),
    (ResourceKind.XHR, lambda initiator_type, path: initiator_type == "xmlhttprequest"),
    (ResourceKind.FETCH, lambda initiator_type, path: initiator_type == "fetch"),
    (ResourceKind.BEACON, lambda initiator_type, path: initiator_type == "beacon"),
    (ResourceKind.CSS, lambda initiator_type, path: _CSS_PATH.search(path) is not None),
    (ResourceKind.JS, lambda initiator_type, path: _JS_PATH.search(path) is not None),
    (
        ResourceKind.IMAGE,
        lambda initiator_type, path: initiator_type in ("image", "img", "icon") or _IMAGE_PATH.search(path) is not None,
    ),
    (ResourceKind.FONT, lambda initiator_type, path: _FONT_PATH.search(path) is not None),
    (
        ResourceKind.MEDIA,
        lambda initiator_type, path: initiator_type in ("audio", "video") or _MEDIA_PATH.search(path) is not None,
    ),
)


@pure
def compute_resource_kind(entry: RumPerformanceResourceTiming) -> ResourceKind:
    """Classify a resource by its initiator type, then by the extension of its URL path."""
    parsed = urlsplit(entry.name)
    if not parsed.scheme or not parsed.netloc:
        return ResourceKind.OTHER
    for kind, matches in _RESOURCE_KIND_MATCHERS:
        if matches(entry.initiator_type, parsed.path):
            return kind
    return ResourceKind.OTHER


@pure
def compute_performance_resource_duration(entry: RumPerformanceResourceTiming) -> int:
    """Return the duration of the entry in nanoseconds.

    Entries blocked by cross-origin policies may report a zero duration; the
    response end is used instead when it is known.
    """
    if entry.duration == 0 and entry.response_end is not None and entry.start_time < entry.response_end:
        return round((entry.response_end - entry.start_time) * 1e6)
    return round(entry.duration * 1e6)


@pure
def compute_performance_resource_details(entry: RumPerformanceResourceTiming) -> PerformanceResourceDetails | None:
    """Return the per-phase timings of the entry, or None when they are missing or out of order.

    Each phase is reported as {start, duration} in nanoseconds, start being relative
    to the entry start. Connect, ssl, dns and redirect phases are only reported when
    they actually happened.
    """
    fetch_start = entry.fetch_start
    domain_lookup_start = entry.domain_lookup_start
    domain_lookup_end = entry.domain_lookup_end
    connect_start = entry.connect_start
    connect_end = entry.connect_end
    request_start = entry.request_start
    response_start = entry.response_start
    response_end = entry.response_end
    if (
        fetch_start is None
        or domain_lookup_start is None
        or domain_lookup_end is None
        or connect_start is None
        or connect_end is None
        or request_start is None
        or response_start is None
        or response_end is None
    ):
        return None

    start_time = entry.start_time
    # Timings that cannot be collected (e.g. cross-origin without Timing-Allow-Origin) come back out of order
    if not _are_in_order(
        start_time,
        fetch_start,
        domain_lookup_start,
        domain_lookup_end,
        connect_start,
        connect_end,
        request_start,
        response_start,
        response_end,
    ):
        return None

    redirect: PerformanceTimingSpan | None = None
    if _has_redirection(entry):
        redirect_start = entry.redirect_start if entry.redirect_start is not None else start_time
        redirect_end = entry.redirect_end if entry.redirect_end is not None else fetch_start
        # Some browsers hide cross-origin redirect timings
        if redirect_start < start_time:
            redirect_start = start_time
        if redirect_end < start_time:
            redirect_end = fetch_start
        if not _are_in_order(start_time, redirect_start, redirect_end, fetch_start):
            return None
        redirect = _format_timing(start_time, redirect_start, redirect_end)

    connect: PerformanceTimingSpan | None = None
    ssl: PerformanceTimingSpan | None = None
    if connect_end != fetch_start:
        connect = _format_timing(start_time, connect_start, connect_end)
        secure_connection_start = entry.secure_connection_start
        if secure_connection_start is not None and _are_in_order(connect_start, secure_connection_start, connect_end):
            ssl = _format_timing(start_time, secure_connection_start, connect_end)

    dns: PerformanceTimingSpan | None = None
    if domain_lookup_end != fetch_start:
        dns = _format_timing(start_time, domain_lookup_start, domain_lookup_end)

    return PerformanceResourceDetails(
        connect=connect,
        dns=dns,
        download=_format_timing(start_time, response_start, response_end),
        first_byte=_format_timing(start_time, request_start, response_start),
        redirect=redirect,
        ssl=ssl,
    )


@pure
def compute_size(entry: RumPerformanceResourceTiming) -> int | None:
    """Return the decoded body size, only when a response was actually received."""
    if entry.response_start is not None and entry.start_time < entry.response_start:
        return entry.decoded_body_size
    return None


def _are_in_order(*numbers: float) -> bool:
    return all(previous <= current for previous, current in zip(numbers, numbers[1:]))


def _has_redirection(entry: RumPerformanceResourceTiming) -> bool:
    # fetchStart only differs from startTime when a redirection occurred
    return entry.fetch_start != entry.start_time


def _format_timing(origin: float, start: float, end: float) -> PerformanceTimingSpan:
    return PerformanceTimingSpan(duration=round((end - start) * 1e6), start=round((start - origin) * 1e6))
