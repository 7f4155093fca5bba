from typing import Any

import pytest

from rum_core.collection.resource_utils import compute_performance_resource_details
from rum_core.collection.resource_utils import compute_performance_resource_duration
from rum_core.collection.resource_utils import compute_resource_kind
from rum_core.collection.resource_utils import compute_size
from rum_core.data_types import RumPerformanceResourceTiming
from rum_core.primitives import RelativeTime
from rum_core.primitives import ResourceKind
from rum_core.raw_events import PerformanceResourceDetails
from rum_core.raw_events import PerformanceTimingSpan


def _create_entry(**overrides: Any) -> RumPerformanceResourceTiming:
    fields: dict[str, Any] = {
        "name": "https://resource.com/valid",
        "start_time": RelativeTime(10),
        "duration": 50,
        "fetch_start": 12,
        "redirect_start": 0,
        "redirect_end": 0,
        "domain_lookup_start": 13,
        "domain_lookup_end": 14,
        "connect_start": 15,
        "secure_connection_start": 16,
        "connect_end": 17,
        "request_start": 20,
        "response_start": 50,
        "response_end": 60,
        "decoded_body_size": 51,
    }
    fields.update(overrides)
    return RumPerformanceResourceTiming(**fields)


def _span(start_ms: int, duration_ms: int) -> PerformanceTimingSpan:
    return PerformanceTimingSpan(start=start_ms * 1_000_000, duration=duration_ms * 1_000_000)


# =============================================================================
# compute_resource_kind
# =============================================================================


@pytest.mark.parametrize(
    "initiator_type, url, expected_kind",
    [
        ("initial_document", "https://resource.com/", ResourceKind.DOCUMENT),
        ("xmlhttprequest", "https://resource.com/api", ResourceKind.XHR),
        ("fetch", "https://resource.com/api", ResourceKind.FETCH),
        ("beacon", "https://resource.com/collect", ResourceKind.BEACON),
        ("link", "https://resource.com/style.CSS", ResourceKind.CSS),
        ("script", "https://resource.com/app.js?v=2", ResourceKind.JS),
        ("img", "https://resource.com/logo", ResourceKind.IMAGE),
        ("other", "https://resource.com/logo.png", ResourceKind.IMAGE),
        ("css", "https://resource.com/font.woff2", ResourceKind.FONT),
        ("video", "https://resource.com/stream", ResourceKind.MEDIA),
        ("other", "https://resource.com/clip.mp4", ResourceKind.MEDIA),
        ("other", "https://resource.com/data", ResourceKind.OTHER),
        ("script", "not a url", ResourceKind.OTHER),
    ],
)
def test_compute_resource_kind(initiator_type: str, url: str, expected_kind: ResourceKind) -> None:
    assert compute_resource_kind(_create_entry(name=url, initiator_type=initiator_type)) == expected_kind


# =============================================================================
# compute_performance_resource_duration / compute_size
# =============================================================================


def test_duration_is_converted_to_nanoseconds() -> None:
    assert compute_performance_resource_duration(_create_entry(duration=50)) == 50_000_000


def test_zero_duration_falls_back_to_response_end() -> None:
    assert compute_performance_resource_duration(_create_entry(duration=0)) == 50_000_000


def test_size_is_reported_when_a_response_was_received() -> None:
    assert compute_size(_create_entry()) == 51


def test_size_is_not_reported_without_response() -> None:
    assert compute_size(_create_entry(response_start=None)) is None
    assert compute_size(_create_entry(response_start=10)) is None


# =============================================================================
# compute_performance_resource_details
# =============================================================================


def test_details_of_a_complete_entry() -> None:
    assert compute_performance_resource_details(_create_entry()) == PerformanceResourceDetails(
        connect=_span(5, 2),
        dns=_span(3, 1),
        download=_span(40, 10),
        first_byte=_span(10, 30),
        redirect=_span(0, 2),
        ssl=_span(6, 1),
    )


def test_details_of_fractional_timings_are_whole_nanoseconds() -> None:
    details = compute_performance_resource_details(_create_entry(request_start=20.25, response_start=50.5))

    assert details is not None
    assert details.first_byte == PerformanceTimingSpan(start=10_250_000, duration=30_250_000)
    assert details.download == PerformanceTimingSpan(start=40_500_000, duration=9_500_000)


def test_details_without_secure_connection_have_no_ssl() -> None:
    details = compute_performance_resource_details(_create_entry(secure_connection_start=0))

    assert details is not None
    assert details.ssl is None
    assert details.connect == _span(5, 2)


def test_details_of_a_persistent_connection_have_no_connect_or_dns() -> None:
    details = compute_performance_resource_details(
        _create_entry(domain_lookup_start=12, domain_lookup_end=12, connect_start=12, connect_end=12)
    )

    assert details is not None
    assert details.connect is None
    assert details.ssl is None
    assert details.dns is None


def test_details_without_redirection_have_no_redirect() -> None:
    details = compute_performance_resource_details(_create_entry(fetch_start=10))

    assert details is not None
    assert details.redirect is None


def test_details_of_out_of_order_timings_are_not_computed() -> None:
    assert compute_performance_resource_details(_create_entry(response_start=70)) is None


def test_details_of_out_of_order_redirect_are_not_computed() -> None:
    assert compute_performance_resource_details(_create_entry(redirect_start=11, redirect_end=13)) is None


def test_details_of_entries_with_missing_timings_are_not_computed() -> None:
    assert compute_performance_resource_details(_create_entry(request_start=None)) is None
