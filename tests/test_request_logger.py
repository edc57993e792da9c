"""
Access log filtering in the request logger middleware
"""
import logging
from types import SimpleNamespace

from rentdesk.core.config import settings
from rentdesk.middleware.request_logger import access_level, route_template


def test_server_errors_always_logged():
    assert access_level(500, 1.0) == logging.ERROR
    assert access_level(503, settings.log_slow_request_threshold_ms + 1) == logging.ERROR


def test_booking_conflict_logged_for_audit():
    assert access_level(409, 1.0) == logging.INFO


def test_slow_request_logged():
    assert access_level(200, settings.log_slow_request_threshold_ms + 1) == logging.WARNING


def test_fast_success_not_logged():
    assert access_level(200, 1.0) is None
    assert access_level(404, 1.0) is None


def test_route_template_prefers_matched_route():
    request = SimpleNamespace(
        scope={"route": SimpleNamespace(path="/api/bookings/{booking_id}")},
        url=SimpleNamespace(path="/api/bookings/17"),
    )
    assert route_template(request) == "/api/bookings/{booking_id}"


def test_route_template_falls_back_to_url_path():
    request = SimpleNamespace(scope={}, url=SimpleNamespace(path="/nowhere"))
    assert route_template(request) == "/nowhere"
