"""
Smoke tests for application wiring.
"""

import pytest

from main import create_app


def test_routes_registered():
    app = create_app()
    paths = {getattr(route, "path", None) for route in app.routes}

    assert "/health" in paths
    assert "/api/notifications/send" in paths
    assert "/api/notifications/preview" in paths
    assert "/api/push-subscription" in paths
    assert "/api/schedules/{schedule_date}" in paths
    assert "/api/completions" in paths
    assert "/api/completions/{completion_id}" in paths
    assert "/api/reminders/sync" in paths
    assert "/api/reminders/{reminder_id}/complete" in paths


@pytest.mark.asyncio
async def test_health():
    app = create_app()
    health = next(route for route in app.routes if getattr(route, "path", None) == "/health")

    body = await health.endpoint()

    assert body["status"] == "healthy"
    assert body["environment"] == "test"
