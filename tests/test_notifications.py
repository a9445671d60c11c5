import json
import uuid

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from structlog.testing import capture_logs

from app.config import settings
from app.services import notifications


class FakeRedis:
    """Records publishes; fails the first ``failures`` calls."""

    def __init__(self, failures=0):
        self.failures = failures
        self.published = []

    async def publish(self, channel, message):
        if self.failures:
            self.failures -= 1
            raise RedisConnectionError("Connection refused")
        self.published.append((channel, message))
        return 1


@pytest.fixture
def redis_enabled(monkeypatch):
    monkeypatch.setattr(settings, "REDIS_URL", "redis://localhost:6379/0")


@pytest.fixture
def fake_redis(monkeypatch, redis_enabled):
    def install(failures=0):
        fake = FakeRedis(failures)
        monkeypatch.setattr(notifications, "get_redis", lambda: fake)
        return fake
    return install


def test_channel_is_per_user():
    user_id = uuid.uuid4()
    assert notifications.channel_for(user_id) == f"user:{user_id}"


@pytest.mark.asyncio
async def test_disabled_without_redis_url(monkeypatch):
    async def must_not_publish(channel, message):
        raise AssertionError("published while notifications are disabled")

    monkeypatch.setattr(settings, "REDIS_URL", "")
    monkeypatch.setattr(notifications, "_publish", must_not_publish)

    assert await notifications.publish_status_change(uuid.uuid4(), "application.approved", {"status": "Approved"}) is None


@pytest.mark.asyncio
async def test_publishes_json_to_user_channel(fake_redis):
    fake = fake_redis()
    tenant_id = uuid.uuid4()
    application_id = uuid.uuid4()

    await notifications.publish_status_change(
        tenant_id, "application.approved", {"applicationId": application_id, "status": "Approved"}
    )

    channel, message = fake.published[0]
    assert channel == f"user:{tenant_id}"
    assert json.loads(message) == {
        "event": "application.approved",
        "userId": str(tenant_id),
        "applicationId": str(application_id),
        "status": "Approved",
    }


@pytest.mark.asyncio
async def test_transient_failure_is_retried(fake_redis):
    fake = fake_redis(failures=1)
    await notifications.publish_status_change(uuid.uuid4(), "application.rejected", {"status": "Rejected"})
    assert len(fake.published) == 1


@pytest.mark.asyncio
async def test_publish_failure_is_logged_not_raised(monkeypatch, redis_enabled):
    async def unreachable(channel, message):
        raise RedisConnectionError("Connection refused")

    monkeypatch.setattr(notifications, "_publish", unreachable)

    with capture_logs() as logs:
        await notifications.publish_status_change(uuid.uuid4(), "application.submitted", {"status": "Pending"})

    failures = [entry for entry in logs if entry["event"] == "Notification publish failed"]
    assert failures[0]["log_level"] == "warning"
    assert failures[0]["event_type"] == "application.submitted"
