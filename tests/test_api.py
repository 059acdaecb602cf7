"""
Tests for the HTTP endpoints.
"""

import json

import pytest
from fastapi.testclient import TestClient

from todays_horoscope.config import settings
from todays_horoscope.main import app

from conftest import ScriptedModel, distinct_replies

DAILY_LEO = "horoscope-prod:horoscope:date=2024-06-15&sign=leo&type=daily"


@pytest.fixture
def client(make_service, cache, model):
    """App wired to the fake cache and scripted model (lifespan not run)."""
    app.state.cache_store = cache
    app.state.language_model = model
    app.state.horoscope_service = make_service()
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_get_horoscope(client, fake_redis):
    response = client.get("/api/horoscope", params={"sign": "leo"})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    body = response.json()
    assert body["success"] is True
    assert body["cached"] is False
    assert body["batchGenerated"] is False
    assert body["timezone"] == "UTC"
    assert body["localDate"] == "2024-06-15"
    assert body["data"]["sign"] == "leo"
    assert "leo" not in body["data"]["best_match"].split(", ")
    assert DAILY_LEO in fake_redis.store

    again = client.get("/api/horoscope", params={"sign": "leo"}).json()
    assert again["cached"] is True
    assert again["data"]["message"] == body["data"]["message"]


def test_directory_timezone_falls_back_to_utc(client, make_service):
    app.state.horoscope_service = make_service(timezone_aware=True)

    response = client.get("/api/horoscope", params={"sign": "aries", "timezone": "Europe"})

    assert response.status_code == 200
    body = response.json()
    assert body["timezone"] == "UTC"
    assert body["timezoneAware"] is True
    assert body["localDate"] == "2024-06-15"


def test_invalid_sign_is_400(client, model):
    response = client.get("/api/horoscope", params={"sign": "ophiuchus"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"].startswith("Invalid sign")
    assert model.calls == 0


def test_missing_sign_is_400(client):
    assert client.get("/api/horoscope").status_code == 400


def test_invalid_type_is_400(client):
    response = client.get("/api/horoscope", params={"sign": "leo", "type": "yearly"})
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid type")


def test_generation_failure_is_500(client, model):
    model.default = "not json"

    response = client.get("/api/horoscope", params={"sign": "leo"})

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_all_horoscopes(client, make_service):
    replies = distinct_replies(3) + ["not json"] + distinct_replies(8, start=3)
    app.state.horoscope_service = make_service(model=ScriptedModel(replies))

    response = client.get("/api/horoscopes")

    assert response.status_code == 200
    body = response.json()
    assert len(body["horoscopes"]) == 12
    assert body["horoscopes"]["cancer"] is None
    assert body["horoscopes"]["leo"]["sign"] == "leo"
    assert "cancer" not in body["cached"]


def test_all_horoscopes_lists_sign_metadata(client):
    signs = client.get("/api/horoscopes").json()["signs"]

    assert len(signs) == 12
    assert signs[0] == {
        "sign": "aries",
        "name": "Aries",
        "element": "fire",
        "dateRange": "Mar 21 - Apr 19",
    }
    assert signs[-1]["sign"] == "pisces"


def test_rate_limit(client, fake_redis, monkeypatch):
    monkeypatch.setattr(settings, "feature_flag_use_rate_limiting", True)
    monkeypatch.setattr(settings, "rate_limit_seconds", 60)
    monkeypatch.setattr(settings, "rate_limit_max_requests", 2)

    statuses = [client.get("/api/horoscope", params={"sign": "leo"}).status_code for _ in range(3)]

    assert statuses == [200, 200, 429]
    assert fake_redis.store["horoscope-prod:rate_limit:client=testclient"] == "3"
    assert fake_redis.ttls["horoscope-prod:rate_limit:client=testclient"] == 60


def test_rate_limit_off_by_default(client, fake_redis):
    for _ in range(3):
        assert client.get("/api/horoscope", params={"sign": "leo"}).status_code == 200
    assert not any(key.startswith("horoscope-prod:rate_limit") for key in fake_redis.store)


def test_cron_requires_secret(client, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")

    assert client.get("/api/cron/daily-horoscope").status_code == 401
    assert client.get(
        "/api/cron/daily-horoscope", headers={"Authorization": "Bearer wrong"}
    ).status_code == 401


def test_cron_runs_batch(client, make_service, fake_redis, monkeypatch):
    monkeypatch.setattr(settings, "cron_secret", "s3cret")
    app.state.horoscope_service = make_service(model=ScriptedModel(distinct_replies(12)))

    response = client.get("/api/cron/daily-horoscope", headers={"Authorization": "Bearer s3cret"})

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2024-06-15"
    assert body["timezoneBucketed"] is False
    assert len(body["results"]) == 12
    assert body["errors"] == []
    assert all(item["success"] for item in body["results"])
    assert len(fake_redis.store) == 12


def test_debug_requires_admin_key(client, monkeypatch):
    monkeypatch.setattr(settings, "admin_api_key", "admin")

    assert client.get("/api/debug/ping").status_code == 401
    assert client.get("/api/debug/ping", headers={"X-Admin-Key": "nope"}).status_code == 401
    response = client.get("/api/debug/ping", headers={"X-Admin-Key": "admin"})
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_debug_status(client, fake_redis):
    fake_redis.store[DAILY_LEO] = json.dumps({
        "sign": "leo", "type": "daily", "date": "2024-06-15", "message": "m",
        "best_match": "aries", "inspirational_quote": "q", "quote_author": "Plato",
    })

    body = client.get("/api/debug").json()

    assert body["redis"]["connected"] is True
    assert body["redis"]["cachedSigns"] == ["leo"]
    assert body["openai"]["promptVersion"] == "v2"
    assert body["openai"]["model"] == "scripted"
    assert "FEATURE_FLAG_USE_REDIS_CACHE" in body["featureFlags"]
    assert body["timezone"]["resolved"] == "UTC"


def test_debug_status_reports_timezone_bucket(client):
    body = client.get("/api/debug", params={"timezone": "Asia/Tokyo"}).json()

    assert body["timezone"] == {
        "requested": "Asia/Tokyo",
        "resolved": "Asia/Tokyo",
        "localDate": "2024-06-16",
        "localHour": 7,
        "isNextDayFromUtc": True,
        "timezoneAware": False,
    }

    fallback = client.get("/api/debug", params={"timezone": "Europe"}).json()["timezone"]
    assert fallback["resolved"] == "UTC"
    assert fallback["localDate"] == "2024-06-15"
    assert fallback["isNextDayFromUtc"] is False


def test_debug_regenerate_and_bust(client, fake_redis):
    response = client.get("/api/debug/regenerate-horoscopes", params={"sign": "leo"})
    assert response.status_code == 200
    assert response.json()["key"] == "horoscope:date=2024-06-15&sign=leo&type=daily"
    assert DAILY_LEO in fake_redis.store

    redis_status = client.get("/api/debug/redis").json()
    assert redis_status["redis"]["results"]["leo"]["exists"] is True

    response = client.delete("/api/debug/cache", params={"sign": "leo"})
    assert response.json() == {"success": True, "key": "horoscope:date=2024-06-15&sign=leo&type=daily"}
    assert DAILY_LEO not in fake_redis.store


def test_debug_regenerate_invalid_sign(client):
    assert client.get("/api/debug/regenerate-horoscopes", params={"sign": "x"}).status_code == 400


def test_debug_regenerate_all(client, make_service):
    app.state.horoscope_service = make_service(model=ScriptedModel(distinct_replies(12)))

    response = client.post("/api/debug/regenerate-horoscopes")

    body = response.json()
    assert response.status_code == 200
    assert len(body["results"]) == 12
    assert body["attributionUnmet"] == []
    assert sum(body["authorCounts"].values()) == 12
