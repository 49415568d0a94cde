"""
Key/value settings store and the public config derived from it
"""
import pytest

from prizeboard.core.errors import SettingNotFound
from prizeboard.services.settings_service import SettingsService


def put(client, auth_headers, key, value):
    return client.put("/api/settings", json={"key": key, "value": value}, headers=auth_headers)


def test_upsert_and_list(client, auth_headers):
    response = put(client, auth_headers, "cache_version", "202510")
    assert response.status_code == 200
    assert response.json()["value"] == "202510"

    put(client, auth_headers, "cache_version", "202511")
    listing = client.get("/api/settings", headers=auth_headers).json()
    assert listing == {"settings": {"cache_version": "202511"}}


def test_settings_flow_into_public_config(client, auth_headers):
    put(client, auth_headers, "hero_promo_days_before_start", 3)
    put(client, auth_headers, "cache_version", "202510")
    put(client, auth_headers, "leaderboard_enabled", False)

    config = client.get("/api/prizes").json()["config"]
    assert config == {
        "hero_promo_days_before_start": 3,
        "cache_version": "202510",
        "leaderboard_enabled": False,
    }
    assert client.get("/api/stats").json()["cache_version"] == "202510"


def test_bad_values_fall_back_to_defaults(db, settings):
    service = SettingsService(db, settings)
    config = service.public_config({
        "hero_promo_days_before_start": "soon",
        "leaderboard_enabled": "yes",
    })
    assert config.hero_promo_days_before_start == settings.DEFAULT_HERO_PROMO_DAYS
    assert config.leaderboard_enabled is True
    assert config.cache_version == settings.DEFAULT_CACHE_VERSION


@pytest.mark.parametrize("raw", ["false", "0", "off", "No"])
def test_falsy_leaderboard_values(db, settings, raw):
    config = SettingsService(db, settings).public_config({"leaderboard_enabled": raw})
    assert config.leaderboard_enabled is False


def test_missing_key(db, settings):
    with pytest.raises(SettingNotFound):
        SettingsService(db, settings).get("nope")


def test_empty_key_rejected(client, auth_headers):
    assert put(client, auth_headers, "", "x").status_code == 422
