"""Unit tests for Prometheus metric helpers (src/observability/metrics.py)"""
from prometheus_client import REGISTRY

from src.observability import metrics


def _sample(name, labels=None):
    return REGISTRY.get_sample_value(name, labels or {}) or 0


def test_track_challenge_completed():
    before = _sample("challenges_completed_total", {"category": "energy"})
    xp_before = _sample("challenge_xp_credited_total")

    metrics.track_challenge_completed("energy", 500)

    assert _sample("challenges_completed_total", {"category": "energy"}) == before + 1
    assert _sample("challenge_xp_credited_total") == xp_before + 500


def test_track_storage_fallback():
    before = _sample("storage_fallbacks_total", {"key": "challenges"})

    metrics.track_storage_fallback("challenges")

    assert _sample("storage_fallbacks_total", {"key": "challenges"}) == before + 1


def test_disabled_metrics_not_recorded(monkeypatch):
    monkeypatch.setattr(metrics, "ENABLE_PROMETHEUS", False)
    before = _sample("leaderboard_fetch_failures_total")

    metrics.track_leaderboard_failure()

    assert _sample("leaderboard_fetch_failures_total") == before


def test_track_activity_logged():
    before = _sample("activities_logged_total", {"kind": "workout"})

    metrics.track_activity_logged("workout")

    assert _sample("activities_logged_total", {"kind": "workout"}) == before + 1
