"""Tests for ooosync.sync.event module."""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest

from ooosync.core.config import SetupError
from ooosync.sync.event import SyncEvent, load_default_sync_event


def valid_event(**overrides) -> SyncEvent:
    params = {
        "start": "2025-12-01",
        "end": "2025-12-31",
        "createdStart": "2025-11-30T00:00:00Z",
        "createdEnd": "2025-12-01T00:00:00Z",
        "statuses": ["APPROVED"],
        "by": "created",
        "pageSize": 50,
    }
    params.update(overrides)
    return SyncEvent.model_validate(params)


class TestFromJson:
    """Tests for SyncEvent.from_json."""

    def test_parses_aliases(self):
        event = SyncEvent.from_json(
            b'{"start": "2025-12-01", "createdStart": "2025-11-30", '
            b'"statuses": ["APPROVED"], "by": "created", "pageSize": 25}'
        )
        assert event.start == "2025-12-01"
        assert event.created_start == "2025-11-30"
        assert event.page_size == 25
        assert event.statuses == ["APPROVED"]

    def test_accepts_dict(self):
        assert SyncEvent.from_json({"by": "period"}).by == "period"

    def test_empty_payload(self):
        assert SyncEvent.from_json(b"") == SyncEvent()
        assert SyncEvent.from_json(None) == SyncEvent()

    def test_invalid_json(self):
        with pytest.raises(SetupError, match="invalid JSON event"):
            SyncEvent.from_json(b"{not json")

    def test_wrong_types(self):
        with pytest.raises(SetupError, match="invalid JSON event"):
            SyncEvent.from_json({"pageSize": "many"})


class TestValidateForRun:
    """Tests for SyncEvent.validate_for_run."""

    def test_valid(self):
        valid_event().validate_for_run()

    @pytest.mark.parametrize("page_size", [0, -1])
    def test_page_size_must_be_positive(self, page_size):
        with pytest.raises(SetupError, match="invalid pageSize"):
            valid_event(pageSize=page_size).validate_for_run()

    def test_page_must_be_positive(self):
        with pytest.raises(SetupError, match="invalid page"):
            valid_event(page=0).validate_for_run()

    def test_by_required(self):
        with pytest.raises(SetupError, match="missing required parameter: by"):
            valid_event(by="").validate_for_run()

    def test_by_must_be_known(self):
        with pytest.raises(SetupError, match="invalid by"):
            valid_event(by="updated").validate_for_run()

    def test_statuses_required(self):
        with pytest.raises(SetupError, match="missing or empty statuses"):
            valid_event(statuses=[]).validate_for_run()

    def test_blank_statuses_count_as_empty(self):
        with pytest.raises(SetupError, match="missing or empty statuses"):
            valid_event(statuses=["", " "]).validate_for_run()

    def test_statuses_must_be_known(self):
        with pytest.raises(SetupError, match="invalid statuses value: 'DONE'"):
            valid_event(statuses=["APPROVED", "done"]).validate_for_run()

    def test_statuses_case_insensitive(self):
        valid_event(statuses=["approved", "Pending"]).validate_for_run()

    @pytest.mark.parametrize("missing", ["start", "end"])
    def test_created_mode_requires_period(self, missing):
        with pytest.raises(SetupError, match="both start and end"):
            valid_event(**{missing: ""}).validate_for_run()

    def test_period_mode_allows_open_period(self):
        valid_event(by="period", start="", end="").validate_for_run()


class TestFiltersByCreated:
    """Tests for the filters_by_created property."""

    def test_created_with_bounds(self):
        assert valid_event().filters_by_created is True

    def test_created_with_one_bound(self):
        assert valid_event(createdEnd="").filters_by_created is True

    def test_created_without_bounds(self):
        assert valid_event(createdStart="", createdEnd="").filters_by_created is False

    def test_period_mode(self):
        assert valid_event(by="period").filters_by_created is False


class TestLoadDefaultSyncEvent:
    """Tests for load_default_sync_event function."""

    NOW = datetime(2025, 12, 1, 12, 0, tzinfo=UTC)

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for name in (
            "OOO_SYNC_BY",
            "OOO_SYNC_STATUSES",
            "OOO_SYNC_PAGE_SIZE",
            "OOO_SYNC_LOOKBACK_HOURS",
            "OOO_SYNC_PERIOD_DAYS",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        with patch("ooosync.sync.event.load_dotenv"):
            event = load_default_sync_event(now=self.NOW)

        assert event.by == "created"
        assert event.statuses == ["APPROVED"]
        assert event.page_size == 50
        assert event.created_start == "2025-11-30T12:00:00.000000Z"
        assert event.created_end == "2025-12-01T12:00:00.000000Z"
        assert event.start == "2024-12-01T12:00:00.000000Z"
        assert event.end == "2026-12-01T12:00:00.000000Z"
        event.validate_for_run()

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("OOO_SYNC_STATUSES", "APPROVED,PENDING")
        monkeypatch.setenv("OOO_SYNC_PAGE_SIZE", "200")
        monkeypatch.setenv("OOO_SYNC_LOOKBACK_HOURS", "2")
        monkeypatch.setenv("OOO_SYNC_PERIOD_DAYS", "30")

        with patch("ooosync.sync.event.load_dotenv"):
            event = load_default_sync_event(now=self.NOW)

        assert event.statuses == ["APPROVED", "PENDING"]
        assert event.page_size == 200
        assert event.created_start == "2025-12-01T10:00:00.000000Z"
        assert event.start == "2025-11-01T12:00:00.000000Z"
        assert event.end == "2025-12-31T12:00:00.000000Z"

    def test_non_integer_setting(self, monkeypatch):
        monkeypatch.setenv("OOO_SYNC_PAGE_SIZE", "lots")
        with (
            patch("ooosync.sync.event.load_dotenv"),
            pytest.raises(SetupError, match="OOO_SYNC_PAGE_SIZE must be an integer"),
        ):
            load_default_sync_event(now=self.NOW)
