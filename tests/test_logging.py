"""Tests for metarwatch._logging: call-log decorators and file logging."""

from __future__ import annotations

import logging

import httpx
import pytest
import respx

from metarwatch._http import HttpFeedSource
from metarwatch._logging import CALL_LOGGER_NAME, configure_log_dir, log_feed_call, log_service_call
from metarwatch.exceptions import FeedConnectionError, StationNotFoundError
from metarwatch.service import MetarService
from tests.conftest import FEED_URL, SAMPLE_PAYLOAD


class _FakeSource:
    """Minimal class to test logging decorators."""

    @log_feed_call
    def fetch(self, bbox: str) -> dict:
        return {"features": [{"id": "1"}, {"id": "2"}]}

    @log_feed_call
    def fetch_failing(self, bbox: str) -> dict:
        raise ValueError("feed down")

    @log_service_call
    def metar(self, identifier: str) -> list:
        return [identifier]

    @log_service_call
    def metar_failing(self) -> None:
        raise RuntimeError("service error")


@pytest.fixture
def fake_source():
    return _FakeSource()


class TestLogFeedCall:
    def test_returns_result(self, fake_source, _call_log_in_tmp_path):
        result = fake_source.fetch("33,-85,34,-84")
        assert result == {"features": [{"id": "1"}, {"id": "2"}]}

    def test_logs_call_and_ok(self, fake_source, _call_log_in_tmp_path):
        fake_source.fetch("box")
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "CALL: _FakeSource.fetch('box')" in content
        assert "OK: _FakeSource.fetch('box') -> 2 features" in content

    def test_logs_failure(self, fake_source, _call_log_in_tmp_path):
        with pytest.raises(ValueError, match="feed down"):
            fake_source.fetch_failing("box")
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "FAIL: _FakeSource.fetch_failing('box')" in content
        assert "ValueError" in content

    def test_preserves_function_name(self, fake_source):
        assert fake_source.fetch.__name__ == "fetch"


class TestLogServiceCall:
    def test_returns_result(self, fake_source):
        assert fake_source.metar("KATL") == ["KATL"]

    def test_logs_service_call(self, fake_source, _call_log_in_tmp_path):
        fake_source.metar("KATL")
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "SERVICE CALL: _FakeSource.metar('KATL')" in content
        assert "SERVICE OK: _FakeSource.metar" in content

    def test_logs_service_failure(self, fake_source, _call_log_in_tmp_path):
        with pytest.raises(RuntimeError, match="service error"):
            fake_source.metar_failing()
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "SERVICE FAIL: _FakeSource.metar_failing" in content
        assert "RuntimeError" in content

    def test_creates_log_directory(self, tmp_path):
        """Log directory is created on first use."""
        import metarwatch._logging as mod

        new_dir = tmp_path / "nested" / "logs"
        configure_log_dir(str(new_dir))
        mod._logger = None
        logging.getLogger(CALL_LOGGER_NAME).handlers.clear()

        _FakeSource().metar("KPDK")

        assert new_dir.exists()
        assert (new_dir / "feed_calls.log").exists()

    def test_does_not_propagate(self, fake_source, caplog):
        with caplog.at_level(logging.INFO):
            fake_source.metar("KATL")
        assert not [r for r in caplog.records if r.name == CALL_LOGGER_NAME]


class TestResultSummaries:
    def test_service_logs_record_count(self, fake_source, _call_log_in_tmp_path):
        fake_source.metar("KATL")
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "SERVICE OK: _FakeSource.metar('KATL') -> 1 records" in content

    @respx.mock
    def test_http_fetch_logs_feature_count(self, _call_log_in_tmp_path):
        respx.get(FEED_URL).mock(return_value=httpx.Response(200, json=SAMPLE_PAYLOAD))
        source = HttpFeedSource()
        try:
            source.fetch()
        finally:
            source.close()
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "CALL: HttpFeedSource.fetch()" in content
        assert "OK: HttpFeedSource.fetch() -> 2 features" in content

    @respx.mock
    def test_http_fetch_logs_feed_error(self, _call_log_in_tmp_path):
        respx.get(FEED_URL).mock(side_effect=httpx.ConnectError("refused"))
        source = HttpFeedSource()
        try:
            with pytest.raises(FeedConnectionError):
                source.fetch()
        finally:
            source.close()
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "FAIL: HttpFeedSource.fetch() -> FeedConnectionError: refused" in content

    def test_metar_query_logs_records_returned(self, registry, feed, _call_log_in_tmp_path):
        with MetarService(registry=registry, source=feed) as service:
            service.update()
            service.metar("atlanta", data=["temperature"])
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert "SERVICE OK: MetarService.update() -> done" in content
        assert (
            "SERVICE OK: MetarService.metar('atlanta', data=['temperature']) -> 2 records"
            in content
        )

    def test_not_found_logged_as_failure(self, registry, feed, _call_log_in_tmp_path):
        with MetarService(registry=registry, source=feed) as service:
            with pytest.raises(StationNotFoundError):
                service.metar("KATL")
        content = (_call_log_in_tmp_path / "feed_calls.log").read_text()
        assert (
            "SERVICE FAIL: MetarService.metar('KATL') -> StationNotFoundError: "
            "METAR information not found for KATL" in content
        )
