"""
Unit tests for InferenceGateway.

The requests session is replaced by a MagicMock, so nothing touches the
network; assertions on the mock prove when no request was made.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from paperlib.llm.gateway import GatewayError, GatewayErrorKind, InferenceGateway
from paperlib.llm.json_recovery import ResponseMalformed
from paperlib.observability.telemetry import get_counter, get_latency_stats


class TestCheckStatus:
    def test_health_ok(self, session):
        gateway = InferenceGateway("http://llm.test/", session=session)

        assert gateway.check_status() is True
        assert gateway.online is True
        assert gateway.last_checked is not None
        session.get.assert_called_once_with("http://llm.test/health", timeout=2.0)

    def test_falls_back_to_models_on_error(self, session, health_response):
        session.get.side_effect = [
            requests.exceptions.ConnectionError("refused"),
            health_response(ok=True),
        ]
        gateway = InferenceGateway("http://llm.test", session=session)

        assert gateway.check_status() is True
        assert session.get.call_args_list[1].args == ("http://llm.test/v1/models",)

    def test_falls_back_to_models_on_bad_status(self, session, health_response):
        session.get.side_effect = [health_response(ok=False), health_response(ok=True)]
        gateway = InferenceGateway("http://llm.test", session=session)

        assert gateway.check_status() is True
        assert session.get.call_count == 2

    def test_both_probes_fail(self, session):
        session.get.side_effect = requests.exceptions.Timeout("slow")
        gateway = InferenceGateway("http://llm.test", session=session)

        assert gateway.check_status() is False
        assert gateway.online is False

    def test_concurrent_probe_returns_cached_flag(self, session):
        gateway = InferenceGateway("http://llm.test", session=session)
        gateway._probe_guard.acquire()
        try:
            assert gateway.check_status() is False
            session.get.assert_not_called()
        finally:
            gateway._probe_guard.release()

    def test_refresh_status_respects_max_age(self, online_gateway, session):
        session.get.reset_mock()

        online_gateway.refresh_status(max_age=60.0)
        session.get.assert_not_called()

        online_gateway.refresh_status(max_age=0.0)
        session.get.assert_called()

    def test_set_endpoint_resets_status(self, online_gateway):
        online_gateway.set_endpoint("http://other.test/")

        assert online_gateway.endpoint == "http://other.test"
        assert online_gateway.online is False
        assert online_gateway.last_checked is None


class TestComplete:
    def test_offline_raises_without_network(self, offline_gateway):
        with pytest.raises(GatewayError) as excinfo:
            offline_gateway.complete("hello", max_tokens=10)

        assert excinfo.value.kind is GatewayErrorKind.OFFLINE
        offline_gateway._session.post.assert_not_called()
        assert get_counter("gateway.offline_rejections") == 1

    def test_returns_first_choice_content(self, online_gateway, session, completion_response):
        session.post.return_value = completion_response('{"energy": "calm"}')

        text = online_gateway.complete("prompt", max_tokens=200, temperature=0.3)

        assert text == '{"energy": "calm"}'
        kwargs = session.post.call_args.kwargs
        assert session.post.call_args.args == ("http://llm.test/v1/chat/completions",)
        assert kwargs["json"]["messages"] == [{"role": "user", "content": "prompt"}]
        assert kwargs["json"]["max_tokens"] == 200
        assert kwargs["json"]["temperature"] == 0.3
        assert kwargs["timeout"] == online_gateway.completion_timeout
        assert get_latency_stats("gateway.complete")["count"] == 1

    def test_http_error(self, online_gateway, session, completion_response):
        session.post.return_value = completion_response("", status_code=500)

        with pytest.raises(GatewayError) as excinfo:
            online_gateway.complete("prompt", max_tokens=10)

        assert excinfo.value.kind is GatewayErrorKind.HTTP_ERROR
        assert excinfo.value.status_code == 500
        assert str(excinfo.value) == "API error: 500"

    def test_transport_error(self, online_gateway, session):
        session.post.side_effect = requests.exceptions.ReadTimeout("timed out")

        with pytest.raises(GatewayError) as excinfo:
            online_gateway.complete("prompt", max_tokens=10)

        assert excinfo.value.kind is GatewayErrorKind.TRANSPORT

    def test_malformed_body(self, online_gateway, session):
        response = MagicMock(ok=True, status_code=200)
        response.json.return_value = {"choices": []}
        session.post.return_value = response

        with pytest.raises(ResponseMalformed):
            online_gateway.complete("prompt", max_tokens=10)
        assert get_counter("gateway.malformed_responses") == 1

    def test_non_text_content(self, online_gateway, session):
        response = MagicMock(ok=True, status_code=200)
        response.json.return_value = {"choices": [{"message": {"content": None}}]}
        session.post.return_value = response

        with pytest.raises(ResponseMalformed):
            online_gateway.complete("prompt", max_tokens=10)


def test_default_session_is_requests_session():
    with patch("paperlib.llm.gateway.requests.Session") as session_cls:
        gateway = InferenceGateway("http://llm.test")

    assert gateway._session is session_cls.return_value
