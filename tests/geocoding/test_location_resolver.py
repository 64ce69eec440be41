from __future__ import annotations

from unittest import mock

import requests

from src.timeclock.timeclock.geocoding.resolver import NullLocationResolver, OpenCageLocationResolver


def _session_returning(payload=None, exc=None):
    session = mock.Mock(spec=requests.Session)
    if exc is not None:
        session.get.side_effect = exc
        return session
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    session.get.return_value = response
    return session


def test_first_formatted_result_is_returned():
    session = _session_returning({"results": [{"formatted": "10 Downing St, London"}, {"formatted": "other"}]})
    resolver = OpenCageLocationResolver("k", session=session, timeout=3)

    assert resolver.resolve(51.5, -0.12) == "10 Downing St, London"
    _, kwargs = session.get.call_args
    assert kwargs["params"]["key"] == "k"
    assert kwargs["timeout"] == 3


def test_coordinates_are_sent_comma_separated():
    session = _session_returning({"results": []})
    OpenCageLocationResolver("k", session=session).resolve(48.8566, 2.3522)

    (url,), kwargs = session.get.call_args
    prepared = requests.Request("GET", url, params=kwargs["params"]).prepare()

    assert "q=48.8566%2C2.3522" in prepared.url
    assert "%2B" not in prepared.url


def test_no_results_is_none():
    resolver = OpenCageLocationResolver("k", session=_session_returning({"results": []}))
    assert resolver.resolve(0.0, 0.0) is None


def test_network_errors_never_escape():
    resolver = OpenCageLocationResolver("k", session=_session_returning(exc=requests.Timeout("slow")))
    assert resolver.resolve(1.0, 2.0) is None


def test_http_error_is_none():
    session = _session_returning({"results": []})
    session.get.return_value.raise_for_status.side_effect = requests.HTTPError("403")

    assert OpenCageLocationResolver("bad", session=session).resolve(1.0, 2.0) is None


def test_null_resolver():
    assert NullLocationResolver().resolve(1.0, 2.0) is None
