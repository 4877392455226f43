# FILE: tests/test_memory_client.py

from unittest.mock import Mock

import pytest
import requests

from soar.core.exceptions import DecodeFailure, HTTPStatusFailure, InvalidRequest, TransportFailure
from soar.memory.client import MemoryStoreClient

BASE_URL = "https://memory.example.test/v1"


def _response(status=200, body=None, text=None):
    response = Mock(spec=requests.Response)
    response.status_code = status
    response.text = text if text is not None else ("" if body is None else str(body))
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def _record(memory_id, text, user_id="u1", score=None):
    return {
        "id": memory_id,
        "memory": text,
        "user_id": user_id,
        "metadata": None,
        "categories": ["travel"],
        "immutable": False,
        "created_at": "2026-10-01T09:00:00Z",
        "updated_at": "2026-10-01T09:00:00Z",
        "expiration_date": None,
        "score": score,
    }


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return MemoryStoreClient(
        api_key="secret",
        base_url=BASE_URL + "/",
        session=session,
        timeout=5,
        app_identifier="soar-tests",
    )


def test_add_posts_two_turn_payload(client, session):
    session.post.return_value = _response(200, {"results": []})

    assert client.add("My passport number is 123456", "u1") is True

    args, kwargs = session.post.call_args
    assert args[0] == f"{BASE_URL}/memories/"
    assert kwargs["headers"]["Authorization"] == "Token secret"
    assert kwargs["timeout"] == 5
    payload = kwargs["json"]
    assert payload["user_id"] == "u1"
    assert payload["messages"] == [
        {"role": "user", "content": "My passport number is 123456"},
        {"role": "assistant", "content": "I've noted the following information: My passport number is 123456"},
    ]
    assert payload["metadata"] == {"content_type": "travel_info", "app": "soar-tests"}
    assert payload["output_format"] == "v1.1"
    assert payload["version"] == "v2"


def test_add_http_error(client, session):
    session.post.return_value = _response(500, text="internal error")

    with pytest.raises(HTTPStatusFailure) as exc_info:
        client.add("text", "u1")

    assert exc_info.value.http_status == 500
    assert exc_info.value.body == "internal error"


def test_add_transport_error(client, session):
    session.post.side_effect = requests.exceptions.ConnectionError("refused")

    with pytest.raises(TransportFailure):
        client.add("text", "u1")


def test_add_invalid_url(client, session):
    session.post.side_effect = requests.exceptions.MissingSchema("no scheme")

    with pytest.raises(InvalidRequest):
        client.add("text", "u1")


def test_search_decodes_records(client, session):
    session.post.return_value = _response(200, [
        _record("m1", "Trip to Tokyo", score=0.82),
        _record("m2", "Passport number is 123456"),
    ])

    records = client.search("passport", "u1")

    args, kwargs = session.post.call_args
    assert args[0] == f"{BASE_URL}/memories/search/?version=v2"
    assert kwargs["json"] == {"query": "passport", "user_id": "u1"}
    assert [r.id for r in records] == ["m1", "m2"]
    assert records[0].text == "Trip to Tokyo"
    assert records[0].relevance_score == 0.82
    assert records[0].metadata == {}
    assert records[0].categories == {"travel"}
    assert records[1].relevance_score is None
    assert records[1].score_or_zero == 0.0


def test_search_drops_other_users_records(client, session):
    session.post.return_value = _response(200, [
        _record("m1", "mine"),
        _record("m2", "someone else's", user_id="u2"),
    ])

    records = client.search("anything", "u1")

    assert [r.text for r in records] == ["mine"]


def test_search_empty(client, session):
    session.post.return_value = _response(200, [])
    assert client.search("anything", "u1") == []


def test_search_non_list_body(client, session):
    session.post.return_value = _response(200, {"results": []}, text='{"results": []}')

    with pytest.raises(DecodeFailure) as exc_info:
        client.search("anything", "u1")

    assert exc_info.value.raw_body == '{"results": []}'


def test_search_invalid_json(client, session):
    session.post.return_value = _response(200, ValueError("bad json"), text="<html>")

    with pytest.raises(DecodeFailure) as exc_info:
        client.search("anything", "u1")

    assert exc_info.value.raw_body == "<html>"


def test_search_schema_mismatch(client, session):
    session.post.return_value = _response(200, [{"id": "m1"}])

    with pytest.raises(DecodeFailure):
        client.search("anything", "u1")
