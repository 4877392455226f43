# FILE: tests/test_chat_service.py

import pytest

from soar.core.exceptions import DecodeFailure, HTTPStatusFailure
from soar.llm.client import MessageType
from soar.services.background import BackgroundTaskRunner
from soar.services.chat_service import (
    DEFAULT_ACKNOWLEDGMENT,
    MEMORY_UNAVAILABLE_RESPONSE,
    NO_INFORMATION_RESPONSE,
    UNEXPECTED_ERROR_RESPONSE,
    WEB_SEARCH_FAILURE_RESPONSE,
    ChatService,
)


@pytest.fixture
def runner():
    runner = BackgroundTaskRunner(max_workers=1, name="test-chat-bg")
    yield runner
    runner.shutdown(wait=True)


@pytest.fixture
def service(fake_memory, fake_llm, runner):
    return ChatService(memory_client=fake_memory, llm_client=fake_llm, background=runner)


def test_query_without_memories(service, fake_memory):
    reply = service.handle("When is my flight to Tokyo?", "u1")

    assert reply == NO_INFORMATION_RESPONSE
    assert fake_memory.searches == [("When is my flight to Tokyo?", "u1")]


def test_query_answers_from_top_three(service, fake_memory, fake_llm, make_record):
    fake_memory.search_results = [
        make_record("a", 0.5),
        make_record("b", 0.9),
        make_record("c", 0.5),
        make_record("d", 0.5),
    ]

    reply = service.handle("When is my flight to Tokyo?", "u1")

    assert reply == fake_llm.response
    _, query, memories = fake_llm.calls[-1]
    assert query == "When is my flight to Tokyo?"
    assert [m.text for m in memories] == ["b", "a", "c"]


def test_query_falls_back_to_memories(service, fake_memory, fake_llm, make_record, transport_error):
    fake_memory.search_results = [make_record("Trip to Tokyo", 0.9), make_record("Flight NH106", 0.4)]
    fake_llm.response_error = transport_error

    reply = service.handle("When is my flight?", "u1")

    assert reply == "Based on your travel information:\n\n• Trip to Tokyo\n\n• Flight NH106"


def test_query_blank_llm_reply_falls_back(service, fake_memory, fake_llm, make_record):
    fake_memory.search_results = [make_record("Trip to Tokyo", 0.9)]
    fake_llm.response = "   "

    assert service.handle("When is my trip?", "u1") == "Based on your travel information:\n\n• Trip to Tokyo"


def test_query_memory_search_failure(service, fake_memory, fake_llm):
    fake_memory.search_error = HTTPStatusFailure(502, service="memory-store")

    assert service.handle("When is my flight?", "u1") == MEMORY_UNAVAILABLE_RESPONSE
    assert not any(call[0] == "generate_response" for call in fake_llm.calls)


def test_classification_failure_is_treated_as_query(service, fake_memory, fake_llm, transport_error):
    fake_llm.classify_error = transport_error

    reply = service.handle("My passport number is 123456", "u1")

    assert reply == NO_INFORMATION_RESPONSE
    assert fake_memory.searches
    assert fake_memory.added == []


def test_statement_is_stored_and_acknowledged(service, fake_memory, fake_llm, runner):
    fake_llm.classification = MessageType.STATEMENT

    reply = service.handle("My passport number is 123456", "u1")

    assert reply == fake_llm.acknowledgment
    assert runner.wait(timeout=5)
    assert fake_memory.added == [("My passport number is 123456", "u1")]
    assert fake_memory.searches == []


def test_statement_acknowledged_even_if_store_fails(service, fake_memory, fake_llm, runner):
    fake_llm.classification = MessageType.STATEMENT
    fake_memory.fail_markers.add("passport")

    reply = service.handle("My passport number is 123456", "u1")

    assert reply == fake_llm.acknowledgment
    assert runner.wait(timeout=5)
    assert runner.get_stats()["failed"] == 1


def test_statement_default_acknowledgment(service, fake_memory, fake_llm, runner):
    fake_llm.classification = MessageType.STATEMENT
    fake_llm.acknowledgment_error = DecodeFailure("bad body", service="llm")

    reply = service.handle("I prefer aisle seats", "u1")

    assert reply == DEFAULT_ACKNOWLEDGMENT
    assert runner.wait(timeout=5)
    assert fake_memory.texts() == ["I prefer aisle seats"]


def test_statement_after_runner_shutdown(fake_memory, fake_llm):
    runner = BackgroundTaskRunner(max_workers=1)
    runner.shutdown()
    service = ChatService(memory_client=fake_memory, llm_client=fake_llm, background=runner)
    fake_llm.classification = MessageType.STATEMENT

    assert service.handle("I prefer aisle seats", "u1") == fake_llm.acknowledgment


def test_web_search(service, fake_memory, fake_llm):
    fake_llm.classification = MessageType.WEB_SEARCH

    reply = service.handle("Do I need a visa for Japan?", "u1")

    assert reply == fake_llm.search_reply
    assert fake_memory.searches == []


def test_web_search_failure(service, fake_llm, transport_error):
    fake_llm.classification = MessageType.WEB_SEARCH
    fake_llm.search_error = transport_error

    reply = service.handle("Do I need a visa for Japan?", "u1")

    assert reply == "I'm having trouble searching for that information right now. Please try again later."
    assert reply == WEB_SEARCH_FAILURE_RESPONSE


def test_unexpected_error_never_escapes(service, fake_llm):
    fake_llm.classify_error = KeyError("surprise")

    assert service.handle("hello", "u1") == UNEXPECTED_ERROR_RESPONSE
    assert service.is_processing is False


@pytest.mark.parametrize("classification", [MessageType.QUERY, MessageType.STATEMENT, MessageType.WEB_SEARCH])
def test_is_processing_only_while_handling(service, fake_llm, fake_memory, runner, classification):
    seen = []
    fake_memory.search_results = []

    def classify(message):
        seen.append(("classify", service.is_processing))
        return classification

    def search_and_reformat(query):
        seen.append(("search", service.is_processing))
        return "Most visitors need a visa."

    fake_llm.classify = classify
    fake_llm.search_and_reformat = search_and_reformat

    assert service.is_processing is False
    service.handle("Do I need a visa for Japan?", "u1")

    assert seen[0] == ("classify", True)
    assert all(flag for _, flag in seen)
    assert service.is_processing is False
    assert runner.wait(timeout=5)
