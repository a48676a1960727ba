"""Unit tests for the completion request pipeline."""
import asyncio

import httpx
import pytest
from conftest import FakeProvider, completion_body, make_openai_provider, request_json
from hypothesis import given, settings as hypothesis_settings
from hypothesis import strategies as st

from parley.conversation import (
    AlreadyInFlightError,
    ConversationStore,
    InvalidInputError,
    Message,
    MissingCredentialError,
    Role,
)
from parley.llm import OpenAIProvider, RemoteCallError
from parley.pipeline import (
    DEFAULT_TEMPERATURE,
    CompletionPipeline,
    TurnOutcome,
    build_request_messages,
)
from parley.settings import ClientSettings


def history(store: ConversationStore) -> list[tuple[Role, str]]:
    return [(m.role, m.content) for m in store.messages]


class TestBuildRequestMessages:
    """Tests for mapping history to wire messages."""

    def test_maps_roles(self):
        messages = [
            Message(role=Role.USER, content="Hi"),
            Message(role=Role.ASSISTANT, content="Hello"),
            Message(role=Role.USER, content="Bye"),
        ]
        wire = build_request_messages(messages)
        assert [(m.role, m.content) for m in wire] == [
            ("user", "Hi"),
            ("assistant", "Hello"),
            ("user", "Bye"),
        ]

    def test_empty_history(self):
        assert build_request_messages([]) == []


class TestSubmitPreconditions:
    """Rejected submissions leave no trace."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    async def test_blank_input_is_rejected(self, pipeline, store, provider, text):
        store.set_draft(text)
        outcome = await pipeline.submit(text)

        assert outcome is TurnOutcome.REJECTED
        assert store.messages == ()
        assert not store.awaiting_response
        assert store.draft == text
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_missing_credential_is_rejected(self, store, provider):
        pipeline = CompletionPipeline(store, ClientSettings(api_key=None), provider=provider)
        store.set_draft("Hi")

        outcome = await pipeline.submit("Hi")

        assert outcome is TurnOutcome.REJECTED
        assert store.messages == ()
        assert store.draft == "Hi"
        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_blank_credential_is_rejected(self, store, provider):
        pipeline = CompletionPipeline(store, ClientSettings(api_key="  "), provider=provider)
        assert await pipeline.submit("Hi") is TurnOutcome.REJECTED
        assert provider.calls == []

    def test_check_order_input_before_credential(self, store):
        pipeline = CompletionPipeline(store, ClientSettings(api_key=None))
        store.begin_request()
        with pytest.raises(InvalidInputError):
            pipeline.check_submission("  ")

    def test_check_order_credential_before_in_flight(self, store):
        pipeline = CompletionPipeline(store, ClientSettings(api_key=None))
        store.begin_request()
        with pytest.raises(MissingCredentialError):
            pipeline.check_submission("Hi")

    def test_check_in_flight(self, pipeline, store):
        store.begin_request()
        with pytest.raises(AlreadyInFlightError):
            pipeline.check_submission("Hi")

    def test_check_passes(self, pipeline):
        pipeline.check_submission("Hi")


class TestSubmitOutcomes:
    """Tests for fulfilled and failed turns."""

    @pytest.mark.asyncio
    async def test_success(self, pipeline, store, provider):
        store.set_draft("Hi")
        outcome = await pipeline.submit("Hi")

        assert outcome is TurnOutcome.FULFILLED
        assert history(store) == [(Role.USER, "Hi"), (Role.ASSISTANT, "Hello")]
        assert not store.awaiting_response
        assert store.draft == ""

    @pytest.mark.asyncio
    async def test_request_parameters(self, pipeline, provider):
        await pipeline.submit("Hi")

        call = provider.calls[0]
        assert call["model"] == "gpt-4o-mini"
        assert call["temperature"] == DEFAULT_TEMPERATURE == 0.7
        assert [(m.role, m.content) for m in call["messages"]] == [("user", "Hi")]

    @pytest.mark.asyncio
    async def test_whole_history_is_resent(self, pipeline, provider):
        await pipeline.submit("Hi")
        provider.reply = "Second"
        await pipeline.submit("Again")

        second = provider.calls[1]["messages"]
        assert [(m.role, m.content) for m in second] == [
            ("user", "Hi"),
            ("assistant", "Hello"),
            ("user", "Again"),
        ]

    @pytest.mark.asyncio
    async def test_remote_failure_becomes_error_turn(self, store, settings):
        provider = FakeProvider(error=RemoteCallError("HTTP 500", status_code=500))
        pipeline = CompletionPipeline(store, settings, provider=provider)

        outcome = await pipeline.submit("Hi")

        assert outcome is TurnOutcome.FAILED
        assert history(store) == [(Role.USER, "Hi"), (Role.ASSISTANT, "Error: HTTP 500")]
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_error_turn(self, store, settings):
        provider = FakeProvider(error=KeyError("choices"))
        pipeline = CompletionPipeline(store, settings, provider=provider)

        outcome = await pipeline.submit("Hi")

        assert outcome is TurnOutcome.FAILED
        assert store.messages[-1].role is Role.ASSISTANT
        assert store.messages[-1].content.startswith("Error: ")
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_session_accepts_new_submission_after_failure(self, store, settings):
        provider = FakeProvider(error=RemoteCallError("HTTP 503", status_code=503))
        pipeline = CompletionPipeline(store, settings, provider=provider)

        await pipeline.submit("Hi")
        provider.error = None
        outcome = await pipeline.submit("Retry by hand")

        assert outcome is TurnOutcome.FULFILLED
        assert len(store) == 4
        assert len(provider.calls) == 2

    @pytest.mark.asyncio
    async def test_cancellation_still_clears_flag(self, store, settings):
        gate = asyncio.Event()
        pipeline = CompletionPipeline(store, settings, provider=FakeProvider(gate=gate))

        task = asyncio.create_task(pipeline.submit("Hi"))
        await asyncio.sleep(0)
        assert store.awaiting_response

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert not store.awaiting_response
        assert history(store) == [(Role.USER, "Hi")]


class TestWireEndToEnd:
    """Pipeline plus the real OpenAI client over a mocked transport."""

    @pytest.mark.asyncio
    async def test_success_response(self, store, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": [{"message": {"content": "Hello"}}]})

        pipeline = CompletionPipeline(store, settings, provider=make_openai_provider(handler))
        await pipeline.submit("Hi")

        assert history(store) == [(Role.USER, "Hi"), (Role.ASSISTANT, "Hello")]
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_full_service_body_with_usage_details(self, store, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=completion_body("Hello"))

        pipeline = CompletionPipeline(store, settings, provider=make_openai_provider(handler))
        outcome = await pipeline.submit("Hi")

        assert outcome is TurnOutcome.FULFILLED
        assert history(store) == [(Role.USER, "Hi"), (Role.ASSISTANT, "Hello")]
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_http_500(self, store, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="internal error")

        pipeline = CompletionPipeline(store, settings, provider=make_openai_provider(handler))
        outcome = await pipeline.submit("Hi")

        assert outcome is TurnOutcome.FAILED
        assert history(store) == [(Role.USER, "Hi"), (Role.ASSISTANT, "Error: HTTP 500")]
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_malformed_body(self, store, settings):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": []})

        pipeline = CompletionPipeline(store, settings, provider=make_openai_provider(handler))
        await pipeline.submit("Hi")

        assert store.messages[-1].content.startswith("Error: Malformed response")
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_payload_mirrors_history(self, store, settings):
        bodies = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(request_json(request))
            return httpx.Response(200, json=completion_body(f"reply {len(bodies)}"))

        pipeline = CompletionPipeline(store, settings, provider=make_openai_provider(handler))
        await pipeline.submit("first")
        await pipeline.submit("second")

        assert bodies[1]["messages"] == [
            {"role": "user", "content": "first"},
            {"role": "assistant", "content": "reply 1"},
            {"role": "user", "content": "second"},
        ]
        assert bodies[1]["temperature"] == 0.7
        assert bodies[1]["model"] == "gpt-4o-mini"


class TestSingleInFlight:
    """Only one request may be awaiting settlement."""

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_ignored(self, store, settings):
        gate = asyncio.Event()
        provider = FakeProvider(gate=gate)
        pipeline = CompletionPipeline(store, settings, provider=provider)

        first = asyncio.create_task(pipeline.submit("Hi"))
        await asyncio.sleep(0)
        assert store.awaiting_response
        assert history(store) == [(Role.USER, "Hi")]

        store.set_draft("Again")
        second = await pipeline.submit("Again")

        assert second is TurnOutcome.REJECTED
        assert history(store) == [(Role.USER, "Hi")]
        assert store.draft == "Again"
        assert len(provider.calls) == 1

        gate.set()
        assert await first is TurnOutcome.FULFILLED
        assert history(store) == [(Role.USER, "Hi"), (Role.ASSISTANT, "Hello")]
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_flag_observed_by_listener(self, pipeline, store):
        flags = []
        store.add_listener(lambda s: flags.append(s.awaiting_response))

        await pipeline.submit("Hi")

        # append user, begin, clear draft (unchanged), append assistant, end
        assert flags[0] is False
        assert True in flags
        assert flags[-1] is False
        assert store.messages[-1].role is Role.ASSISTANT


class TestResetDuringFlight:
    """Resetting while a reply is pending."""

    @pytest.mark.asyncio
    async def test_reset_drops_late_reply(self, store, settings):
        gate = asyncio.Event()
        pipeline = CompletionPipeline(store, settings, provider=FakeProvider(gate=gate))

        task = asyncio.create_task(pipeline.submit("Hi"))
        await asyncio.sleep(0)
        pipeline.reset()

        assert store.messages == ()
        assert not store.awaiting_response

        gate.set()
        await task

        assert store.messages == ()
        assert not store.awaiting_response

    @pytest.mark.asyncio
    async def test_late_reply_does_not_clear_newer_request(self, store, settings):
        first_gate = asyncio.Event()
        provider = FakeProvider(gate=first_gate)
        pipeline = CompletionPipeline(store, settings, provider=provider)

        old = asyncio.create_task(pipeline.submit("old"))
        await asyncio.sleep(0)
        pipeline.reset()

        second_gate = asyncio.Event()
        provider.gate = second_gate
        new = asyncio.create_task(pipeline.submit("new"))
        await asyncio.sleep(0)
        assert store.awaiting_response

        first_gate.set()
        await old
        assert store.awaiting_response
        assert history(store) == [(Role.USER, "new")]

        second_gate.set()
        await new
        assert history(store) == [(Role.USER, "new"), (Role.ASSISTANT, "Hello")]
        assert not store.awaiting_response


class TestProviderLifecycle:
    """Lazy provider creation and cleanup."""

    @pytest.mark.asyncio
    async def test_provider_created_from_settings(self, store):
        pipeline = CompletionPipeline(store, ClientSettings(api_key="sk-test", model="gpt-4o"))
        provider = pipeline._get_provider()

        assert isinstance(provider, OpenAIProvider)
        assert provider.model == "gpt-4o"
        await pipeline.aclose()

    @pytest.mark.asyncio
    async def test_injected_provider_is_not_closed(self, pipeline, provider):
        await pipeline.aclose()
        assert not provider.closed


class TestPipelineProperties:
    """Property tests over sequences of submissions."""

    @hypothesis_settings(deadline=None, max_examples=50)
    @given(st.lists(st.tuples(st.text(max_size=20), st.booleans()), max_size=12))
    def test_payload_length_and_append_only(self, submissions):
        async def run() -> None:
            store = ConversationStore()
            provider = FakeProvider()
            pipeline = CompletionPipeline(store, ClientSettings(api_key="k"), provider=provider)

            for text, fail in submissions:
                provider.error = RemoteCallError("HTTP 500", status_code=500) if fail else None
                before = store.messages
                calls_before = len(provider.calls)

                outcome = await pipeline.submit(text)

                assert not store.awaiting_response
                assert store.messages[:len(before)] == before
                if not text.strip():
                    assert outcome is TurnOutcome.REJECTED
                    assert store.messages == before
                    assert len(provider.calls) == calls_before
                    continue

                sent = provider.calls[-1]["messages"]
                assert len(sent) == len(before) + 1
                assert [m.role for m in sent] == [
                    "user" if m.role is Role.USER else "assistant" for m in store.messages[:-1]
                ]
                assert len(store.messages) == len(before) + 2
                expected = TurnOutcome.FAILED if fail else TurnOutcome.FULFILLED
                assert outcome is expected

        asyncio.run(run())
