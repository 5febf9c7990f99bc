"""GenerationOrchestrator against a scripted generation backend (httpx.MockTransport)."""
import asyncio
import json

import httpx
import pytest

from ebook_builder.services.generation_client import (
    CONTENT_PATH,
    OUTLINE_PATH,
    CancellationToken,
    GenerationCancelled,
    GenerationClient,
    UpstreamError,
    UserInputError,
)
from ebook_builder.services.generation_orchestrator import (
    LABEL_CANCELLED,
    LABEL_COMPLETE,
    LABEL_ERROR,
    GenerationOrchestrator,
    GenerationStage,
    section_percent,
)

SOURDOUGH = "A guide to sourdough baking"
TITLES = ["Starter", "Flour", "Hydration", "Shaping", "Baking"]


class FakeBackend:
    """Records every call and answers like the generation endpoints."""

    def __init__(self, outline=None, *, fail_section=None, outline_status=200):
        self.outline = TITLES if outline is None else outline
        self.fail_section = fail_section
        self.outline_status = outline_status
        self.outline_calls = []
        self.section_calls = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if request.url.path == OUTLINE_PATH:
            self.outline_calls.append(body)
            if self.outline_status != 200:
                return httpx.Response(self.outline_status, json={"error": "boom"})
            return httpx.Response(200, json={"outline": self.outline})
        if request.url.path == CONTENT_PATH:
            self.section_calls.append(body)
            if body["sectionIndex"] == self.fail_section:
                return httpx.Response(500, json={"error": "Failed to generate content"})
            return httpx.Response(200, json={"success": True, "page": {"id": f"p{body['sectionIndex']}"}})
        return httpx.Response(404)

    def client(self) -> GenerationClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler), base_url="http://gen")
        return GenerationClient(client=http)


def make_orchestrator(backend, **kwargs):
    snapshots = []
    orchestrator = GenerationOrchestrator(
        backend.client(), on_progress=snapshots.append, close_delay=0, **kwargs,
    )
    return orchestrator, snapshots


async def test_successful_run_issues_one_call_per_section():
    backend = FakeBackend()
    orchestrator, _ = make_orchestrator(backend)

    final = await orchestrator.run(SOURDOUGH, "ebook-1")

    assert len(backend.outline_calls) == 1
    assert backend.outline_calls[0] == {"description": SOURDOUGH, "ebookId": "ebook-1"}
    assert [c["sectionIndex"] for c in backend.section_calls] == [0, 1, 2, 3, 4]
    assert {c["totalSections"] for c in backend.section_calls} == {5}
    assert [c["sectionTitle"] for c in backend.section_calls] == TITLES
    assert all(c["ebookId"] == "ebook-1" for c in backend.section_calls)
    assert final.stage == GenerationStage.COMPLETE
    assert final.percent == 100
    assert final.current_step == LABEL_COMPLETE
    assert final.outline == TITLES


async def test_progress_sequence_for_five_sections():
    backend = FakeBackend()
    orchestrator, snapshots = make_orchestrator(backend)

    await orchestrator.run(SOURDOUGH, "ebook-1")

    distinct = []
    for snap in snapshots:
        if not distinct or distinct[-1] != snap.percent:
            distinct.append(snap.percent)
    assert distinct == pytest.approx([0, 10, 30, 43, 56, 69, 82, 95, 100])


async def test_progress_is_monotonic_and_100_only_when_complete():
    backend = FakeBackend(outline=[f"Section {i}" for i in range(7)])
    orchestrator, snapshots = make_orchestrator(backend)

    await orchestrator.run("Topic", "ebook-1")

    percents = [s.percent for s in snapshots]
    assert percents == sorted(percents)
    for snap in snapshots:
        assert (snap.percent == 100) == (snap.stage == GenerationStage.COMPLETE)


async def test_blank_description_is_rejected_without_calls():
    backend = FakeBackend()
    orchestrator, snapshots = make_orchestrator(backend)

    with pytest.raises(UserInputError):
        await orchestrator.run("   ", "ebook-1")

    assert backend.outline_calls == []
    assert snapshots == []
    assert not orchestrator.is_running


async def test_outline_failure_issues_no_section_calls():
    backend = FakeBackend(outline_status=500)
    orchestrator, _ = make_orchestrator(backend)

    with pytest.raises(UpstreamError) as excinfo:
        await orchestrator.run(SOURDOUGH, "ebook-1")

    assert excinfo.value.stage == "outline"
    assert excinfo.value.status_code == 500
    assert backend.section_calls == []
    assert orchestrator.progress.stage == GenerationStage.IDLE
    assert orchestrator.progress.current_step == LABEL_ERROR


@pytest.mark.parametrize("outline", [[], "not a list", [1, 2]])
async def test_malformed_outline_is_an_upstream_error(outline):
    backend = FakeBackend(outline=outline)
    orchestrator, _ = make_orchestrator(backend)

    with pytest.raises(UpstreamError):
        await orchestrator.run(SOURDOUGH, "ebook-1")

    assert backend.section_calls == []


async def test_section_failure_stops_later_sections():
    backend = FakeBackend(fail_section=2)
    orchestrator, _ = make_orchestrator(backend)

    with pytest.raises(UpstreamError) as excinfo:
        await orchestrator.run(SOURDOUGH, "ebook-1")

    assert excinfo.value.section_index == 2
    assert [c["sectionIndex"] for c in backend.section_calls] == [0, 1, 2]
    progress = orchestrator.progress
    assert progress.stage == GenerationStage.IDLE
    assert progress.current_step == LABEL_ERROR
    # Percent stays where the failure happened
    assert progress.percent == pytest.approx(section_percent(1, 5))


@pytest.mark.parametrize("k", [0, 1, 3, 5])
async def test_cancel_after_k_sections(k):
    backend = FakeBackend()
    orchestrator = None

    def listener(snap):
        if snap.stage != GenerationStage.EXPANDING:
            return
        if len(backend.section_calls) == k and snap.percent == pytest.approx(
            section_percent(k - 1, 5) if k else 30
        ):
            orchestrator.cancel()

    orchestrator = GenerationOrchestrator(backend.client(), on_progress=listener, close_delay=0)

    with pytest.raises(GenerationCancelled):
        await orchestrator.run(SOURDOUGH, "ebook-1")

    assert len(backend.section_calls) == k
    assert orchestrator.progress.stage == GenerationStage.IDLE
    assert orchestrator.progress.current_step == LABEL_CANCELLED
    assert not orchestrator.is_running


async def test_cancel_aborts_in_flight_request():
    started = asyncio.Event()
    section_calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == OUTLINE_PATH:
            return httpx.Response(200, json={"outline": TITLES})
        section_calls.append(json.loads(request.content))
        started.set()
        await asyncio.Event().wait()  # never answers
        return httpx.Response(200, json={})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gen")
    orchestrator = GenerationOrchestrator(GenerationClient(client=http), close_delay=0)

    task = asyncio.create_task(orchestrator.run(SOURDOUGH, "ebook-1"))
    await asyncio.wait_for(started.wait(), timeout=5)
    orchestrator.cancel()

    with pytest.raises(GenerationCancelled):
        await asyncio.wait_for(task, timeout=5)

    assert len(section_calls) == 1
    assert orchestrator.progress.stage == GenerationStage.IDLE
    await http.aclose()


async def test_second_run_while_active_is_refused():
    started = asyncio.Event()
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        started.set()
        await release.wait()
        return httpx.Response(200, json={"outline": ["Only"]})

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gen")
    orchestrator = GenerationOrchestrator(GenerationClient(client=http), close_delay=0)

    task = asyncio.create_task(orchestrator.run(SOURDOUGH, "ebook-1"))
    await started.wait()
    assert orchestrator.is_running
    with pytest.raises(RuntimeError):
        await orchestrator.run(SOURDOUGH, "ebook-1")

    orchestrator.cancel()
    with pytest.raises(GenerationCancelled):
        await task
    await http.aclose()


async def test_rerun_starts_from_zero_with_empty_outline():
    backend = FakeBackend()
    orchestrator, snapshots = make_orchestrator(backend)
    await orchestrator.run(SOURDOUGH, "ebook-1")

    snapshots.clear()
    backend.outline = ["One", "Two"]
    await orchestrator.run("Another topic", "ebook-1")

    first = snapshots[0]
    assert first.percent == 0
    assert first.outline == []
    assert first.stage == GenerationStage.IDLE
    assert orchestrator.progress.outline == ["One", "Two"]


async def test_rerun_after_cancel_resets_progress():
    backend = FakeBackend()
    orchestrator = None

    def cancel_on_first_section(snap):
        if len(backend.section_calls) == 1 and snap.stage == GenerationStage.EXPANDING:
            orchestrator.cancel()

    orchestrator = GenerationOrchestrator(
        backend.client(), on_progress=cancel_on_first_section, close_delay=0,
    )
    with pytest.raises(GenerationCancelled):
        await orchestrator.run(SOURDOUGH, "ebook-1")
    assert orchestrator.progress.percent > 0

    snapshots = []
    orchestrator._on_progress = snapshots.append
    backend.section_calls.clear()
    await orchestrator.run(SOURDOUGH, "ebook-1")

    assert snapshots[0].percent == 0
    assert snapshots[0].outline == []
    assert len(backend.section_calls) == 5


async def test_completion_closes_after_delay():
    backend = FakeBackend(outline=["Only"])
    closed = asyncio.Event()
    orchestrator = GenerationOrchestrator(
        backend.client(), on_complete=closed.set, close_delay=0.01,
    )

    await orchestrator.run(SOURDOUGH, "ebook-1")
    assert orchestrator.progress.stage == GenerationStage.COMPLETE

    await asyncio.wait_for(closed.wait(), timeout=5)
    assert orchestrator.progress.stage == GenerationStage.IDLE
    assert orchestrator.progress.percent == 0
    assert orchestrator.progress.outline == []


async def test_reset_clears_progress():
    backend = FakeBackend()
    orchestrator, snapshots = make_orchestrator(backend)
    await orchestrator.run(SOURDOUGH, "ebook-1")

    orchestrator.reset()

    assert snapshots[-1].percent == 0
    assert orchestrator.progress.outline == []
    assert orchestrator.progress.stage == GenerationStage.IDLE


async def test_transport_error_is_upstream_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gen")
    orchestrator = GenerationOrchestrator(GenerationClient(client=http), close_delay=0)

    with pytest.raises(UpstreamError) as excinfo:
        await orchestrator.run(SOURDOUGH, "ebook-1")
    assert excinfo.value.stage == "outline"
    assert excinfo.value.status_code is None


async def test_cancellation_wins_over_request_failing_at_the_same_time():
    token = CancellationToken()

    async def cancel_then_fail():
        token.cancel()
        raise httpx.ConnectError("connection reset")

    with pytest.raises(GenerationCancelled):
        await token.run(cancel_then_fail())


async def test_client_reports_cancel_when_request_fails_after_abort():
    token = CancellationToken()

    def handler(request):
        token.cancel()
        raise httpx.ReadError("stream closed", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://gen")
    async with GenerationClient(client=http) as gen_client:
        with pytest.raises(GenerationCancelled):
            await gen_client.generate_outline(SOURDOUGH, "ebook-1", token=token)
    await http.aclose()


async def test_token_returns_result_when_not_cancelled():
    async def answer():
        return 42

    assert await CancellationToken().run(answer()) == 42
