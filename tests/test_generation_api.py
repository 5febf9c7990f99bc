"""Generation endpoints (mock mode and a stubbed model), and the orchestrator driving them end to end."""
import httpx
import pytest

from ebook_builder.services import content_service, outline_service
from ebook_builder.services.generation_client import GenerationClient
from ebook_builder.services.generation_orchestrator import (
    GenerationOrchestrator,
    GenerationStage,
)
from ebook_builder.services.llm_client import LLMError


async def test_outline_returns_titles_and_clears_pages(client, ebook):
    assert len(ebook["pages"]) == 1

    response = await client.post(
        "/api/generate-outline",
        json={"description": "Sourdough baking", "ebookId": ebook["id"]},
    )

    assert response.status_code == 200
    outline = response.json()["outline"]
    assert len(outline) == 6
    assert all("Sourdough baking" in title for title in outline)

    pages = await client.get(f"/api/ebooks/{ebook['id']}/pages/")
    assert pages.json() == []


async def test_outline_rejects_blank_description(client, ebook):
    response = await client.post(
        "/api/generate-outline", json={"description": "   ", "ebookId": ebook["id"]},
    )
    assert response.status_code == 400


async def test_outline_unknown_ebook_is_404(client):
    response = await client.post(
        "/api/generate-outline", json={"description": "Topic", "ebookId": "missing"},
    )
    assert response.status_code == 404


async def test_outline_without_api_key_is_500(client, ebook, settings, monkeypatch):
    monkeypatch.setattr(settings, "USE_MOCK_API", False)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")

    response = await client.post(
        "/api/generate-outline", json={"description": "Topic", "ebookId": ebook["id"]},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "OpenAI API key not configured"}


@pytest.mark.parametrize(
    "index, template",
    [(0, "cover-page"), (1, "text-only"), (3, "text-only"), (4, "image-top"), (8, "image-top")],
)
async def test_content_creates_page_with_template(client, ebook, index, template):
    response = await client.post(
        "/api/generate-content",
        json={
            "ebookId": ebook["id"],
            "sectionTitle": "Feeding the starter",
            "sectionIndex": index,
            "totalSections": 10,
            "description": "Sourdough baking",
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    page = body["page"]
    assert page["template"] == template
    assert page["order"] == index
    assert page["title"] == "Feeding the starter"
    assert "<h2>Feeding the starter</h2>" in page["content"]


async def test_content_index_out_of_range_is_400(client, ebook):
    response = await client.post(
        "/api/generate-content",
        json={
            "ebookId": ebook["id"],
            "sectionTitle": "Too far",
            "sectionIndex": 3,
            "totalSections": 3,
        },
    )
    assert response.status_code == 400


async def test_content_missing_fields_is_422(client, ebook):
    response = await client.post("/api/generate-content", json={"ebookId": ebook["id"]})
    assert response.status_code == 422


async def test_generate_image_mock_writes_png(client, settings):
    response = await client.post("/api/generate-image", json={"prompt": "A loaf of bread"})

    assert response.status_code == 200
    image_url = response.json()["imageUrl"]
    assert image_url.startswith("/media/images/ai-generated-")
    assert image_url.endswith(".png")


async def test_orchestrator_end_to_end(app, client, ebook):
    http = httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
    snapshots = []
    async with GenerationClient(client=http) as gen_client:
        orchestrator = GenerationOrchestrator(
            gen_client, on_progress=snapshots.append, close_delay=0,
        )
        final = await orchestrator.run("Sourdough baking", ebook["id"])
    await http.aclose()

    assert final.stage == GenerationStage.COMPLETE
    assert len(final.outline) == 6

    pages = (await client.get(f"/api/ebooks/{ebook['id']}/pages/")).json()
    assert [p["order"] for p in pages] == list(range(6))
    assert [p["title"] for p in pages] == final.outline
    assert pages[0]["template"] == "cover-page"
    assert pages[4]["template"] == "image-top"


@pytest.fixture
def live_provider(settings, monkeypatch):
    monkeypatch.setattr(settings, "USE_MOCK_API", False)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "sk-test")


async def test_outline_with_malformed_model_output_is_500(client, ebook, live_provider, monkeypatch):
    async def fake_llm_call(system_prompt, user_prompt, **kwargs):
        return '{"outline": "Intro"}'

    monkeypatch.setattr(outline_service, "llm_call", fake_llm_call)

    response = await client.post(
        "/api/generate-outline", json={"description": "Topic", "ebookId": ebook["id"]},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Invalid outline format received"}


async def test_outline_model_failure_is_500(client, ebook, live_provider, monkeypatch):
    async def fake_llm_call(system_prompt, user_prompt, **kwargs):
        raise LLMError("LLM API error (429)", status_code=429, retriable=True)

    monkeypatch.setattr(outline_service, "llm_call", fake_llm_call)

    response = await client.post(
        "/api/generate-outline", json={"description": "Topic", "ebookId": ebook["id"]},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "LLM API error (429)"}


async def test_content_model_failure_is_500_and_stores_no_page(client, ebook, live_provider, monkeypatch):
    async def fake_llm_call(system_prompt, user_prompt, **kwargs):
        raise LLMError("No response from model", status_code=502)

    monkeypatch.setattr(content_service, "llm_call", fake_llm_call)
    before = (await client.get(f"/api/ebooks/{ebook['id']}/pages/")).json()

    response = await client.post(
        "/api/generate-content",
        json={
            "ebookId": ebook["id"],
            "sectionTitle": "Starter",
            "sectionIndex": 1,
            "totalSections": 5,
            "description": "Sourdough baking",
        },
    )

    assert response.status_code == 500
    assert response.json() == {"error": "No response from model"}
    after = (await client.get(f"/api/ebooks/{ebook['id']}/pages/")).json()
    assert len(after) == len(before)


async def test_content_uses_model_output_as_page_html(client, ebook, live_provider, monkeypatch):
    prompts = []

    async def fake_llm_call(system_prompt, user_prompt, **kwargs):
        prompts.append(user_prompt)
        return "<h2>Flour</h2><p>Strong white flour.</p>"

    monkeypatch.setattr(content_service, "llm_call", fake_llm_call)

    response = await client.post(
        "/api/generate-content",
        json={
            "ebookId": ebook["id"],
            "sectionTitle": "Flour",
            "sectionIndex": 2,
            "totalSections": 5,
            "description": "Sourdough baking",
        },
    )

    assert response.status_code == 200
    assert response.json()["page"]["content"] == "<h2>Flour</h2><p>Strong white flour.</p>"
    assert 'Section 3 of 5: "Flour"' in prompts[0]
