"""Theme endpoints and preset seeding."""
from ebook_builder.services.theme_presets import THEME_PRESETS


async def test_seed_inserts_every_preset(client):
    response = await client.post("/api/themes/seed")

    assert response.status_code == 200
    names = {t["name"] for t in response.json()}
    assert names == {p["name"] for p in THEME_PRESETS}
    assert len(THEME_PRESETS) == 14


async def test_seed_is_idempotent_and_restores_presets(client):
    themes = (await client.post("/api/themes/seed")).json()
    modern = next(t for t in themes if t["name"] == "Modern")
    await client.patch(f"/api/themes/{modern['id']}", json={"accent_color": "#FF0000"})

    reseeded = (await client.post("/api/themes/seed")).json()

    listed = (await client.get("/api/themes/")).json()
    assert len(listed) == len(THEME_PRESETS)
    restored = next(t for t in reseeded if t["name"] == "Modern")
    assert restored["id"] == modern["id"]
    assert restored["accent_color"] == "#3B82F6"


async def test_current_ebook_does_not_overwrite_edited_default(client):
    themes = (await client.post("/api/themes/seed")).json()
    modern = next(t for t in themes if t["name"] == "Modern")
    await client.patch(f"/api/themes/{modern['id']}", json={"accent_color": "#FF0000"})

    ebook = (await client.get("/api/ebooks/current")).json()

    assert ebook["theme"]["id"] == modern["id"]
    assert ebook["theme"]["accent_color"] == "#FF0000"


async def test_create_theme_fills_defaults(client):
    response = await client.post(
        "/api/themes/", json={"name": "Bakery", "primary_color": "#8B4513"},
    )

    assert response.status_code == 201
    theme = response.json()
    assert theme["primary_color"] == "#8B4513"
    assert theme["secondary_color"] == "#666666"
    assert theme["heading_font"] == "Inter"
    assert theme["h1_size"] == "2.5rem"


async def test_create_duplicate_theme_is_400(client):
    await client.post("/api/themes/", json={"name": "Bakery"})
    response = await client.post("/api/themes/", json={"name": "Bakery"})
    assert response.status_code == 400


async def test_rename_to_taken_name_is_400(client):
    await client.post("/api/themes/", json={"name": "Bakery"})
    other = (await client.post("/api/themes/", json={"name": "Cafe"})).json()

    response = await client.patch(f"/api/themes/{other['id']}", json={"name": "Bakery"})

    assert response.status_code == 400


async def test_get_unknown_theme_is_404(client):
    assert (await client.get("/api/themes/missing")).status_code == 404
