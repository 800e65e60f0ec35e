import pytest
from fastapi.testclient import TestClient

from captionkit.main import create_app
from captionkit.vlm.hf_captioner import ModelClients

from conftest import FakeCaptioner, FakeGenerator


@pytest.fixture()
def client(settings, models):
    return TestClient(create_app(settings=settings, models=models))


def post_caption(client, png_bytes, **fields):
    return client.post(
        "/api/v1/caption",
        files={"file": ("beach.png", png_bytes, "image/png")},
        data=fields,
    )


def test_missing_file_is_400(client):
    resp = client.post("/api/v1/caption", data={"tone": "casual"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No image uploaded (field 'file')."


def test_undecodable_image_is_400(client):
    resp = client.post(
        "/api/v1/caption",
        files={"file": ("x.png", b"definitely not a png", "image/png")},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"].startswith("Invalid image")


def test_caption_happy_path(client, png_bytes):
    resp = post_caption(
        client,
        png_bytes,
        tone="chill",
        keywords='["sunset"]',
        hashtags='["BeachLife", "Summer"]',
        includeHashtags="true",
        includeMentions="true",
        includeEmojis="true",
        location="Malibu",
        handles="alice,@bob",
        emojiCount="2",
        emojiPlacement="beginning",
        mentionsPlacement="middle",
        hashtagsPlacement="nonsense",
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["caption"] == "A warm sunset over the beach."
    assert body["enhanced"] == "🏖️ 🌅 Chill 📍Malibu @alice @bob vibes at the beach #beachlife #summer"
    meta = body["meta"]
    assert meta["source"] == "model"
    assert meta["used_keywords"] == ["sunset"]
    assert meta["used_hashtags"] == ["BeachLife", "Summer"]
    assert meta["used_emojis"] == ["🏖️", "🌅"]
    assert meta["placements"] == {
        "hashtagsPlacement": "end",
        "mentionsPlacement": "middle",
        "emojiPlacement": "beginning",
    }
    assert "Incorporate these concepts naturally: sunset." in meta["prompt"]


def test_hashtags_off_hides_used_hashtags(client, png_bytes):
    resp = post_caption(client, png_bytes, hashtags="a,b", includeHashtags="false")
    meta = resp.json()["meta"]
    assert meta["used_hashtags"] == []
    assert "#" not in resp.json()["enhanced"]


def test_generator_failure_is_invisible_except_source(settings, png_bytes):
    models = ModelClients(
        settings=settings, captioner=FakeCaptioner(), generator=FakeGenerator(exc=RuntimeError("oom"))
    )
    client = TestClient(create_app(settings=settings, models=models))
    resp = post_caption(client, png_bytes, includeEmojis="true")
    assert resp.status_code == 200
    body = resp.json()
    assert body["meta"]["source"] == "rule-based"
    assert body["enhanced"] == "warm sunset over the beach."


def test_captioner_failure_is_500(settings, png_bytes):
    models = ModelClients(
        settings=settings, captioner=FakeCaptioner(exc=RuntimeError("cuda gone")), generator=FakeGenerator()
    )
    client = TestClient(create_app(settings=settings, models=models))
    resp = post_caption(client, png_bytes)
    assert resp.status_code == 500
    assert resp.json()["detail"].startswith("caption-failed")


def test_stub_models_still_answer(settings, png_bytes):
    client = TestClient(create_app(settings=settings, models=ModelClients(settings=settings)))
    body = post_caption(client, png_bytes).json()
    assert body["caption"] == "A photo (8x8)."
    assert body["enhanced"] == "photo (8x8)."
    assert body["meta"]["image_caption_model"] == "stub"
    assert body["meta"]["source"] == "rule-based"


def test_compose_endpoint(client):
    resp = client.post("/api/v1/caption/compose", json={
        "text": "A lovely sunny afternoon by the river.",
        "prompt": "Paraphrase into",
        "options": {
            "hashtags": ["SunnyDay", "Nature", "Walk"],
            "includeMentions": True,
            "includeEmojis": True,
            "location": "Paris",
            "handles": ["alice", "@bob"],
            "emojis": ["🌞", "🌿"],
            "emojiPlacement": "beginning",
            "mentionsPlacement": "middle",
            "hashtagsPlacement": "end",
        },
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["enhanced"] == "🌞 🌿 lovely sunny 📍Paris @alice @bob afternoon by the river. #sunnyday #nature #walk"
    assert body["looks_bad"] is False


def test_healthz(client):
    body = client.get("/healthz").json()
    assert body["status"] == "ok"
    assert body["config"]["env_keys_present"] == {"HF_TOKEN": False, "OPENAI_API_KEY": False}
    assert body["models"]["captioner"] == "IMG-1"
