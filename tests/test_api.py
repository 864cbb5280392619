import json

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient  # noqa: E402

from cardforge.apis.cards.main import _STATUS_BY_ERROR, PREFIX, get_card_generator  # noqa: E402
from cardforge.modules.cards.errors import CardValidationError, ParseError, ProviderError  # noqa: E402
from cardforge.modules.cards.main import CardGenerator  # noqa: E402
from main import app  # noqa: E402

from .conftest import StubProvider, batch  # noqa: E402


@pytest.fixture
def use_provider(settings):
    def install(*outputs, generation_settings=None):
        provider = StubProvider(*outputs)
        svc = CardGenerator(generation_settings or settings, provider=provider)
        app.dependency_overrides[get_card_generator] = lambda: svc
        return provider

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client():
    return TestClient(app)


def test_root(client):
    res = client.get("/")

    assert res.status_code == 200
    assert res.json()["status"] == "ok"


def test_classify(client):
    res = client.post(f"{PREFIX}/classify", json={"text": "Tell me about a time you failed."})

    assert res.status_code == 200
    assert res.json() == {"category": "BEHAVIORAL_QA", "label": "Behavioral Q&A"}


def test_generate(client, use_provider):
    provider = use_provider(batch({"front": "Q", "back": "A", "noteType": "BASIC"}, notes="NEEDS_REVIEW"))

    res = client.post(f"{PREFIX}/generate", json={"text": "Notes on heaps", "count": 2})

    assert res.status_code == 200
    body = res.json()
    assert body["needs_review"] is True
    assert body["result"]["selectedNoteType"] == "BASIC"
    assert body["result"]["cards"][0]["front"] == "Q"
    assert provider.calls[0][0][1].content.startswith("Generate 2 atomic")


@pytest.mark.parametrize(
    "output, status",
    [
        ("no json at all", 422),
        ('{"cards": []}', 422),
        (ProviderError("stub", 500, "upstream exploded"), 502),
    ],
)
def test_generate_errors(client, use_provider, output, status):
    use_provider(output)

    res = client.post(f"{PREFIX}/generate", json={"text": "Notes on heaps"})

    assert res.status_code == status
    assert res.json()["detail"]


def test_generate_without_key_is_unavailable(client, use_provider, settings):
    use_provider(generation_settings=settings.model_copy(update={"api_key": None}))

    res = client.post(f"{PREFIX}/generate", json={"text": "Notes"})

    assert res.status_code == 503


def test_generate_blank_text(client, use_provider):
    use_provider()

    assert client.post(f"{PREFIX}/generate", json={"text": "  "}).status_code == 400


def test_score(client, use_provider):
    use_provider(json.dumps({"scores": [{"score": 3, "feedback": ["vague"], "improvedCard": {"front": "Better"}}]}))

    res = client.post(f"{PREFIX}/score", json={"cards": [{"front": "Explain X"}], "noteType": "BASIC"})

    assert res.status_code == 200
    (score,) = res.json()["scores"]
    assert score["grade"] == "Poor"
    assert score["improvedCard"]["front"] == "Better"


def test_map_returns_per_card_errors_as_data(client, use_provider):
    use_provider()
    payload = {
        "result": {
            "selectedNoteType": "CLOZE",
            "cards": [{"text": "{{c1::Redis}} is fast"}, {"front": "Q", "noteType": "BASIC"}],
        },
        "schemas": [
            {"name": "Basic", "type": 0, "fields": ["Front", "Back"]},
            {"name": "Cloze", "type": 0, "fields": ["Text", "Extra"]},
        ],
    }

    res = client.post(f"{PREFIX}/map", json=payload)

    assert res.status_code == 200
    first, second = res.json()["mappings"]
    assert first["kind"] == "error"
    assert "not a Cloze-type model" in first["error"]
    assert second == {"kind": "fields", "modelName": "Basic", "fields": {"Front": "Q", "Back": ""}}


def test_suggest_tags(client, use_provider):
    use_provider('["DSA", "heap"]')

    res = client.post(f"{PREFIX}/suggest-tags", json={"content": "Binary heaps"})

    assert res.json() == {"tags": ["dsa", "heap"]}


def test_autofill(client, use_provider):
    use_provider('{"deck": "DSA", "noteType": "BASIC", "fields": {"Front": "Q"}, "confidence": 0.8}')

    res = client.post(f"{PREFIX}/autofill", json={"text": "heap notes", "decks": ["DSA"]})

    assert res.status_code == 200
    assert res.json()["result"]["deck"] == "DSA"
    assert res.json()["result"]["noteType"] == "BASIC"


def test_unusable_model_output_maps_to_422():
    codes = dict(_STATUS_BY_ERROR)

    assert codes[ParseError] == 422
    assert codes[CardValidationError] == 422
