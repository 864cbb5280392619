import json

import pytest

from cardforge.core.config import GenerationSettings
from cardforge.modules.cards.models import ExternalSchema
from cardforge.modules.cards.providers import Provider


class StubProvider(Provider):
    """Replays canned completions and records every conversation it receives."""

    name = "stub"

    def __init__(self, *outputs):
        super().__init__()
        self.outputs = list(outputs)
        self.calls = []

    async def generate(self, messages, settings):
        self.calls.append((list(messages), settings))
        if not self.outputs:
            return ""
        out = self.outputs.pop(0)
        if isinstance(out, Exception):
            raise out
        return out


def batch(*cards, note_type="BASIC", **extra):
    return json.dumps({"selectedNoteType": note_type, "cards": list(cards), "notes": "", **extra})


@pytest.fixture
def settings():
    return GenerationSettings(
        provider="openai",
        api_key="test-key",
        model="gpt-test",
        max_output_tokens=512,
        temperature=0.2,
        note_type_policy="auto",
        max_clozes_per_card=2,
        basic_model_name="Basic",
        cloze_model_name="Cloze",
    )


@pytest.fixture
def basic_schema():
    return ExternalSchema(name="Basic", type=0, fields=["Front", "Back", "Extra"])


@pytest.fixture
def cloze_schema():
    return ExternalSchema(name="Cloze", type=1, fields=["Text", "Extra"])


@pytest.fixture
def schemas(basic_schema, cloze_schema):
    return [basic_schema, cloze_schema]
