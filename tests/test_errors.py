from cardforge.modules.cards.errors import (
    CardForgeError,
    CardValidationError,
    ParseError,
    ProviderError,
    display_message,
)


def test_provider_error_carries_status_and_body():
    e = ProviderError("anthropic", 401, '{"error": "invalid x-api-key"}')

    assert isinstance(e, CardForgeError)
    assert str(e) == 'anthropic API error (401): {"error": "invalid x-api-key"}'


def test_transport_failure_message():
    assert str(ProviderError("gemini", None, "timed out")) == "gemini API request failed: timed out"


def test_parse_error_bounds_the_raw_excerpt():
    e = ParseError("No JSON object found in AI response", "z" * 1000)

    assert e.raw == "z" * 1000
    assert str(e).count("z") == 199
    assert str(e).endswith("…'")


def test_parse_error_without_raw_text():
    assert str(ParseError("AI response was empty")) == "AI response was empty"


def test_validation_error_index():
    assert CardValidationError("bad card", index=3).index == 3


def test_display_message_truncates():
    message = display_message(ProviderError("openai", 500, "x" * 500))

    assert len(message) == 120
    assert message.endswith("…")


def test_display_message_short_and_empty():
    assert display_message(CardValidationError("short")) == "short"
    assert display_message(CardForgeError()) == "CardForgeError"
