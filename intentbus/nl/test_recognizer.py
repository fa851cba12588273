import pytest

from intentbus.nl.aliases import DEFAULT_ALIASES, AliasResolver
from intentbus.nl.engine import RecognizerEngine
from intentbus.nl.recognizer import TextRecognizer
from intentbus.nl.slots import derive_domain, extract_slots


def _recognizer(defs: list[dict]) -> TextRecognizer:
    engine = RecognizerEngine()
    engine.load(defs)
    return TextRecognizer(engine)


def test_legacy_name_is_canonicalized_before_domain() -> None:
    rec = _recognizer([{"name": "greetings", "examples": ["hello there"]}]).recognize("hello there")

    assert rec.intent == "chat.greet"
    assert rec.score == 1.0
    assert rec.domain == "chat"
    assert rec.slots == {}


def test_unknown_with_action_slot_is_iot_domain() -> None:
    rec = _recognizer([]).recognize("turn on the light")

    assert rec.intent == "unknown"
    assert rec.slots == {"action": "on", "device": "light"}
    assert rec.domain == "iot"


def test_to_dict_shape() -> None:
    rec = _recognizer([{"name": "iot.light.set", "examples": ["toggle kitchen lamp"]}]).recognize(
        "toggle kitchen lamp"
    )

    assert rec.to_dict() == {
        "intent": "iot.light.set",
        "score": 1.0,
        "domain": "iot",
        "slots": {"action": "toggle", "location": "kitchen", "device": "lamp"},
    }


def test_canonicalize_is_idempotent() -> None:
    resolver = AliasResolver()
    names = [*DEFAULT_ALIASES, *DEFAULT_ALIASES.values(), "Foo.Bar", "unknown", "GREETINGS"]

    for name in names:
        once = resolver.canonicalize(name)
        assert resolver.canonicalize(once) == once


def test_canonicalize_case_insensitive_and_pass_through() -> None:
    resolver = AliasResolver()

    assert resolver.canonicalize("GREETINGS") == "chat.greet"
    assert resolver.canonicalize("time") == "sys.time.now"
    assert resolver.canonicalize("Foo.Bar") == "Foo.Bar"


def test_alias_chains_are_collapsed() -> None:
    resolver = AliasResolver({"a": "b", "b": "c"})

    assert resolver.canonicalize("a") == "c"
    assert resolver.canonicalize("b") == "c"


def test_alias_cycle_rejected() -> None:
    with pytest.raises(ValueError):
        AliasResolver({"a": "b", "b": "a"})


def test_extra_aliases_extend_defaults() -> None:
    resolver = AliasResolver(extra={"hiya": "greetings"})

    assert resolver.canonicalize("hiya") == "chat.greet"
    assert resolver.canonicalize("goodbye") == "chat.farewell"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (
            "Turn on the Living Room light",
            {"action": "on", "location": "livingroom", "device": "light"},
        ),
        ("switch the bedroom lamp off", {"action": "off", "location": "bedroom", "device": "lamp"}),
        ("on desk", {"action": "on", "location": "desk"}),
        ("toggle it on", {"action": "toggle"}),
        ("online status please", {}),
        ("", {}),
    ],
)
def test_extract_slots(text: str, expected: dict[str, str]) -> None:
    assert extract_slots(text) == expected


@pytest.mark.parametrize(
    ("intent", "slots", "domain"),
    [
        ("iot.light.set", {}, "iot"),
        ("IOT.light.set", {}, "iot"),
        ("chat.greet", {"action": "on"}, "chat"),
        ("unknown", {"action": "off"}, "iot"),
        ("sys.time.now", {"device": "lamp"}, "other"),
    ],
)
def test_derive_domain(intent: str, slots: dict[str, str], domain: str) -> None:
    assert derive_domain(intent, slots) == domain
