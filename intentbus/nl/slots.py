"""Heuristic slot extraction and domain derivation.

Plain substring tests over the raw lowercased text. Independent of the
recognizer score; absent signals simply leave the slot out.
"""

from __future__ import annotations

LOCATIONS = ("living room", "livingroom", "kitchen", "office", "bedroom", "desk")


def _has_word_at_edges(text: str, word: str) -> bool:
    return f" {word} " in text or text.startswith(f"{word} ") or text.endswith(f" {word}")


def extract_slots(text: str | None) -> dict[str, str]:
    t = (text or "").lower()
    slots: dict[str, str] = {}

    if "toggle" in t:
        slots["action"] = "toggle"
    elif _has_word_at_edges(t, "on"):
        slots["action"] = "on"
    elif _has_word_at_edges(t, "off"):
        slots["action"] = "off"

    location = next((loc for loc in LOCATIONS if loc in t), None)
    if location:
        slots["location"] = location.replace(" ", "")

    if "lamp" in t:
        slots["device"] = "lamp"
    elif "light" in t:
        slots["device"] = "light"

    return slots


def derive_domain(intent: str, slots: dict[str, str]) -> str:
    name = intent.lower()
    if name.startswith("iot."):
        return "iot"
    if name.startswith("chat."):
        return "chat"
    if "action" in slots:
        return "iot"
    return "other"
