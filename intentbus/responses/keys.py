"""Canonical intent name → keys used in the response file.

Response files predate the dotted intent names, so most canonical intents
look their text up under one or more legacy keys.
"""

from __future__ import annotations

_KEYS: dict[str, tuple[str, ...]] = {
    # chat
    "chat.greet": ("greetings",),
    "chat.farewell": ("goodbye",),
    "chat.help": ("help",),
    "chat.howareyou": ("howareyou",),
    "chat.apology": ("apology",),
    "chat.thanks.reply": ("userthankyou",),
    "chat.compliment": ("complimentaffection",),
    "chat.love": ("loveaffection",),
    "chat.missedyou.reply": ("usermissedyou",),
    "chat.name.asked": ("name",),
    "chat.name.confirm": ("calledname",),
    "chat.name.spelling": ("callednamespeltwrong",),
    # system / meta
    "sys.status.current": ("currenttask", "usercurrenttaskcodingondansby"),
    "sys.meta.creator": ("creatorname", "whoiscreatorname"),
    "sys.meta.favoritecolor": ("dansbyfavcolor",),
    "fun.easteregg.steven": ("steveneasteregg",),
    # weather (static text)
    "weather.forecast": ("weather",),
    "weather.temperature": ("temperature",),
    # dynamic replies, no file key
    "sys.time.date": (),
    "sys.time.dayofweek": (),
}

REPLY_INTENTS: tuple[str, ...] = tuple(_KEYS)


def candidates_for(canonical: str) -> tuple[str, ...]:
    """Keys to try, in order. Falls back to the canonical name itself."""
    keys = _KEYS.get(canonical.casefold())
    return keys if keys else (canonical,)
