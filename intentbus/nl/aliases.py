"""Legacy and alternate intent names → canonical names."""

from __future__ import annotations

from collections.abc import Mapping

# Canonical pass-throughs first, then the older flat names still found in
# intent files and clients.
DEFAULT_ALIASES: dict[str, str] = {
    "chat.greet": "chat.greet",
    "chat.farewell": "chat.farewell",
    "chat.help": "chat.help",
    "chat.howareyou": "chat.howareyou",
    "chat.apology": "chat.apology",
    "chat.love": "chat.love",
    "chat.compliment": "chat.compliment",
    "chat.thanks.reply": "chat.thanks.reply",
    "chat.missedyou.reply": "chat.missedyou.reply",
    "chat.name.asked": "chat.name.asked",
    "chat.name.confirm": "chat.name.confirm",
    "chat.name.spelling": "chat.name.spelling",
    "sys.status.current": "sys.status.current",
    "sys.status.listallfunctions": "sys.status.listallfunctions",
    "sys.meta.creator": "sys.meta.creator",
    "sys.meta.favoritecolor": "sys.meta.favoritecolor",
    "sys.time.now": "sys.time.now",
    "sys.time.date": "sys.time.date",
    "sys.time.dayofweek": "sys.time.dayofweek",
    "weather.forecast": "weather.forecast",
    "weather.temperature": "weather.temperature",
    "fun.easteregg.steven": "fun.easteregg.steven",
    # legacy
    "greetings": "chat.greet",
    "goodbye": "chat.farewell",
    "howareyou": "chat.howareyou",
    "currenttask": "sys.status.current",
    "usercurrenttaskcodingondansby": "sys.status.current",
    "whoiscreatorname": "sys.meta.creator",
    "creatorname": "sys.meta.creator",
    "dansbyfavcolor": "sys.meta.favoritecolor",
    "userthankyou": "chat.thanks.reply",
    "complimentaffection": "chat.compliment",
    "loveaffection": "chat.love",
    "usermissedyou": "chat.missedyou.reply",
    "calledname": "chat.name.confirm",
    "callednamespeltwrong": "chat.name.spelling",
    "name": "chat.name.asked",
    "weather": "weather.forecast",
    "temperature": "weather.temperature",
    "time": "sys.time.now",
    "date": "sys.time.date",
    "dayofweek": "sys.time.dayofweek",
    "listallfunctions": "sys.status.listallfunctions",
    "steveneasteregg": "fun.easteregg.steven",
    # deprecated commands kept mappable
    "performexitdansby": "app.exit",
    "openerrorlog": "ops.errorlog.open",
    "forcesavelorehaven": "ops.autosave.force",
    "pauseautosavetimer": "ops.autosave.pause",
    "resumeautosavetimer": "ops.autosave.resume",
    "handlevolumeintent": "media.volume.set",
    "summonslime": "ui.sprite.summon",
}


def _flatten(table: Mapping[str, str]) -> dict[str, str]:
    """Follow alias chains to their end so one lookup is always enough."""
    lowered = {k.casefold(): v for k, v in table.items()}
    flat: dict[str, str] = {}
    for key, target in lowered.items():
        seen = {key}
        while target.casefold() in lowered and lowered[target.casefold()] != target:
            nxt = target.casefold()
            if nxt in seen:
                raise ValueError(f"alias cycle through '{target}'")
            seen.add(nxt)
            target = lowered[nxt]
        flat[key] = target
    return flat


class AliasResolver:
    """Case-insensitive alias table; unmapped names pass through unchanged.

    Chains (``a → b``, ``b → c``) are collapsed on construction, so
    ``canonicalize(canonicalize(x)) == canonicalize(x)``.
    """

    def __init__(
        self,
        aliases: Mapping[str, str] | None = None,
        extra: Mapping[str, str] | None = None,
    ) -> None:
        table = dict(DEFAULT_ALIASES if aliases is None else aliases)
        table.update(extra or {})
        self._map = _flatten(table)

    def canonicalize(self, name: str) -> str:
        return self._map.get(name.casefold(), name)

    def __len__(self) -> int:
        return len(self._map)
