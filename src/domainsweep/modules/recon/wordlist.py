"""Wordlist loading and validation."""

import json
from importlib import resources
from pathlib import Path
from typing import Any

from domainsweep.errors import WordlistError

from .models import Wordlist, WordlistEntry

DEFAULT_WORDLIST_RESOURCE = "wordlist.json"


def parse_wordlist(data: Any) -> Wordlist:
    """Build a wordlist from decoded JSON.

    Accepts ``{"endpoints": [...]}`` or a bare list of entries.
    """
    if isinstance(data, dict):
        data = data.get("endpoints")
    if not isinstance(data, list):
        raise WordlistError("Wordlist must be a list or an object with an 'endpoints' list")

    entries: list[WordlistEntry] = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise WordlistError(f"Wordlist entry #{index} is not an object")
        entries.append(WordlistEntry.from_dict(item))
    return tuple(entries)


def default_wordlist() -> Wordlist:
    """Return the wordlist bundled with the package."""
    text = (
        resources.files("domainsweep.modules.recon")
        .joinpath("data", DEFAULT_WORDLIST_RESOURCE)
        .read_text(encoding="utf-8")
    )
    return parse_wordlist(json.loads(text))


def load_wordlist(source: str | Path | dict | list | None = None) -> Wordlist:
    """Load a wordlist from a path, JSON text, decoded JSON, or the default.

    Strings that look like JSON documents are parsed directly; any other
    string is treated as a file path.
    """
    if source is None or source == "":
        return default_wordlist()

    if isinstance(source, (dict, list)):
        return parse_wordlist(source)

    if isinstance(source, str) and source.lstrip()[:1] in ("{", "["):
        try:
            return parse_wordlist(json.loads(source))
        except json.JSONDecodeError as exc:
            raise WordlistError(f"Wordlist is not valid JSON: {exc}") from exc

    path = Path(source).expanduser()
    if not path.exists():
        raise WordlistError(f"Wordlist file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise WordlistError(f"Wordlist file {path} is not valid JSON: {exc}") from exc
    return parse_wordlist(data)
