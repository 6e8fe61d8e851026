"""
normalize.py: pull a named payload out of whatever wrapper the backend chose.

The backend is inconsistent about envelopes. The same list of exams can arrive
as any of:

    [ ... ]
    {"exams": [ ... ]}
    {"success": true, "data": {"exams": [ ... ]}}
    {"success": true, "data": {"data": {"exams": [ ... ]}}}
    {"success": true, "data": [ ... ]}

Every lookup here walks an ordered list of extractors and returns the first
hit. Nothing in this module raises; a miss is None (or [] for lists).
"""
from __future__ import annotations

import logging
from typing import Any, Callable

log = logging.getLogger(__name__)

_MISSING = object()

# Keys whose payload is a list; a bare list response is accepted for these.
_LIST_KEYS = {"exams", "results", "sections", "users", "questions"}

TOKEN_PATHS = (
    "token",
    "data.token",
    "data.admin.token",
    "data.user.token",
    "admin.token",
    "user.token",
    "accessToken",
    "access_token",
    "data.accessToken",
    "data.access_token",
)


def dig(payload: Any, path: str, default: Any = None) -> Any:
    """Follow a dotted path through nested dicts. Empty values count as missing."""
    node = payload
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    if node is None or node == "" or node == {} or node == []:
        return default
    return node


def _looks_like(record: Any, key: str) -> bool:
    if not isinstance(record, dict):
        return False
    if key == "exam":
        return bool(record.get("title")) and (
            record.get("questions") is not None or record.get("questionsCount") is not None
        )
    if key == "result":
        return record.get("score") is not None and bool(record.get("totalQuestions"))
    return False


def _extractors(key: str) -> list[tuple[str, Callable[[Any], Any]]]:
    """Ordered (location, extractor) pairs for one key."""
    plural = key in _LIST_KEYS
    return [
        (f"data.data.{key}", lambda p: dig(p, f"data.data.{key}", _MISSING)),
        (f"data.{key}", lambda p: dig(p, f"data.{key}", _MISSING)),
        (key, lambda p: dig(p, key, _MISSING)),
        ("<root list>", lambda p: p if plural and isinstance(p, list) else _MISSING),
        ("data <list>", lambda p: p["data"] if plural and isinstance(p, dict)
            and isinstance(p.get("data"), list) else _MISSING),
        ("data.data <list>", lambda p: dig(p, "data.data") if plural
            and isinstance(dig(p, "data.data"), list) else _MISSING),
        ("<root record>", lambda p: p if _looks_like(p, key) else _MISSING),
        ("data <record>", lambda p: p["data"] if isinstance(p, dict)
            and _looks_like(p.get("data"), key) else _MISSING),
    ]


def extract(payload: Any, key: str) -> Any:
    """Return the first value found for ``key``, or None."""
    if payload is None:
        return None

    checked = []
    for location, extractor in _extractors(key):
        try:
            value = extractor(payload)
        except Exception:
            log.debug("extractor %s failed for %r", location, key, exc_info=True)
            value = _MISSING
        if value is not _MISSING:
            log.debug("found %s in %s", key, location)
            return value
        checked.append(location)

    log.debug("could not extract %s; checked %s", key, ", ".join(checked))
    return None


def extract_list(payload: Any, key: str) -> list:
    value = extract(payload, key)
    return value if isinstance(value, list) else []


def extract_token(payload: Any) -> str | None:
    if not payload:
        return None
    if isinstance(payload, str):
        return payload

    for path in TOKEN_PATHS:
        token = dig(payload, path)
        if isinstance(token, str):
            return token

    log.debug("token not found; checked %s", ", ".join(TOKEN_PATHS))
    if isinstance(payload, dict) and payload.get("success") is True:
        log.debug("response was successful but carried no token")
    return None


def extract_data(payload: Any, path: str | None = None) -> Any:
    """Unwrap the ``{success, data}`` envelope, optionally descending into ``path``."""
    if not payload:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("data"), (dict, list)):
        data = payload["data"]
        if path and isinstance(data, dict) and data.get(path):
            return data[path]
        return data
    if path and isinstance(payload, dict) and payload.get(path):
        return payload[path]
    return payload


def extract_profile(payload: Any, kind: str = "user") -> dict | None:
    """Find the user (or admin) record in an auth response."""
    if not isinstance(payload, dict):
        return None

    paths = (f"data.{kind}", f"data.{kind}Data", kind, f"{kind}Data")
    if kind == "admin":
        paths += ("data.user",)
    for path in paths:
        record = dig(payload, path)
        if isinstance(record, dict):
            return record

    # { success, data: { id, ... } }: data is the record itself
    data = payload.get("data")
    if isinstance(data, dict) and (data.get("id") or data.get("phone") or data.get("username")):
        return data

    if payload.get("id") or payload.get("phone"):
        return payload
    return None
