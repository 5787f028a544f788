# core/validators.py

import regex as re

COMMIT_SHA_RE = re.compile(r"[0-9a-fA-F]{40}")


def is_commit_sha(value: str) -> bool:
    """
    Return True if value looks like a full git commit sha (40 hex chars).
    """
    return bool(COMMIT_SHA_RE.fullmatch(value))


def short_sha(value: str, length: int = 7) -> str:
    return value[:length]
