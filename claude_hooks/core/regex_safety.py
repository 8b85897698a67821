"""ReDoS screening and compiled-pattern caching for user-supplied regexes.

Patterns in ``claude-hooks.config.json`` (blocked commands, secret patterns,
permission rules) are matched against tool input on every hook call.  Two
concerns live here:

- :func:`check_regex_safety` flags patterns with nested quantifiers
  (``(a+)+``, ``(a{2,})*``), the shape that enables catastrophic
  backtracking.  It is a heuristic: false positives are acceptable because
  the result only produces config warnings.
- :class:`RegexCache` compiles each ``(pattern, flags)`` pair once per
  process and remembers compile failures as ``None``.

Usage::

    from claude_hooks.core.regex_safety import RegexCache, check_regex_safety

    check_regex_safety("(a+)+")        # RegexSafetyResult(safe=False, ...)
    cache = RegexCache()
    regex = cache.get(r"rm\\s+-rf")    # compiled once, reused afterwards
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NESTED_QUANTIFIER_REASON = "nested quantifiers detected - potential catastrophic backtracking"

DEFAULT_FLAGS = re.IGNORECASE

# {n,m} or {n,}; a fixed {n} does not enable unbounded backtracking
_OPEN_REPETITION_RE = re.compile(r"\{\d+,\d*\}")
_BRACE_QUANTIFIER_RE = re.compile(r"\{\d+,?\d*\}")
_GROUP_PREFIX_RE = re.compile(r"^(?:\?[:=!>]|\?<[!=]|\?P?<\w+>)")

_PLACEHOLDER = "_"


@dataclass(frozen=True)
class RegexSafetyResult:
    """Outcome of a ReDoS screen.

    Attributes:
        safe: Whether the pattern is considered safe from ReDoS.
        reason: Human-readable reason when the pattern is flagged.
    """

    safe: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Compiled pattern cache
# ---------------------------------------------------------------------------


class RegexCache:
    """Process-lifetime cache of compiled patterns.

    Keyed by ``(pattern, flags)``.  An invalid pattern is stored as ``None``
    and never recompiled, so a bad config entry costs one ``re.error`` per
    process rather than one per match attempt.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, int], re.Pattern[str] | None] = {}

    def get(self, pattern: str, flags: int = DEFAULT_FLAGS) -> re.Pattern[str] | None:
        """Return the compiled pattern, or ``None`` if it does not compile."""
        key = (pattern, int(flags))
        if key in self._entries:
            return self._entries[key]

        try:
            compiled: re.Pattern[str] | None = re.compile(pattern, flags)
        except re.error as e:
            logger.debug(f"Caching invalid pattern {pattern!r}: {e}")
            compiled = None

        self._entries[key] = compiled
        return compiled

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_regex_safety(pattern: str) -> RegexSafetyResult:
    """Check a regex source string for nested-quantifier ReDoS risk.

    Detects:
        - ``(a+)+``, ``(a*)*``, ``(a+)*``, ``(a*)+``
        - ``(a+b+)+``: several quantified atoms in a quantified group
        - ``(a{2,})+``: open-ended repetition in a quantified group
        - ``((a+)b)+``: quantified atoms inside nested groups

    Args:
        pattern: The regex source string (no delimiters or flags).

    Returns:
        A :class:`RegexSafetyResult`.
    """
    cleaned = _strip_escapes_and_classes(pattern)
    reason = _detect_nested_quantifiers(cleaned)
    if reason:
        return RegexSafetyResult(safe=False, reason=reason)
    return RegexSafetyResult(safe=True)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _strip_escapes_and_classes(pattern: str) -> str:
    """Replace escapes and character classes with an inert placeholder.

    - ``\\x`` (any escaped char) becomes ``_``
    - ``[...]`` (character class, including ``[^...]`` and a leading
      literal ``]``) becomes ``_``
    """
    result: list[str] = []
    i = 0
    length = len(pattern)

    while i < length:
        ch = pattern[i]

        if ch == "\\":
            result.append(_PLACEHOLDER)
            i += 2
            continue

        if ch == "[":
            i += 1
            if i < length and pattern[i] == "^":
                i += 1
            if i < length and pattern[i] == "]":
                i += 1
            while i < length and pattern[i] != "]":
                if pattern[i] == "\\":
                    i += 1
                i += 1
            i += 1  # closing ]
            result.append(_PLACEHOLDER)
            continue

        result.append(ch)
        i += 1

    return "".join(result)


def _is_repetition_quantifier(s: str, pos: int) -> bool:
    """Whether ``s[pos]`` starts ``+``, ``*``, ``{n,}`` or ``{n,m}``.

    A lone ``?`` and a fixed ``{n}`` are not repetition quantifiers here.
    """
    if pos >= len(s):
        return False
    ch = s[pos]
    if ch in "+*":
        return True
    if ch == "{":
        return _OPEN_REPETITION_RE.match(s, pos) is not None
    return False


def _strip_group_prefix(body: str) -> str:
    return _GROUP_PREFIX_RE.sub("", body, count=1)


def _detect_nested_quantifiers(pattern: str) -> str | None:
    """Find a quantified group whose body also contains a quantified atom.

    Walks the cleaned pattern with a stack of open-paren positions; that
    "star height > 1" condition is what enables catastrophic backtracking.
    """
    stack: list[int] = []

    for i, ch in enumerate(pattern):
        if ch == "(":
            stack.append(i)
            continue

        if ch == ")":
            if not stack:
                continue
            open_pos = stack.pop()

            if _is_repetition_quantifier(pattern, i + 1):
                body = _strip_group_prefix(pattern[open_pos + 1 : i])
                if _body_contains_repetition(body):
                    return NESTED_QUANTIFIER_REASON

    return None


def _body_contains_repetition(body: str) -> bool:
    """Whether any atom in *body*, including inside nested groups, is quantified."""
    i = 0
    length = len(body)

    while i < length:
        ch = body[i]

        # Nested group: treat as one atom, then look inside it
        if ch == "(":
            depth = 1
            group_start = i
            i += 1
            while i < length and depth > 0:
                if body[i] == "(":
                    depth += 1
                elif body[i] == ")":
                    depth -= 1
                i += 1

            if _is_repetition_quantifier(body, i):
                return True

            inner = _strip_group_prefix(body[group_start + 1 : i - 1])
            if _body_contains_repetition(inner):
                return True
            continue

        if ch in "|)+*?":
            i += 1
            continue

        if ch == "{":
            match = _BRACE_QUANTIFIER_RE.match(body, i)
            if match:
                i = match.end()
                continue

        # Regular atom
        i += 1
        if _is_repetition_quantifier(body, i):
            return True

    return False
