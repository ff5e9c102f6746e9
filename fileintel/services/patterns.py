from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatch
from functools import lru_cache

from fileintel.config.schema import PatternRule

# Matcher kinds, integers for fast dispatch in the hot loop.
_CONTAINS = 0  # "/segment/" in path  (for **/segment/**)
_ENDSWITH = 1  # basename.endswith(v) (for **/*.ext)
_STARTSWITH = 2  # basename.startswith(v) (for **/prefix*)
_EXACT = 3  # basename == v         (for **/name)
_GLOB = 4  # fallback to fnmatch


@dataclass(slots=True, frozen=True)
class _Matcher:
    kind: int
    value: str
    alt: str  # _CONTAINS only: endswith variant without trailing /


def _has_glob_chars(s: str) -> bool:
    return "*" in s or "?" in s or "[" in s


def _classify(pattern: str) -> _Matcher:
    """Turn one expanded pattern into a fast string matcher.

    All matcher values are lowercased at compile time so that callers can pass
    pre-lowercased paths for case-insensitive matching.
    """
    if not pattern.startswith("**/"):
        return _Matcher(_GLOB, pattern.lower(), "")

    rest = pattern[3:]

    # **/segment/** or **/path/to/thing/**  →  contains check on path
    if rest.endswith("/**"):
        middle = rest[:-3]
        if not _has_glob_chars(middle):
            mid = middle.lower()
            return _Matcher(_CONTAINS, f"/{mid}/", f"/{mid}")
        return _Matcher(_GLOB, pattern.lower(), "")

    # **/*.ext  →  endswith check on basename
    if rest.startswith("*") and not _has_glob_chars(rest[1:]):
        return _Matcher(_ENDSWITH, rest[1:].lower(), "")

    # **/prefix*  →  startswith check on basename
    if rest.endswith("*") and not _has_glob_chars(rest[:-1]):
        return _Matcher(_STARTSWITH, rest[:-1].lower(), "")

    # **/exact  →  exact basename match
    if not _has_glob_chars(rest):
        return _Matcher(_EXACT, rest.lower(), "")

    return _Matcher(_GLOB, pattern.lower(), "")


@lru_cache(maxsize=256)
def _expand_braces(pattern: str) -> tuple[str, ...]:
    start = pattern.find("{")
    end = pattern.find("}", start + 1)
    if start == -1 or end == -1:
        return (pattern,)
    choices = pattern[start + 1 : end].split(",")
    prefix = pattern[:start]
    suffix = pattern[end + 1 :]
    expanded: list[str] = []
    for choice in choices:
        expanded.extend(_expand_braces(f"{prefix}{choice}{suffix}"))
    return tuple(expanded)


def _match_pattern_slow(pattern: str, normalized_path: str, basename: str) -> bool:
    """Fallback for patterns that can't be classified into simple string ops."""
    if pattern.endswith("/**"):
        base_pattern = pattern[: -len("/**")]
        if fnmatch(normalized_path, base_pattern):
            return True
    if fnmatch(normalized_path, pattern):
        return True
    return fnmatch(basename, pattern)


def _matches(m: _Matcher, lpath: str, lbase: str) -> bool:
    if m.kind == _EXACT:
        return lbase == m.value
    if m.kind == _ENDSWITH:
        return lbase.endswith(m.value)
    if m.kind == _STARTSWITH:
        return lbase.startswith(m.value)
    if m.kind == _CONTAINS:
        # "/segment" only counts at the very end of the path (the entry itself).
        return m.value in lpath or lpath.endswith(m.alt)
    return _match_pattern_slow(m.value, lpath, lbase)


@dataclass(slots=True, frozen=True)
class CompiledRule:
    rule: PatternRule
    matchers: tuple[_Matcher, ...]


def compile_rule(rule: PatternRule) -> CompiledRule:
    expanded = _expand_braces(rule.pattern)
    matchers = tuple(_classify(p) for p in expanded)
    return CompiledRule(rule=rule, matchers=matchers)


@dataclass(slots=True, frozen=True)
class CompiledRuleSet:
    """Rules in priority order; the first one that matches wins."""

    rules: tuple[CompiledRule, ...]


def compile_ruleset(rules: list[PatternRule]) -> CompiledRuleSet:
    return CompiledRuleSet(rules=tuple(compile_rule(rule) for rule in rules))


def first_match(rs: CompiledRuleSet, lpath: str, lbase: str) -> PatternRule | None:
    """Return the highest-priority rule matching a path, or ``None``.

    *lpath* and *lbase* must be pre-lowercased and use ``/`` separators.
    """
    for compiled in rs.rules:
        for m in compiled.matchers:
            if _matches(m, lpath, lbase):
                return compiled.rule
    return None


def match_path(rs: CompiledRuleSet, path: str) -> PatternRule | None:
    lpath = path.replace("\\", "/").rstrip("/").lower()
    lbase = lpath.rsplit("/", 1)[-1]
    return first_match(rs, lpath, lbase)
