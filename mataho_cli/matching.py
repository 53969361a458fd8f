"""
Identifier resolution for devices and groups.

Priority, in order: id equality, case-insensitive exact label, then (fuzzy
mode only) the single best subsequence score. Ties at the top score are
reported as AmbiguousMatchError, never broken silently.
"""

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Protocol

from mataho_cli import config
from mataho_cli.exceptions import AmbiguousMatchError, NotFoundError
from mataho_cli.models import MatchMode

# Bonus for a matched run that starts a word in the candidate label.
_BOUNDARY_BONUS = 3


class Scorer(Protocol):
    def score(self, candidate: str, query: str) -> int | None:
        """Return a match score (higher is better) or None for no match."""


def _is_subsequence(query: str, candidate: str) -> bool:
    it = iter(candidate)
    return all(ch in it for ch in query)


class SubsequenceScorer:
    """Fuzzy scorer over lower-cased strings.

    A candidate only matches when every query character appears in it in
    order. Matched runs score by the square of their length, so contiguous
    matches beat scattered ones; runs starting a word get a small bonus.
    """

    def score(self, candidate: str, query: str) -> int | None:
        if not _is_subsequence(query, candidate):
            return None
        blocks = SequenceMatcher(None, query, candidate, autojunk=False).get_matching_blocks()
        total = 0
        for block in blocks:
            if not block.size:
                continue
            total += block.size * block.size
            if block.b == 0 or not candidate[block.b - 1].isalnum():
                total += _BOUNDARY_BONUS
        return total


DEFAULT_SCORER = SubsequenceScorer()


def _resolve(identifier, mode, candidates, kind, id_of, label_of, scorer):
    query = (identifier or "").strip()
    if not query:
        raise NotFoundError(f"[ERROR] Empty {kind} identifier.")
    candidates = list(candidates)

    for candidate in candidates:
        if id_of(candidate) == query:
            return candidate

    folded = query.casefold()
    exact = [c for c in candidates if label_of(c).casefold() == folded]
    if exact:
        if len(exact) > 1:
            others = ", ".join(f"{id_of(c)}" for c in exact[1:])
            config.warn(
                f"Several {kind}s are labelled '{label_of(exact[0])}'; using {id_of(exact[0])}. "
                f"Pass an id to pick another ({others})."
            )
        return exact[0]

    if mode is not MatchMode.FUZZY:
        raise NotFoundError(f"[ERROR] No {kind} matches '{query}'.")

    lowered = query.lower()
    best = None
    scored = []
    for candidate in candidates:
        value = scorer.score(label_of(candidate).lower(), lowered)
        if value is None:
            continue
        scored.append((candidate, value))
        if best is None or value > best:
            best = value

    top = [c for c, value in scored if value == best]
    if not top:
        raise NotFoundError(f"[ERROR] No {kind} matches '{query}'.")
    if len(top) > 1:
        labels = [label_of(c) for c in top]
        listing = ", ".join(f"`{label}`" for label in labels)
        raise AmbiguousMatchError(
            f"[ERROR] Several {kind}s match '{query}' equally well: {listing}. "
            "Use the id or a more precise label.",
            labels=labels,
        )
    return top[0]


def resolve_device(identifier, mode, candidates, scorer=None):
    """Resolve *identifier* to exactly one Device among *candidates*."""
    return _resolve(
        identifier,
        mode,
        candidates,
        "device",
        lambda d: d.id,
        lambda d: d.label,
        scorer or DEFAULT_SCORER,
    )


def resolve_group(name, groups):
    """Resolve a group by id or name, exact matching only.

    A case-sensitive name match is preferred since names are unique that
    way; otherwise the case-insensitive rule used for device labels applies.
    """
    groups = list(groups)
    for group in groups:
        if group.name == name:
            return group
    return _resolve(
        name,
        MatchMode.EXACT,
        groups,
        "group",
        lambda g: g.id,
        lambda g: g.name,
        DEFAULT_SCORER,
    )
