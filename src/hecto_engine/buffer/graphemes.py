"""Grapheme cluster helpers; every column in the engine counts clusters."""

from __future__ import annotations

from typing import List, Sequence

import grapheme


def split(text: str) -> List[str]:
    """Return ``text`` as a list of user-perceived characters."""

    return list(grapheme.graphemes(text))


def length(text: str) -> int:
    return grapheme.length(text)


def join(clusters: Sequence[str]) -> str:
    return "".join(clusters)


def casefold(clusters: Sequence[str]) -> List[str]:
    return [cluster.casefold() for cluster in clusters]


def is_blank(cluster: str) -> bool:
    return cluster in (" ", "\t")


def leading_whitespace(clusters: Sequence[str]) -> int:
    count = 0
    for cluster in clusters:
        if not is_blank(cluster):
            break
        count += 1
    return count


__all__ = ["split", "length", "join", "casefold", "is_blank", "leading_whitespace"]
