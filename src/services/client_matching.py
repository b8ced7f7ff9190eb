"""
Client matching: map loosely-named calendar entries to roster clients.

Two sources of suggestions:
- existing mappings (a label the user already linked to a client)
- auto-match scoring over the roster (name, pet names, similarity)

The mapping table is passed in as a ClientMappings snapshot; persistence is
the caller's job (see core.database.MappingStore).
"""

import logging
from typing import Protocol

from core.config import (
    DEFAULT_MATCH_THRESHOLD,
    MATCH_WEIGHTS,
    NAME_SIMILARITY_CUTOFF,
    PREFIX_SIMILARITY_CUTOFF,
)
from models.events import Client
from models.matching import ClientMappings, ClientSuggestion

logger = logging.getLogger(__name__)

TITLE_SEPARATOR = " - "

SERVICE_KEYWORDS = {"visit", "walk", "drop-in", "overnight", "housesit", "meet", "greet"}


class MappingWriter(Protocol):
    """Write side of the persisted label -> client table."""

    def set(self, normalized_label: str, client_id: str, label: str) -> None: ...

    def remove(self, normalized_label: str) -> None: ...

    def remove_for_client(self, client_id: str) -> None: ...


# =============================================================================
# STRING SIMILARITY
# =============================================================================


def normalize_label(value: str | None) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join((value or "").lower().split())


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance (insert/delete/substitute all cost 1)."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """(max_len - distance) / max_len, 1.0 for two empty strings."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - levenshtein_distance(a, b)) / max_len


# =============================================================================
# MAPPINGS
# =============================================================================


def get_client_id(label: str, mappings: ClientMappings) -> str | None:
    return mappings.get(normalize_label(label))


def set_mapping(
    label: str,
    client_id: str,
    mappings: ClientMappings,
    store: MappingWriter | None = None,
) -> ClientMappings:
    """Return a new snapshot with label linked to client_id; writes through store once."""
    key = normalize_label(label)
    updated = ClientMappings({**mappings.entries, key: client_id})
    if store is not None:
        store.set(key, client_id, label.strip())
    return updated


def remove_mapping(
    label: str, mappings: ClientMappings, store: MappingWriter | None = None
) -> ClientMappings:
    key = normalize_label(label)
    updated = ClientMappings({k: v for k, v in mappings.entries.items() if k != key})
    if store is not None:
        store.remove(key)
    return updated


def remove_mappings_for_client(
    client_id: str, mappings: ClientMappings, store: MappingWriter | None = None
) -> ClientMappings:
    updated = ClientMappings({k: v for k, v in mappings.entries.items() if v != client_id})
    if store is not None:
        store.remove_for_client(client_id)
    return updated


# =============================================================================
# AUTO-MATCH
# =============================================================================


def score_client(title: str, client: Client) -> tuple[float, list[str]]:
    """
    Additive confidence for one client against a title, capped at 1.0.

    The name signals are exclusive (substring > first word > similarity);
    pet name and "Name - ..." prefix add on top independently.
    """
    normalized_title = normalize_label(title)
    client_name = normalize_label(client.name)
    if not normalized_title or not client_name:
        return 0.0, []

    score = 0.0
    reasons = []

    first_word = normalized_title.split()[0]
    if client_name in normalized_title:
        score += MATCH_WEIGHTS["name_in_title"]
        reasons.append(f'Client name "{client.name}" found in event title')
    elif first_word in client_name:
        score += MATCH_WEIGHTS["first_word"]
        reasons.append(f'Client name contains "{first_word}"')
    else:
        name_similarity = similarity(client_name, normalized_title)
        if name_similarity > NAME_SIMILARITY_CUTOFF:
            score += name_similarity * MATCH_WEIGHTS["similarity_scale"]
            reasons.append(f"Name similarity: {round(name_similarity * 100)}%")

    for pet_name in client.pet_names:
        if normalize_label(pet_name) and normalize_label(pet_name) in normalized_title:
            score += MATCH_WEIGHTS["pet_name"]
            reasons.append(f'Pet name "{pet_name}" found in event title')
            break

    if TITLE_SEPARATOR in title:
        prefix = normalize_label(title.split(TITLE_SEPARATOR)[0])
        if prefix and similarity(prefix, client_name) > PREFIX_SIMILARITY_CUTOFF:
            score += MATCH_WEIGHTS["separator_prefix"]
            reasons.append(f'Title prefix "{prefix}" matches client name')

    return min(score, 1.0), reasons


def auto_match(
    title: str, clients: list[Client], threshold: float = DEFAULT_MATCH_THRESHOLD
) -> list[ClientSuggestion]:
    """
    Score every client, drop those under threshold, highest confidence first.

    A threshold of 0 keeps every client, including ones with no signal.
    """
    suggestions = []
    for client in clients:
        confidence, reasons = score_client(title, client)
        if confidence >= threshold:
            suggestions.append(
                ClientSuggestion(
                    client_id=client.id,
                    client_name=client.name,
                    confidence=confidence,
                    reasons=reasons,
                    source="auto-match",
                )
            )

    # sorted() is stable, so equal scores keep roster order
    return sorted(suggestions, key=lambda s: s.confidence, reverse=True)


def suggest(
    title: str,
    label: str | None,
    clients: list[Client],
    mappings: ClientMappings,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
) -> list[ClientSuggestion]:
    """Existing mapping first (confidence 1.0), then auto-matches for other clients."""
    suggestions = []
    seen: set[str] = set()

    mapped_id = get_client_id(label, mappings) if label else None
    if mapped_id:
        client = next((c for c in clients if c.id == mapped_id), None)
        if client is not None:
            suggestions.append(
                ClientSuggestion(
                    client_id=client.id,
                    client_name=client.name,
                    confidence=1.0,
                    reasons=[f'Previously linked "{label.strip()}" to this client'],
                    source="existing-mapping",
                )
            )
            seen.add(client.id)
        else:
            logger.debug("Mapping for %r points at unknown client %s", label, mapped_id)

    for suggestion in auto_match(title, clients, threshold):
        if suggestion.client_id not in seen:
            suggestions.append(suggestion)
            seen.add(suggestion.client_id)

    return suggestions


# =============================================================================
# ROSTER LOOKUPS
# =============================================================================


def find_exact_matches(clients: list[Client], candidate: str | None) -> list[Client]:
    if not candidate:
        return []
    normalized = normalize_label(candidate)
    return [c for c in clients if normalize_label(c.name) == normalized]


def client_candidate(label: str | None, title: str | None) -> str | None:
    """
    Client name candidate for an entry: the classifier's label, else the title
    text before " - ". Rejects one-letter candidates and bare service words.
    """
    if label and label.strip():
        return label.strip()
    if not title:
        return None

    candidate = title.split(TITLE_SEPARATOR)[0].strip()
    if len(candidate) < 2 or candidate.lower() in SERVICE_KEYWORDS:
        return None
    return candidate


def confident_match(clients: list[Client], label: str | None, title: str | None = None) -> str | None:
    """Client id when exactly one client's name equals the candidate, else None."""
    matches = find_exact_matches(clients, client_candidate(label, title))
    if len(matches) == 1:
        return matches[0].id
    return None


def search_clients(clients: list[Client], term: str | None) -> list[Client]:
    """Clients whose name, email or address contains term."""
    if not term:
        return list(clients)
    normalized = normalize_label(term)
    return [
        c
        for c in clients
        if normalized in normalize_label(c.name)
        or (c.email and normalized in normalize_label(c.email))
        or (c.address and normalized in normalize_label(c.address))
    ]
