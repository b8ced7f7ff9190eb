"""
Data models for client matching.
"""

from dataclasses import dataclass, field
from typing import Literal

SuggestionSource = Literal["existing-mapping", "auto-match"]


@dataclass
class ClientSuggestion:
    client_id: str
    client_name: str
    confidence: float
    reasons: list[str] = field(default_factory=list)
    source: SuggestionSource = "auto-match"


@dataclass(frozen=True)
class ClientMappings:
    """
    Immutable snapshot of the persisted label -> client id table.

    Keys are normalized labels. Callers load a snapshot from their store and
    pass it into each matching call; updates return a new snapshot.
    """
    entries: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, normalized_label: str) -> str | None:
        return self.entries.get(normalized_label)
