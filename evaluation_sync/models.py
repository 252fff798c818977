"""Data model for the evaluation sync helper."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


# Timestamp of a copy that has never been written.
NEVER = "1970-01-01T00:00:00+00:00"


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into a timezone-aware datetime.

    A trailing ``Z`` is accepted and naive values are treated as UTC.

    Raises:
        ValueError: if the value is not an ISO-8601 timestamp.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(slots=True)
class SyncState:
    """Runtime connectivity and progress flags."""

    online: bool = True
    syncing: bool = False
    last_error: Optional[str] = None

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "online": self.online,
            "syncing": self.syncing,
            "lastError": self.last_error,
        }


@dataclass(slots=True)
class OnlineConfig:
    """Which company the data syncs for and when it last succeeded."""

    company_id: str = ""
    active: bool = False
    last_sync: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.company_id)

    def to_api_dict(self) -> Dict[str, Any]:
        return {
            "companyId": self.company_id or None,
            "active": self.active,
            "lastSync": self.last_sync,
        }


@dataclass(slots=True)
class DataSnapshot:
    """The complete evaluation data set at a point in time.

    Collections are treated as opaque documents: evaluations are a list of
    records, collaborators and managers are maps keyed by identifier.
    """

    evaluations: List[Any] = field(default_factory=list)
    collaborators: Dict[str, Any] = field(default_factory=dict)
    managers: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "evaluations": self.evaluations,
            "collaborators": self.collaborators,
            "managers": self.managers,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataSnapshot":
        """Create from dictionary.

        Missing or wrongly shaped collections default to empty and a missing
        timestamp to NEVER.
        """
        evaluations = data.get("evaluations")
        collaborators = data.get("collaborators")
        managers = data.get("managers")
        return cls(
            evaluations=list(evaluations) if isinstance(evaluations, list) else [],
            collaborators=dict(collaborators) if isinstance(collaborators, dict) else {},
            managers=dict(managers) if isinstance(managers, dict) else {},
            timestamp=data.get("timestamp") or NEVER,
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """Convert to API response format (camelCase)."""
        payload = self.to_dict()
        payload.update({
            "evaluationCount": len(self.evaluations),
            "collaboratorCount": len(self.collaborators),
            "managerCount": len(self.managers),
        })
        return payload

    def parsed_timestamp(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def is_newer_than(self, other: "DataSnapshot") -> bool:
        """True only if this snapshot was written strictly after other."""
        return self.parsed_timestamp() > other.parsed_timestamp()


@dataclass(slots=True)
class ConflictCheck:
    """Local and remote snapshots side by side."""

    local: DataSnapshot
    remote: DataSnapshot

    @property
    def has_conflict(self) -> bool:
        return self.local.timestamp != self.remote.timestamp
