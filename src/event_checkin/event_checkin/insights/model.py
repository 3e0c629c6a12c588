from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class DelegateFailure:
    """Error value returned (never raised) by the insight delegate."""

    message: str

    def to_dict(self) -> dict:
        return {"error": self.message}


@dataclass(frozen=True)
class CandidateProfile:
    name: str
    domain: str


@dataclass(frozen=True)
class MemberMatchRequest:
    name: str
    profile: str
    candidates: list[CandidateProfile] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "MemberMatchRequest":
        candidates = [
            CandidateProfile(name=str(c.get("name") or ""), domain=str(c.get("domain") or c.get("profession") or ""))
            for c in (data.get("candidates") or data.get("members") or [])
            if isinstance(c, dict)
        ]
        return cls(
            name=str(data.get("name") or data.get("guestName") or ""),
            profile=str(data.get("profile") or data.get("profession") or ""),
            candidates=candidates,
        )


@dataclass(frozen=True)
class InsightItem:
    title: str
    description: str
    confidence: float
    data_points: dict[str, Any]

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "dataPoints": self.data_points,
        }


@dataclass(frozen=True)
class InsightResponse:
    event_id: int
    analysis_type: str
    generated_at: datetime
    insights: list[InsightItem]
    recommendations: list[str]

    def to_dict(self) -> dict:
        return {
            "eventId": self.event_id,
            "analysisType": self.analysis_type,
            "generatedAt": self.generated_at.isoformat(),
            "insights": [i.to_dict() for i in self.insights],
            "recommendations": list(self.recommendations),
        }
