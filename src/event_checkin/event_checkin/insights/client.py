from __future__ import annotations

import json
import logging
from typing import Sequence, Union

import httpx

from ..core.constants import DEFAULT_INSIGHT_API_URL, DEFAULT_INSIGHT_MODEL, DEFAULT_INSIGHT_TIMEOUT
from .model import DelegateFailure, MemberMatchRequest

logger = logging.getLogger(__name__)

ANALYST_PROMPT = "You are a networking event analyst. Provide insights based on attendance data."
MATCHMAKER_PROMPT = (
    "You match guests with chapter members for business referrals. "
    'Reply with JSON only: {"matches": [{"name": str, "reason": str, "score": float}]}.'
)


class InsightClient:
    """Pass-through client for an OpenAI-style chat completion endpoint.

    Failures never escape: text calls return an explanatory string and
    structured calls return ``{"error": ...}``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        api_url: str = DEFAULT_INSIGHT_API_URL,
        model: str = DEFAULT_INSIGHT_MODEL,
        timeout: float = DEFAULT_INSIGHT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ):
        self._api_key = api_key or ""
        self._api_url = api_url
        self._model = model
        self._timeout = float(timeout)
        self._http = http_client or httpx.Client()

    @property
    def model(self) -> str:
        return self._model

    @property
    def configured(self) -> bool:
        return bool(self._api_key.strip())

    def _chat(self, system: str, prompt: str, *, temperature: float = 0.7) -> Union[str, DelegateFailure]:
        if not self.configured:
            return DelegateFailure("Insight API key not configured. Please set INSIGHT_API_KEY")

        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
            "max_tokens": 1000,
        }
        try:
            resp = self._http.post(
                self._api_url,
                json=body,
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.error("Insight API call failed: %s", e)
            return DelegateFailure(f"Error calling insight API: {e}")

        if resp.status_code != 200:
            logger.warning("Insight API returned %s", resp.status_code)
            return DelegateFailure(f"Insight API error: {resp.status_code} - {resp.text}")

        try:
            choices = resp.json()["choices"]
            content = choices[0]["message"]["content"] if choices else None
        except (ValueError, KeyError, IndexError, TypeError) as e:
            return DelegateFailure(f"Unreadable insight API response: {e}")

        if not content:
            return DelegateFailure("No response from insight API")
        return str(content)

    def generate_insight(self, prompt: str) -> str:
        result = self._chat(ANALYST_PROMPT, prompt)
        if isinstance(result, DelegateFailure):
            return result.message
        return result

    def analyze_guest_match(self, guest_name: str, guest_profession: str, member_professions: Sequence[str]) -> str:
        listing = "\n".join(f"- {p}" for p in member_professions)
        prompt = (
            "Guest Information:\n"
            f"- Name: {guest_name}\n"
            f"- Profession: {guest_profession}\n\n"
            "Available Members' Professions:\n"
            f"{listing}\n\n"
            "Task: Analyze which members would benefit most from networking with this guest. "
            "Provide 3-5 specific reasons why certain professions would synergize well.\n"
            "Format: Brief, actionable insights."
        )
        return self.generate_insight(prompt)

    def generate_retention_strategy(self, attendance_rate: float, late_rate: float, absent_members: Sequence[str]) -> str:
        prompt = (
            "Chapter Statistics:\n"
            f"- Overall Attendance Rate: {attendance_rate * 100:.1f}%\n"
            f"- Late Arrival Rate: {late_rate * 100:.1f}%\n"
            f"- Frequently Absent Members: {', '.join(list(absent_members)[:5])}\n\n"
            "Task: Provide 3-5 actionable retention strategies to improve attendance and engagement.\n"
            "Format: Brief bullet points."
        )
        return self.generate_insight(prompt)

    def match_members(self, request: MemberMatchRequest) -> dict:
        """Ask the model to rank candidates for ``request``; parsed JSON or ``{"error"}``."""
        listing = "\n".join(f"- {c.name}: {c.domain}" for c in request.candidates)
        prompt = (
            f"Participant: {request.name}\n"
            f"Profile: {request.profile}\n\n"
            f"Candidates:\n{listing}\n\n"
            "Pick the best matches."
        )
        result = self._chat(MATCHMAKER_PROMPT, prompt, temperature=0.3)
        if isinstance(result, DelegateFailure):
            return result.to_dict()
        return parse_json_reply(result)


def parse_json_reply(content: str) -> dict:
    """Parse a model reply that should be JSON, tolerating ``` fences."""
    text = content.strip()
    if text.startswith("```"):
        text = text.strip("`")
        if text.lower().startswith("json"):
            text = text[4:]
    try:
        parsed = json.loads(text)
    except ValueError:
        return DelegateFailure(f"Unparseable model reply: {content[:200]}").to_dict()
    if not isinstance(parsed, dict):
        return {"matches": parsed}
    return parsed
