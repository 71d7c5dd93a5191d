"""Advisory client: risk commentary and report text from Claude.

Every public operation returns text and never raises. Missing credentials,
network errors, model errors and timeouts all come back as the operation's
fallback string. Requests are never retried.
"""

import logging
import time
from dataclasses import dataclass
from datetime import date

import anthropic

from insighted.config import get_settings
from insighted.schemas.project import Project
from insighted.services.advisory_prompts import (
    REGIONAL_REPORT_LINE,
    REGIONAL_REPORT_SYSTEM,
    REGIONAL_REPORT_USER,
    RISK_ANALYSIS_SYSTEM,
    RISK_ANALYSIS_USER,
    SMART_REMARKS_SYSTEM,
    SMART_REMARKS_USER,
)
from insighted.services.errors import AdvisoryBusyError, AdvisoryConfigError

logger = logging.getLogger(__name__)

MODEL_MAP = {
    "haiku": "claude-haiku-4-5-20251001",
    "sonnet": "claude-sonnet-4-5-20250929",
    "opus": "claude-opus-4-5-20250620",
}

RISK_FALLBACK = "Unable to perform AI analysis at this time. Please check your API key."
RISK_EMPTY = "Could not generate analysis."
REMARKS_FALLBACK = ""
REPORT_FALLBACK = "Unable to generate the regional report at this time."
REPORT_EMPTY = "Could not generate report."


@dataclass
class AIResponse:
    content: str
    tokens_used: dict  # { "input": int, "output": int }
    model: str
    latency_ms: int


def _get_client() -> anthropic.AsyncAnthropic:
    settings = get_settings()
    if not settings.anthropic_api_key:
        raise AdvisoryConfigError("ANTHROPIC_API_KEY is not configured")
    return anthropic.AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.advisory_timeout_seconds,
        max_retries=0,
    )


async def generate_response(
    *,
    system_prompt: str,
    user_prompt: str,
    model: str | None = None,
    max_tokens: int | None = None,
    temperature: float = 0.3,
) -> AIResponse:
    """Generate a Claude response.

    Args:
        system_prompt: System instructions.
        user_prompt: User message text.
        model: One of "haiku", "sonnet", "opus" (defaults to ADVISORY_MODEL).
        max_tokens: Maximum output tokens (defaults to ADVISORY_MAX_TOKENS).
        temperature: Sampling temperature.
    """
    settings = get_settings()
    client = _get_client()
    model_key = model or settings.advisory_model
    model_id = MODEL_MAP.get(model_key, MODEL_MAP["haiku"])

    start = time.monotonic()
    response = await client.messages.create(
        model=model_id,
        max_tokens=max_tokens or settings.advisory_max_tokens,
        temperature=temperature,
        system=system_prompt,
        messages=[{"role": "user", "content": user_prompt}],
    )
    latency_ms = int((time.monotonic() - start) * 1000)

    text = ""
    if response.content and response.content[0].type == "text":
        text = response.content[0].text

    return AIResponse(
        content=text,
        tokens_used={
            "input": response.usage.input_tokens,
            "output": response.usage.output_tokens,
        },
        model=model_id,
        latency_ms=latency_ms,
    )


async def _generate_text(operation: str, **kwargs) -> str | None:
    """Run one advisory request; None means it failed and the caller should fall back."""
    try:
        response = await generate_response(**kwargs)
    except AdvisoryConfigError as exc:
        logger.warning("Advisory %s skipped: %s", operation, exc)
        return None
    except Exception:
        logger.exception("Advisory %s failed", operation)
        return None

    logger.info(
        "Advisory %s completed in %d ms (%s, %d output tokens)",
        operation,
        response.latency_ms,
        response.model,
        response.tokens_used.get("output", 0),
    )
    return response.content


def _fmt(value, default: str = "None") -> str:
    if value is None or value == "":
        return default
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


async def analyze_project_risk(project: Project, today: date | None = None) -> str:
    """Short risk assessment for one project."""
    user_prompt = RISK_ANALYSIS_USER.format(
        project_name=_fmt(project.project_name),
        school_name=_fmt(project.school_name),
        allocation=_fmt(project.project_allocation),
        contractor_name=_fmt(project.contractor_name),
        notice_to_proceed=_fmt(project.notice_to_proceed),
        target_completion_date=_fmt(project.target_completion_date),
        status=project.status.value,
        accomplishment=project.accomplishment_percentage,
        status_as_of_date=_fmt(project.status_as_of_date),
        remarks=_fmt(project.other_remarks),
        today=(today or date.today()).isoformat(),
    )
    text = await _generate_text(
        "risk analysis",
        system_prompt=RISK_ANALYSIS_SYSTEM,
        user_prompt=user_prompt,
    )
    if text is None:
        return RISK_FALLBACK
    return text or RISK_EMPTY


async def generate_smart_remarks(project: Project) -> str:
    """One-line "Other Remarks" suggestion; empty string when unavailable."""
    user_prompt = SMART_REMARKS_USER.format(
        status=project.status.value,
        accomplishment=project.accomplishment_percentage,
        target_completion_date=_fmt(project.target_completion_date),
    )
    text = await _generate_text(
        "smart remarks",
        system_prompt=SMART_REMARKS_SYSTEM,
        user_prompt=user_prompt,
        max_tokens=100,
        temperature=0.5,
    )
    if text is None:
        return REMARKS_FALLBACK
    return text.strip()


async def generate_regional_report(
    region: str, projects: list[Project], today: date | None = None
) -> str:
    """Executive summary for the projects of one region."""
    lines = "\n".join(
        REGIONAL_REPORT_LINE.format(
            school_name=_fmt(p.school_name),
            project_name=_fmt(p.project_name),
            status=p.status.value,
            accomplishment=p.accomplishment_percentage,
            allocation=_fmt(p.project_allocation),
            target_completion_date=_fmt(p.target_completion_date),
            contractor_name=_fmt(p.contractor_name),
            remarks=_fmt(p.other_remarks),
        )
        for p in projects
    )
    user_prompt = REGIONAL_REPORT_USER.format(
        region=region,
        project_count=len(projects),
        total_allocation=sum((p.project_allocation for p in projects), start=0),
        today=(today or date.today()).isoformat(),
        project_lines=lines,
    )
    text = await _generate_text(
        "regional report",
        system_prompt=REGIONAL_REPORT_SYSTEM,
        user_prompt=user_prompt,
        max_tokens=4096,
    )
    if text is None:
        return REPORT_FALLBACK
    return text or REPORT_EMPTY


# ---------------------------------------------------------------------------
# In-flight guard
# ---------------------------------------------------------------------------


class AdvisoryGuard:
    """Allows one outstanding advisory request per key (project id or region)."""

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    def acquire(self, key: str) -> None:
        if key in self._in_flight:
            raise AdvisoryBusyError(key)
        self._in_flight.add(key)

    def release(self, key: str) -> None:
        self._in_flight.discard(key)

    async def run(self, key: str, func, *args):
        """Await ``func(*args)`` while holding ``key``; refuse if already held."""
        self.acquire(key)
        try:
            return await func(*args)
        finally:
            self.release(key)


advisory_guard = AdvisoryGuard()
