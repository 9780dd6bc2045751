"""
Symptom trend and dashboard statistics. Pure functions over already-loaded records;
nothing here writes or caches.
"""
import math
from datetime import datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from metabolic_health.config import settings
from metabolic_health.db.storage import ContentCatalog, RecordStore
from metabolic_health.schemas.dashboard import DashboardStats
from metabolic_health.schemas.symptoms import SymptomEntry, SymptomProgress, SymptomTrend

# Shown on the progress card, in display order
TRACKED_SYMPTOMS = ("nausea", "fatigue", "digestive")

# Severity points the two halves must differ by before the trend moves off "stable"
TREND_DEADBAND = 0.5
ADHERENCE_PENALTY_PER_SIDE_EFFECT = 5
WEEK = timedelta(days=7)


def _mean(values: Sequence[int]) -> float:
    return sum(values) / len(values)


def classify_symptom_trend(entries: Iterable[SymptomEntry]) -> SymptomTrend:
    """Average severity, 0-100 progress score and recent-vs-older trend for one symptom category."""
    ordered = sorted(entries, key=lambda e: e.timestamp, reverse=True)
    if not ordered:
        return SymptomTrend(progress=0, trend="stable", avg_severity=0)

    avg_severity = _mean([e.severity for e in ordered])
    progress = max(0, 100 - avg_severity * 10)

    split = math.ceil(len(ordered) / 2)
    recent_avg = _mean([e.severity for e in ordered[:split]])
    older = ordered[split:]
    older_avg = _mean([e.severity for e in older]) if older else recent_avg

    trend = "stable"
    if recent_avg < older_avg - TREND_DEADBAND:
        trend = "improving"
    elif recent_avg > older_avg + TREND_DEADBAND:
        trend = "worsening"
    return SymptomTrend(progress=progress, trend=trend, avg_severity=avg_severity)


def symptom_progress(entries: Iterable[SymptomEntry], symptoms: Sequence[str] = TRACKED_SYMPTOMS) -> List[SymptomProgress]:
    """classify_symptom_trend applied separately to each tracked category."""
    entries = list(entries)
    results = []
    for symptom in symptoms:
        trend = classify_symptom_trend(e for e in entries if e.symptom == symptom)
        results.append(SymptomProgress(symptom=symptom, **trend.model_dump()))
    return results


def start_of_day(now: datetime) -> datetime:
    """Midnight of `now`'s date in the server's local time zone (naive input is taken as local)."""
    local_midnight = now.astimezone().replace(tzinfo=None, hour=0, minute=0, second=0, microsecond=0)
    # Re-attach the zone for midnight itself; the offset can differ from now's across a DST change
    return local_midnight.astimezone()


def compute_dashboard_stats(
    entries: Iterable[SymptomEntry],
    content_total: int,
    now: datetime,
    content_cap: Optional[int] = None,
) -> DashboardStats:
    """
    symptomsToday: entries logged since local midnight.
    adherenceRate: 100 minus 5 per side effect in the last 7 days, floored at 0.
    contentViewed: catalog size capped (there is no per-user view history).
    """
    cap = settings.content_viewed_cap if content_cap is None else content_cap
    now = now.astimezone()
    midnight = start_of_day(now)
    week_ago = now - WEEK

    entries = list(entries)
    symptoms_today = sum(1 for e in entries if midnight <= e.timestamp <= now)
    week_side_effects = [e for e in entries if e.timestamp >= week_ago]

    adherence = max(0, 100 - len(week_side_effects) * ADHERENCE_PENALTY_PER_SIDE_EFFECT)
    return DashboardStats(
        symptoms_today=symptoms_today,
        adherence_rate=f"{round(adherence)}%",
        content_viewed=min(content_total, cap),
    )


def dashboard_stats(
    records: RecordStore,
    catalog: ContentCatalog,
    user_id: str,
    now: Optional[datetime] = None,
) -> DashboardStats:
    """Load the user's last week of entries and the catalog size, then compute stats."""
    now = (now or datetime.now()).astimezone()
    # Local midnight is always inside the trailing week, so one query covers both counts
    entries = records.list_symptoms(user_id, since=now - WEEK)
    return compute_dashboard_stats(entries, catalog.count_content(), now)
