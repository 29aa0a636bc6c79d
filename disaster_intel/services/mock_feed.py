"""Deterministic stand-in for the live social feed.

The five templates, their ids and their relative timestamps are fixed so
that callers and tests can rely on exact values.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Sequence


def mock_social_media_reports(
    disaster_id: str,
    keywords: Sequence[str] = (),
    now: datetime | None = None,
) -> list[dict[str, Any]]:
    """
    Build the canned reports for a disaster.

    Args:
        disaster_id: Disaster the reports are attributed to
        keywords: If given, keep only reports whose text contains any of them
        now: Reference time for the relative timestamps

    Returns:
        Raw report dicts in template order, with their declared priority and type
    """
    now = now or datetime.now(timezone.utc)

    def at(offset: timedelta) -> str:
        return (now - offset).isoformat()

    reports = [
        {
            "id": f"mock_{disaster_id}_1",
            "text": "#floodrelief Need food and water in Lower East Side, NYC. Situation is urgent!",
            "author_id": "citizen1",
            "username": "citizen1",
            "name": "Local Resident",
            "created_at": at(timedelta(0)),
            "priority": "high",
            "type": "need",
        },
        {
            "id": f"mock_{disaster_id}_2",
            "text": "Red Cross shelter open at 123 Main St. Providing food, water, and medical assistance. #disasterresponse",
            "author_id": "redcross_nyc",
            "username": "redcross_nyc",
            "name": "Red Cross NYC",
            "created_at": at(timedelta(hours=1)),
            "priority": "medium",
            "type": "offer",
        },
        {
            "id": f"mock_{disaster_id}_3",
            "text": "SOS! Trapped in building on 5th Ave. Need immediate rescue. #emergency #flood",
            "author_id": "trapped_citizen",
            "username": "trapped_citizen",
            "name": "Emergency Call",
            "created_at": at(timedelta(minutes=30)),
            "priority": "critical",
            "type": "alert",
        },
        {
            "id": f"mock_{disaster_id}_4",
            "text": "Volunteers needed at Central Park shelter. Helping with distribution and medical support. #volunteer",
            "author_id": "volunteer_coord",
            "username": "volunteer_coord",
            "name": "Volunteer Coordinator",
            "created_at": at(timedelta(hours=2)),
            "priority": "medium",
            "type": "request",
        },
        {
            "id": f"mock_{disaster_id}_5",
            "text": "Power restored in Midtown area. Traffic lights working again. #recovery",
            "author_id": "nyc_utilities",
            "username": "nyc_utilities",
            "name": "NYC Utilities",
            "created_at": at(timedelta(hours=1, minutes=30)),
            "priority": "low",
            "type": "update",
        },
    ]

    if keywords:
        lowered = [k.lower() for k in keywords]
        return [r for r in reports if any(k in r["text"].lower() for k in lowered)]

    return reports
