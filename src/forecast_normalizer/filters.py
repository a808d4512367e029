"""Field-inclusion filters that bound how much of a response gets decoded."""

from __future__ import annotations

from .decoder import DocumentFilter

ALERT_FIELDS: dict[str, bool] = {
    "sender_name": False,
    "event": True,
    "start": True,
    "end": True,
    # Free-text description can run to several kilobytes.
    "description": False,
    "tags": True,
}


def build_onecall_filter(alerts_enabled: bool) -> DocumentFilter:
    """Return the OneCall filter: minutely dropped, alerts trimmed or dropped."""
    selector: dict[str, DocumentFilter] = {
        "lat": True,
        "lon": True,
        "timezone": True,
        "timezone_offset": True,
        "current": True,
        "minutely": False,
        "hourly": True,
        "daily": True,
    }
    if alerts_enabled:
        selector["alerts"] = [dict(ALERT_FIELDS)]
    else:
        selector["alerts"] = False
    return selector
