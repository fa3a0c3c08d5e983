"""
Freshness classification shared by the server and the poll client.

Kept free of Django imports so the poll client can use it standalone.
"""

FRESHNESS_THRESHOLD_MS = 5000

FRESH = "fresh"
STALE = "stale"
NO_DATA = "no-data"


def snapshot_age_ms(snapshot, now_ms):
    """Milliseconds since the snapshot's serverTs (a missing serverTs counts as 0)."""
    try:
        server_ts = int(snapshot.get("serverTs") or 0)
    except (TypeError, ValueError):
        server_ts = 0
    return now_ms - server_ts


def classify_freshness(snapshot, now_ms, threshold_ms=FRESHNESS_THRESHOLD_MS):
    """
    "fresh" when the snapshot's serverTs is less than threshold_ms old,
    "stale" otherwise, "no-data" when there is no snapshot at all.
    """
    if not snapshot:
        return NO_DATA
    return FRESH if snapshot_age_ms(snapshot, now_ms) < threshold_ms else STALE
