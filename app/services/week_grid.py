# app/services/week_grid.py
"""Layout math for the Monday-Friday week view of the calendar.

The grid spans GRID_START_HOUR..GRID_END_HOUR, split into 30 minute slots,
with a fixed pixel height per hour. Everything here works on naive
datetimes already shifted into the viewer's local time.
"""
from datetime import datetime, timedelta

GRID_START_HOUR = 8
GRID_END_HOUR = 18
SLOT_MINUTES = 30
HOUR_ROW_PX = 56
SLOT_PX = HOUR_ROW_PX / 2
HOURS_COUNT = GRID_END_HOUR - GRID_START_HOUR
GRID_BODY_HEIGHT_PX = HOURS_COUNT * HOUR_ROW_PX
GRID_MINUTES_TOTAL = HOURS_COUNT * 60
SLOT_COUNT = GRID_MINUTES_TOTAL // SLOT_MINUTES

MIN_EVENT_MINUTES = 24
DEFAULT_EVENT_MINUTES = 60
WORK_DAYS = 5


def clamp(n, low, high):
    return max(low, min(high, n))


def start_of_day(d):
    return datetime(d.year, d.month, d.day)


def start_of_week_monday(d):
    return start_of_day(d) - timedelta(days=d.weekday())


def week_range(anchor):
    """[Monday 00:00, next Monday 00:00) around ``anchor``."""
    start = start_of_week_monday(anchor)
    return start, start + timedelta(days=7)


def column_for_day(d):
    """0..4 for Monday..Friday, -1 on weekends."""
    dow = d.weekday()
    return dow if dow < WORK_DAYS else -1


def minutes_from_grid_start(d):
    return (d.hour - GRID_START_HOUR) * 60 + d.minute


def event_box(start, end=None):
    """(top_px, height_px) of an event block, clamped to the visible grid."""
    if end is None:
        end = start + timedelta(minutes=DEFAULT_EVENT_MINUTES)
    start_min = clamp(minutes_from_grid_start(start), 0, GRID_MINUTES_TOTAL)
    end_min = clamp(minutes_from_grid_start(end), 0, GRID_MINUTES_TOTAL)
    duration = max(MIN_EVENT_MINUTES, end_min - start_min)

    top_px = start_min * GRID_BODY_HEIGHT_PX / GRID_MINUTES_TOTAL
    height_px = duration * GRID_BODY_HEIGHT_PX / GRID_MINUTES_TOTAL
    return top_px, height_px


def now_line(now):
    """Column and offset of the "now" marker, or None outside working hours/days."""
    col = column_for_day(now)
    minutes = minutes_from_grid_start(now)
    if col < 0 or minutes < 0 or minutes > GRID_MINUTES_TOTAL:
        return None
    top_px = clamp(minutes * GRID_BODY_HEIGHT_PX / GRID_MINUTES_TOTAL, 0, GRID_BODY_HEIGHT_PX)
    return {"col": col, "topPx": top_px}


def layout_week(anchor, events, now=None):
    """
    Position ``events`` (dicts with ``id``, ``start`` and an optional ``end``,
    as local datetimes) on the week containing ``anchor``. Weekend events and events
    outside the week are left out of ``blocks``.
    """
    week_start, week_end = week_range(anchor)
    days = [week_start + timedelta(days=i) for i in range(WORK_DAYS)]

    blocks = []
    for ev in events:
        if not (week_start <= ev["start"] < week_end):
            continue
        col = column_for_day(ev["start"])
        if col < 0:
            continue
        top_px, height_px = event_box(ev["start"], ev.get("end"))
        blocks.append({"id": ev["id"], "col": col, "topPx": top_px, "heightPx": height_px})

    return {
        "weekStart": week_start,
        "weekEnd": week_end,
        "days": days,
        "blocks": blocks,
        "nowLine": now_line(now) if now is not None and week_start <= now < week_end else None,
    }
