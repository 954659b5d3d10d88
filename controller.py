from dataclasses import dataclass
from typing import List, Optional

from analytics import Analytics
from calendar_date import CalendarDate
from events import EventCSVCodec, EventStore, as_date


@dataclass(frozen=True)
class DayCell:
    day: int
    month: int
    year: int
    weekday: int
    is_selected: bool
    is_today: bool
    has_events: bool

    def __str__(self):
        return str(CalendarDate(self.day, self.month, self.year))


class CalendarController:
    """Everything a calendar front end needs besides drawing.

    Holds the selected date and the event store, applies navigation
    commands and builds the month grid shown around the selected date.
    """

    ACTIONS = {
        "minus_day": CalendarDate.minus_day,
        "plus_day": CalendarDate.plus_day,
        "minus_week": CalendarDate.minus_week,
        "plus_week": CalendarDate.plus_week,
        "prev_month": lambda selected: selected.add_months(-1),
        "next_month": lambda selected: selected.add_months(1),
        "reset": CalendarDate.reset_to_today,
    }

    def __init__(self, store: EventStore, selected: CalendarDate = None, analytics: Analytics = None):
        self.store = store
        self.selected = selected if selected is not None else CalendarDate()
        self.analytics = analytics or Analytics()

    def navigate(self, action: str) -> CalendarDate:
        try:
            step = self.ACTIONS[action]
        except KeyError:
            raise ValueError(f"Unknown navigation action: {action}") from None
        step(self.selected)
        self.analytics.log(f"{action} -> {self.selected}")
        return self.selected

    def select(self, value):
        self.selected = CalendarDate.from_date(as_date(value))
        return self.selected

    def header(self) -> str:
        # "Poniedziałek, 30 listopada 2020"
        return f"{self.selected.day_of_week_name()}, {self.selected.formatted_with_month_name(genitive=True)}"

    def month_label(self) -> str:
        return f"{self.selected.month.name} {self.selected.year}"

    def month_grid(self) -> List[List[Optional[DayCell]]]:
        """Weeks of the selected month, Monday first, padded with ``None``."""
        month = self.selected.month_number
        today = CalendarDate()
        # plain tuples, so years datetime cannot hold still get a grid
        event_days = {(d.year, d.month, d.day) for d in self.store.event_dates()}

        cursor = CalendarDate(1, month, self.selected.year)
        weeks = []
        week = [None] * cursor.weekday()
        while cursor.month_number == month:
            key = (cursor.year, month, cursor.day)
            week.append(DayCell(
                day=cursor.day,
                month=month,
                year=cursor.year,
                weekday=len(week),
                is_selected=cursor == self.selected,
                is_today=cursor == today,
                has_events=key in event_days,
            ))
            if len(week) == 7:
                weeks.append(week)
                week = []
            cursor.plus_day()

        if week:
            week.extend([None] * (7 - len(week)))
            weeks.append(week)
        return weeks

    def events_for_selected(self):
        selected = self.selected
        return [
            e for e in self.store.all_events()
            if (e.date.year, e.date.month, e.date.day) == (selected.year, selected.month_number, selected.day)
        ]

    def add_event(self, event_date, title: str) -> bool:
        title = _checked_title(title)
        saved = self.store.add(event_date, title)
        if saved:
            self.analytics.log(f"add {_label(event_date)}: {title}")
        return saved

    def save_event(self, old_date, new_date, title: str) -> bool:
        title = _checked_title(title)
        saved = self.store.replace(old_date, new_date, title)
        if saved:
            self.analytics.log(f"edit {_label(old_date)} -> {_label(new_date)}: {title}")
        return saved

    def remove_event(self, event_date) -> int:
        removed = self.store.remove(event_date)
        if removed:
            self.analytics.log(f"remove {_label(event_date)} ({removed})")
        return removed


def _checked_title(title):
    if title is None or not title.strip():
        raise ValueError("Event title must not be blank")
    return title.strip()


def _label(value):
    return EventCSVCodec.format_date(as_date(value))
