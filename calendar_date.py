import re
from datetime import date
from functools import total_ordering

from months import days_in_month, genitive_name, month_by_ordinal


class InvalidDate(ValueError):
    pass


# Monday first, the same order datetime.date.weekday() uses
WEEKDAYS = ("Poniedziałek", "Wtorek", "Środa", "Czwartek", "Piątek", "Sobota", "Niedziela")

# Residues of Zeller's congruence: 0 is Saturday
ZELLER_WEEKDAYS = ("Sobota", "Niedziela", "Poniedziałek", "Wtorek", "Środa", "Czwartek", "Piątek")

# 30 November 2020 was a Monday
ANCHOR_DATE = (30, 11, 2020)

_TEXT_PATTERN = re.compile(r"([0-9]{2})-([0-9]{2})-(-?[0-9]{4,})")


def _today() -> date:
    return date.today()


def _validate(day, month, year):
    if not 1 <= month <= 12:
        raise InvalidDate(f"Month must be in range 1-12, got {month}")
    if not 1 <= day <= days_in_month(year, month):
        raise InvalidDate(f"Invalid day of month: {day:02d}-{month:02d}-{year}")


def anchor_weekday(day: int, month: int, year: int) -> int:
    """Weekday of a date (0 = Monday) found by walking from a known Monday.

    The anchor moves by whole weeks until it passes the target and then
    steps back one day at a time, so the cost grows with the distance.
    """
    target = CalendarDate(day, month, year)
    cursor = CalendarDate(*ANCHOR_DATE)
    index = 0

    if cursor < target:
        while cursor < target:
            cursor.plus_week()
        while cursor != target:
            cursor.minus_day()
            index = (index + 6) % 7
    elif cursor > target:
        while cursor > target:
            cursor.minus_week()
        while cursor != target:
            cursor.plus_day()
            index = (index + 1) % 7

    return index


def zeller_weekday(day: int, month: int, year: int) -> int:
    """Zeller's congruence for the Gregorian calendar (0 = Saturday)."""
    # January and February count as months 13 and 14 of the previous year
    if month < 3:
        month += 12
        year -= 1

    k = year % 100
    j = year // 100
    return (day + (13 * (month + 1)) // 5 + k + k // 4 + j // 4 - 2 * j) % 7


@total_ordering
class CalendarDate:
    """A mutable day/month/year triple with calendar navigation.

    ``CalendarDate()`` starts at today's date, ``CalendarDate(day, month, year)``
    validates the triple and raises :class:`InvalidDate` instead of clamping.
    Navigation methods change the date in place.
    """

    # mutable, so not usable as a dict key
    __hash__ = None

    def __init__(self, day: int = None, month: int = None, year: int = None):
        given = [value is not None for value in (day, month, year)]
        if not any(given):
            self.reset_to_today()
            return
        if not all(given):
            raise TypeError("day, month and year must be given together")

        _validate(day, month, year)
        self._day = day
        self._month = month
        self._year = year

    @classmethod
    def from_date(cls, value: date):
        return cls(value.day, value.month, value.year)

    @classmethod
    def parse(cls, text: str):
        """Build a date from its ``dd-MM-yyyy`` form."""
        match = _TEXT_PATTERN.fullmatch(text.strip())
        if match is None:
            raise InvalidDate(f"Expected dd-MM-yyyy, got {text!r}")
        day, month, year = (int(part) for part in match.groups())
        return cls(day, month, year)

    def copy(self):
        return CalendarDate(self._day, self._month, self._year)

    __copy__ = copy

    def to_date(self) -> date:
        try:
            return date(self._year, self._month, self._day)
        except ValueError as exc:
            raise InvalidDate(f"{self} is outside the years datetime supports: {exc}") from exc

    # ---- accessors ----

    @property
    def day(self) -> int:
        return self._day

    @property
    def month(self):
        return month_by_ordinal(self._month, self._year)

    @property
    def month_number(self) -> int:
        return self._month

    @property
    def year(self) -> int:
        return self._year

    # ---- navigation ----

    def _days_in_current_month(self):
        return days_in_month(self._year, self._month)

    def _next_month(self):
        if self._month == 12:
            self._month = 1
            self._year += 1
        else:
            self._month += 1

    def _previous_month(self):
        if self._month == 1:
            self._month = 12
            self._year -= 1
        else:
            self._month -= 1

    def plus_day(self):
        new_day = self._day + 1
        if new_day > self._days_in_current_month():
            new_day = 1
            self._next_month()
        self._day = new_day

    def minus_day(self):
        new_day = self._day - 1
        if new_day < 1:
            self._previous_month()
            new_day = self._days_in_current_month()
        self._day = new_day

    def plus_week(self):
        new_day = self._day + 7
        while new_day > self._days_in_current_month():
            new_day -= self._days_in_current_month()
            self._next_month()
        self._day = new_day

    def minus_week(self):
        new_day = self._day - 7
        while new_day < 1:
            self._previous_month()
            new_day += self._days_in_current_month()
        self._day = new_day

    def add_months(self, delta: int):
        """Move by ``delta`` months, clamping the day to the target month's length."""
        months_total = self._year * 12 + (self._month - 1) + delta
        self._year, month_index = divmod(months_total, 12)
        self._month = month_index + 1
        self._day = min(self._day, self._days_in_current_month())

    def reset_to_today(self):
        today = _today()
        self._day = today.day
        self._month = today.month
        self._year = today.year

    # ---- day of week ----

    def day_of_week_by_anchor(self) -> str:
        return WEEKDAYS[anchor_weekday(self._day, self._month, self._year)]

    def day_of_week_by_zeller(self) -> str:
        return ZELLER_WEEKDAYS[zeller_weekday(self._day, self._month, self._year)]

    def day_of_week_name(self) -> str:
        return self.day_of_week_by_zeller()

    def weekday(self) -> int:
        """Monday is 0 and Sunday is 6."""
        return (zeller_weekday(self._day, self._month, self._year) + 5) % 7

    # ---- formatting and comparison ----

    def formatted_with_month_name(self, genitive: bool = False) -> str:
        name = genitive_name(self._month) if genitive else self.month.name
        return f"{self._day} {name} {self._year}"

    def _key(self):
        return (self._year, self._month, self._day)

    def compare_to(self, other) -> int:
        mine, theirs = self._key(), other._key()
        return (mine > theirs) - (mine < theirs)

    def __eq__(self, other):
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other):
        if not isinstance(other, CalendarDate):
            return NotImplemented
        return self._key() < other._key()

    def __str__(self):
        sign = "-" if self._year < 0 else ""
        return f"{self._day:02d}-{self._month:02d}-{sign}{abs(self._year):04d}"

    def __repr__(self):
        return f"CalendarDate({self._day}, {self._month}, {self._year})"
