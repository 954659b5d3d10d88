from typing import NamedTuple


class OutOfRange(ValueError):
    pass


class MonthOfYear(NamedTuple):
    ordinal: int
    name: str
    nominal_days: int

    def __str__(self):
        return self.name


# February is stored with its common-year length; leap years are resolved per query
MONTHS = (
    MonthOfYear(1, "Styczeń", 31),
    MonthOfYear(2, "Luty", 28),
    MonthOfYear(3, "Marzec", 31),
    MonthOfYear(4, "Kwiecień", 30),
    MonthOfYear(5, "Maj", 31),
    MonthOfYear(6, "Czerwiec", 30),
    MonthOfYear(7, "Lipiec", 31),
    MonthOfYear(8, "Sierpień", 31),
    MonthOfYear(9, "Wrzesień", 30),
    MonthOfYear(10, "Październik", 31),
    MonthOfYear(11, "Listopad", 30),
    MonthOfYear(12, "Grudzień", 31),
)

_LEAP_FEBRUARY = MONTHS[1]._replace(nominal_days=29)

# "15 marca 2024"
_GENITIVE_NAMES = (
    "stycznia",
    "lutego",
    "marca",
    "kwietnia",
    "maja",
    "czerwca",
    "lipca",
    "sierpnia",
    "września",
    "października",
    "listopada",
    "grudnia",
)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def _check_ordinal(number):
    if not isinstance(number, int) or isinstance(number, bool) or not 1 <= number <= 12:
        raise OutOfRange(f"Month number must be in range 1-12, got {number!r}")


def month_by_ordinal(number: int, year: int = None) -> MonthOfYear:
    """Return the month with the given number (1 = January).

    Without a year the nominal table entry is returned. With a year,
    February carries 29 days when the year is a leap year.
    """
    _check_ordinal(number)
    if number == 2 and year is not None and is_leap_year(year):
        return _LEAP_FEBRUARY
    return MONTHS[number - 1]


def days_in_month(year: int, number: int) -> int:
    return month_by_ordinal(number, year).nominal_days


def genitive_name(number: int) -> str:
    _check_ordinal(number)
    return _GENITIVE_NAMES[number - 1]
