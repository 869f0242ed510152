"""Conversion of UTC timestamps to Finnish civil hours (EET/EEST)."""

from __future__ import annotations

import calendar
import re
from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from threading import Lock
from typing import Generic, Hashable, Optional, Tuple, TypeVar

from settings import get_settings

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

STANDARD_OFFSET = timedelta(hours=2)
SUMMER_OFFSET = timedelta(hours=3)

_FRACTION = re.compile(r"(?<=:\d\d)\.(\d+)")


class BoundedCache(Generic[K, V]):
    """Thread-safe LRU mapping with a fixed capacity."""

    def __init__(self, maxsize: int) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be positive.")
        self.maxsize = maxsize
        self._entries: "OrderedDict[K, V]" = OrderedDict()
        self._lock = Lock()

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            value = self._entries.get(key)
            if value is not None:
                self._entries.move_to_end(key)
            return value

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._entries[key] = value
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


def last_sunday(year: int, month: int) -> int:
    """Day number of the last Sunday in the given month."""
    days_in_month = calendar.monthrange(year, month)[1]
    last_weekday = date(year, month, days_in_month).weekday()
    return days_in_month - (last_weekday + 1) % 7


def is_daylight_saving(day: date) -> bool:
    """EU summer time rule: last Sunday of March up to the last Sunday of October."""
    if 3 < day.month < 10:
        return True
    if day.month == 3:
        return day.day >= last_sunday(day.year, 3)
    if day.month == 10:
        return day.day < last_sunday(day.year, 10)
    return False


def parse_utc_timestamp(value: str) -> datetime:
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    # fromisoformat only takes 3 or 6 fractional digits before Python 3.11
    candidate = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), candidate, count=1)

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError(f"Invalid timestamp format: {value!r}") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


class LocalHourResolver:
    """Resolve the local hour of day for UTC timestamps with memoization.

    Both caches are injected so callers can size them or reset them between
    test cases. Entries are pure functions of their keys and are shared by
    concurrent requests.
    """

    def __init__(
        self,
        hour_cache: Optional[BoundedCache[str, int]] = None,
        dst_cache: Optional[BoundedCache[Tuple[int, int, int], bool]] = None,
    ) -> None:
        self.hour_cache = hour_cache if hour_cache is not None else BoundedCache(100_000)
        self.dst_cache = dst_cache if dst_cache is not None else BoundedCache(4096)

    def local_hour(self, utc_timestamp: str) -> int:
        cached = self.hour_cache.get(utc_timestamp)
        if cached is not None:
            return cached

        moment = parse_utc_timestamp(utc_timestamp)
        offset = SUMMER_OFFSET if self.is_dst(moment.date()) else STANDARD_OFFSET
        hour = (moment + offset).hour
        self.hour_cache.put(utc_timestamp, hour)
        return hour

    def is_dst(self, day: date) -> bool:
        key = (day.year, day.month, day.day)
        cached = self.dst_cache.get(key)
        if cached is not None:
            return cached
        flag = is_daylight_saving(day)
        self.dst_cache.put(key, flag)
        return flag

    def clear(self) -> None:
        self.hour_cache.clear()
        self.dst_cache.clear()


@lru_cache
def build_default_resolver() -> LocalHourResolver:
    """Process-wide resolver whose caches are capped by settings."""
    settings = get_settings()
    return LocalHourResolver(
        hour_cache=BoundedCache(settings.hour_cache_size),
        dst_cache=BoundedCache(settings.dst_cache_size),
    )
