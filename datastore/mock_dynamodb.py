from __future__ import annotations
import bisect
import copy
import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Tuple

from models.records import SensorRecord
from services.errors import ConfigurationError
from settings import get_settings

Item = Dict[str, Any]


@dataclass
class QueryPage:
    """One page of a key-range query plus the continuation key, if any."""

    items: List[Item] = field(default_factory=list)
    last_evaluated_key: Optional[str] = None


class MockDynamoDBTable:
    """Partitioned table keyed by ``stationId`` and sorted by ``compositeKey``."""

    def __init__(
        self,
        name: str,
        persistence_path: Optional[Path] = None,
        page_size: int = 1000,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive.")
        self.name = name
        self.page_size = page_size
        self._partitions: Dict[int, Dict[str, Item]] = {}
        self._sort_keys: Dict[int, List[str]] = {}
        self.persistence_path = persistence_path
        self._lock = Lock()
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def put_item(self, record: SensorRecord) -> None:
        with self._lock:
            self._store(record.to_item())
            self._persist()

    def put_items(self, records: Iterable[SensorRecord]) -> int:
        count = 0
        with self._lock:
            for record in records:
                self._store(record.to_item())
                count += 1
            self._persist()
        return count

    def get_item(self, station_id: int, composite_key: str) -> Optional[Item]:
        with self._lock:
            item = self._partitions.get(station_id, {}).get(composite_key)
            if item is None:
                return None
            return copy.deepcopy(item)

    def scan(self) -> list[Item]:
        """Return deep copies of all stored items, ordered by partition then sort key."""

        with self._lock:
            return [
                copy.deepcopy(self._partitions[station][key])
                for station in sorted(self._partitions)
                for key in self._sort_keys[station]
            ]

    def query(
        self,
        partition_key: int,
        key_range: Tuple[str, str],
        limit: Optional[int] = None,
        exclusive_start_key: Optional[str] = None,
    ) -> QueryPage:
        """Return one page of items whose sort key lies within ``key_range`` inclusive."""

        page_limit = self.page_size if limit is None else limit
        if page_limit <= 0:
            raise ValueError("limit must be positive.")
        start_key, end_key = key_range

        with self._lock:
            keys = self._sort_keys.get(partition_key, [])
            if exclusive_start_key is not None:
                position = bisect.bisect_right(keys, exclusive_start_key)
                position = max(position, bisect.bisect_left(keys, start_key))
            else:
                position = bisect.bisect_left(keys, start_key)
            stop = bisect.bisect_right(keys, end_key)

            selected = keys[position:min(stop, position + page_limit)]
            items = [copy.deepcopy(self._partitions[partition_key][key]) for key in selected]
            has_more = position + len(selected) < stop

        last_key = selected[-1] if has_more and selected else None
        return QueryPage(items=items, last_evaluated_key=last_key)

    def _store(self, item: Item) -> None:
        station_id = int(item["stationId"])
        key = str(item["compositeKey"])
        partition = self._partitions.setdefault(station_id, {})
        keys = self._sort_keys.setdefault(station_id, [])
        if key not in partition:
            bisect.insort(keys, key)
        partition[key] = copy.deepcopy(item)

    def _persist(self) -> None:
        if not self.persistence_path:
            return
        payload = {
            str(station): [self._partitions[station][key] for key in self._sort_keys[station]]
            for station in sorted(self._partitions)
        }
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            data = {}

        for items in data.values():
            for item in items:
                self._store(item)


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> MockDynamoDBTable:
    settings = get_settings()
    table_name = settings.table_name if name is None else name
    if not table_name:
        raise ConfigurationError("TRAFFIC_TABLE_NAME environment variable is not defined")
    table_path = settings.table_persistence_path if path is None else path
    persistence = Path(table_path) if table_path else None
    return MockDynamoDBTable(
        name=table_name,
        persistence_path=persistence,
        page_size=settings.table_page_size,
    )
