"""Compare uploaded workbook files, memoizing results by content digest."""

from __future__ import annotations

import hashlib
import threading
from collections import OrderedDict
from dataclasses import dataclass, replace

from excel_comparer.models import ComparisonResult
from excel_comparer.services.comparison import WorkbookComparator
from excel_comparer.services.format_detector import FormatDetector
from excel_comparer.services.sheet_differ import clamp_header_row
from excel_comparer.services.workbook_loader import WorkbookLoader
from excel_comparer.utils.logging import get_logger, timed_operation

logger = get_logger(__name__)

CacheKey = tuple[str, str, int]


@dataclass(frozen=True)
class ComparisonOutcome:
    """A comparison result plus the sheet counts of both inputs."""

    result: ComparisonResult
    file1_sheet_count: int
    file2_sheet_count: int
    cache_hit: bool = False


class ComparisonCache:
    """Least-recently-used store of comparison outcomes.

    Keys are the SHA-256 digests of both file contents plus the header row,
    so identical uploads map to the same entry regardless of file name.
    """

    def __init__(self, max_entries: int = 32) -> None:
        self.max_entries = max_entries
        self._entries: OrderedDict[CacheKey, ComparisonOutcome] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def make_key(content1: bytes, content2: bytes, header_row: int) -> CacheKey:
        return (
            hashlib.sha256(content1).hexdigest(),
            hashlib.sha256(content2).hexdigest(),
            clamp_header_row(header_row),
        )

    def get(self, key: CacheKey) -> ComparisonOutcome | None:
        with self._lock:
            outcome = self._entries.get(key)
            if outcome is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return outcome

    def put(self, key: CacheKey, outcome: ComparisonOutcome) -> None:
        if self.max_entries <= 0:
            return
        with self._lock:
            self._entries[key] = outcome
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ComparisonService:
    """Detects, decodes and compares two uploaded workbooks."""

    def __init__(
        self,
        loader: WorkbookLoader | None = None,
        detector: FormatDetector | None = None,
        cache: ComparisonCache | None = None,
    ) -> None:
        self._loader = loader or WorkbookLoader()
        self._detector = detector or FormatDetector()
        self._cache = cache if cache is not None else ComparisonCache(max_entries=0)

    @property
    def cache(self) -> ComparisonCache:
        return self._cache

    def compare_files(
        self,
        content1: bytes,
        name1: str | None,
        content2: bytes,
        name2: str | None,
        header_row: int = 1,
    ) -> ComparisonOutcome:
        """Compare two workbook files given their raw content.

        Raises:
            UnsupportedFormatError: If either file is not a supported workbook.
            WorkbookReadError: If either file cannot be decoded.
        """
        header_row = clamp_header_row(header_row)
        key = ComparisonCache.make_key(content1, content2, header_row)

        with timed_operation(logger, "compare_files") as metrics:
            cached = self._cache.get(key)
            if cached is not None:
                metrics.cache_hit = True
                metrics.differences_found = cached.result.total_differences
                return replace(cached, cache_hit=True)

            self._detector.detect_from_content(content1, filename=name1)
            self._detector.detect_from_content(content2, filename=name2)
            workbook1 = self._loader.load_from_bytes(content1, filename=name1)
            workbook2 = self._loader.load_from_bytes(content2, filename=name2)

            result = WorkbookComparator(header_row).compare(workbook1, workbook2)
            metrics.sheets_compared = len(result.sheets)
            metrics.differences_found = result.total_differences

            outcome = ComparisonOutcome(
                result=result,
                file1_sheet_count=len(workbook1.sheet_names),
                file2_sheet_count=len(workbook2.sheet_names),
            )
            self._cache.put(key, outcome)
            return outcome
