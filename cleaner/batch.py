"""Order-preserving parallel cleaning of many URLs."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable

from core.config import CleanerConfig
from core.errors import InvalidUrl
from core.models import EffectiveRuleSet
from cleaner.engine import clean_url


@dataclass(frozen=True)
class CleanResult:
    """Outcome for one input, tagged with its position in the batch."""

    index: int
    input: str
    output: str | None = None
    error: InvalidUrl | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _clean_one(
    index: int,
    raw: str,
    effective: EffectiveRuleSet,
    strip_fragment_params: bool,
) -> CleanResult:
    try:
        output = clean_url(raw, effective, strip_fragment_params=strip_fragment_params)
    except InvalidUrl as exc:
        return CleanResult(index=index, input=raw, error=exc)
    return CleanResult(index=index, input=raw, output=output)


def clean_batch(
    urls: Iterable[str],
    effective: EffectiveRuleSet,
    *,
    max_workers: int | None = None,
    strip_fragment_params: bool = False,
) -> list[CleanResult]:
    """
    Clean many URLs in parallel.

    Workers share the immutable rule set without locking. Results complete in
    any order but are returned sorted by input index; InvalidUrl failures are
    recorded per item and never abort the batch.
    """
    items = list(urls)
    if not items:
        return []

    workers = CleanerConfig.DEFAULT_BATCH_WORKERS if max_workers is None else max_workers
    if workers < 1:
        raise ValueError("max_workers must be >= 1")

    with ThreadPoolExecutor(max_workers=min(workers, len(items))) as pool:
        futures = [
            pool.submit(_clean_one, index, raw, effective, strip_fragment_params)
            for index, raw in enumerate(items)
        ]
        results = [future.result() for future in as_completed(futures)]

    results.sort(key=lambda result: result.index)
    return results
