"""
Batch Quote Loader - Bounded-Concurrency Bulk Fetch.

Splits a code list into fixed-size batches and fetches them on a thread
pool, reporting progress as batches complete.

Design Notes:
    - At most ``concurrency`` batches in flight
    - Results are concatenated in input batch order regardless of
      completion order
    - A failed batch fails the whole load with QuoteFetchError
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Callable, List, Optional, Sequence

from quote_screener.domain.value_objects import ProgressCallback, RawRecord
from quote_screener.resilience.error_handler import QuoteFetchError

logger = logging.getLogger(__name__)

BatchFetcher = Callable[[List[str]], List[RawRecord]]


def chunk(codes: Sequence[str], size: int) -> List[List[str]]:
    """Split codes into consecutive batches of at most ``size``."""
    if size <= 0:
        raise ValueError(f"batch size must be positive, got {size}")
    return [list(codes[i : i + size]) for i in range(0, len(codes), size)]


class BatchQuoteLoader:
    """Fetches quotes for many codes through a per-batch fetch function."""

    def __init__(
        self,
        fetch_batch: BatchFetcher,
        batch_size: int = 300,
        concurrency: int = 5,
    ) -> None:
        """
        Initialize loader.

        Args:
            fetch_batch: Fetches raw records for one batch of codes
            batch_size: Codes per batch
            concurrency: Maximum batches in flight
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if concurrency <= 0:
            raise ValueError(f"concurrency must be positive, got {concurrency}")
        self.fetch_batch = fetch_batch
        self.batch_size = batch_size
        self.concurrency = concurrency

    def load(
        self,
        codes: Sequence[str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[RawRecord]:
        """
        Fetch records for all codes.

        Args:
            codes: Codes to fetch
            on_progress: Called with (completed_batches, total_batches)

        Returns:
            Records of all batches in input order

        Raises:
            QuoteFetchError: If any batch fails
        """
        batches = chunk(codes, self.batch_size)
        total = len(batches)
        if total == 0:
            return []

        completed = 0
        progress_lock = Lock()

        def run(batch: List[str]) -> List[RawRecord]:
            nonlocal completed
            records = self.fetch_batch(batch)
            with progress_lock:
                completed += 1
                done = completed
                if on_progress is not None:
                    on_progress(done, total)
            return list(records)

        records: List[RawRecord] = []
        with ThreadPoolExecutor(max_workers=min(self.concurrency, total)) as pool:
            futures: List[Future] = [pool.submit(run, batch) for batch in batches]

            for index, future in enumerate(futures):
                try:
                    records.extend(future.result())
                except Exception as e:
                    for pending in futures:
                        pending.cancel()
                    logger.error(f"Batch {index + 1}/{total} failed: {e}")
                    raise QuoteFetchError(
                        f"Batch {index + 1}/{total} failed: {e}",
                        operation="get_all_quotes",
                    ) from e

        logger.info(f"Loaded {len(records)} records in {total} batches")
        return records
