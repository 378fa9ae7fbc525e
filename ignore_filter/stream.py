"""
Stream stage dropping the files that rule files exclude.

Records are checked against an IgnoreResolver shared by the whole stream, so
each directory's rule files are read once no matter how many records it holds.
"""

import asyncio
from typing import AsyncIterable, AsyncIterator, Iterable, List, Optional, Union

from ignore_filter.config import FileRecord, FilterError, FilterOptions
from ignore_filter.ignore import IgnoreResolver
from ignore_filter.ignore.constants import DEFAULT_CONCURRENCY, PLUGIN_NAME
from ignore_filter.utils import get_logger

logger = get_logger(PLUGIN_NAME)


class FileFilterStage:
    """Per-record filter over one resolver"""

    def __init__(self, options: Optional[FilterOptions] = None,
                 resolver: Optional[IgnoreResolver] = None):
        self.options = options or FilterOptions.from_options()
        self.resolver = resolver or IgnoreResolver(self.options.filenames)
        self.forwarded = 0
        self.dropped = 0

    async def process(self, record: FileRecord) -> Optional[FileRecord]:
        """
        Filter one record

        Args:
            record: File record to check

        Returns:
            The record if it is included, None if it is dropped

        Raises:
            FilterError: wrapping any resolution failure
        """
        if self.options.exclude_ignore_file and self.options.is_rule_file(record):
            logger.trace(f"Dropping rule file {record.path}")
            self.dropped += 1
            return None

        try:
            included = await self.resolver.check(record.path, self.options.max_parent(record))
        except Exception as e:
            raise FilterError(e) from e

        if included:
            self.forwarded += 1
            return record
        logger.trace(f"Dropping excluded file {record.path}")
        self.dropped += 1
        return None

    async def close(self):
        """Finish the stream and release the resolver cache"""
        try:
            await self.resolver.cleanup()
        except Exception as e:
            raise FilterError(e) from e
        logger.debug(f"Filter finished: {self.forwarded} forwarded, {self.dropped} dropped")

    async def __aenter__(self) -> 'FileFilterStage':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()


async def _batches(records: Union[Iterable[FileRecord], AsyncIterable[FileRecord]],
                   size: int) -> AsyncIterator[List[FileRecord]]:
    batch: List[FileRecord] = []
    if hasattr(records, '__aiter__'):
        async for record in records:
            batch.append(record)
            if len(batch) >= size:
                yield batch
                batch = []
    else:
        for record in records:
            batch.append(record)
            if len(batch) >= size:
                yield batch
                batch = []
    if batch:
        yield batch


async def filter_files(records: Union[Iterable[FileRecord], AsyncIterable[FileRecord]],
                       options: Optional[FilterOptions] = None,
                       concurrency: int = DEFAULT_CONCURRENCY,
                       stage: Optional[FileFilterStage] = None) -> AsyncIterator[FileRecord]:
    """
    Filter a stream of file records

    Up to `concurrency` records are checked at once; included records are
    yielded in input order.

    Args:
        records: Sync or async iterable of records
        options: Filter options (defaults apply when omitted)
        concurrency: Number of records checked concurrently
        stage: Stage to use instead of one built from `options`

    Yields:
        Included records

    Raises:
        FilterError: on the first record whose resolution fails
    """
    if concurrency < 1:
        raise FilterError(f"concurrency must be at least 1. Got {concurrency}.")

    stage = stage or FileFilterStage(options)
    async with stage:
        async for batch in _batches(records, concurrency):
            # Let the whole batch settle before failing so nothing outlives close()
            results = await asyncio.gather(
                *(stage.process(record) for record in batch), return_exceptions=True
            )
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            for result in results:
                if result is not None:
                    yield result
