"""
Producer invocation helpers.

Producers may be plain callables or coroutine functions.
"""

import inspect
from typing import Any, List, Sequence

from staycache.exceptions import MalformedInput
from staycache.models.cache_entry import BatchProducer, Producer


async def call_producer(producer: Producer) -> Any:
    """Invoke a single-value producer and await its result if needed."""
    result = producer()
    if inspect.isawaitable(result):
        result = await result
    return result


async def call_batch_producer(
    producer: BatchProducer, missing_keys: Sequence[str]
) -> List[Any]:
    """
    Invoke a batch producer for the missing keys.

    Args:
        producer: Callable receiving the missing keys
        missing_keys: Keys no tier could serve

    Returns:
        Values positionally aligned with missing_keys

    Raises:
        MalformedInput: If the producer returns the wrong number of values
    """
    result = producer(list(missing_keys))
    if inspect.isawaitable(result):
        result = await result
    values = list(result) if result is not None else []
    if len(values) != len(missing_keys):
        raise MalformedInput(
            f"Batch producer returned {len(values)} values "
            f"for {len(missing_keys)} keys"
        )
    return values
