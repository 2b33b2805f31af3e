"""Bounded retry with linear backoff."""

import time
from collections.abc import Callable
from typing import TypeVar

import click

T = TypeVar("T")

MAX_RETRIES = 3
BASE_DELAY = 0.7  # seconds


class RetryPolicy:
    """Retries a call up to ``max_retries`` extra times.

    Before retry ``n`` (1-based) the policy sleeps ``base_delay * n``, so the
    defaults wait 0.7 s, 1.4 s and 2.1 s. Every exception of the given types
    is retried; once retries are exhausted the last one propagates.
    """

    def __init__(
        self,
        max_retries: int = MAX_RETRIES,
        base_delay: float = BASE_DELAY,
        retry_on: tuple[type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] | None = None,
    ):
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.retry_on = retry_on
        self.sleep = sleep or time.sleep

    def delay(self, retry_number: int) -> float:
        return self.base_delay * retry_number

    def call(self, func: Callable[[], T]) -> T:
        for attempt in range(self.max_retries + 1):
            try:
                return func()
            except self.retry_on as e:
                if attempt == self.max_retries:
                    raise
                wait = self.delay(attempt + 1)
                click.echo(
                    f"Attempt {attempt + 1} failed ({e}); retrying in {wait:.1f}s...",
                    err=True,
                )
                self.sleep(wait)
        raise AssertionError("unreachable")
