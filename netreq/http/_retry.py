'''
bounded retry policy for netreq requests

Attempts are immediate: no delay, no backoff, no jitter. Once every
attempt has failed the last `NetreqError` is raised unchanged.
'''

import functools
import logging
from collections.abc import Callable
from typing import ParamSpec, TypeVar

from netreq.http._errors import NetreqError

P = ParamSpec("P")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class retry_policy:

    def __init__(
        self,
        *,
        retries: int = 3,
        retry_permanent_errors: bool = True,
    ) -> None:
        '''
        Parameters
        ----------
        retries : int, optional
            The number of attempts after the first one, by default 3
        retry_permanent_errors : bool, optional
            Whether errors that can never succeed on a retry
            (`retryable = False`) still consume attempts, by default True
        '''
        if retries < 0:
            raise ValueError(f'retries must be >= 0, got {retries}')
        self.retries: int = retries
        self.retry_permanent_errors: bool = retry_permanent_errors

    @property
    def attempts(self) -> int:
        return self.retries + 1

    def should_retry(self, exc: NetreqError) -> bool:
        return self.retry_permanent_errors or exc.retryable

    def call_with_retries(
        self,
        func: Callable[P, R],
        *args: P.args,
        **kwargs: P.kwargs
    ) -> R:
        name = getattr(func, '__name__', repr(func))
        for attempt_no in range(1, self.attempts + 1):
            try:
                return func(*args, **kwargs)
            except NetreqError as exc:
                if attempt_no == self.attempts or not self.should_retry(exc):
                    logger.error(
                        f'{name} failed after {attempt_no} attempt(s): {exc}'
                    )
                    raise
                logger.warning(
                    f'{name} attempt {attempt_no}/{self.attempts} failed: {exc}'
                )

        raise AssertionError('unreachable')

    def __call__(self, func: Callable[P, R]) -> Callable[P, R]:

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            return self.call_with_retries(func, *args, **kwargs)

        return wrapper
