# marketplace/utils/retry.py
from tenacity import retry, stop_after_attempt, retry_if_exception_type

from marketplace.domain.errors import DuplicateOrderNumberError
from marketplace.utils.settings import ORDER_NUMBER_ATTEMPTS


def conflict_retry(attempts: int = ORDER_NUMBER_ATTEMPTS):
    """Re-run the wrapped call when a generated order number is already taken.

    No wait between attempts: the caller regenerates whatever collided.
    """
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception_type(DuplicateOrderNumberError),
    )
