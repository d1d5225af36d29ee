"""
Error taxonomy for subscription operations.

- SubscriptionValidationError  -> 400 (bad input, nothing is computed)
- SubscriptionNotFoundError    -> 404 (unknown subscription id)
- SubscriptionStorageError     -> 500 (persistence failure, not retried)
"""


class SubscriptionValidationError(ValueError):
    pass


class SubscriptionNotFoundError(LookupError):
    pass


class SubscriptionStorageError(RuntimeError):
    pass
