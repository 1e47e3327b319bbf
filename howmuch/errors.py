# howmuch/errors.py

"""Exception types shared across howmuch modules."""


class HowMuchError(Exception):
    """Base class for howmuch errors."""


class StoreError(HowMuchError):
    """A persistence backend was unreachable or rejected an operation."""
