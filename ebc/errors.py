from __future__ import annotations

from typing import Iterable


class EbcError(Exception):
    pass


class RPCConnectionError(EbcError):
    """The endpoint cannot be dialed (empty, malformed or unsupported scheme)."""


class RPCCallError(EbcError):
    """A remote call failed or returned something we could not decode."""

    def __init__(self, message: str, endpoint: str | None = None, code: int | None = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.code = code


class MultiError(EbcError):
    """Aggregate of independent failures.

    Every contributing error is kept, in the order it was reported.
    """

    def __init__(self, errors: Iterable[BaseException]):
        self.errors: tuple[BaseException, ...] = tuple(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    @classmethod
    def combine(cls, *errors: BaseException | None) -> MultiError | None:
        """Build one aggregate from the non-None errors, or return None."""
        flat: list[BaseException] = []
        for err in errors:
            if err is None:
                continue
            if isinstance(err, cls):
                flat.extend(err.errors)
            else:
                flat.append(err)
        if not flat:
            return None
        return cls(flat)


class ConfigurationError(MultiError):
    pass


class UpstreamError(MultiError):
    pass
