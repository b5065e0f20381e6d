"""Root error class for logship."""

from __future__ import annotations


class BaseError(Exception):
    """Root of the logship error hierarchy.

    ``code`` is a stable slug callers can branch on without parsing the
    message; subclasses set ``default_code``.
    """

    default_code: str = "logship_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


__all__ = ["BaseError"]
