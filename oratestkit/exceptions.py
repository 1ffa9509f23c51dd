from typing import Any, Optional

__all__ = (
    "ImproperConfigurationError",
    "OraTestKitError",
    "PrivilegeRequiredError",
    "SQLBuilderError",
    "get_error_code",
)


class OraTestKitError(Exception):
    """Base exception class from which all oratestkit exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``OraTestKitError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(OraTestKitError):
    """Improper Configuration error.

    Raised when the test database settings are incomplete or inconsistent.
    """


class PrivilegeRequiredError(OraTestKitError):
    """An operation needs the DBA privilege that the configuration does not grant."""

    def __init__(self, operation: Optional[str] = None) -> None:
        message = "DBA privilege environment variable is not true!"
        if operation:
            message = f"{message} Without DBA privilege the test cannot {operation}."
        super().__init__(message)


class SQLBuilderError(OraTestKitError):
    """Issues building helper SQL statements."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues building SQL statement."
        super().__init__(message)


def get_error_code(error: BaseException) -> Optional[int]:
    """Extract the numeric Oracle error code from a driver exception.

    Args:
        error: Exception raised by ``oracledb``.

    Returns:
        The error code (``942`` for ORA-00942), or None when the exception does
        not carry a driver error object.
    """
    error_obj = error.args[0] if getattr(error, "args", None) else None
    try:
        code = error_obj.code  # type: ignore[union-attr]
    except AttributeError:
        return None
    return code or None
