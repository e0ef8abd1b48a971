from typing import Any, Dict, Optional


class DebinstallException(Exception):
    """Base class for all debinstall exceptions"""

    _msg_fmt = "An unknown exception occurred."

    def __init__(self, message: Optional[str] = None, **kwargs: Dict[str, Any]):
        if not message:
            message = self._msg_fmt % kwargs

        super().__init__(message)


class BusConnectionError(DebinstallException):
    _msg_fmt = "Could not connect to the system bus."


class AuthorizationError(DebinstallException):
    """The authorization check did not produce a positive decision.

    Subclasses tell apart "could not determine" (subject or check errors) from
    an explicit denial by the authority.
    """

    _msg_fmt = "Authorization failed."


class SubjectConstructionError(AuthorizationError):
    _msg_fmt = "Could not create polkit subject."


class AuthorizationCheckError(AuthorizationError):
    _msg_fmt = "Could not check polkit authorization."


class PermissionDenied(AuthorizationError):
    _msg_fmt = "Operation not permitted by polkit."


class InstallError(DebinstallException):
    _msg_fmt = "Error during installation."


class TransactionRunError(InstallError):
    _msg_fmt = "Error running transaction."


class PackageQueryError(DebinstallException):
    _msg_fmt = "Could not query package details."


def describe_error(exc: BaseException) -> str:
    """Format an error for presentation to the user"""
    kinds = {
        BusConnectionError: "connection error",
        PermissionDenied: "permission denied",
        AuthorizationError: "authorization error",
        InstallError: "installation error",
        PackageQueryError: "package query error",
    }
    # Subclasses are described like their closest known ancestor
    kind = next((kinds[cls] for cls in type(exc).__mro__ if cls in kinds), "error")

    message = str(exc)
    cause = exc.__cause__
    if cause is not None and str(cause):
        message = f"{message} ({cause})"

    return f"{kind}: {message}"
