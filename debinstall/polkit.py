"""Authorization gate backed by the polkit authority.

Decides whether a process may perform a privileged action by asking
``org.freedesktop.PolicyKit1`` over the system bus. The caller's PID is an
explicit parameter; PID 0 is treated as already privileged and never reaches
the authority.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dbus_fast import Variant

from debinstall import bus as dbus_util
from debinstall import debinstall_logging, introspection
from debinstall.common.exception import AuthorizationCheckError, SubjectConstructionError

logger = debinstall_logging.init_logging("polkit")

POLKIT_BUS_NAME = "org.freedesktop.PolicyKit1"
POLKIT_AUTHORITY_PATH = "/org/freedesktop/PolicyKit1/Authority"
POLKIT_AUTHORITY_INTERFACE = "org.freedesktop.PolicyKit1.Authority"

# Action declared by aptdaemon for installing a local package file
INSTALL_FILE_ACTION = "org.debian.apt.install-file"

UINT32_MAX = 0xFFFFFFFF
UINT64_MAX = 0xFFFFFFFFFFFFFFFF
INT32_MIN = -0x80000000
INT32_MAX = 0x7FFFFFFF


class CheckAuthorizationFlags(enum.IntFlag):
    NONE = 0
    ALLOW_USER_INTERACTION = 1


@dataclass(frozen=True)
class AuthorizationResult:
    """Decoded reply of CheckAuthorization.

    Attributes:
        is_authorized: Whether the subject is authorized for the action
        is_challenge: Whether the subject could be authorized after authentication
        details: Extra details returned by the authority
    """

    is_authorized: bool
    is_challenge: bool = False
    details: Dict[str, str] = field(default_factory=dict)


def _in_range(value: Any, low: int, high: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high


def unix_process_subject(pid: int, start_time: Optional[int] = None, uid: Optional[int] = None) -> List[Any]:
    """Build a polkit ``unix-process`` subject for a PID.

    Args:
        pid: Process identifier of the subject
        start_time: Process start time, omitted from the subject when None
        uid: User id owning the process, omitted from the subject when None

    Returns:
        The subject as a D-Bus ``(sa{sv})`` structure

    Raises:
        SubjectConstructionError: If any value does not fit its D-Bus type
    """
    if not _in_range(pid, 0, UINT32_MAX):
        raise SubjectConstructionError(f"Could not create polkit subject: invalid pid {pid!r}")
    if start_time is not None and not _in_range(start_time, 0, UINT64_MAX):
        raise SubjectConstructionError(f"Could not create polkit subject: invalid start time {start_time!r}")
    if uid is not None and not _in_range(uid, INT32_MIN, INT32_MAX):
        raise SubjectConstructionError(f"Could not create polkit subject: invalid uid {uid!r}")

    subject_details = {"pid": Variant("u", pid)}
    if start_time is not None:
        subject_details["start-time"] = Variant("t", start_time)
    if uid is not None:
        subject_details["uid"] = Variant("i", uid)

    return ["unix-process", subject_details]


async def check_authorization(
    bus: Any,
    subject: List[Any],
    action_id: str,
    details: Optional[Dict[str, str]] = None,
    flags: CheckAuthorizationFlags = CheckAuthorizationFlags.ALLOW_USER_INTERACTION,
    cancellation_id: str = "",
) -> AuthorizationResult:
    """Ask the polkit authority whether ``subject`` may perform ``action_id``.

    The call waits for as long as the authority needs, including any
    interactive authentication it decides to show.

    Raises:
        AuthorizationCheckError: If the authority cannot be reached or the call
            fails; this is never reported as a negative decision
    """
    result = dbus_util.get_interface(
        bus, POLKIT_BUS_NAME, POLKIT_AUTHORITY_PATH, POLKIT_AUTHORITY_INTERFACE, introspection.POLKIT_AUTHORITY
    )
    if isinstance(result, dbus_util.Unavailable):
        raise AuthorizationCheckError(f"Could not check polkit authorization: {result.reason}") from result.error

    try:
        reply = await result.interface.call_check_authorization(
            subject, action_id, details or {}, int(flags), cancellation_id
        )
        is_authorized, is_challenge, reply_details = reply
    except Exception as e:
        logger.error("CheckAuthorization for %s failed: %s", action_id, e)
        raise AuthorizationCheckError() from e

    return AuthorizationResult(bool(is_authorized), bool(is_challenge), dict(reply_details))


async def check_permission(bus: Any, pid: int, action_id: str = INSTALL_FILE_ACTION) -> bool:
    """Decide whether process ``pid`` may perform ``action_id``.

    Args:
        bus: Connected system bus
        pid: Process identifier of the caller
        action_id: polkit action to check

    Returns:
        True if permitted, False if the authority denied the action

    Raises:
        SubjectConstructionError: If no subject can be built for ``pid``
        AuthorizationCheckError: If the authority could not decide
    """
    if pid == 0:
        logger.info("Authorization GRANTED: pid=0, action=%s, reason=superuser", action_id)
        return True

    subject = unix_process_subject(pid)
    result = await check_authorization(bus, subject, action_id)

    if result.is_authorized:
        logger.info("Authorization GRANTED: pid=%d, action=%s", pid, action_id)
    else:
        logger.warning(
            "Authorization DENIED: pid=%d, action=%s, challenge=%s", pid, action_id, result.is_challenge
        )

    return result.is_authorized
