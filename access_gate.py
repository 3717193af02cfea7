"""
Camera access gate.
Checks (and if needed requests) camera permission, then proves access by
running a capture session for a short dwell time.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from camera_permission import AuthorizationStatus, CameraPermissions, default_permissions
from capture_session import CaptureBackend, running_session
from config import SESSION_DWELL_SECONDS

logger = logging.getLogger(__name__)

REMEDIATION_STEPS = [
    "1. Open 'System Settings' (or 'System Preferences' on older macOS versions).",
    "2. Go to 'Privacy & Security' > 'Camera'.",
    "3. Find your terminal application (e.g., Terminal, iTerm).",
    "4. Ensure the checkbox next to your terminal application is checked.",
]


class AccessFailure(Enum):
    """Why a run did not confirm camera access."""
    PERMISSION_DENIED = "permission_denied"
    PERMISSION_UNKNOWN = "permission_unknown"
    DEVICE_UNAVAILABLE = "device_unavailable"
    SESSION_FAILURE = "session_failure"


def resolve_authorization(permissions: CameraPermissions) -> AuthorizationStatus:
    """
    Report the current authorization and settle NOT_DETERMINED by prompting.
    The result is never NOT_DETERMINED: a prompt answer becomes AUTHORIZED or DENIED.
    """
    status = permissions.get_status()
    logger.debug(f"Camera authorization status: {status.value}")

    if status is AuthorizationStatus.AUTHORIZED:
        print("Camera access is authorized.")
    elif status is AuthorizationStatus.NOT_DETERMINED:
        print("Camera access is not determined. Requesting access...")
        if permissions.request_access():
            print("Camera access granted.")
            status = AuthorizationStatus.AUTHORIZED
        else:
            print("Camera access denied.")
            status = AuthorizationStatus.DENIED
    elif status is AuthorizationStatus.DENIED:
        print("Camera access is denied. Please enable it in System Settings.")
    elif status is AuthorizationStatus.RESTRICTED:
        print("Camera access is restricted.")
    else:
        print("Unknown camera access status.")
    return status


def ensure_camera_access(permissions: Optional[CameraPermissions] = None) -> bool:
    """
    Return True iff the process may use the camera after this call.
    Uses the running platform's permission subsystem unless one is given.
    """
    if permissions is None:
        permissions = default_permissions()
    return resolve_authorization(permissions) is AuthorizationStatus.AUTHORIZED


def print_remediation():
    print("Camera access was not granted.")
    print("To manually enable camera access:")
    for step in REMEDIATION_STEPS:
        print(step)


def smoke_test(
    capture: CaptureBackend,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[AccessFailure]:
    """Open the default camera, keep the session running briefly, then stop it."""
    print("Accessing the camera...")

    device = capture.default_device()
    if device is None:
        print("No camera device found.")
        return AccessFailure.DEVICE_UNAVAILABLE

    result = capture.open_session(device)
    if not result.ok:
        print(f"Failed to start camera session: {result.error}")
        return AccessFailure.SESSION_FAILURE

    session = result.session
    with running_session(session) as started:
        if not started:
            print(f"Failed to start camera session: {session.failure_reason}")
            return AccessFailure.SESSION_FAILURE

        print("Camera session started.")
        sleep(SESSION_DWELL_SECONDS)

    print("Camera session stopped.")
    return None


def run(
    permissions: CameraPermissions,
    capture: CaptureBackend,
    sleep: Callable[[float], None] = time.sleep,
) -> Optional[AccessFailure]:
    """Full check: permission first, then the capture smoke test."""
    status = resolve_authorization(permissions)
    if status is not AuthorizationStatus.AUTHORIZED:
        print_remediation()
        if status is AuthorizationStatus.UNKNOWN:
            return AccessFailure.PERMISSION_UNKNOWN
        return AccessFailure.PERMISSION_DENIED

    failure = smoke_test(capture, sleep=sleep)
    if failure is not None:
        logger.warning(f"Camera smoke test failed: {failure.value}")
    return failure


def exit_code(failure: Optional[AccessFailure]) -> int:
    return 0 if failure is None else 1
