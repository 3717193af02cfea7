"""
Camera authorization state and the OS permission subsystem.
Reads the current video-capture authorization and, when it is still
undetermined, shows the one-shot consent prompt and waits for the answer.
"""

import logging
import platform
import threading
from enum import Enum
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class AuthorizationStatus(Enum):
    """Authorization level the OS tracks for video capture."""
    AUTHORIZED = "authorized"
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"
    UNKNOWN = "unknown"


# AVAuthorizationStatus enum values
# 0 = notDetermined, 1 = restricted, 2 = denied, 3 = authorized
_AV_STATUS_CODES = {
    0: AuthorizationStatus.NOT_DETERMINED,
    1: AuthorizationStatus.RESTRICTED,
    2: AuthorizationStatus.DENIED,
    3: AuthorizationStatus.AUTHORIZED,
}


def status_from_code(code) -> AuthorizationStatus:
    """Map a raw AVAuthorizationStatus value, newer OS values become UNKNOWN."""
    try:
        return _AV_STATUS_CODES.get(int(code), AuthorizationStatus.UNKNOWN)
    except (TypeError, ValueError):
        return AuthorizationStatus.UNKNOWN


class CameraPermissions(Protocol):
    """Anything that can report and request camera authorization."""

    def get_status(self) -> AuthorizationStatus:
        ...

    def request_access(self) -> bool:
        ...


class AVFoundationPermissions:
    """
    Camera permission checks on macOS through PyObjC.

    Args:
        framework: Module exposing AVCaptureDevice and AVMediaTypeVideo.
            Defaults to the AVFoundation bridge, imported on first use.
    """

    def __init__(self, framework=None):
        self._framework = framework

    def _av(self):
        if self._framework is None:
            import AVFoundation  # type: ignore
            self._framework = AVFoundation
        return self._framework

    def get_status(self) -> AuthorizationStatus:
        try:
            av = self._av()
            code = av.AVCaptureDevice.authorizationStatusForMediaType_(av.AVMediaTypeVideo)
        except Exception as e:
            logger.error(f"Could not check camera permission: {e}")
            return AuthorizationStatus.UNKNOWN

        logger.debug(f"AVAuthorizationStatus for video: {code}")
        return status_from_code(code)

    def request_access(self) -> bool:
        """
        Show the system permission dialog and block until the user answers.
        There is no timeout, a human has to respond.
        """
        semaphore = threading.Semaphore(0)
        outcome = {"granted": False}

        def completion_handler(granted):
            # Runs on an AVFoundation dispatch queue, not the calling thread
            outcome["granted"] = bool(granted)
            semaphore.release()

        try:
            av = self._av()
            av.AVCaptureDevice.requestAccessForMediaType_completionHandler_(
                av.AVMediaTypeVideo, completion_handler
            )
        except Exception as e:
            logger.error(f"Could not request camera permission via AVFoundation: {e}")
            return False

        logger.info("Waiting for the camera permission prompt to be answered")
        semaphore.acquire()
        return outcome["granted"]


class HostPermissions:
    """Non-macOS systems have no camera consent prompt."""

    def get_status(self) -> AuthorizationStatus:
        return AuthorizationStatus.AUTHORIZED

    def request_access(self) -> bool:
        return True


def default_permissions(system: Optional[str] = None) -> CameraPermissions:
    """Pick the permission subsystem for the running platform."""
    system = system or platform.system()
    if system == "Darwin":
        return AVFoundationPermissions()
    logger.info(f"No camera permission subsystem on {system}, assuming access")
    return HostPermissions()
