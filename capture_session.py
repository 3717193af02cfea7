"""
Capture device discovery and short-lived capture sessions.
Wraps AVFoundation on macOS and OpenCV elsewhere behind one small interface:
find the default device, build a session for it, start it, stop it.
"""

import logging
import platform
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol

import cv2

from config import OPENCV_CAMERA_INDEX

logger = logging.getLogger(__name__)


class CaptureSession(Protocol):
    failure_reason: Optional[str]

    def start(self) -> bool:
        ...

    def stop(self) -> None:
        ...


class CaptureBackend(Protocol):
    def default_device(self) -> Optional[Any]:
        ...

    def open_session(self, device: Any) -> "SessionResult":
        ...


@dataclass
class SessionResult:
    """Either a ready (not yet started) session or the reason it could not be built."""
    session: Optional[CaptureSession] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.session is not None


@contextmanager
def running_session(session: CaptureSession) -> Iterator[bool]:
    """
    Start the session and yield whether it is running.
    The session is stopped on every exit path, including exceptions
    raised inside the block.
    """
    started = False
    try:
        started = session.start()
        yield started
    finally:
        session.stop()
        logger.debug(f"Capture session stopped (was running: {started})")


def _describe_error(error) -> str:
    if error is None:
        return "unknown error"
    try:
        return str(error.localizedDescription())
    except AttributeError:
        return str(error)


class AVFoundationSession:
    """An AVCaptureSession with one device input attached."""

    def __init__(self, session):
        self._session = session
        self.failure_reason: Optional[str] = None

    def start(self) -> bool:
        try:
            self._session.startRunning()
        except Exception as e:
            self.failure_reason = str(e)
            return False

        if not self._session.isRunning():
            self.failure_reason = "the capture session did not start running"
            return False
        return True

    def stop(self) -> None:
        self._session.stopRunning()


class AVFoundationCapture:
    """
    Capture subsystem on macOS through PyObjC.

    Args:
        framework: Module exposing AVCaptureDevice, AVCaptureDeviceInput,
            AVCaptureSession and AVMediaTypeVideo. Defaults to the
            AVFoundation bridge, imported on first use.
    """

    def __init__(self, framework=None):
        self._framework = framework

    def _av(self):
        if self._framework is None:
            import AVFoundation  # type: ignore
            self._framework = AVFoundation
        return self._framework

    def default_device(self):
        try:
            av = self._av()
            device = av.AVCaptureDevice.defaultDeviceWithMediaType_(av.AVMediaTypeVideo)
        except Exception as e:
            logger.error(f"Could not look up the default video device: {e}")
            return None

        if device is not None:
            try:
                name = device.localizedName()
            except Exception as e:
                name = f"<name unavailable: {e}>"
            logger.info(f"Default video device: {name}")
        return device

    def open_session(self, device) -> SessionResult:
        try:
            av = self._av()
            device_input, error = av.AVCaptureDeviceInput.deviceInputWithDevice_error_(device, None)
            if device_input is None:
                return SessionResult(error=_describe_error(error))

            session = av.AVCaptureSession.alloc().init()
            if not session.canAddInput_(device_input):
                return SessionResult(error="the capture session cannot accept the camera input")
            session.addInput_(device_input)
        except Exception as e:
            logger.error(f"AVFoundation session setup raised: {e}")
            return SessionResult(error=str(e))

        return SessionResult(session=AVFoundationSession(session))


class OpenCVSession:
    """OpenCV capture on a camera index; running means a frame could be read."""

    def __init__(self, camera_index: int):
        self.camera_index = camera_index
        self.failure_reason: Optional[str] = None
        self._cap = None

    def start(self) -> bool:
        try:
            self._cap = cv2.VideoCapture(self.camera_index)
            if not self._cap.isOpened():
                self.failure_reason = f"camera {self.camera_index} could not be opened"
                return False

            ret, _ = self._cap.read()
            if not ret:
                self.failure_reason = "camera opened but cannot read frames"
                return False
        except cv2.error as e:
            self.failure_reason = str(e)
            return False
        return True

    def stop(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


class OpenCVCapture:
    """Capture subsystem for hosts without AVFoundation."""

    def __init__(self, camera_index: int = OPENCV_CAMERA_INDEX):
        self.camera_index = camera_index

    def default_device(self) -> Optional[int]:
        cap = cv2.VideoCapture(self.camera_index)
        try:
            if not cap.isOpened():
                return None
        finally:
            cap.release()
        return self.camera_index

    def open_session(self, device: int) -> SessionResult:
        return SessionResult(session=OpenCVSession(device))


def default_capture(system: Optional[str] = None) -> CaptureBackend:
    """Pick the capture subsystem for the running platform."""
    system = system or platform.system()
    if system == "Darwin":
        return AVFoundationCapture()
    logger.info(f"Using OpenCV capture (camera index {OPENCV_CAMERA_INDEX}) on {system}")
    return OpenCVCapture()
