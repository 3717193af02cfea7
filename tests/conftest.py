"""Test doubles for the OS permission and capture subsystems."""

import pytest

from camera_permission import AuthorizationStatus
from capture_session import SessionResult


class FakePermissions:
    def __init__(self, status: AuthorizationStatus, grant: bool = False):
        self.status = status
        self.grant = grant
        self.request_calls = 0

    def get_status(self) -> AuthorizationStatus:
        return self.status

    def request_access(self) -> bool:
        self.request_calls += 1
        return self.grant


class FakeSession:
    def __init__(self, starts: bool = True, failure_reason=None):
        self.starts = starts
        self.failure_reason = failure_reason
        self.start_calls = 0
        self.stop_calls = 0

    def start(self) -> bool:
        self.start_calls += 1
        return self.starts

    def stop(self) -> None:
        self.stop_calls += 1


class FakeCapture:
    def __init__(self, device="FaceTime HD Camera", session=None, error=None):
        self.device = device
        self.session = session if session is not None else FakeSession()
        self.error = error
        self.open_calls = 0

    def default_device(self):
        return self.device

    def open_session(self, device) -> SessionResult:
        self.open_calls += 1
        if self.error is not None:
            return SessionResult(error=self.error)
        return SessionResult(session=self.session)


@pytest.fixture
def make_permissions():
    return FakePermissions


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def make_capture():
    return FakeCapture


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def no_sleep():
    return SleepRecorder()
