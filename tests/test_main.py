"""End-to-end runs of the entry point with fake OS subsystems."""

import pytest

import access_gate
import camera_permission
import capture_session
import config
import main
from camera_permission import AuthorizationStatus


@pytest.fixture
def wire(monkeypatch):
    def _wire(permissions, capture):
        monkeypatch.setattr(camera_permission, "default_permissions", lambda: permissions)
        monkeypatch.setattr(capture_session, "default_capture", lambda: capture)
        monkeypatch.setattr(access_gate, "SESSION_DWELL_SECONDS", 0)
    return _wire


class TestMain:

    def test_exit_zero_when_access_confirmed(self, wire, make_permissions, make_capture, capsys):
        capture = make_capture()
        wire(make_permissions(AuthorizationStatus.AUTHORIZED), capture)
        with pytest.raises(SystemExit) as exc:
            main.main()
        assert exc.value.code == 0
        assert capture.session.stop_calls == 1
        assert "Camera session started." in capsys.readouterr().out

    def test_exit_one_when_denied(self, wire, make_permissions, make_capture, capsys):
        wire(make_permissions(AuthorizationStatus.DENIED), make_capture())
        with pytest.raises(SystemExit) as exc:
            main.main()
        assert exc.value.code == 1
        assert "To manually enable camera access:" in capsys.readouterr().out

    def test_exit_one_when_no_device(self, wire, make_permissions, make_capture):
        wire(make_permissions(AuthorizationStatus.AUTHORIZED), make_capture(device=None))
        with pytest.raises(SystemExit) as exc:
            main.main()
        assert exc.value.code == 1


class TestConfig:

    def test_env_file_wins_over_environment(self, monkeypatch):
        monkeypatch.setattr(config, "_env_file_vars", {"LOG_LEVEL": "DEBUG"})
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        assert config.get_env("LOG_LEVEL") == "DEBUG"

    def test_environment_then_default(self, monkeypatch):
        monkeypatch.setattr(config, "_env_file_vars", {})
        monkeypatch.delenv("OPENCV_CAMERA_INDEX", raising=False)
        assert config.get_env("OPENCV_CAMERA_INDEX", "0") == "0"
        monkeypatch.setenv("OPENCV_CAMERA_INDEX", "2")
        assert config.get_env("OPENCV_CAMERA_INDEX", "0") == "2"

    def test_dotenv_file_is_parsed(self, monkeypatch, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text('# local overrides\nLOG_LEVEL="debug"\nOPENCV_CAMERA_INDEX=1\n')
        monkeypatch.setattr(config, "ENV_PATH", env_file)
        assert config._load_env_file() == {"LOG_LEVEL": "debug", "OPENCV_CAMERA_INDEX": "1"}

    @pytest.mark.parametrize("name, expected", [
        ("debug", "DEBUG"),
        (" Warning ", "WARNING"),
        ("verbose", "INFO"),
        ("", "INFO"),
    ])
    def test_log_level_falls_back_to_info(self, name, expected):
        assert config.resolve_log_level(name) == expected

    def test_main_runs_with_unknown_log_level(self, wire, make_permissions, make_capture, monkeypatch):
        monkeypatch.setattr(config, "_env_file_vars", {"LOG_LEVEL": "chatty"})
        monkeypatch.setattr(main, "LOG_LEVEL", config.resolve_log_level(config.get_env("LOG_LEVEL", "INFO")))
        wire(make_permissions(AuthorizationStatus.DENIED), make_capture())
        with pytest.raises(SystemExit) as exc:
            main.main()
        assert exc.value.code == 1

    def test_missing_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.setattr(config, "ENV_PATH", tmp_path / "missing.env")
        assert config._load_env_file() == {}
