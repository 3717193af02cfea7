#!/usr/bin/env python3
"""
Camera Access Check
Confirms this process may use the camera: checks the macOS camera permission,
asks for it if it was never granted or refused, then opens the default camera
for a couple of seconds.

Usage:
    python main.py

Exit status is 0 when camera access is confirmed and 1 otherwise.

Note: On macOS the permission belongs to the terminal application running
this script (Terminal, iTerm, ...), not to Python itself.
"""

import logging
import sys

from config import LOG_DATEFMT, LOG_FORMAT, LOG_LEVEL


def main():
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, datefmt=LOG_DATEFMT)

    from access_gate import exit_code, run
    from camera_permission import default_permissions
    from capture_session import default_capture

    failure = run(default_permissions(), default_capture())
    sys.exit(exit_code(failure))


if __name__ == "__main__":
    main()
