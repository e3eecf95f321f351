# Launcher that opens the Snake window with the autopilot driving in maze mode.
from __future__ import annotations

try:
    from .snake_gui import run_gui
except ImportError:
    from snake_gui import run_gui


if __name__ == "__main__":
    run_gui()
