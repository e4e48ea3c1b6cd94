"""
Convenience launcher for the Mantis GUI.

Behaviour:
- If not already running inside a virtual environment, create ``.venv`` in the
  project root (if it does not exist), then re-run this script inside it.
- Inside the venv:
  - If mantis_gui is importable: start the GUI directly (no pip install).
  - Otherwise: install the package with pip install -e .[dev,gui], then start the GUI.
"""
from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


ROOT = Path(__file__).resolve().parent
VENV_DIR = ROOT / ".venv"


def in_virtualenv() -> bool:
    """Return True if we're currently running inside any virtualenv."""
    return sys.prefix != getattr(sys, "base_prefix", sys.prefix) or bool(
        os.environ.get("VIRTUAL_ENV")
    )


def venv_python_path() -> Path:
    if os.name == "nt":
        return VENV_DIR / "Scripts" / "python.exe"
    return VENV_DIR / "bin" / "python"


def gui_installed() -> bool:
    """Return True if mantis_gui and PySide6 are importable."""
    try:
        import mantis_gui.main  # noqa: F401
        return True
    except ImportError:
        return False


def ensure_venv_and_rerun() -> None:
    """Create .venv if needed and re-run this script inside it."""
    if not VENV_DIR.exists():
        print(f"Creating virtual environment at {VENV_DIR} ...")
        subprocess.check_call([sys.executable, "-m", "venv", str(VENV_DIR)], cwd=str(ROOT))

    py = venv_python_path()
    print(f"Re-running inside virtualenv using {py} ...")
    subprocess.check_call([str(py), str(ROOT / "run.py"), "--inside-venv"], cwd=str(ROOT))


def inside_venv_main() -> None:
    if not gui_installed():
        print("Installing mantis-game with dev and GUI extras into virtualenv ...")
        subprocess.check_call(
            [sys.executable, "-m", "pip", "install", "-e", ".[dev,gui]"],
            cwd=str(ROOT),
        )

    subprocess.check_call([sys.executable, "-m", "mantis_gui.main"], cwd=str(ROOT))


def main() -> None:
    if "--inside-venv" in sys.argv or in_virtualenv():
        inside_venv_main()
    else:
        ensure_venv_and_rerun()


if __name__ == "__main__":
    main()
