import os
from pathlib import Path

APP_DIR_NAME = "Cosmere Character Builder"


def get_writable_dir(sub_dir: str = "logs") -> Path:
    """Get a writable directory path, preferring the backend root and falling back to AppData or home."""
    base_dir = Path(__file__).parent.parent
    target_dir = base_dir / sub_dir

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        # Test write access
        test_file = target_dir / ".write_test"
        test_file.touch()
        test_file.unlink()
        return target_dir
    except (PermissionError, OSError):
        app_data = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or os.path.expanduser("~")
        target_dir = Path(app_data) / APP_DIR_NAME / sub_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        return target_dir
