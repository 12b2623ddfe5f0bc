from pathlib import Path

# Absolute path of the backend root, this file lives in audionotes/core/
PROJECT_PATH = Path(__file__).resolve().parent.parent.parent

DATA_VOLUME = PROJECT_PATH / "datavolume"
DATA_VOLUME.mkdir(parents=True, exist_ok=True)
