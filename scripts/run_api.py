import copy
import os
import sys
from pathlib import Path

import uvicorn
from uvicorn.config import LOGGING_CONFIG

project_root = Path(__file__).parent.parent
src_path = str(project_root / "src")


def build_log_config(level: str = "INFO") -> dict:
    """Uvicorn's logging config plus the application's own loggers."""
    config = copy.deepcopy(LOGGING_CONFIG)
    config["formatters"]["app"] = {
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    }
    config["handlers"]["app"] = {
        "formatter": "app",
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stderr",
    }
    config["loggers"]["pellet_tool"] = {
        "handlers": ["app"],
        "level": level,
        "propagate": False,
    }
    return config


def main():
    os.chdir(project_root)

    # Ensure src is in python path, for the reloader's worker too
    if src_path not in sys.path:
        sys.path.insert(0, src_path)
    if "PYTHONPATH" in os.environ:
        os.environ["PYTHONPATH"] = f"{src_path}{os.pathsep}{os.environ['PYTHONPATH']}"
    else:
        os.environ["PYTHONPATH"] = src_path

    port = int(os.environ.get("PORT", "8000"))
    print(f"Starting Pellet Quote API (FastAPI) on port {port}...")
    try:
        uvicorn.run(
            "pellet_tool.api.main:app",
            host="0.0.0.0",
            port=port,
            reload=True,
            log_config=build_log_config(os.environ.get("LOG_LEVEL", "INFO").upper()),
        )
    except KeyboardInterrupt:
        print("\nAPI stopped.")

if __name__ == "__main__":
    main()
