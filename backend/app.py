import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

from backend.demo import create_demo_data
from backend.engine import init_engine
from backend.routes import router

load_dotenv(Path(__file__).parent.parent / ".env")

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    engine = init_engine(resolved)
    # A fresh data dir gets the starter missions and default player
    if not engine.list_missions():
        create_demo_data()

    app = FastAPI(title="Crime Missions")
    app.include_router(router, prefix="/api")
    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()
