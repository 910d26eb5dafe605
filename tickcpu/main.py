import logging
import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from tickcpu.api.routes_sim import router as sim_router
from tickcpu.api.ws import router as ws_router

logger = logging.getLogger(__name__)


def find_www_dir() -> Optional[str]:
    """Locate the presentation assets: $TICKCPU_WWW, then ./www, then ../www."""
    candidates = [os.environ.get("TICKCPU_WWW", ""), "www", os.path.join("..", "www")]
    for path in candidates:
        if path and os.path.isdir(path):
            return os.path.abspath(path)
    return None


app = FastAPI(title="CPU Scheduling Simulator API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:8080"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sim_router)
app.include_router(ws_router)


@app.get("/")
def root():
    return {"ok": True, "hint": "Use /health, /docs, /sim/state or /www"}


www_dir = find_www_dir()
if www_dir is not None:
    logger.info("serving static files from %s", www_dir)
    app.mount("/www", StaticFiles(directory=www_dir, html=True), name="www")


def serve(host: str = "0.0.0.0", port: int = 8080) -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
