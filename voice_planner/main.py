import logging
import os
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from voice_planner.api.assistant import router as assistant_router
from voice_planner.api.calendar import router as calendar_router
from voice_planner.api.deps import int_env
from voice_planner.api.reminders import router as reminders_router
from voice_planner.api.tasks import router as tasks_router
from voice_planner.api.users import router as users_router

app = FastAPI(title="Voice Planner Assistant")
app.include_router(users_router)
app.include_router(tasks_router)
app.include_router(assistant_router)
app.include_router(calendar_router)
app.include_router(reminders_router)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
  o.strip()
  for o in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
  if o.strip()
]

app.add_middleware(
  CORSMiddleware,
  allow_origins=CORS_ORIGINS,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


@app.get("/health")
async def health():
  return {"status": "ok", "timestamp": datetime.now().isoformat()}


def run() -> None:
  logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
  )
  host = os.getenv("BACKEND_HOST", "127.0.0.1")
  port = int_env("BACKEND_PORT", 8888)
  reload_enabled = os.getenv("BACKEND_RELOAD", "true").lower() in ("1", "true", "yes", "on")

  logger.info("Starting backend on %s:%s (reload=%s)", host, port, reload_enabled)
  uvicorn.run("voice_planner.main:app", host=host, port=port, reload=reload_enabled)


if __name__ == "__main__":
  run()
