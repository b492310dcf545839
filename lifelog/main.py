import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lifelog.config import APP_NAME, CORS_ORIGINS
from lifelog.database import init_db
from lifelog.errors import register_error_handlers
from lifelog.routes.analytics_routes import router as analytics_router
from lifelog.routes.finance_routes import router as finance_router
from lifelog.routes.habit_routes import router as habit_router
from lifelog.routes.journal_routes import router as journal_router
from lifelog.routes.notification_routes import router as notification_router
from lifelog.routes.profile_routes import router as profile_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{APP_NAME} backend started")
    yield


app = FastAPI(title=f"{APP_NAME} API", lifespan=lifespan)


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(analytics_router)
app.include_router(habit_router)
app.include_router(journal_router)
app.include_router(finance_router)
app.include_router(notification_router)
app.include_router(profile_router)


def run():
    import uvicorn
    uvicorn.run("lifelog.main:app", host="0.0.0.0", port=8000, reload=True)


if __name__ == "__main__":
    run()
