import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pillarlog.core.config import settings
from pillarlog.core.errors import PillarlogError
from pillarlog.api.friends import router as friends_router, me_router
from pillarlog.api.habits import router as habits_router
from pillarlog.api.pillars import router as pillars_router
from pillarlog.api.wellbeing import router as wellbeing_router

log = logging.getLogger("pillarlog")
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

app = FastAPI(title="pillarlog")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PillarlogError)
async def pillarlog_error_handler(request: Request, exc: PillarlogError):
    if exc.status_code >= 500:
        log.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.detail, exc.error_code)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": exc.error_code},
        headers=exc.headers,
    )


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}


app.include_router(me_router)
app.include_router(friends_router)
app.include_router(habits_router)
app.include_router(pillars_router)
app.include_router(wellbeing_router)
