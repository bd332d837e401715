from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.account import router as account_router
from app.api.v1.bag import router as bag_router
from app.api.v1.courses import router as courses_router
from app.api.v1.export import router as export_router
from app.api.v1.health import router as health_router
from app.api.v1.home_club import router as home_club_router
from app.api.v1.mental_elements import router as mental_elements_router
from app.api.v1.public import router as public_router
from app.api.v1.rounds import router as rounds_router
from app.api.v1.stats import router as stats_router
from app.core.errors import GolfBrainError
from app.core.logging import configure_logging
from app.core.settings import settings

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(GolfBrainError)
def golf_brain_error_handler(request: Request, exc: GolfBrainError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(
    health_router,
    prefix=settings.API_V1_STR,
    tags=["Health"],
)
app.include_router(
    account_router,
    prefix=settings.API_V1_STR,
    tags=["Account"],
)
app.include_router(
    home_club_router,
    prefix=settings.API_V1_STR,
    tags=["Home club"],
)
app.include_router(
    courses_router,
    prefix=settings.API_V1_STR,
    tags=["Courses"],
)
app.include_router(
    bag_router,
    prefix=settings.API_V1_STR,
    tags=["Bag"],
)
app.include_router(
    mental_elements_router,
    prefix=settings.API_V1_STR,
    tags=["Mental elements"],
)
app.include_router(
    rounds_router,
    prefix=settings.API_V1_STR,
    tags=["Rounds"],
)
app.include_router(
    stats_router,
    prefix=settings.API_V1_STR,
    tags=["Stats"],
)
app.include_router(
    export_router,
    prefix=settings.API_V1_STR,
    tags=["Export"],
)
app.include_router(
    public_router,
    prefix=settings.API_V1_STR,
    tags=["Public"],
)
