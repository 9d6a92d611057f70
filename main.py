from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from database import engine
import database_models
import auth.models  # registers the auth tables on Base

from auth.routes import router as auth_router
from users.routes import router as users_router
from prompts.routes import router as prompts_router
from prompt_templates.routes import router as templates_router
from analytics.routes import router as analytics_router
from users.plans import QuotaExceededError
from core.rate_limit import limiter
from core.logger import logger


# -------------------------------
# App Setup
# -------------------------------
app = FastAPI(title="Prompt Enhancer API")

# middleware

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------
# Rate Limiter Setup
# -------------------------------
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit hit path={request.url.path}")
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests. Slow down."},
    )


# -------------------------------
# Error Handlers
# -------------------------------
@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation failed path={request.url.path}")
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Invalid request data",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(QuotaExceededError)
def quota_exceeded_handler(request: Request, exc: QuotaExceededError):
    return JSONResponse(
        status_code=402,
        content={"detail": str(exc), "limit": exc.limit},
    )


@app.exception_handler(Exception)
def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error path={request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# -------------------------------
# Routers
# -------------------------------
app.include_router(auth_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(prompts_router, prefix="/api")
app.include_router(templates_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")


@app.get("/")
def health():
    return {"status": "ok"}


# -------------------------------
# Startup
# -------------------------------
@app.on_event("startup")
def startup():
    logger.info("Application startup initiated")

    try:
        database_models.Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured successfully")
    except Exception as e:
        logger.error(f"Database startup failed: {e}")
        raise

    logger.info("Application startup completed")
