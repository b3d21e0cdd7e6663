from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.controllers import admin_controller, auth_controller, car_controller, health_controller
from app.core import exceptions
from app.core.config import settings
from app.core.dependencies import lifespan
from app.core.rate_limit import limiter

# Cria a aplicação FastAPI com lifespan
app = FastAPI(title="Car Market API", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(exceptions.CarMarketError)
async def car_market_error_handler(request: Request, exc: exceptions.CarMarketError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "reason": exc.reason},
        headers=headers,
    )


# --- Endpoints ---
app.include_router(auth_controller.router)
app.include_router(car_controller.router)
app.include_router(admin_controller.router)
app.include_router(health_controller.router)
