from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware import Middleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from cors import cors_middleware
from database import Store
from errors import AppError
from logger import get_logger
from request_log import RequestLogMiddleware
from routers import admin, cart, orders, products

logger = get_logger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.store = Store().open()
    try:
        yield
    finally:
        app.state.store.close()


# Applied in order: CORS policy and origin guard, then the request log
middleware = cors_middleware() + [Middleware(RequestLogMiddleware)]

app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan, middleware=middleware)

app.include_router(products.router, prefix="/api/products", tags=["products"])
app.include_router(cart.router, prefix="/api/cart", tags=["cart"])
app.include_router(orders.router, prefix="/api/orders", tags=["orders"])
app.include_router(admin.router, prefix="/api/admin", tags=["admin"])


# Error mapping
def _field_error(err: dict) -> str:
    loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
    return f"{'.'.join(loc)}: {err.get('msg')}" if loc else err.get("msg", "")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Validation error", "errors": [_field_error(e) for e in exc.errors()]},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code in (404, 405) and exc.detail in ("Not Found", "Method Not Allowed"):
        return JSONResponse(status_code=404, content={"message": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Server error", "error": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Something went wrong!", "error": str(exc)})


# Health
@app.get("/api/health")
def health():
    return {
        "message": "E-commerce API is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
