# app/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, configure_logging, get_settings
from .core import DeleteProductIn, UpdateProductIn
from .sdk import delete_product_logic, list_products_logic, update_product_logic
from .upstream import AdminGraphQL, build_admin_client

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_settings()
    app.state.admin_client = build_admin_client(config)
    logger.info("Products admin panel starting (%s backend)", config.backend)
    try:
        yield
    finally:
        await app.state.admin_client.aclose()


app = FastAPI(title="products admin panel", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------
# Error handlers
# ---------------------------
@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Unreadable bodies get the same failure shape as every other error."""
    details = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    logger.warning("Rejected request to %s: %s", request.url.path, details)
    return JSONResponse(status_code=400, content={"success": False, "error": "; ".join(details)})

# ---------------------------
# Dependencies
# ---------------------------
def get_admin_client(request: Request) -> AdminGraphQL:
    """The upstream client built at startup; tests override this."""
    return request.app.state.admin_client

# ---------------------------
# Product endpoints
# ---------------------------
@app.get("/api/products")
async def list_products(
    after: Optional[str] = None,
    client: AdminGraphQL = Depends(get_admin_client),
    config: Settings = Depends(get_settings),
):
    status, body = await list_products_logic(client, after, config.expose_error_details)
    return JSONResponse(status_code=status, content=body)

@app.post("/api/products/update")
async def update_product(
    payload: UpdateProductIn,
    client: AdminGraphQL = Depends(get_admin_client),
    config: Settings = Depends(get_settings),
):
    status, body = await update_product_logic(client, payload, config.expose_error_details)
    return JSONResponse(status_code=status, content=body)

@app.post("/api/products/delete")
async def delete_product(
    payload: DeleteProductIn,
    client: AdminGraphQL = Depends(get_admin_client),
    config: Settings = Depends(get_settings),
):
    status, body = await delete_product_logic(client, payload, config.expose_error_details)
    return JSONResponse(status_code=status, content=body)
