from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import BadRequest, ExtensionError
from .routes.extension import router as extension_router
from .utils.logging import logger

app = FastAPI(title="cartguard API extension",
              description="Cart discount/stock and order fraud decisions for platform API extensions",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json")

app.include_router(extension_router)

@app.exception_handler(ExtensionError)
async def extension_error_handler(request: Request, exc: ExtensionError):
    logger.error("Extension call failed (%s): %s", exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    err = BadRequest("Bad request - Invalid body: " + "; ".join(e["msg"] for e in exc.errors()))
    return await extension_error_handler(request, err)

@app.get("/health")
def health():
    return {"ok": True}
