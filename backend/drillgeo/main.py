import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from drillgeo.api.boreholes import router as boreholes_router
from drillgeo.api.transform import router as transform_router
from drillgeo.errors import ConfigurationError
from drillgeo.logging_config import setup_logging

logger = setup_logging(log_file=os.getenv("DRILLGEO_LOG_FILE"))

app = FastAPI(title="Borehole Coordinate Transformation Service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(boreholes_router)
app.include_router(transform_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Transform parameters rejected: %s", exc)
    return JSONResponse(status_code=500, content={"detail": f"Configuration error: {exc}"})


@app.get("/")
def root():
    return {"status": "ok", "service": "drillgeo"}
