from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before config is read
load_dotenv()

from palettelab.api.v1 import router as v1_router  # noqa: E402
from palettelab.config import config  # noqa: E402
from palettelab.schemas import HealthResponse  # noqa: E402
from palettelab.utils.logging import get_logger  # noqa: E402

log = get_logger()

app = FastAPI(
    title="PaletteLab",
    description="Palette extraction and luminosity analysis API",
    version=config.VERSION
)

allowed_origins = [origin.strip() for origin in config.ALLOWED_ORIGINS.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins or ["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def healthz() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(ok=True, version=config.VERSION, service=config.SERVICE_NAME)


log.info("PaletteLab API initialised", extra={"version": config.VERSION, "max_edge": config.MAX_EDGE})
