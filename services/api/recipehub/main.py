# Recipehub API Main Entry Point
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .settings import settings
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .routers.community import router as community_router
from .routers.preferences import router as preferences_router
from .routers.history import router as history_router
from .routers.recommendations import router as recommendations_router
from .routers.planner import router as planner_router
from .routers.prices import router as prices_router
from .routers.site import router as site_router
from .routers.ads import router as ads_router
from .routers.admin import router as admin_router

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recipehub")

# Rate limiter (per-IP)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)

app = FastAPI(title="Recipehub API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(community_router, prefix="/api", tags=["community"])
app.include_router(preferences_router, prefix="/api", tags=["preferences"])
app.include_router(history_router, prefix="/api", tags=["history"])
app.include_router(recommendations_router, prefix="/api", tags=["recommendations"])
app.include_router(planner_router, prefix="/api/planner", tags=["planner"])
app.include_router(prices_router, prefix="/api/prices", tags=["prices"])
app.include_router(site_router, prefix="/api", tags=["site"])
app.include_router(ads_router, prefix="/api", tags=["ads"])
app.include_router(admin_router, prefix="/api/admin", tags=["admin"])
