import logging

from fastapi import FastAPI

from spacetraveling.routers import pages, posts
from spacetraveling.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="spacetraveling", description="Blog front-end over Prismic")

app.include_router(posts.router)
app.include_router(pages.router)


@app.get("/health")
async def health():
    return {"message": "spacetraveling is running"}
