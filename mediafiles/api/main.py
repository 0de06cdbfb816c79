import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mediafiles.api.routes.files import router as files_router
from mediafiles.api.routes.upload import router as upload_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Media Files API",
    description="Browse, upload, delete and preview media files and their derived artifacts",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:8501",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(files_router)
app.include_router(upload_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


def serve() -> None:
    """Run the API with uvicorn on the configured host and port."""
    import uvicorn

    from mediafiles.config import settings

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
