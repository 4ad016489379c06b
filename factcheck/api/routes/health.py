"""Health check endpoint."""

from fastapi import APIRouter

from factcheck import __version__

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "service": "factcheck", "version": __version__}


@router.get("/")
async def root():
    return {"service": "factcheck", "version": __version__}
