from fastapi import APIRouter

from ... import __version__

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "OK", "version": __version__}
