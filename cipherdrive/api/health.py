from fastapi import APIRouter
from cipherdrive.schemas import HealthCheck

router = APIRouter(tags=["Health"])

@router.get("/health", response_model=HealthCheck)
async def health():
    return HealthCheck(status="healthy", version="1.0.0")
