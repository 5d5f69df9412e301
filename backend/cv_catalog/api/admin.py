import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from cv_catalog.api.deps import get_admin_gate
from cv_catalog.core.auth import AdminGate
from cv_catalog.schemas.admin import LoginRequest, LoginResponse

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = structlog.get_logger(__name__)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, gate: AdminGate = Depends(get_admin_gate)):
    """Check the admin password. No session or token is issued."""
    if gate.verify(request.password):
        return LoginResponse(success=True, message="Authentication successful")

    logger.info("admin_login_failed")
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content=LoginResponse(success=False, message="Invalid password").model_dump(),
    )
