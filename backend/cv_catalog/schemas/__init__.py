from cv_catalog.schemas.admin import LoginRequest, LoginResponse
from cv_catalog.schemas.cv import CvDetail, CvFields, CvSummary, CvUpdate, MessageResponse

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "CvDetail",
    "CvFields",
    "CvSummary",
    "CvUpdate",
    "MessageResponse",
]
