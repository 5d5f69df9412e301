from cv_catalog.api.admin import router as admin_router
from cv_catalog.api.cvs import router as cvs_router
from cv_catalog.api.files import router as files_router

__all__ = ["admin_router", "cvs_router", "files_router"]
