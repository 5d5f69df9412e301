from fastapi import Request

from cv_catalog.core.auth import AdminGate
from cv_catalog.core.config import Settings
from cv_catalog.services.files import FileStore
from cv_catalog.services.store import CvStore


# Everything below is built once in the app lifespan and parked on app.state

def get_store(request: Request) -> CvStore:
    return request.app.state.store


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_admin_gate(request: Request) -> AdminGate:
    return request.app.state.admin_gate
