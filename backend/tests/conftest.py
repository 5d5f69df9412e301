import pytest
from fastapi.testclient import TestClient

from cv_catalog.core.config import Settings
from cv_catalog.main import create_app
from cv_catalog.services.store import MemoryCvStore, SqlCvStore

ADMIN_PASSWORD = "s3cret-admin"


@pytest.fixture
def anyio_backend():
    return "asyncio"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "STORE_BACKEND": "sql",
        "DATABASE_URL": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        "FILE_STORAGE": "filesystem",
        "UPLOAD_DIR": str(tmp_path / "uploads"),
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def inline_client(tmp_path):
    app = create_app(make_settings(tmp_path, STORE_BACKEND="memory", FILE_STORAGE="inline"))
    with TestClient(app) as c:
        yield c


@pytest.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    if request.param == "memory":
        s = MemoryCvStore(default_limit=50)
    else:
        s = SqlCvStore(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", default_limit=50)
    await s.start()
    yield s
    await s.close()


def pdf_bytes(size: int = 64) -> bytes:
    header = b"%PDF-1.4\n"
    return header + b"0" * max(size - len(header), 0)


def upload(client, data=None, filename="cv.pdf", content_type="application/pdf", **fields):
    form = {
        "name": "Maria",
        "age": "29",
        "nationality": "philippines",
        "experience": "2 years",
    }
    form.update(fields)
    form = {k: v for k, v in form.items() if v is not None}
    files = {"file": (filename, pdf_bytes() if data is None else data, content_type)}
    return client.post("/api/cvs", data=form, files=files)
