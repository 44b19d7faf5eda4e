import pytest
from fastapi.testclient import TestClient

from converter.conversion.service import ConversionService
from helpers import SVG_SOURCE, image_bytes


@pytest.fixture
def png_bytes() -> bytes:
    return image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return image_bytes("JPEG", mode="RGB")


@pytest.fixture
def svg_bytes() -> bytes:
    return SVG_SOURCE


@pytest.fixture
def service() -> ConversionService:
    return ConversionService()


@pytest.fixture
def client():
    from converter.main import app

    with TestClient(app) as c:
        yield c
