"""Shared fixtures."""
import pytest

from jsbin_export.config import Config
from fakes import BASE_URL, FakeJSBin


@pytest.fixture
def output_folder(tmp_path):
    return tmp_path / "export"


@pytest.fixture
def service(output_folder):
    return FakeJSBin(folder=output_folder)


@pytest.fixture
def config(output_folder):
    return Config(
        username="alice",
        password="s3cret&pw",
        folder=output_folder,
        delay=250,
        base_url=BASE_URL,
    )
