"""Shared fixtures for the SAM Lambda toolkit test suite."""

import json
from pathlib import Path

import pytest

from src.config.settings import get_settings
from src.project.models import Module

HANDLER_SOURCE = "exports.handle = async (event) => ({ statusCode: 200 });\n"


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(SAM_BUILD_DIR="out", LOG_LEVEL="DEBUG")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    # Always clear cache on teardown so other tests get fresh settings
    get_settings.cache_clear()


@pytest.fixture
def module_root(tmp_path) -> Path:
    """Content root of the "main" module."""
    root = tmp_path / "main"
    root.mkdir()
    return root


@pytest.fixture
def module(module_root) -> Module:
    return Module(name="main", content_roots=[module_root])


def add_lambda_handler(root: Path, sub_path: str = "", file_name: str = "app.js") -> Path:
    """Write a Node.js handler file under `root/sub_path` and return its path."""
    directory = root / sub_path if sub_path else root
    directory.mkdir(parents=True, exist_ok=True)
    handler = directory / file_name
    handler.write_text(HANDLER_SOURCE, encoding="utf-8")
    return handler


def add_package_json(root: Path, sub_path: str = "") -> Path:
    directory = root / sub_path if sub_path else root
    directory.mkdir(parents=True, exist_ok=True)
    manifest = directory / "package.json"
    manifest.write_text(json.dumps({"name": "hello-world", "version": "1.0.0"}), encoding="utf-8")
    return manifest


def add_sam_template(
    root: Path,
    logical_id: str,
    code_uri: str,
    handler: str = "app.handle",
    runtime: str = "nodejs12.x",
) -> Path:
    """Write a minimal SAM template with one function and return its path."""
    template = root / "template.yaml"
    template.write_text(
        f"""AWSTemplateFormatVersion: '2010-09-09'
Transform: AWS::Serverless-2016-10-31
Resources:
  {logical_id}:
    Type: AWS::Serverless::Function
    Properties:
      CodeUri: {code_uri}
      Handler: {handler}
      Runtime: {runtime}
      Timeout: 900
""",
        encoding="utf-8",
    )
    return template
