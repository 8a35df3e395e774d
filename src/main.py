"""SAM Lambda toolkit service: FastAPI application entry point.

Exposes the Lambda build helpers (base directory, build directory,
debugger path mappings) and tag key completions as JSON endpoints.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from src.lambdas.nodejs import find_handler_file
from src.lambdas.registry import get_builder
from src.logging.structured import (
    RequestTimer,
    bind_request_id,
    get_logger,
    setup_logging,
)
from src.project.models import Module
from src.sam.template import TemplateError, find_function, load_template, resolve_code_uri
from src.tagging.keys import TagKeyFetchError, get_tag_key_provider

VERSION = "0.3.0"
DEFAULT_RUNTIME = "nodejs14.x"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    get_logger().info("Toolkit service started")
    yield
    get_logger().info("Toolkit service stopped")


app = FastAPI(
    title="SAM Lambda Toolkit",
    description="Build and debug helpers for SAM Lambda functions",
    version=VERSION,
    lifespan=lifespan,
)


class ModuleSpec(BaseModel):
    name: str
    content_roots: list[str]

    def to_module(self) -> Module:
        return Module(name=self.name, content_roots=[Path(root) for root in self.content_roots])


class BaseDirectoryRequest(BaseModel):
    module: ModuleSpec
    handler_file: str | None = None
    runtime: str = DEFAULT_RUNTIME
    # Alternative to handler_file: locate the handler through the template
    template_path: str | None = None
    logical_id: str | None = None


class BuildDirectoryRequest(BaseModel):
    module: ModuleSpec
    logical_id: str | None = None
    runtime: str = DEFAULT_RUNTIME


class PathMappingsRequest(BaseModel):
    template_path: str
    logical_id: str
    build_directory: str


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag each request with an id and log its outcome."""
    rid = bind_request_id()

    with RequestTimer() as timer:
        response = await call_next(request)

    get_logger().info(
        "Request handled",
        extra={"fields": {
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "latency_ms": timer.elapsed_ms,
        }},
    )
    response.headers["X-Request-Id"] = rid
    return response


@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}


@app.post("/v1/lambda/base-directory")
async def base_directory(body: BaseDirectoryRequest):
    """Resolve a handler's base directory (null when no manifest is found)."""
    module = body.module.to_module()

    if body.handler_file:
        handler_file = Path(body.handler_file)
        runtime = body.runtime
    elif body.template_path and body.logical_id:
        handler_file, runtime = _handler_from_template(Path(body.template_path), body.logical_id)
    else:
        raise HTTPException(status_code=400, detail="Provide handler_file or template_path and logical_id")

    builder = _builder_or_400(runtime)
    base_dir = builder.handler_base_directory(module, handler_file)
    return {"base_directory": str(base_dir) if base_dir is not None else None}


@app.post("/v1/lambda/build-directory")
async def build_directory(body: BuildDirectoryRequest):
    module = body.module.to_module()
    builder = _builder_or_400(body.runtime)
    try:
        if body.logical_id:
            path = builder.build_directory_for(module, body.logical_id)
        else:
            path = builder.get_build_directory(module)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"build_directory": str(path)}


@app.post("/v1/lambda/path-mappings")
async def path_mappings(body: PathMappingsRequest):
    template_path = Path(body.template_path)
    try:
        function = find_function(load_template(template_path), body.logical_id)
    except TemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    builder = _builder_or_400(function.runtime or DEFAULT_RUNTIME)
    try:
        mappings = builder.default_path_mappings(template_path, body.logical_id, Path(body.build_directory))
    except TemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"mappings": [{"local_root": m.local_root, "remote_root": m.remote_root} for m in mappings]}


@app.get("/v1/tags/keys")
async def tag_keys(prefix: str = "", refresh: bool = False):
    """Tag key completions; `refresh` drops the cached keys first."""
    provider = get_tag_key_provider()
    if refresh:
        provider.invalidate()
    try:
        keys = await provider.completions(prefix)
    except TagKeyFetchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"keys": keys}


def _builder_or_400(runtime: str):
    try:
        return get_builder(runtime)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _handler_from_template(template_path: Path, logical_id: str) -> tuple[Path, str]:
    """Locate a function's handler source file through its template."""
    try:
        function = find_function(load_template(template_path), logical_id)
        code_dir = resolve_code_uri(template_path, function)
    except TemplateError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not function.handler:
        raise HTTPException(status_code=400, detail=f"Function '{logical_id}' has no Handler")

    handler_file = find_handler_file(code_dir, function.handler)
    if handler_file is None:
        raise HTTPException(
            status_code=404,
            detail=f"Handler source for '{function.handler}' not found under {code_dir}",
        )
    return handler_file, function.runtime or DEFAULT_RUNTIME
