"""FastAPI application exposing role classification over HTTP."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import ConfigError, parse_role
from ..inference import Engine, EngineOptions
from ..manifest import ManifestError, parse_raw_files
from ..models import FileRecord, Role
from ..summary import summarize


class LineMetricsPayload(BaseModel):
    total: int = 0
    blanks: int = 0
    comments: int = 0
    code: int = 0


class RawFilePayload(BaseModel):
    path: str
    loc: int = 0
    lines: LineMetricsPayload = Field(default_factory=LineMetricsPayload)
    language_hint: str = ""
    embedded: Dict[str, LineMetricsPayload] = Field(default_factory=dict)


class ClassifyRequest(BaseModel):
    files: List[RawFilePayload]
    # Opens each listed path on the server host; see create_app(allow_header_probe=...).
    header_probe: bool = False
    neighborhood: bool = True
    overrides: Dict[str, List[str]] = Field(default_factory=dict)
    include_summary: bool = True


class ClassifyResponse(BaseModel):
    files: List[Dict[str, Any]]
    summary: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str


EngineFactory = Callable[[EngineOptions], Engine]


def _default_engine(options: EngineOptions) -> Engine:
    return Engine(options)


def create_app(
    engine_factory: EngineFactory = _default_engine,
    *,
    allow_header_probe: bool = True,
) -> FastAPI:
    """Create the FastAPI application exposing roleinfer operations.

    With header probing, `/classify` reads the first 2048 bytes of every path
    named in the request from the server's filesystem. Only the presence of
    known markers reaches the response (through the role), but services
    reachable by untrusted clients should pass `allow_header_probe=False`,
    which rejects such requests with 403.
    """

    app = FastAPI(title="roleinfer", version="0.1.0")

    async def get_engine_factory() -> EngineFactory:
        return engine_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/classify", response_model=ClassifyResponse)
    async def classify(
        payload: ClassifyRequest,
        factory: EngineFactory = Depends(get_engine_factory),
    ) -> ClassifyResponse:
        if payload.header_probe and not allow_header_probe:
            raise HTTPException(status_code=403, detail="Header probing is disabled on this server")

        overrides: Dict[Role, List[str]] = {}
        for name, patterns in payload.overrides.items():
            overrides.setdefault(parse_role(name), []).extend(patterns)

        files = parse_raw_files([item.model_dump() for item in payload.files])
        engine = factory(
            EngineOptions(
                header_probe=payload.header_probe,
                neighborhood=payload.neighborhood,
                overrides=overrides or None,
            )
        )

        def _run() -> List[FileRecord]:
            return engine.infer_batch(files)

        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(None, _run)

        summary = summarize(records).to_dict() if payload.include_summary else None
        return ClassifyResponse(files=[record.to_dict() for record in records], summary=summary)

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ManifestError)
    async def manifest_error_handler(_: Any, exc: ManifestError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000, *, allow_header_probe: bool = False
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(allow_header_probe=allow_header_probe), host=host, port=port)
