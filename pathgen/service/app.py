"""FastAPI application entrypoint for pathgen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..errors import PathgenError
from ..models import PathKind, PathPlanItem, PlanOutcome, Token
from ..orchestrator import Orchestrator, PathsOutcome, PromptRunOutcome, Selector
from ..templating.resolver import collect_selections, resolve_template
from ..templating.scanner import choice_tokens, parse_placeholders, scan

_T = TypeVar("_T")


class HealthResponse(BaseModel):
    status: str


class TemplateRequest(BaseModel):
    template: str


class TokenModel(BaseModel):
    kind: str
    raw: str
    start: int
    end: int
    name: Optional[str] = None
    options: List[str] = Field(default_factory=list)
    default: Optional[str] = None
    prompt: Optional[str] = None


class ScanResponse(BaseModel):
    tokens: List[TokenModel]
    placeholders: List[str]


class ResolveRequest(BaseModel):
    template: str
    selections: Dict[int, Union[str, List[str]]] = Field(default_factory=dict)
    values: Dict[str, str] = Field(default_factory=dict)


class ResolveResponse(BaseModel):
    prompt: str


class PlanRequest(BaseModel):
    path: str
    instructions: str
    kinds: Optional[List[PathKind]] = None
    create: bool = False
    paths: Optional[List[str]] = None


class PlanItemModel(BaseModel):
    path: str
    kind: PathKind


class FailedPathModel(BaseModel):
    path: str
    reason: str


class PlanResponse(BaseModel):
    items: List[PlanItemModel]
    fallback: bool
    reason: Optional[str] = None
    created: List[str] = Field(default_factory=list)
    failed: List[FailedPathModel] = Field(default_factory=list)


class GenerateRequest(BaseModel):
    path: str
    template: str
    selections: Dict[int, Union[str, List[str]]] = Field(default_factory=dict)
    values: Dict[str, str] = Field(default_factory=dict)
    paths: Optional[List[str]] = None
    overwrite: Optional[bool] = None


class GenerateResponse(BaseModel):
    prompt: str
    targets: List[str]
    plan_fallback: bool
    created: List[str]
    overwritten: List[str]
    skipped: List[str]
    failed: List[FailedPathModel]
    fallbacks: List[str]
    summary: str


def _token_model(token: Token) -> TokenModel:
    return TokenModel(
        kind=token.kind.value,
        raw=token.raw,
        start=token.start,
        end=token.end,
        name=getattr(token, "name", None),
        options=list(getattr(token, "options", ())),
        default=getattr(token, "default", None),
        prompt=getattr(token, "prompt", None),
    )


def _plan_items(items: List[PathPlanItem]) -> List[PlanItemModel]:
    return [PlanItemModel(path=item.path, kind=item.kind) for item in items]


def _generate_response(outcome: PromptRunOutcome) -> GenerateResponse:
    result = outcome.result
    return GenerateResponse(
        prompt=outcome.prompt,
        targets=outcome.targets,
        plan_fallback=outcome.plan.fallback,
        created=result.created,
        overwritten=result.overwritten,
        skipped=result.skipped,
        failed=[FailedPathModel(path=item.path, reason=item.reason) for item in result.failed],
        fallbacks=result.fallbacks,
        summary=result.summary(),
    )


def _explicit(paths: List[str]) -> Selector:
    return lambda _items: list(paths)


async def _in_executor(func: Callable[[], _T]) -> _T:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing pathgen operations."""
    app = FastAPI(title="Pathgen Service", version="0.1.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan", response_model=ScanResponse)
    async def scan_template(payload: TemplateRequest) -> ScanResponse:
        return ScanResponse(
            tokens=[_token_model(token) for token in scan(payload.template)],
            placeholders=parse_placeholders(payload.template),
        )

    @app.post("/resolve", response_model=ResolveResponse)
    async def resolve(payload: ResolveRequest) -> ResolveResponse:
        selections = collect_selections(choice_tokens(payload.template), payload.selections)
        return ResolveResponse(
            prompt=resolve_template(payload.template, selections, payload.values)
        )

    @app.post("/plan", response_model=PlanResponse)
    async def plan(
        payload: PlanRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> PlanResponse:
        if not payload.create:
            def _preview() -> PlanOutcome:
                return orchestrator.preview_paths(
                    payload.path, payload.instructions, kinds=payload.kinds
                )

            preview = await _in_executor(_preview)
            return PlanResponse(
                items=_plan_items(preview.items),
                fallback=preview.fallback,
                reason=preview.reason,
            )

        selector = _explicit(payload.paths) if payload.paths is not None else None

        def _create() -> PathsOutcome:
            return orchestrator.run_generate_paths(
                payload.path, payload.instructions, kinds=payload.kinds, selector=selector
            )

        outcome = await _in_executor(_create)
        return PlanResponse(
            items=_plan_items(outcome.plan.items),
            fallback=outcome.plan.fallback,
            reason=outcome.plan.reason,
            created=outcome.created,
            failed=[FailedPathModel(path=item.path, reason=item.reason) for item in outcome.failed],
        )

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run() -> PromptRunOutcome:
            return orchestrator.run_prompt(
                payload.path,
                payload.template,
                picks=payload.selections,
                values=payload.values,
                targets=payload.paths,
                overwrite=payload.overwrite,
            )

        return _generate_response(await _in_executor(_run))

    @app.exception_handler(PathgenError)
    async def pathgen_error_handler(_: Any, exc: PathgenError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["create_app", "run_service"]
