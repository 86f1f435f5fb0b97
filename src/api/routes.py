"""POST /diagnostics/scan and GET /diagnostics/scanners endpoint handlers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.schemas import Report, ScannerInfo, ScanRequest
from src.api.service import list_scanners, run_scan
from src.diagnostics.engine import DiagnosticsEngine

router = APIRouter(prefix="/diagnostics")


def _get_engine(request: Request) -> DiagnosticsEngine:
    return request.app.state.engine


@router.post("/scan", response_model=Report)
async def scan_site(
    body: ScanRequest,
    engine: DiagnosticsEngine = Depends(_get_engine),
) -> Report:
    try:
        return await run_scan(engine, body)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/scanners", response_model=list[ScannerInfo])
async def get_scanners(engine: DiagnosticsEngine = Depends(_get_engine)) -> list[ScannerInfo]:
    return list_scanners(engine)
