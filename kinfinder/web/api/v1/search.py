"""Search endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response

from kinfinder.export import export_csv_string, export_json_string
from kinfinder.models import SearchResult, SearchStatus
from kinfinder.orchestrator import SearchOrchestrator
from kinfinder.web.api.v1.deps import get_orchestrator
from kinfinder.web.api.v1.models import SearchPayload

router = APIRouter()

# Results that carry no candidates to return, with their HTTP status
NO_RESULT_STATUS_CODES = {
    SearchStatus.UNAVAILABLE: 503,
    SearchStatus.SUPERSEDED: 409,
}


def no_result_response(result: SearchResult):
    """JSON error response for unavailable or superseded results, else None."""
    status_code = NO_RESULT_STATUS_CODES.get(result.status)
    if status_code is None:
        return None
    return JSONResponse(result.to_dict(), status_code=status_code)


@router.post("/search")
async def run_search(
    payload: SearchPayload,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """
    Run a search and return ranked candidates with facets.

    Responds 503 when every queried provider failed, 409 when a newer search
    in the same session replaced this one, 400 on invalid filters.
    """
    result = await orchestrator.search(payload.to_request())
    error = no_result_response(result)
    if error is not None:
        return error
    return JSONResponse(result.to_dict())


@router.post("/search/export")
async def export_search(
    payload: SearchPayload,
    format: str = Query("csv", pattern="^(csv|json)$"),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """
    Run a search and download the results as CSV or JSON.

    Unavailable and superseded searches get the same 503/409 JSON body as
    ``/search`` instead of an empty file.
    """
    result = await orchestrator.search(payload.to_request())
    error = no_result_response(result)
    if error is not None:
        return error

    filename = f"kinship-candidates-{payload.case_id}.{format}"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}

    if format == "json":
        return Response(export_json_string(result), media_type="application/json", headers=headers)
    return Response(export_csv_string(result.results), media_type="text/csv", headers=headers)
