import json
from fastapi import APIRouter, Depends, Header, Request, Response
from ..schemas import EstimateRequest, EstimateResponse, LeadRequest, LeadResponse
from ..services.estimate_service import EstimateService
from ..core.security import require_api_key, rate_limit
from ..core.utils import weak_etag

router = APIRouter()

def service_dep(request: Request) -> EstimateService:
    # Dataset and notifier are built once at start-up and live on app.state
    return EstimateService(request.app.state.dataset, request.app.state.notifier)

def request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or "unknown"

@router.post("/estimate", response_model=EstimateResponse)
async def post_estimate(
    body: EstimateRequest,
    request: Request,
    response: Response,
    if_none_match: str | None = Header(default=None, alias="if-none-match"),
    _auth = Depends(require_api_key),     # API key guard
    _lim  = Depends(rate_limit),          # Rate limiting
    svc: EstimateService = Depends(service_dep),
):
    payload = await svc.estimate(body, request_id(request))
    etag = weak_etag(json.dumps(payload["result"], sort_keys=True, separators=(",", ":")).encode("utf-8"))
    if if_none_match and if_none_match == etag:
        return Response(status_code=304, headers={"ETag": etag})
    response.headers["ETag"] = etag
    return payload

@router.post("/lead", response_model=LeadResponse)
async def post_lead(
    body: LeadRequest,
    request: Request,
    _lim = Depends(rate_limit),
    svc: EstimateService = Depends(service_dep),
):
    return await svc.submit_lead(body, request_id(request))
