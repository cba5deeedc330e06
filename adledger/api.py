import logging
from typing import Optional
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, configure_logging
from .errors import AdNotFoundError, LedgerServiceError
from .models import (
    Ad,
    AssignRoleRequest,
    ClaimResponse,
    CreateProfileRequest,
    DashboardStats,
    Profile,
    RoleResponse,
    WatchEvent,
    WithdrawalRequest,
    WithdrawalRequestBody,
    WithdrawalResponse,
)
from .service import AdRewardService

logger = logging.getLogger(__name__)

CALLER_HEADER = "X-Caller-Identity"


def caller_identity(x_caller_identity: Optional[str] = Header(default=None)) -> str:
    if not x_caller_identity or not x_caller_identity.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {CALLER_HEADER} header",
        )
    return x_caller_identity.strip()


def create_app(
    service: Optional[AdRewardService] = None,
    settings: Optional[Settings] = None,
    root_path: str = "",
) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)
    ledger_service = service or AdRewardService(settings=settings)

    app = FastAPI(
        title="Ad Reward Ledger API",
        description="Watch ads, earn a daily reward per ad, and withdraw through admin approval",
        version="1.0.0",
        root_path=root_path,
    )
    app.state.ledger_service = ledger_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LedgerServiceError)
    def ledger_error_handler(request: Request, exc: LedgerServiceError) -> JSONResponse:
        headers = {"Retry-After": "1"} if exc.retryable else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.code, "detail": str(exc), "retryable": exc.retryable},
            headers=headers,
        )

    @app.get("/health", tags=["System"])
    def health_check():
        return {"status": "healthy", "service": "ad-reward-ledger"}

    # Profiles

    @app.post("/profile", response_model=Profile, status_code=status.HTTP_201_CREATED, tags=["Profiles"])
    def create_profile(request: CreateProfileRequest, caller: str = Depends(caller_identity)) -> Profile:
        return ledger_service.create_profile(caller, request.username, request.email)

    @app.put("/profile", response_model=Profile, tags=["Profiles"])
    def save_profile(request: CreateProfileRequest, caller: str = Depends(caller_identity)) -> Profile:
        return ledger_service.save_profile(caller, request.username, request.email)

    @app.get("/profile", response_model=Optional[Profile], tags=["Profiles"])
    def get_caller_profile(caller: str = Depends(caller_identity)) -> Optional[Profile]:
        return ledger_service.get_profile(caller)

    @app.get("/profiles/{identity}", response_model=Optional[Profile], tags=["Profiles"])
    def get_user_profile(identity: str, caller: str = Depends(caller_identity)) -> Optional[Profile]:
        return ledger_service.get_profile(caller, identity)

    # Roles

    @app.get("/role", response_model=RoleResponse, tags=["Roles"])
    def get_caller_role(caller: str = Depends(caller_identity)) -> RoleResponse:
        return RoleResponse(identity=caller, role=ledger_service.get_role(caller))

    @app.get("/role/admin", tags=["Roles"])
    def is_caller_admin(caller: str = Depends(caller_identity)) -> dict:
        return {"identity": caller, "is_admin": ledger_service.is_admin(caller)}

    @app.put("/roles/{identity}", response_model=RoleResponse, tags=["Roles"])
    def assign_role(identity: str, request: AssignRoleRequest, caller: str = Depends(caller_identity)) -> RoleResponse:
        role = ledger_service.assign_role(caller, identity, request.role)
        return RoleResponse(identity=identity, role=role)

    # Ads

    @app.get("/ads", response_model=list[Ad], tags=["Ads"])
    def get_available_ads() -> list[Ad]:
        return ledger_service.get_available_ads()

    @app.get("/ads/{ad_id}", response_model=Ad, tags=["Ads"])
    def get_ad(ad_id: int) -> Ad:
        ad = ledger_service.get_ad(ad_id)
        if ad is None:
            raise AdNotFoundError(f"Ad {ad_id} not found")
        return ad

    @app.post("/ads/{ad_id}/claim", response_model=ClaimResponse, status_code=status.HTTP_201_CREATED, tags=["Ads"])
    def claim_ad(ad_id: int, caller: str = Depends(caller_identity)) -> ClaimResponse:
        return ledger_service.claim_ad(caller, ad_id)

    @app.get("/watches", response_model=list[WatchEvent], tags=["Ads"])
    def get_caller_ad_watches(caller: str = Depends(caller_identity)) -> list[WatchEvent]:
        return ledger_service.get_caller_ad_watches(caller)

    # Withdrawals

    @app.post("/withdrawals", response_model=WithdrawalResponse, status_code=status.HTTP_201_CREATED, tags=["Withdrawals"])
    def request_withdrawal(request: WithdrawalRequestBody, caller: str = Depends(caller_identity)) -> WithdrawalResponse:
        return ledger_service.request_withdrawal(caller, request.amount)

    @app.get("/withdrawals", response_model=list[WithdrawalRequest], tags=["Withdrawals"])
    def get_caller_withdrawal_history(caller: str = Depends(caller_identity)) -> list[WithdrawalRequest]:
        return ledger_service.get_caller_withdrawal_history(caller)

    @app.get("/withdrawals/{request_id}", response_model=WithdrawalRequest, tags=["Withdrawals"])
    def get_withdrawal_request(request_id: UUID, caller: str = Depends(caller_identity)) -> WithdrawalRequest:
        return ledger_service.get_withdrawal_request(caller, request_id)

    @app.get("/admin/withdrawals", response_model=list[WithdrawalRequest], tags=["Admin"])
    def get_all_withdrawal_requests(caller: str = Depends(caller_identity)) -> list[WithdrawalRequest]:
        return ledger_service.get_all_withdrawal_requests(caller)

    @app.post("/admin/withdrawals/{request_id}/approve", response_model=WithdrawalResponse, tags=["Admin"])
    def approve_withdrawal(request_id: UUID, caller: str = Depends(caller_identity)) -> WithdrawalResponse:
        return ledger_service.approve_withdrawal(caller, request_id)

    @app.post("/admin/withdrawals/{request_id}/reject", response_model=WithdrawalResponse, tags=["Admin"])
    def reject_withdrawal(request_id: UUID, caller: str = Depends(caller_identity)) -> WithdrawalResponse:
        return ledger_service.reject_withdrawal(caller, request_id)

    # Dashboard

    @app.get("/dashboard", response_model=DashboardStats, tags=["Dashboard"])
    def get_dashboard_stats(caller: str = Depends(caller_identity)) -> DashboardStats:
        return ledger_service.get_dashboard_stats(caller)

    logger.info("Ad reward ledger API ready with %d ads", len(ledger_service.get_available_ads()))
    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
