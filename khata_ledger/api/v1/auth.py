"""Signup, login, token check and the business directory"""

from typing import List

from fastapi import APIRouter, Depends, Request

from khata_ledger.api.dependencies import get_current_identity, get_identity_service, get_request_id
from khata_ledger.api.v1.schemas import (
    BusinessSchema,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    SignupRequest,
    VerifyTokenResponse,
    user_payload,
)
from khata_ledger.config import Settings, get_settings
from khata_ledger.domain.exceptions import InvalidCredentials
from khata_ledger.domain.identity import IdentityService
from khata_ledger.domain.models import Identity, Role
from khata_ledger.infrastructure.observability.logging import log_login, log_signup
from khata_ledger.infrastructure.observability.metrics import record_login, signup_counter

router = APIRouter()


@router.post("/signup", response_model=MessageResponse)
def signup(
    body: SignupRequest,
    request: Request,
    service: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_settings),
):
    """Register a customer or business owner"""
    account = service.register(
        identifier=body.identifier(settings.identity_field),
        password=body.password,
        role=body.user_type,
        name=body.name,
        photo=body.photo,
    )
    signup_counter.labels(role=account.role.value).inc()
    log_signup(get_request_id(request), account.identifier, account.role.value)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    service: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_settings),
):
    """Exchange credentials for a bearer token"""
    identifier = body.identifier(settings.identity_field)
    try:
        result = service.authenticate(identifier, body.password)
    except InvalidCredentials:
        record_login(False)
        log_login(get_request_id(request), identifier, success=False)
        raise

    record_login(True)
    log_login(get_request_id(request), identifier, success=True)
    return LoginResponse(token=result.token, user=user_payload(result.identity, settings.identity_field))


@router.get("/verify-token", response_model=VerifyTokenResponse)
def verify_token(
    caller: Identity = Depends(get_current_identity),
    settings: Settings = Depends(get_settings),
):
    return VerifyTokenResponse(valid=True, user=user_payload(caller, settings.identity_field))


@router.get("/businesses", response_model=List[BusinessSchema], response_model_exclude_unset=True)
def list_businesses(
    caller: Identity = Depends(get_current_identity),
    service: IdentityService = Depends(get_identity_service),
    settings: Settings = Depends(get_settings),
):
    """All business owners, for customers picking who they deal with"""
    return [BusinessSchema.from_domain(a, settings.identity_field) for a in service.list_by_role(Role.OWNER)]
