from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from accounts_api.core.errors import Forbidden
from accounts_api.core.rate_limiter import rate_limit_ip
from accounts_api.db.models import Account
from accounts_api.services.account_service import AccountService
from accounts_api.services.session_service import current_account_id

router = APIRouter(prefix="/users", tags=["users"])


class GuestRegistration(BaseModel):
    phone: str
    display_name: Optional[str] = None
    address: Optional[str] = None


class FullRegistration(BaseModel):
    phone: Optional[str] = None
    display_name: Optional[str] = None
    password: str


class Credentials(BaseModel):
    phone: str
    password: str


class PasswordBody(BaseModel):
    password: str


class ForgotBody(BaseModel):
    email: str


class ResetBody(BaseModel):
    token: str
    password: str


class ProfileBody(BaseModel):
    display_name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


def get_account_service(request: Request) -> AccountService:
    service = getattr(request.app.state, "account_service", None)
    if service is None:
        service = AccountService()
        request.app.state.account_service = service
    return service


def require_account_id(request: Request, service: AccountService = Depends(get_account_service)) -> str:
    account_id = current_account_id(request, service.settings)
    if not account_id:
        raise Forbidden("Not authorized")
    return account_id


def public_account(account: Account) -> dict:
    """Serialize an account without credential or reset-token fields."""
    return {
        "id": account.id,
        "display_name": account.display_name,
        "phone": account.phone,
        "email": account.email,
        "address": account.address,
        "avatar_url": account.avatar_url,
        "role": account.role,
        "has_password": account.has_password,
    }


@router.post("/register/guest")
def register_guest(body: GuestRegistration, service: AccountService = Depends(get_account_service)):
    account = service.register_guest(body.phone, body.display_name, body.address)
    return {"user": public_account(account)}


@router.post("/register", status_code=201)
def register(body: FullRegistration, service: AccountService = Depends(get_account_service)):
    result = service.register_full(body.phone, body.display_name, body.password)
    return {"user": public_account(result.account), "token": result.session_token}


@router.post("/login")
def login(request: Request, body: Credentials, service: AccountService = Depends(get_account_service)):
    rate_limit_ip(request, "users:login", limit=10, window_seconds=300)
    result = service.login(body.phone, body.password)
    payload = {"user": public_account(result.account), "message": result.message}
    if result.session_token:
        payload["token"] = result.session_token
    return payload


@router.get("/me")
def me(account_id: str = Depends(require_account_id), service: AccountService = Depends(get_account_service)):
    return {"user": public_account(service.login_by_token(account_id))}


@router.post("/password")
def set_password(
    body: PasswordBody,
    account_id: str = Depends(require_account_id),
    service: AccountService = Depends(get_account_service),
):
    result = service.set_password(account_id, body.password)
    return {"user": public_account(result.account), "message": result.message}


@router.post("/password/forgot")
def forgot_password(request: Request, body: ForgotBody, service: AccountService = Depends(get_account_service)):
    rate_limit_ip(request, "users:forgot", limit=5, window_seconds=300)
    result = service.request_reset(body.email)
    return {"status": result.status, "message": result.message}


@router.post("/password/reset")
def reset_password(body: ResetBody, service: AccountService = Depends(get_account_service)):
    result = service.consume_reset(body.token, body.password)
    return {"status": result.status, "message": result.message}


@router.post("/password/confirm")
def confirm_password(
    body: PasswordBody,
    account_id: str = Depends(require_account_id),
    service: AccountService = Depends(get_account_service),
):
    result = service.confirm_password(account_id, body.password)
    return {"status": result.status, "message": result.message}


@router.patch("/password")
def update_password(
    body: PasswordBody,
    account_id: str = Depends(require_account_id),
    service: AccountService = Depends(get_account_service),
):
    result = service.update_password(account_id, body.password)
    return {"status": result.status, "message": result.message}


@router.put("/profile")
def update_profile(
    body: ProfileBody,
    account_id: str = Depends(require_account_id),
    service: AccountService = Depends(get_account_service),
):
    profile = {"display_name": body.display_name, "email": body.email, "address": body.address}
    result = service.update_profile(account_id, profile)
    return {"user": public_account(result.account), "message": result.message}


@router.delete("/me")
def delete_me(account_id: str = Depends(require_account_id), service: AccountService = Depends(get_account_service)):
    result = service.delete_account(account_id)
    return {"orders_deleted": result.orders_deleted, "users_deleted": result.accounts_deleted}
