from fastapi import APIRouter, Depends, Request, Response, status

from printshop.application.dto import LoginInput, RegisterInput
from printshop.application.http.fastapi.deps import ACCESS_TOKEN_COOKIE, get_auth_service, get_container
from printshop.application.http.fastapi.schemas import Envelope, ok
from printshop.application.use_cases.auth import AuthService
from printshop.bootstrap import Container

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=Envelope)
def register(data: RegisterInput, auth: AuthService = Depends(get_auth_service)):
    return ok(auth.register(data), "User registered successfully")


@router.post("/login", response_model=Envelope)
def login(
    data: LoginInput,
    response: Response,
    request: Request,
    auth: AuthService = Depends(get_auth_service),
    container: Container = Depends(get_container),
):
    out = auth.login(data)
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        out.token,
        max_age=container.settings.jwt_expires_minutes * 60,
        httponly=True,
        secure=request.url.scheme == "https",
        samesite="lax",
    )
    return ok(out, "Login successful")


@router.post("/logout", response_model=Envelope)
def logout(response: Response):
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return ok(message="Logout successful")
