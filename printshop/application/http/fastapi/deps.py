from fastapi import Depends, Query, Request

from printshop.application.dto import PageRequest
from printshop.application.use_cases.auth import AuthService
from printshop.application.use_cases.carts import CartService
from printshop.application.use_cases.categories import CategoryService
from printshop.application.use_cases.files import FileService
from printshop.application.use_cases.orders import OrderService
from printshop.application.use_cases.payments import PaymentService
from printshop.application.use_cases.products import ProductService
from printshop.application.use_cases.users import UserService
from printshop.bootstrap import Container
from printshop.domain.errors import UnauthorizedError
from printshop.domain.user import Actor

ACCESS_TOKEN_COOKIE = "access_token"


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_auth_service(container: Container = Depends(get_container)) -> AuthService:
    return container.auth_service()


def get_user_service(container: Container = Depends(get_container)) -> UserService:
    return container.user_service()


def get_category_service(container: Container = Depends(get_container)) -> CategoryService:
    return container.category_service()


def get_product_service(container: Container = Depends(get_container)) -> ProductService:
    return container.product_service()


def get_file_service(container: Container = Depends(get_container)) -> FileService:
    return container.file_service()


def get_cart_service(container: Container = Depends(get_container)) -> CartService:
    return container.cart_service()


def get_order_service(container: Container = Depends(get_container)) -> OrderService:
    return container.order_service()


def get_payment_service(container: Container = Depends(get_container)) -> PaymentService:
    return container.payment_service()


def _extract_token(request: Request) -> str:
    header = request.headers.get("Authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise UnauthorizedError("Invalid token format")
        return token.strip()
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if not token:
        raise UnauthorizedError("No token provided")
    return token


def get_current_actor(request: Request, auth: AuthService = Depends(get_auth_service)) -> Actor:
    return auth.authenticate(_extract_token(request))


def get_page(page: int = Query(1), limit: int = Query(10)) -> PageRequest:
    # 範囲外の値は 422 ではなく BadRequest として返す
    return PageRequest.of(page, limit)
