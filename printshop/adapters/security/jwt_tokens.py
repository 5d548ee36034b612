from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from printshop.application.ports import TokenService
from printshop.domain.errors import UnauthorizedError
from printshop.domain.user import Actor, Role


class JwtTokenService(TokenService):
    def __init__(self, secret: str, algorithm: str = "HS256", expires: timedelta = timedelta(hours=1)):
        self.secret = secret
        self.algorithm = algorithm
        self.expires = expires

    def issue(self, actor: Actor) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(actor.id),
            "email": actor.email,
            "role": actor.role.value,
            "iat": now,
            "exp": now + self.expires,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Actor:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
            return Actor(id=UUID(claims["sub"]), role=Role(claims.get("role", "USER")), email=claims.get("email", ""))
        except jwt.ExpiredSignatureError as e:
            raise UnauthorizedError("Token has expired") from e
        except (jwt.InvalidTokenError, ValueError) as e:
            raise UnauthorizedError("Invalid token") from e
