import logging

from printshop.application.dto import LoginInput, RegisterInput, TokenOutput, UserOutput
from printshop.application.ports import PasswordHasher, TokenService, UnitOfWork
from printshop.domain.errors import ConflictError, UnauthorizedError
from printshop.domain.user import Actor, Role, User

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(
        self,
        uow: UnitOfWork,
        hasher: PasswordHasher,
        tokens: TokenService,
        admin_emails: frozenset[str] = frozenset(),
    ):
        self.uow = uow
        self.hasher = hasher
        self.tokens = tokens
        self.admin_emails = admin_emails

    def register(self, input: RegisterInput) -> UserOutput:
        email = input.email.strip().lower()
        logger.info("Attempting to register new user: %s", email)
        with self.uow:
            if self.uow.users.get_by_email(email):
                logger.warning("Registration rejected, email already in use: %s", email)
                raise ConflictError("User already exists")
            user = User(
                first_name=input.first_name,
                last_name=input.last_name,
                email=email,
                password_hash=self.hasher.hash(input.password),
                phone=input.phone,
                role=Role.ADMIN if email in self.admin_emails else Role.USER,
            )
            self.uow.users.add(user)
            self.uow.commit()
        return UserOutput.from_user(user)

    def login(self, input: LoginInput) -> TokenOutput:
        email = input.email.strip().lower()
        logger.info("Attempting to login user with email: %s", email)
        with self.uow:
            user = self.uow.users.get_by_email(email)
        if user is None or not self.hasher.verify(input.password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise UnauthorizedError("Invalid credentials")
        return TokenOutput(token=self.tokens.issue(user.as_actor()), user=UserOutput.from_user(user))

    def authenticate(self, token: str) -> Actor:
        claims = self.tokens.verify(token)
        with self.uow:
            user = self.uow.users.get(claims.id)
        if user is None:
            raise UnauthorizedError("User not found")
        # ロールはトークンではなく現在のユーザー情報から取る
        return user.as_actor()
