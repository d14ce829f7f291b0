import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
import bcrypt
from jose import jwt, JWTError

from app.core.config import settings
from app.core.exceptions import DomainError
from app.models.user import User, RoleEnum
from app.repositories.user_repository import UserRepository
from app.schemas.auth import UserLogin, UserRegister

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self):
        self.SECRET_KEY = settings.SECRET_KEY
        self.REFRESH_SECRET_KEY = settings.REFRESH_SECRET_KEY
        self.ALGORITHM = settings.ALGORITHM
        self.ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        self.REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt()
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        if not hashed_password:
            return False
        try:
            return bcrypt.checkpw(
                plain_password.encode('utf-8'),
                hashed_password.encode('utf-8')
            )
        except ValueError:
            # Строка в БД не является bcrypt-хэшем
            return False

    def create_access_token(self, data: dict, expires_delta: Optional[timedelta] = None):
        to_encode = data.copy()
        if expires_delta:
            expire = datetime.utcnow() + expires_delta
        else:
            expire = datetime.utcnow() + timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)
        to_encode.update({"exp": expire})
        encoded_jwt = jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)
        return encoded_jwt

    def create_refresh_token(self, data: dict):
        to_encode = data.copy()
        expire = datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        # jti делает токены, выпущенные в одну секунду, различимыми
        to_encode.update({"exp": expire, "jti": secrets.token_hex(8)})
        encoded_jwt = jwt.encode(to_encode, self.REFRESH_SECRET_KEY, algorithm=self.ALGORITHM)
        return encoded_jwt

    def _decode_refresh_subject(self, refresh_token: str) -> Optional[int]:
        try:
            payload = jwt.decode(refresh_token, self.REFRESH_SECRET_KEY, algorithms=[self.ALGORITHM])
        except JWTError:
            return None
        user_id = payload.get("sub")
        if user_id is None:
            return None
        return int(user_id)

    def issue_tokens(self, user: User) -> dict:
        access_token = self.create_access_token(
            data={"sub": str(user.id), "role": user.role.value},
            expires_delta=timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES),
        )
        refresh_token = self.create_refresh_token(data={"sub": str(user.id)})
        return {
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "role": user.role.value,
        }

    async def store_refresh_token(self, repo: UserRepository, user: User, refresh_token: str) -> None:
        expires = datetime.utcnow() + timedelta(days=self.REFRESH_TOKEN_EXPIRE_DAYS)
        await repo.save_refresh_token(user, refresh_token, expires)

    async def authenticate_user(self, repo: UserRepository, login_data: UserLogin) -> Optional[User]:
        user = await repo.get_by_email(login_data.email)
        if not user or not self.verify_password(login_data.password, user.password):
            return None
        return user

    async def register_user(self, repo: UserRepository, user_data: UserRegister) -> User:
        existing_user = await repo.get_by_email(user_data.email)
        if existing_user:
            raise DomainError("Пользователь с таким email уже существует")

        new_user = User(
            email=user_data.email,
            nickname=user_data.nickname,
            password=self.hash_password(user_data.password),
            role=RoleEnum.user,
            created_at=datetime.utcnow(),
        )
        created = await repo.create_user(new_user)
        logger.info(f"Зарегистрирован пользователь {created.email}")
        return created

    async def rotate_refresh_token(self, repo: UserRepository, refresh_token: str) -> Optional[User]:
        """
        Проверить refresh-токен перед выдачей новой пары.

        Подпись валидна, но токена нет в БД, значит его уже использовали:
        аннулируем текущий токен владельца, чтобы украденная копия стала бесполезной.
        """
        user_id = self._decode_refresh_subject(refresh_token)
        if user_id is None:
            return None

        user = await repo.get_by_refresh_token(refresh_token)
        if user is None:
            victim = await repo.get_by_id(user_id)
            if victim is not None:
                logger.warning(f"Повторное использование refresh-токена пользователя {victim.id}")
                await repo.revoke_refresh_token(victim)
            return None

        if user.id != user_id:
            return None
        if not user.refresh_token_expires or user.refresh_token_expires < datetime.utcnow():
            return None
        return user

    async def logout_user(self, repo: UserRepository, refresh_token: str) -> bool:
        user_id = self._decode_refresh_subject(refresh_token)
        if user_id is None:
            return False

        user = await repo.get_by_id(user_id)
        if user is None:
            return False

        await repo.revoke_refresh_token(user)
        return True


auth_service = AuthService()
