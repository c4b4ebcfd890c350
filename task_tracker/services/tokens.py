import uuid
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from task_tracker.config import Settings, settings as default_settings
from task_tracker.errors import SigningError, TokenExpired, TokenInvalid


class TokenService:
    """
    Issues and verifies signed access/refresh tokens.

    Both kinds carry the user id in ``sub``; they are told apart by the
    secret that signs them (and a ``type`` claim checked on verify).
    """

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        algorithm: str = "HS256",
        access_expires: timedelta = timedelta(minutes=15),
        refresh_expires: timedelta = timedelta(days=7),
    ):
        self.access_secret = access_secret
        self.refresh_secret = refresh_secret
        self.algorithm = algorithm
        self.access_expires = access_expires
        self.refresh_expires = refresh_expires

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "TokenService":
        return cls(
            access_secret=settings.SECRET_KEY,
            refresh_secret=settings.REFRESH_SECRET_KEY,
            algorithm=settings.ALGORITHM,
            access_expires=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            refresh_expires=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        )

    def _sign(self, user_id, secret: str, token_type: str, expires_delta: timedelta) -> str:
        if not secret:
            raise SigningError()
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
            "jti": uuid.uuid4().hex,
        }
        try:
            return jwt.encode(claims, secret, algorithm=self.algorithm)
        except JWTError as exc:
            raise SigningError(error=str(exc)) from exc

    def issue_access_token(self, user_id, expires_delta: timedelta | None = None) -> str:
        if expires_delta is None:
            expires_delta = self.access_expires
        return self._sign(user_id, self.access_secret, "access", expires_delta)

    def issue_refresh_token(self, user_id, expires_delta: timedelta | None = None) -> str:
        if expires_delta is None:
            expires_delta = self.refresh_expires
        return self._sign(user_id, self.refresh_secret, "refresh", expires_delta)

    def issue_token_pair(self, user_id) -> tuple[str, str]:
        return self.issue_access_token(user_id), self.issue_refresh_token(user_id)

    def verify(self, token: str, secret: str, token_type: str | None = None) -> int:
        """
        Return the user id bound to ``token``.

        Raises TokenExpired past ``exp`` and TokenInvalid for anything else
        wrong with it (garbage, bad signature, missing or non-numeric subject).
        """
        if not token:
            raise TokenInvalid()
        try:
            payload = jwt.decode(token, secret, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except JWTError as exc:
            raise TokenInvalid() from exc

        if token_type is not None and payload.get("type") != token_type:
            raise TokenInvalid()
        subject = payload.get("sub")
        try:
            return int(subject)
        except (TypeError, ValueError) as exc:
            raise TokenInvalid() from exc

    def verify_access_token(self, token: str) -> int:
        return self.verify(token, self.access_secret, "access")

    def verify_refresh_token(self, token: str) -> int:
        return self.verify(token, self.refresh_secret, "refresh")
