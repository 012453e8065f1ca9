import asyncio
import base64
import json
import logging
from dataclasses import dataclass
from typing import Optional

import firebase_admin
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth
from firebase_admin import credentials
from sqlalchemy.orm import Session

from .config import FIREBASE_PROJECT_ID, FIREBASE_SERVICE_ACCOUNT, OUTBOUND_TIMEOUT_SECONDS
from .database import get_db
from .errors import ForbiddenError, UnauthorizedError, UpstreamError
from .models import Decorator, User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def init_firebase_app():
    """Initialize Firebase Admin SDK (only once)"""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    if FIREBASE_SERVICE_ACCOUNT:
        service_account = json.loads(base64.b64decode(FIREBASE_SERVICE_ACCOUNT).decode("utf-8"))
        app = firebase_admin.initialize_app(credentials.Certificate(service_account), options)
        logger.info("Firebase Admin initialized with service account")
        return app

    try:
        cred = credentials.ApplicationDefault()
        app = firebase_admin.initialize_app(cred, options)
        logger.info("Firebase Admin initialized with default credentials")
    except Exception:
        # Token verification only needs the project ID
        app = firebase_admin.initialize_app(options=options)
        logger.info("Firebase Admin initialized with project ID only")
    return app


class FirebaseTokenVerifier:
    """Verifies Firebase ID tokens and returns the principal email"""

    def __init__(self, timeout: float = OUTBOUND_TIMEOUT_SECONDS):
        self.timeout = timeout
        self._app = None

    def _get_app(self):
        if self._app is None:
            self._app = init_firebase_app()
        return self._app

    async def verify(self, token: str) -> str:
        try:
            app = self._get_app()
            decoded = await asyncio.wait_for(
                run_in_threadpool(firebase_auth.verify_id_token, token, app), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"⏰ Token verification timed out after {self.timeout}s")
            raise UpstreamError("Identity provider timed out") from e
        except firebase_auth.CertificateFetchError as e:
            logger.error(f"❌ Could not fetch identity provider certificates: {e}")
            raise UpstreamError("Identity provider unavailable") from e
        except (ValueError, firebase_auth.InvalidIdTokenError) as e:
            # Expired and revoked tokens are InvalidIdTokenError subclasses
            logger.warning(f"⚠️ Firebase verify error: {e}")
            raise UnauthorizedError() from e

        email = decoded.get("email")
        if not email:
            logger.warning(f"⚠️ Token missing email claim. Available claims: {list(decoded.keys())}")
            raise UnauthorizedError()
        return email.lower()


_verifier: Optional[FirebaseTokenVerifier] = None


def get_token_verifier() -> FirebaseTokenVerifier:
    global _verifier
    if _verifier is None:
        _verifier = FirebaseTokenVerifier()
    return _verifier


async def get_token_email(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: FirebaseTokenVerifier = Depends(get_token_verifier),
) -> str:
    """Verified principal email for the request; 401 when absent or invalid"""
    if not credentials or not credentials.credentials:
        raise UnauthorizedError()
    return await verifier.verify(credentials.credentials)


@dataclass
class Principal:
    email: str
    user: Optional[User] = None

    @property
    def role(self) -> str:
        return self.user.role if self.user else "client"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass
class DecoratorPrincipal(Principal):
    profile: Optional[Decorator] = None


def get_principal(email: str = Depends(get_token_email), db: Session = Depends(get_db)) -> Principal:
    user = db.query(User).filter(User.email == email).first()
    return Principal(email=email, user=user)


def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if principal.role != "admin":
        logger.warning(f"🚫 Admin route denied for {principal.email} (role={principal.role})")
        raise ForbiddenError("Admin only actions", role=principal.user.role if principal.user else None)
    return principal


def require_decorator(
    principal: Principal = Depends(get_principal), db: Session = Depends(get_db)
) -> DecoratorPrincipal:
    if principal.role != "decorator":
        logger.warning(f"🚫 Decorator route denied for {principal.email} (role={principal.role})")
        raise ForbiddenError(
            "Decorators only actions", role=principal.user.role if principal.user else None
        )
    profile = db.query(Decorator).filter(Decorator.email == principal.email).first()
    return DecoratorPrincipal(email=principal.email, user=principal.user, profile=profile)
