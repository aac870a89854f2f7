import logging
from dataclasses import dataclass
from typing import Optional
import requests
from fastapi import Header
from .config import Settings, settings
from .errors import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class CurrentUser:
    id: str
    token: str


def bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise UnauthorizedError()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise UnauthorizedError()
    return token.strip()


def fetch_hosted_user(token: str, http: Optional[requests.Session] = None,
                      cfg: Settings = settings) -> str:
    """Ask the hosted auth service who owns ``token``; returns the user id."""
    http = http or requests
    try:
        resp = http.get(
            f"{cfg.SUPABASE_URL.rstrip('/')}/auth/v1/user",
            headers={"apikey": cfg.SUPABASE_ANON_KEY, "Authorization": f"Bearer {token}"},
            timeout=cfg.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        logger.warning("auth service unreachable: %s", e)
        raise UnauthorizedError() from e
    if resp.status_code != 200:
        logger.warning("auth service rejected token (%s)", resp.status_code)
        raise UnauthorizedError()
    user_id = resp.json().get("id")
    if not user_id:
        raise UnauthorizedError()
    return user_id


def resolve_user(token: str, cfg: Settings = settings) -> CurrentUser:
    if cfg.STORE_BACKEND == "supabase":
        return CurrentUser(id=fetch_hosted_user(token, cfg=cfg), token=token)
    user_id = cfg.LOCAL_API_TOKENS.get(token)
    if not user_id:
        logger.warning("unknown local token")
        raise UnauthorizedError()
    return CurrentUser(id=user_id, token=token)


def get_current_user(authorization: Optional[str] = Header(default=None)) -> CurrentUser:
    return resolve_user(bearer_token(authorization))
