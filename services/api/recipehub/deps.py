"""FastAPI dependencies for the recipe API.

Provides:
- Database session dependency
- Request context: the calling user (X-User-Id, set by the auth gateway)
  plus the resolved locale (X-Lang → Accept-Language → default)
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from .db import get_db
from .models import User
from .settings import settings


@dataclass(frozen=True)
class RequestContext:
    user: User
    locale: str

    @property
    def user_id(self) -> str:
        return self.user.id


def pick_locale(header: Optional[str]) -> str:
    """First supported locale mentioned in the header, else the default."""
    if not header:
        return settings.default_locale
    lc = header.lower()
    for locale in settings.supported_locales:
        if locale != settings.default_locale and locale in lc:
            return locale
    return settings.default_locale


def get_locale(
    x_lang: Optional[str] = Header(None, alias="X-Lang"),
    accept_language: Optional[str] = Header(None, alias="Accept-Language"),
) -> str:
    return pick_locale(x_lang or accept_language)


def get_request_context(
    db: Session = Depends(get_db),
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
    locale: str = Depends(get_locale),
) -> RequestContext:
    """Resolve the calling user.

    Raises:
        HTTPException 401 if the header is missing or names no known user
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user = db.get(User, x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")

    return RequestContext(user=user, locale=locale)
