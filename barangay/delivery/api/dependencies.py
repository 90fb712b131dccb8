# barangay/delivery/api/dependencies.py
import math
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from barangay.config.settings import settings
from barangay.domain.errors import SessionError
from barangay.domain.session import SessionContext, SessionStore
from barangay.domain.template_service import TemplateService

bearer = HTTPBearer(auto_error=False)


def _positive_int(raw: Optional[str], default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


@dataclass
class PageParams:
    page: int
    limit: int
    search: str

    def pages(self, total: int) -> int:
        return math.ceil(total / self.limit)


def page_params(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    search: str = Query(""),
) -> PageParams:
    return PageParams(
        page=_positive_int(page, 1),
        limit=min(_positive_int(limit, settings.PAGE_SIZE), settings.MAX_PAGE_SIZE),
        search=search.strip(),
    )


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def current_session(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    store: SessionStore = Depends(get_session_store),
) -> SessionContext:
    if creds is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied: no token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return store.resolve(creds.credentials)
    except SessionError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e),
                            headers={"WWW-Authenticate": "Bearer"})


def get_template_service(request: Request) -> TemplateService:
    service = getattr(request.app.state, "template_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready. Please try again in a moment.",
        )
    return service
