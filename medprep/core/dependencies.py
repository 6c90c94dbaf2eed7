# medprep/core/dependencies.py
"""Shared dependencies for routers."""

import secrets
from typing import Annotated, Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from medprep.core import config
from medprep.core.database import get_db
from medprep.core.exceptions import AdminAccessRequired
from medprep.core.storage import SignedUrlIssuer, get_signed_url_issuer

# Core database dependency
SessionDep = Annotated[Session, Depends(get_db)]

# Object storage
SignedUrlIssuerDep = Annotated[SignedUrlIssuer, Depends(get_signed_url_issuer)]


def require_admin(x_admin_token: Annotated[Optional[str], Header()] = None) -> None:
    """Gate administrative routes on the shared admin token."""
    expected = config.ADMIN_API_TOKEN
    if not expected or not x_admin_token:
        raise AdminAccessRequired()
    if not secrets.compare_digest(x_admin_token.encode(), expected.encode()):
        raise AdminAccessRequired()


AdminDep = Depends(require_admin)
