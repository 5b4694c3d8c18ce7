"""Request-scoped dependencies shared by the routers."""
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from marketplace.database import get_db
from marketplace.services import account_service
from marketplace.services.context import AuthenticatedContext

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login")


def get_current_context(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> AuthenticatedContext:
    """Resolve the bearer token into a fresh AuthenticatedContext."""
    return account_service.context_for_token(db, token)
