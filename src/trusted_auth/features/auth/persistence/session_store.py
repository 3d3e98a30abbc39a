"""Persistence store keeping the principal in the HTTP session."""

import logging
import secrets
from typing import Optional

from ..entities.protocols import PersistenceStoreProtocol
from ..entities.request import AuthRequest
from ....core.value_objects.references import Principal

logger = logging.getLogger(__name__)


class SessionAuthenticationPersistenceStore(PersistenceStoreProtocol):
    """Stores the principal in the session under a random per-process key.
    
    The key is not guessable by application code sharing the session.
    """
    
    SESSION_KEY = f"trustedauth.{secrets.token_hex(8)}"
    
    def store(self, request: AuthRequest, principal: Principal) -> None:
        if request.session is None:
            logger.error(f"No session to store user [{principal}]")
            return
        logger.debug(f"User [{principal}] associated to session")
        request.session[self.SESSION_KEY] = principal
    
    def retrieve(self, request: AuthRequest) -> Optional[Principal]:
        if request.session is None:
            logger.debug("Unable to retrieve user from session")
            return None
        
        principal = request.session.get(self.SESSION_KEY)
        if principal is not None:
            logger.debug(f"User [{principal}] retrieved from session")
        else:
            logger.debug("No user found in session")
        return principal
    
    def clear(self, request: AuthRequest) -> None:
        if request.session is None:
            return
        logger.debug("Clearing user from session")
        request.session.pop(self.SESSION_KEY, None)
