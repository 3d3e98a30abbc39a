"""Adapter trusting HTTP headers set by an authenticating reverse proxy."""

import logging
from typing import Optional

from .base import RequestFieldTrustedAuthAdapter
from ..entities.request import AuthRequest
from ....config.constants import AdapterKeys

logger = logging.getLogger(__name__)


class HeadersTrustedAuthAdapter(RequestFieldTrustedAuthAdapter):
    """Reads identity facts from request headers.
    
    The proxy must strip these headers from client requests. When
    ``secret_field`` is configured, the request must also carry that header
    with the ``secret_value`` shared with the proxy.
    """
    
    encoding_key = AdapterKeys.HEADER_ENCODING
    field_kind = "header"
    
    def get_raw_field(self, request: AuthRequest, name: str) -> Optional[str]:
        return request.get_header(name)
    
    def get_user_uid(self, request: AuthRequest) -> Optional[str]:
        secret_field = self.configuration.get_custom_property(AdapterKeys.SECRET_FIELD)
        if secret_field:
            secret = self.get_field(request, secret_field)
            if secret is None or secret != self.configuration.get_custom_property(AdapterKeys.SECRET_VALUE):
                logger.debug(f"Received invalid value for secret header [{secret_field}], falling back.")
                return None
            logger.debug("Secret validation succeeded.")
        
        return super().get_user_uid(request)
