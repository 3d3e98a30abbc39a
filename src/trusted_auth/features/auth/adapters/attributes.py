"""Adapter trusting request attributes set by an upstream authentication layer."""

from typing import Any, Optional

from .base import RequestFieldTrustedAuthAdapter
from ..entities.request import AuthRequest
from ....config.constants import AdapterKeys


class AttributesTrustedAuthAdapter(RequestFieldTrustedAuthAdapter):
    """Reads identity facts from request attributes.
    
    Attributes cannot be forged by clients, so no shared secret is checked.
    """
    
    encoding_key = AdapterKeys.ATTRIBUTE_ENCODING
    field_kind = "attribute"
    
    def get_raw_field(self, request: AuthRequest, name: str) -> Optional[Any]:
        return request.get_attribute(name)
