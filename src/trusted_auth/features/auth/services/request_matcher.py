"""Request path matching."""

import re
from typing import Pattern

from ..entities.request import AuthRequest


class RequestMatcher:
    """Matches requests whose path starts with a pattern."""
    
    def __init__(self, pattern: str):
        self.pattern: Pattern = re.compile(pattern)
    
    def match(self, request: AuthRequest) -> bool:
        return self.match_path(request.path)
    
    def match_path(self, path: str) -> bool:
        return self.pattern.match(path or "") is not None
