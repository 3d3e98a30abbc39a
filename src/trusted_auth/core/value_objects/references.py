"""Wiki document references.

A document reference locates a page by wiki, space path and page name. The
string forms follow the usual wiki conventions::

    wiki:Space.Nested.Page   default serialization
    Space.Nested.Page        local serialization

A backslash escapes the separators (``.`` and ``:``) and itself. Principals
handled by the authenticator are the default serialization of a user profile
reference.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

WIKI_SEPARATOR = ":"
SPACE_SEPARATOR = "."
ESCAPE = "\\"

_ESCAPED_CHARS = (ESCAPE, SPACE_SEPARATOR, WIKI_SEPARATOR)


def _escape(part: str) -> str:
    result = []
    for ch in part:
        if ch in _ESCAPED_CHARS:
            result.append(ESCAPE)
        result.append(ch)
    return "".join(result)


@dataclass(frozen=True)
class DocumentReference:
    """Immutable reference to a wiki document."""
    
    wiki: str
    spaces: Tuple[str, ...]
    name: str
    
    def __post_init__(self):
        if isinstance(self.spaces, str):
            object.__setattr__(self, "spaces", (self.spaces,))
        elif not isinstance(self.spaces, tuple):
            object.__setattr__(self, "spaces", tuple(self.spaces))
        if not self.spaces:
            raise ValueError("A document reference needs at least one space")
    
    @property
    def last_space(self) -> str:
        """Name of the space directly holding the document."""
        return self.spaces[-1]
    
    def local(self) -> str:
        """Serialize without the wiki part."""
        path = SPACE_SEPARATOR.join(_escape(space) for space in self.spaces)
        return f"{path}{SPACE_SEPARATOR}{_escape(self.name)}"
    
    def serialize(self) -> str:
        """Serialize with the wiki part (default serialization)."""
        return f"{_escape(self.wiki)}{WIKI_SEPARATOR}{self.local()}"
    
    def compact(self, current_wiki: str) -> str:
        """Serialize relative to ``current_wiki``, omitting it when it matches."""
        if self.wiki == current_wiki:
            return self.local()
        return self.serialize()
    
    def sibling(self, name: str) -> "DocumentReference":
        """Reference to another document in the same space."""
        return DocumentReference(self.wiki, self.spaces, name)
    
    def __str__(self) -> str:
        return self.serialize()
    
    @classmethod
    def resolve(
        cls,
        text: str,
        default_wiki: str,
        default_space: Union[str, Tuple[str, ...]],
    ) -> "DocumentReference":
        """Resolve a serialized reference, filling missing parts from defaults.
        
        Args:
            text: Reference in default, local or bare page name form
            default_wiki: Wiki used when ``text`` has no wiki part
            default_space: Space used when ``text`` is a bare page name
            
        Returns:
            The resolved reference
        """
        wiki: Optional[str] = None
        segments: List[str] = []
        current: List[str] = []
        escaped = False
        
        for ch in text:
            if escaped:
                current.append(ch)
                escaped = False
            elif ch == ESCAPE:
                escaped = True
            elif ch == WIKI_SEPARATOR and wiki is None and not segments:
                wiki = "".join(current)
                current = []
            elif ch == SPACE_SEPARATOR:
                segments.append("".join(current))
                current = []
            else:
                current.append(ch)
        segments.append("".join(current))
        
        if isinstance(default_space, str):
            default_space = (default_space,)
        
        name = segments[-1]
        spaces = tuple(segments[:-1]) or tuple(default_space)
        return cls(wiki or default_wiki, spaces, name)


# Serialized user profile reference (default serialization)
Principal = str
