"""Generic string keyed property access.

Properties are looked up in two layers: runtime preferences first (keys
``<preference prefix>_<name>``), then the static configuration (keys
``<configuration prefix>.<name>``). An empty preference falls through to the
configuration layer.
"""

import logging
from typing import Collection, Dict, List, Mapping, Optional, Set

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"true", "yes", "on", "1", "y", "t"})


def split_escaped(text: str, delimiter: str) -> List[str]:
    """Split ``text`` on ``delimiter``, honoring backslash escapes.
    
    Empty tokens are dropped and the escaping backslashes are removed.
    """
    tokens: List[str] = []
    escaped = False
    current: List[str] = []
    
    for ch in text:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == delimiter:
            if current:
                tokens.append("".join(current))
                current = []
        elif ch == "\\":
            escaped = True
        else:
            current.append(ch)
    
    if current:
        tokens.append("".join(current))
    
    return tokens


class PropertiesConfig:
    """Typed access to layered string properties."""
    
    def __init__(
        self,
        properties: Optional[Mapping[str, str]] = None,
        preferences: Optional[Mapping[str, str]] = None,
        preference_prefix: str = "",
        configuration_prefix: str = "",
    ):
        self._properties = dict(properties or {})
        self._preferences = dict(preferences or {})
        self._preference_prefix = f"{preference_prefix}_" if preference_prefix else ""
        self._configuration_prefix = f"{configuration_prefix}." if configuration_prefix else ""
    
    def get_custom_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Retrieve value of a simple property, or ``default`` when missing."""
        value = self._preferences.get(self._preference_prefix + name)
        
        if not value:
            value = self._properties.get(self._configuration_prefix + name)
        
        if value is None:
            value = default
        
        logger.debug(f"Param [{name}]: {value}")
        return value
    
    def get_custom_property_as_boolean(self, name: str, default: bool) -> bool:
        """Retrieve a property as a boolean; 'true', 'yes' and 'on' are true."""
        value = self.get_custom_property(name)
        if value is not None:
            return value.strip().lower() in TRUE_VALUES
        return default
    
    def get_custom_property_as_list(
        self, name: str, separator: str, default: Optional[List[str]] = None
    ) -> Optional[List[str]]:
        """Retrieve the list of values assigned to a property.
        
        An explicitly empty value gives an empty list, a missing property
        gives ``default``.
        """
        value = self.get_custom_property(name)
        if value is None:
            return default
        if not value:
            return []
        return split_escaped(value, separator)
    
    def get_custom_property_as_set(
        self, name: str, separator: str, default: Optional[Set[str]] = None
    ) -> Optional[Set[str]]:
        """Retrieve the set of values assigned to a property."""
        values = self.get_custom_property_as_list(name, separator)
        if values is None:
            return default
        return set(values)
    
    def get_custom_property_as_map(
        self,
        name: str,
        separator: str,
        default: Optional[Dict[str, str]] = None,
        force_lower_case_key: bool = False,
    ) -> Optional[Dict[str, str]]:
        """Retrieve ``key=value`` pairs assigned to a property, in order.
        
        Later duplicates override earlier ones.
        """
        entries = self.get_custom_property_as_list(name, separator)
        if entries is None:
            return default
        
        mappings: Dict[str, str] = {}
        for entry in entries:
            key, sep, value = entry.partition("=")
            if not sep:
                logger.warning(f"Error parsing [{name}] attribute: {entry}")
                continue
            mappings[key.lower() if force_lower_case_key else key] = value
        
        return mappings
    
    def get_custom_property_as_map_of_set(
        self,
        name: str,
        separator: str,
        default: Optional[Dict[str, Collection[str]]] = None,
        left: bool = True,
    ) -> Optional[Dict[str, Set[str]]]:
        """Retrieve one-to-many ``a=b`` pairs assigned to a property.
        
        Args:
            name: The property name
            separator: The entry separator
            default: Value returned when the property is missing
            left: When true the left side of each pair is the key
            
        Returns:
            Mapping of each key to the set of values paired with it
        """
        entries = self.get_custom_property_as_list(name, separator)
        if entries is None:
            return default
        
        one_to_many: Dict[str, Set[str]] = {}
        for entry in entries:
            split_index = entry.find("=")
            if split_index < 1:
                logger.error(f"Error parsing [{name}] attribute: {entry}")
                continue
            
            first, second = entry[:split_index], entry[split_index + 1:]
            key, value = (first, second) if left else (second, first)
            one_to_many.setdefault(key, set()).add(value)
            logger.debug(f"[{name}] mapping found: {key} {one_to_many[key]}")
        
        return one_to_many
