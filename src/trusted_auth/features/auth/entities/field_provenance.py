"""Field provenance configuration.

When a dynamic role rule auto-creates a group, a ``group=role`` entry can be
recorded in a property of a wiki page so that administrators can see why the
group exists. This module holds the configuration of that record and the
template used to render new entries.

Template placeholders:

* ``{group.name}``: page name of the group
* ``{group.fullName}``: local serialization of the group (``Space.Page``)
* ``{group}``: default serialization of the group (``wiki:Space.Page``)
* ``{role}``: the role that produced the group

A backslash escapes the next character, so ``\\{`` renders a literal brace.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Tuple

from ....config.constants import AddGroupToFieldKeys, Defaults
from ....config.properties import PropertiesConfig
from ....core.exceptions import ConfigurationError, InvalidValueFormatError
from ....core.value_objects.references import DocumentReference

logger = logging.getLogger(__name__)

PLACEHOLDERS = ("group.name", "group.fullName", "group", "role")

# (is_placeholder, text)
TemplateToken = Tuple[bool, str]


class ValueTemplate:
    """Parsed field provenance value template."""
    
    def __init__(self, value_format: str):
        self.value_format = value_format
        self.tokens = self.parse(value_format)
    
    @staticmethod
    def parse(value_format: str) -> List[TemplateToken]:
        """Split a template into literal and placeholder tokens.
        
        Raises:
            InvalidValueFormatError: On an unmatched ``{`` or an unknown placeholder
        """
        tokens: List[TemplateToken] = []
        literal: List[str] = []
        i = 0
        n = len(value_format)
        
        while i < n:
            c = value_format[i]
            if c == "\\":
                i += 1
                if i < n:
                    literal.append(value_format[i])
            elif c == "{":
                end_brace = value_format.find("}", i + 1)
                if end_brace == -1:
                    raise InvalidValueFormatError(
                        f"Value format [{value_format}] has an unmatched '{{'. "
                        "Escape it or add the missing brace.",
                        details={"value_format": value_format},
                    )
                placeholder = value_format[i + 1:end_brace]
                if placeholder not in PLACEHOLDERS:
                    raise InvalidValueFormatError(
                        f"Value format [{value_format}] has an unknown placeholder [{placeholder}]. "
                        "Fix it or escape the opening brace '{' right before.",
                        details={"value_format": value_format, "placeholder": placeholder},
                    )
                if literal:
                    tokens.append((False, "".join(literal)))
                    literal = []
                tokens.append((True, placeholder))
                i = end_brace
            else:
                literal.append(c)
            i += 1
        
        if literal:
            tokens.append((False, "".join(literal)))
        return tokens
    
    def render(self, group: DocumentReference, role: str) -> str:
        """Render the template for a group and the role that produced it."""
        parts = []
        for is_placeholder, text in self.tokens:
            if not is_placeholder:
                parts.append(text)
            elif text == "group.name":
                parts.append(group.name)
            elif text == "group.fullName":
                parts.append(group.local())
            elif text == "group":
                parts.append(group.serialize())
            else:
                parts.append(role)
        return "".join(parts)


@dataclass(frozen=True)
class AddGroupToFieldConfiguration:
    """Where and how to record auto-created groups."""
    
    page: str = ""
    class_name: str = ""
    object_number: Optional[int] = None
    property_name: str = ""
    separator: str = Defaults.FIELD_SEPARATOR
    value_regex: str = Defaults.FIELD_VALUE_REGEX
    value_format: str = Defaults.FIELD_VALUE_FORMAT
    template: ValueTemplate = field(init=False, repr=False, compare=False)
    value_pattern: Pattern = field(init=False, repr=False, compare=False)
    
    def __post_init__(self):
        object.__setattr__(self, "template", ValueTemplate(self.value_format))
        try:
            object.__setattr__(self, "value_pattern", re.compile(self.value_regex))
        except re.error as e:
            raise InvalidValueFormatError(
                f"Value regex [{self.value_regex}] is not a valid regular expression: {e}",
                details={"value_regex": self.value_regex},
            ) from e
    
    def get_value(self, group: DocumentReference, role: str) -> str:
        """Render the entry recorded for ``group`` and ``role``."""
        return self.template.render(group, role)
    
    @classmethod
    def parse(
        cls,
        config: PropertiesConfig,
        prefix: str,
        parent: Optional["AddGroupToFieldConfiguration"] = None,
    ) -> Optional["AddGroupToFieldConfiguration"]:
        """Read a configuration from properties under ``prefix``.
        
        Missing properties are inherited from ``parent`` when given.
        
        Returns:
            The configuration, or None when neither a page nor a property name is set
            
        Raises:
            InvalidValueFormatError: When the value template or regex is invalid
            ConfigurationError: When the object number is not an integer
        """
        base = parent or cls()
        
        page = config.get_custom_property(prefix + AddGroupToFieldKeys.PAGE, base.page)
        property_name = config.get_custom_property(
            prefix + AddGroupToFieldKeys.PROPERTY_NAME, base.property_name
        )
        if not page and not property_name:
            return None
        
        object_number = config.get_custom_property(prefix + AddGroupToFieldKeys.OBJECT_NUMBER, None)
        if object_number:
            try:
                number = int(object_number)
            except ValueError as e:
                raise ConfigurationError(
                    f"Object number [{object_number}] of [{prefix}] is not an integer"
                ) from e
        else:
            number = base.object_number
        
        return cls(
            page=page,
            class_name=config.get_custom_property(prefix + AddGroupToFieldKeys.CLASS_NAME, base.class_name),
            object_number=number,
            property_name=property_name,
            separator=config.get_custom_property(prefix + AddGroupToFieldKeys.SEPARATOR, base.separator),
            value_regex=config.get_custom_property(prefix + AddGroupToFieldKeys.VALUE_REGEX, base.value_regex),
            value_format=config.get_custom_property(prefix + AddGroupToFieldKeys.VALUE_FORMAT, base.value_format),
        )
    
    def __str__(self) -> str:
        return (
            f"page: {self.page}, class name: {self.class_name}, object number: {self.object_number}, "
            f"property name: {self.property_name}, separator: {self.separator}, "
            f"value regex: {self.value_regex}, value format: {self.value_format}"
        )
    
    def is_group_role_present(self, group: DocumentReference, role: str, values: str) -> bool:
        """Check whether an entry of ``values`` already records ``group`` and ``role``.
        
        Each entry must fully match the value regex. Its ``group`` named group,
        when the regex has one and it matched, must be the group page name or a
        suffix of the serialized group; its ``role`` named group must be the role.
        """
        serialized_group = group.serialize()
        has_group = "group" in self.value_pattern.groupindex
        has_role = "role" in self.value_pattern.groupindex
        
        entries = values.split(self.separator) if self.separator else [values]
        # Blank entries (trailing separators, empty field) never record a group
        for entry in filter(None, entries):
            match = self.value_pattern.fullmatch(entry)
            if match is None:
                continue
            
            matched_group = match.group("group") if has_group else None
            if matched_group is not None and not (
                matched_group == group.name or serialized_group.endswith(matched_group)
            ):
                continue
            
            matched_role = match.group("role") if has_role else None
            if matched_role is not None and matched_role != role:
                continue
            
            logger.debug(
                f"Group [{group}] / role [{role}] is already in property [{self.property_name}] "
                f"of [{self.page}]. Matching value: [{entry}]"
            )
            return True
        
        return False
