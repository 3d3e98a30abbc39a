"""User profile name normalization."""

from typing import Mapping

from ....config.constants import CaseStyle


def normalize_case(name: str, case_style: CaseStyle) -> str:
    """Fold the case of a whole user name.
    
    Title case upper-cases the first character and lower-cases the rest of
    the string, it does not work per word.
    """
    if case_style == CaseStyle.LOWERCASE:
        return name.lower()
    if case_style == CaseStyle.UPPERCASE:
        return name.upper()
    if case_style == CaseStyle.TITLECASE:
        if len(name) > 1:
            return name[0].upper() + name[1:].lower()
        return name.upper()
    return name


def apply_replacements(name: str, replacements: Mapping[str, str]) -> str:
    """Apply literal substring replacements, in order."""
    for old, new in replacements.items():
        if old:
            name = name.replace(old, new)
    return name


def normalize_user_name(name: str, case_style: CaseStyle, replacements: Mapping[str, str]) -> str:
    """Build the profile page name of a user: case folding, then replacements."""
    return apply_replacements(normalize_case(name, case_style), replacements)
