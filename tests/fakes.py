"""Test doubles and builders shared by the test suite."""

from typing import Dict, Iterable, Optional

from trusted_auth.config.constants import PropertyPrefixes, WikiClasses
from trusted_auth.config.settings import TrustedAuthSettings
from trusted_auth.core.exceptions import DocumentStoreError
from trusted_auth.core.value_objects import DocumentReference
from trusted_auth.features.auth.configuration import TrustedAuthConfiguration
from trusted_auth.features.users.repositories.document_store import InMemoryDocumentStore


def trusted_properties(**properties: str) -> Dict[str, str]:
    """Prefix trusted authentication property names."""
    return {f"{PropertyPrefixes.CONFIGURATION}.{key}": value for key, value in properties.items()}


def make_settings(properties: Optional[Dict[str, str]] = None, **kwargs) -> TrustedAuthSettings:
    """Settings with explicit values, ignoring any ``.env`` file."""
    return TrustedAuthSettings(_env_file=None, properties=properties or {}, **kwargs)


def make_configuration(properties: Optional[Dict[str, str]] = None, **kwargs) -> TrustedAuthConfiguration:
    return TrustedAuthConfiguration(make_settings(properties, **kwargs))


def user_ref(name: str) -> DocumentReference:
    return DocumentReference("xwiki", ("XWiki",), name)


def group_ref(name: str, space: str = "XWiki") -> DocumentReference:
    return DocumentReference("xwiki", (space,), name)


class FakeAdapter:
    """Identity adapter returning fixed facts."""
    
    def __init__(
        self,
        uid: Optional[str] = None,
        name: Optional[str] = None,
        properties: Optional[Dict[str, str]] = None,
        roles: Optional[Iterable[str]] = (),
        logout_url: Optional[str] = None,
    ):
        self.uid = uid
        self.name = name if name is not None else uid
        self.properties = properties or {}
        self.roles = set(roles) if roles is not None else None
        self.logout_url = logout_url
    
    def get_user_uid(self, request):
        return self.uid
    
    def get_user_name(self, request):
        return self.name
    
    def get_user_property(self, request, name):
        return self.properties.get(name)
    
    def is_user_in_role(self, request, role):
        return self.roles is not None and role in self.roles
    
    def get_user_roles(self, request):
        return set(self.roles) if self.roles is not None else None
    
    def get_logout_url(self, request, location):
        if self.logout_url is None:
            return None
        if location is None:
            return self.logout_url
        return self.logout_url.replace("__REDIRECT__", location)


class DictPersistenceStore:
    """Persistence store keeping the principal in memory."""
    
    def __init__(self, principal: Optional[str] = None):
        self.principal = principal
        self.cleared = 0
    
    def store(self, request, principal):
        self.principal = principal
    
    def retrieve(self, request):
        return self.principal
    
    def clear(self, request):
        self.cleared += 1
        self.principal = None


class FailingDocumentStore(InMemoryDocumentStore):
    """In-memory store whose saves or group queries can be made to fail."""
    
    def __init__(self, fail_saves: bool = False, fail_group_queries: bool = False):
        super().__init__()
        self.fail_saves = fail_saves
        self.fail_group_queries = fail_group_queries
    
    def save_document(self, document, comment):
        if self.fail_saves:
            raise DocumentStoreError(f"Cannot save [{document.reference}]")
        super().save_document(document, comment)
    
    def get_all_groups_for_member(self, member):
        if self.fail_group_queries:
            raise DocumentStoreError("Group index unavailable")
        return super().get_all_groups_for_member(member)


def create_group(document_store, group: DocumentReference, *members: DocumentReference) -> None:
    """Save a group page holding ``members``, then forget the setup saves."""
    document = document_store.get_document(group)
    for member in members:
        member_object = document.new_object(WikiClasses.GROUPS)
        member_object.set(WikiClasses.GROUP_MEMBER, member.compact(group.wiki))
    document_store.save_document(document, "Test setup")
    document_store.saves.clear()


def create_page(document_store, page: DocumentReference, class_name: str, **properties: str) -> None:
    """Save a page holding one object of ``class_name``, then forget the setup saves."""
    document = document_store.get_document(page)
    page_object = document.new_object(class_name)
    for name, value in properties.items():
        page_object.set(name, value)
    document_store.save_document(document, "Test setup")
    document_store.saves.clear()
