"""In-memory wiki document store."""

import copy
import logging
import threading
from typing import Dict, List, Set, Tuple

from ..entities.documents import WikiDocument
from ..entities.protocols import DocumentStoreProtocol
from ....config.constants import WikiClasses
from ....core.value_objects.references import DocumentReference

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStoreProtocol):
    """In-memory implementation of DocumentStoreProtocol.
    
    Documents are copied in and out so that callers never share state with
    the store. Every save is recorded in ``saves`` as ``(reference, comment)``.
    """
    
    def __init__(self):
        self._documents: Dict[DocumentReference, WikiDocument] = {}
        self._lock = threading.RLock()
        self.saves: List[Tuple[DocumentReference, str]] = []
    
    def exists(self, reference: DocumentReference) -> bool:
        with self._lock:
            return reference in self._documents
    
    def get_document(self, reference: DocumentReference) -> WikiDocument:
        with self._lock:
            document = self._documents.get(reference)
            if document is None:
                return WikiDocument(reference=reference, is_new=True)
            return copy.deepcopy(document)
    
    def save_document(self, document: WikiDocument, comment: str) -> None:
        with self._lock:
            stored = copy.deepcopy(document)
            stored.is_new = False
            self._documents[document.reference] = stored
            self.saves.append((document.reference, comment))
            document.is_new = False
        logger.debug(f"Saved document [{document.reference}]: {comment}")
    
    def delete_document(self, reference: DocumentReference) -> bool:
        with self._lock:
            return self._documents.pop(reference, None) is not None
    
    def get_members(self, group: DocumentReference) -> Set[DocumentReference]:
        with self._lock:
            document = self._documents.get(group)
            if document is None:
                return set()
            return self._members_of(document)
    
    def get_all_groups_for_member(self, member: DocumentReference) -> Set[DocumentReference]:
        with self._lock:
            direct_members = {
                reference: self._members_of(document)
                for reference, document in self._documents.items()
                if document.get_objects(WikiClasses.GROUPS)
            }
        
        groups: Set[DocumentReference] = set()
        pending = [member]
        while pending:
            current = pending.pop()
            for group, members in direct_members.items():
                if current in members and group not in groups:
                    groups.add(group)
                    pending.append(group)
        return groups
    
    @staticmethod
    def _members_of(document: WikiDocument) -> Set[DocumentReference]:
        members = set()
        for obj in document.get_objects(WikiClasses.GROUPS):
            member = obj.get(WikiClasses.GROUP_MEMBER)
            if member:
                members.add(
                    DocumentReference.resolve(
                        member, document.reference.wiki, document.reference.spaces
                    )
                )
        return members
