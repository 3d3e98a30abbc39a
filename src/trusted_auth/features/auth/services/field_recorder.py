"""Field provenance recording for auto-created groups.

A :class:`FieldProvenanceBatch` lives for one authentication: pages are
loaded once, modified in memory, then saved once each.
"""

import logging
from typing import Dict, Optional

from ..entities.dynamic_role import DynamicRoleConfiguration
from ..entities.field_provenance import AddGroupToFieldConfiguration
from ...users.entities.documents import WikiDocument, WikiObject
from ...users.entities.protocols import DocumentStoreProtocol
from ....config.constants import Comments
from ....core.exceptions import DocumentStoreError
from ....core.value_objects.references import WIKI_SEPARATOR, DocumentReference

logger = logging.getLogger(__name__)


class FieldProvenanceBatch:
    """Records ``group=role`` entries in configured page fields."""
    
    def __init__(self, document_store: DocumentStoreProtocol, main_wiki: str, default_space: str):
        self.document_store = document_store
        self.main_wiki = main_wiki
        self.default_space = default_space
        self._documents: Dict[str, WikiDocument] = {}
        self._modified: Dict[str, WikiDocument] = {}
    
    def add(self, group: DocumentReference, role: str, configuration: DynamicRoleConfiguration) -> None:
        """Record that ``role`` produced ``group`` unless it is already recorded."""
        conf = configuration.add_group_to_field
        if conf is None:
            logger.debug(f"Group [{group}] / role [{role}] does not have any add group to field configuration.")
            return
        
        logger.debug(f"Adding group [{group}] / role [{role}] to a field using configuration [{conf}]")
        
        page = conf.page
        if not page:
            return
        if WIKI_SEPARATOR not in page:
            page = f"{self.main_wiki}{WIKI_SEPARATOR}{page}"
        
        try:
            document = self._get_document(page)
        except DocumentStoreError as e:
            logger.error(f"Failed to get document matching configuration [{conf}]. The field won't be updated: {e}")
            return
        
        obj = self._get_object(document, conf)
        if obj is None:
            logger.error(f"Could not find any object matching configuration [{conf}]. The field won't be updated.")
            return
        
        values = obj.get(conf.property_name) or ""
        if conf.is_group_role_present(group, role, values):
            return
        
        new_value = conf.get_value(group, role)
        logger.debug(
            f"Group [{group}] / role [{role}] was not found in property [{conf.property_name}] "
            f"of [{page}]. Adding it: [{new_value}]"
        )
        obj.set(conf.property_name, f"{values}{conf.separator}{new_value}" if values else new_value)
        self._modified[page] = document
    
    def save(self) -> None:
        """Save every modified page once."""
        for page, document in self._modified.items():
            try:
                self.document_store.save_document(document, Comments.FIELD_PROVENANCE)
                logger.debug(f"Updated [{page}] with new group(s)/role(s).")
            except DocumentStoreError as e:
                logger.error(f"Could not update the group/role field of page [{page}]: {e}")
        self._modified.clear()
    
    def _get_document(self, page: str) -> WikiDocument:
        document = self._documents.get(page)
        if document is None:
            reference = DocumentReference.resolve(page, self.main_wiki, self.default_space)
            document = self.document_store.get_document(reference)
            self._documents[page] = document
        return document
    
    def _get_object(self, document: WikiDocument, conf: AddGroupToFieldConfiguration) -> Optional[WikiObject]:
        if not conf.class_name:
            return document.get_first_object(conf.property_name)
        
        class_name = DocumentReference.resolve(conf.class_name, self.main_wiki, self.default_space).local()
        if conf.object_number is None:
            return document.get_first_object_of_class(class_name)
        return document.get_object(class_name, conf.object_number)
