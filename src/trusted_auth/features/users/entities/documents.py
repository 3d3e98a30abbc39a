"""Wiki document and object entities.

A document holds objects grouped by class name. Each class keeps numbered
slots; removing an object leaves an empty slot so that the numbers of the
remaining objects do not change.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from ....core.value_objects.references import DocumentReference


@dataclass
class WikiObject:
    """Object attached to a document, with string properties."""
    
    class_name: str
    number: int
    properties: Dict[str, str] = field(default_factory=dict)
    
    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.properties.get(name, default)
    
    def set(self, name: str, value: str) -> None:
        self.properties[name] = value
    
    def has(self, name: str) -> bool:
        return name in self.properties


@dataclass
class WikiDocument:
    """Wiki page with its objects."""
    
    reference: DocumentReference
    objects: Dict[str, List[Optional[WikiObject]]] = field(default_factory=dict)
    is_new: bool = True
    
    def get_object(self, class_name: str, number: int = 0) -> Optional[WikiObject]:
        """Get the object of a class at a given number."""
        slots = self.objects.get(class_name, [])
        if 0 <= number < len(slots):
            return slots[number]
        return None
    
    def get_objects(self, class_name: str) -> List[WikiObject]:
        """Get every object of a class."""
        return [obj for obj in self.objects.get(class_name, []) if obj is not None]
    
    def get_first_object_of_class(self, class_name: str) -> Optional[WikiObject]:
        objects = self.get_objects(class_name)
        return objects[0] if objects else None
    
    def get_first_object(self, property_name: str) -> Optional[WikiObject]:
        """Get the first object, of any class, having ``property_name``."""
        for obj in self.iter_objects():
            if obj.has(property_name):
                return obj
        return None
    
    def iter_objects(self) -> Iterator[WikiObject]:
        for slots in self.objects.values():
            for obj in slots:
                if obj is not None:
                    yield obj
    
    def new_object(self, class_name: str) -> WikiObject:
        """Attach a new object of ``class_name`` and return it."""
        slots = self.objects.setdefault(class_name, [])
        obj = WikiObject(class_name=class_name, number=len(slots))
        slots.append(obj)
        return obj
    
    def remove_object(self, obj: WikiObject) -> bool:
        """Detach an object, keeping the numbers of the others."""
        slots = self.objects.get(obj.class_name, [])
        if 0 <= obj.number < len(slots) and slots[obj.number] is obj:
            slots[obj.number] = None
            return True
        return False
    
    def find_object(self, class_name: str, property_name: str, value: str) -> Optional[WikiObject]:
        """Get the first object of a class whose property equals ``value``."""
        for obj in self.get_objects(class_name):
            if obj.get(property_name) == value:
                return obj
        return None
