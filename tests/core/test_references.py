"""Tests for wiki document references."""

import pytest

from trusted_auth.core.exceptions import GroupQueryError, create_error_response
from trusted_auth.core.value_objects import DocumentReference


class TestDocumentReference:
    """Test cases for DocumentReference."""
    
    def test_resolve_bare_name_uses_defaults(self):
        """Test that a bare page name gets the default wiki and space."""
        reference = DocumentReference.resolve("alice", "xwiki", "XWiki")
        
        assert reference == DocumentReference("xwiki", ("XWiki",), "alice")
    
    def test_resolve_local_reference(self):
        """Test that a local reference keeps its space and gets the default wiki."""
        reference = DocumentReference.resolve("Groups.Admins", "xwiki", "XWiki")
        
        assert reference.wiki == "xwiki"
        assert reference.spaces == ("Groups",)
        assert reference.name == "Admins"
    
    def test_resolve_full_reference_with_nested_spaces(self):
        """Test resolving a reference with wiki and nested spaces."""
        reference = DocumentReference.resolve("sub:Projects.Team.Members", "xwiki", "XWiki")
        
        assert reference.wiki == "sub"
        assert reference.spaces == ("Projects", "Team")
        assert reference.name == "Members"
        assert reference.last_space == "Team"
    
    def test_serialize_and_local(self):
        """Test default and local serializations."""
        reference = DocumentReference("xwiki", ("XWiki",), "alice")
        
        assert reference.serialize() == "xwiki:XWiki.alice"
        assert reference.local() == "XWiki.alice"
        assert str(reference) == "xwiki:XWiki.alice"
    
    def test_separators_are_escaped(self):
        """Test that dots and colons in names survive serialization."""
        reference = DocumentReference("xwiki", ("XWiki",), "john.doe:x")
        
        serialized = reference.serialize()
        
        assert serialized == "xwiki:XWiki.john\\.doe\\:x"
        assert DocumentReference.resolve(serialized, "other", "Other") == reference
    
    def test_compact_omits_current_wiki(self):
        """Test that compact serialization drops the wiki only when it is the current one."""
        reference = DocumentReference("xwiki", ("XWiki",), "alice")
        
        assert reference.compact("xwiki") == "XWiki.alice"
        assert reference.compact("sub") == "xwiki:XWiki.alice"
    
    def test_sibling(self):
        """Test that a sibling lives in the same wiki and space."""
        reference = DocumentReference("xwiki", ("Groups",), "Staff")
        
        assert reference.sibling("Staff-Shard0") == DocumentReference("xwiki", ("Groups",), "Staff-Shard0")
    
    def test_spaces_are_normalized_to_tuple(self):
        """Test that a single space string or a list are accepted."""
        assert DocumentReference("xwiki", "XWiki", "a").spaces == ("XWiki",)
        assert DocumentReference("xwiki", ["A", "B"], "a").spaces == ("A", "B")
    
    def test_missing_space_is_rejected(self):
        """Test that a reference needs a space."""
        with pytest.raises(ValueError, match="at least one space"):
            DocumentReference("xwiki", (), "alice")
    
    def test_references_are_hashable(self):
        """Test that equal references collapse in sets."""
        groups = {
            DocumentReference.resolve("XWiki.Admins", "xwiki", "XWiki"),
            DocumentReference.resolve("Admins", "xwiki", "XWiki"),
            DocumentReference.resolve("xwiki:XWiki.Admins", "xwiki", "XWiki"),
        }
        
        assert len(groups) == 1


class TestErrorResponse:
    """Test cases for error rendering."""
    
    def test_create_error_response(self):
        """Test that the error response carries code, message and details."""
        error = GroupQueryError("Cannot list groups", details={"user": "xwiki:XWiki.alice"})
        
        response = create_error_response(error)
        
        assert response == {
            "error": {
                "code": "GroupQueryError",
                "message": "Cannot list groups",
                "details": {"user": "xwiki:XWiki.alice"},
                "type": "GroupQueryError",
            }
        }
    
    def test_error_string_includes_details(self):
        """Test that details are appended to the error message."""
        error = GroupQueryError("Cannot list groups", details={"user": "alice"})
        
        assert str(error) == "Cannot list groups (user=alice)"
        assert str(GroupQueryError("Cannot list groups")) == "Cannot list groups"
