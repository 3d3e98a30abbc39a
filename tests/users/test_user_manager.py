"""Tests for the default user manager."""

import logging

import pytest

from trusted_auth.config.constants import WikiClasses
from trusted_auth.core.exceptions import GroupQueryError
from trusted_auth.core.value_objects import DocumentReference
from trusted_auth.features.users.services.user_manager import DefaultUserManager

from tests.fakes import FailingDocumentStore, create_group, group_ref, user_ref

ALICE = user_ref("alice")
ADMINS = group_ref("Admins")
EDITORS = group_ref("Editors")


def profile_of(document_store, user):
    return document_store.get_document(user).get_first_object_of_class(WikiClasses.USERS)


class TestDefaultUserManager:
    """Test cases for DefaultUserManager."""
    
    def test_create_user(self, user_manager, document_store, caplog):
        """Test that new users are active and unknown fields ignored."""
        with caplog.at_level(logging.WARNING):
            created = user_manager.create_user(ALICE, {"email": "alice@example.com", "shoe_size": "42"})
        
        assert created is True
        assert user_manager.exists(ALICE)
        assert profile_of(document_store, ALICE).properties == {"email": "alice@example.com", "active": "1"}
        assert "shoe_size" in caplog.text
    
    def test_create_user_keeps_explicit_active(self, user_manager, document_store):
        """Test that an explicit active value is kept."""
        user_manager.create_user(ALICE, {"active": "0"})
        
        assert profile_of(document_store, ALICE).get("active") == "0"
    
    def test_create_existing_user_fails(self, user_manager):
        """Test that an existing profile is not created again."""
        user_manager.create_user(ALICE, {})
        
        assert user_manager.create_user(ALICE, {}) is False
    
    def test_custom_user_fields(self, document_store):
        """Test restricting the known profile fields."""
        user_manager = DefaultUserManager(document_store, user_fields={"email", "active"})
        
        user_manager.create_user(ALICE, {"email": "a@example.com", "company": "ACME"})
        
        assert profile_of(document_store, ALICE).properties == {"email": "a@example.com", "active": "1"}
    
    def test_synchronize_only_changed_properties(self, user_manager, document_store):
        """Test that unchanged properties do not trigger a save."""
        user_manager.create_user(ALICE, {"email": "alice@example.com"})
        document_store.saves.clear()
        
        assert user_manager.synchronize_user_properties(ALICE, {"email": "alice@example.com"}, "Sync") is True
        assert document_store.saves == []
        
        assert user_manager.synchronize_user_properties(
            ALICE, {"email": "new@example.com", "company": "ACME"}, "Sync"
        ) is True
        assert document_store.saves == [(ALICE, "Sync")]
        assert profile_of(document_store, ALICE).get("company") == "ACME"
    
    def test_synchronize_missing_user(self, user_manager):
        """Test that a missing profile is not synchronized."""
        assert user_manager.synchronize_user_properties(ALICE, {"email": "x"}, "Sync") is False
    
    def test_group_query_failure_is_wrapped(self):
        """Test that store failures listing groups raise GroupQueryError."""
        user_manager = DefaultUserManager(FailingDocumentStore(fail_group_queries=True))
        
        with pytest.raises(GroupQueryError):
            user_manager.get_groups_for_member(ALICE)
    
    def test_add_and_remove_member(self, user_manager, document_store):
        """Test adding then removing a group member."""
        create_group(document_store, ADMINS)
        
        assert user_manager.add_to_group(ALICE, ADMINS, "Add", False) is True
        assert user_manager.add_to_group(ALICE, ADMINS, "Add", False) is True
        assert document_store.saves == [(ADMINS, "Add")]
        assert document_store.get_members(ADMINS) == {ALICE}
        
        assert user_manager.remove_from_group(ALICE, ADMINS, "Remove") is True
        assert document_store.get_members(ADMINS) == set()
    
    def test_member_is_serialized_relative_to_group_wiki(self, user_manager, document_store):
        """Test that members of groups in other wikis keep their wiki."""
        group = DocumentReference("sub", ("XWiki",), "Admins")
        
        user_manager.add_to_group(ALICE, group, "Add", True)
        
        member = document_store.get_document(group).get_first_object_of_class(WikiClasses.GROUPS)
        assert member.get(WikiClasses.GROUP_MEMBER) == "xwiki:XWiki.alice"
    
    def test_unknown_group(self, user_manager, document_store):
        """Test that unknown groups are only created on request."""
        assert user_manager.add_to_group(ALICE, ADMINS, "Add", False) is False
        assert not document_store.exists(ADMINS)
        assert user_manager.remove_from_group(ALICE, ADMINS, "Remove") is False
        
        assert user_manager.add_to_group(ALICE, ADMINS, "Add", True) is True
        assert document_store.get_members(ADMINS) == {ALICE}
    
    def test_synchronize_groups_membership(self, user_manager, document_store):
        """Test applying a delta against the current memberships."""
        create_group(document_store, ADMINS, ALICE)
        create_group(document_store, EDITORS, ALICE)
        create_group(document_store, group_ref("Viewers"))
        project = group_ref("42", space="Group")
        
        synchronized = user_manager.synchronize_groups_membership(
            ALICE,
            {ADMINS, group_ref("Viewers")},
            {project},
            {EDITORS, group_ref("NotAMember")},
            "Sync",
        )
        
        assert synchronized is True
        assert document_store.get_all_groups_for_member(ALICE) == {ADMINS, group_ref("Viewers"), project}
        assert sorted(reference.name for reference, _ in document_store.saves) == ["42", "Editors", "Viewers"]
    
    def test_synchronize_groups_membership_reports_failures(self, user_manager):
        """Test that a group that cannot be joined is reported."""
        assert user_manager.synchronize_groups_membership(ALICE, {ADMINS}, set(), set(), "Sync") is False
    
    def test_synchronize_groups_membership_query_failure(self):
        """Test that memberships are not touched when current groups are unknown."""
        document_store = FailingDocumentStore(fail_group_queries=True)
        user_manager = DefaultUserManager(document_store)
        
        assert user_manager.synchronize_groups_membership(ALICE, set(), {ADMINS}, set(), "Sync") is False
        assert not document_store.exists(ADMINS)
