"""Tests for dynamic role rules."""

import re

import pytest

from trusted_auth.features.auth.entities.dynamic_role import DynamicRoleConfiguration

from tests.fakes import group_ref


@pytest.fixture
def project_rule():
    """Rule turning ``proj-<id>-admin`` roles into ``Group.<id>`` groups."""
    return DynamicRoleConfiguration(
        name="proj",
        role_prefix="proj-",
        role_suffix="-admin",
        group_prefix="Group.",
    )


class TestDynamicRoleConfiguration:
    """Test cases for DynamicRoleConfiguration."""
    
    def test_matches_role_by_prefix_and_suffix(self, project_rule):
        """Test role selection by prefix and suffix."""
        assert project_rule.matches_role("proj-42-admin")
        assert not project_rule.matches_role("proj-42-user")
        assert not project_rule.matches_role("team-42-admin")
        assert not project_rule.matches_role(None)
    
    def test_prefix_and_suffix_cannot_overlap(self):
        """Test that a role shorter than prefix plus suffix does not match."""
        rule = DynamicRoleConfiguration(name="r", role_prefix="ab", role_suffix="ba", group_prefix="G-")
        
        assert not rule.matches_role("aba")
        assert rule.matches_role("abba")
    
    def test_rule_without_selector_matches_nothing(self):
        """Test that a rule without prefix, suffix or regex ignores every role."""
        rule = DynamicRoleConfiguration(name="r", group_prefix="G-")
        
        assert not rule.matches_role("admin")
    
    def test_regex_must_match_whole_role(self):
        """Test that the regex is matched against the whole role."""
        rule = DynamicRoleConfiguration(
            name="r", role_prefix="proj-", role_regex=r"proj-(\d+)", group_prefix="Project"
        )
        
        assert rule.matches_role("proj-42")
        assert not rule.matches_role("proj-42x")
    
    def test_group_name_swaps_prefix_and_suffix(self, project_rule):
        """Test the default derivation of the group name."""
        assert project_rule.group_name_for_role("proj-42-admin") == "Group.42"
    
    def test_group_name_with_regex_replacement(self):
        """Test group name derivation by substitution."""
        rule = DynamicRoleConfiguration(
            name="r",
            role_regex=r"cn=(\w+),ou=groups",
            replacement=r"LDAP.\1Group",
            group_prefix="LDAP.",
        )
        
        assert rule.matches_role("cn=editors,ou=groups")
        assert rule.group_name_for_role("cn=editors,ou=groups") == "LDAP.editorsGroup"
    
    def test_regex_without_replacement_uses_prefixes(self):
        """Test that a regex without replacement only filters roles."""
        rule = DynamicRoleConfiguration(
            name="r", role_prefix="proj-", role_regex=r"proj-\d+", group_prefix="P", group_suffix="Group"
        )
        
        assert rule.group_name_for_role("proj-7") == "P7Group"
    
    def test_is_unsafe(self, project_rule):
        """Test that a rule needs a group prefix or suffix to be safe."""
        assert not project_rule.is_unsafe
        assert DynamicRoleConfiguration(name="r", role_prefix="x").is_unsafe
        assert not DynamicRoleConfiguration(name="r", group_suffix="Group").is_unsafe
    
    def test_matches_group(self, project_rule):
        """Test recognition of groups produced by the rule."""
        assert project_rule.matches_group(group_ref("42", space="Group"), "XWiki")
        assert not project_rule.matches_group(group_ref("42", space="Other"), "XWiki")
    
    def test_matches_group_ignores_wiki_qualifier(self):
        """Test that the wiki part of the group prefix is ignored."""
        rule = DynamicRoleConfiguration(name="r", role_prefix="p-", group_prefix="xwiki:Projects.P")
        
        assert rule.unqualified_group_prefix == "Projects.P"
        assert rule.matches_group(group_ref("P12", space="Projects"), "XWiki")
    
    def test_matches_group_by_bare_name_in_default_space(self):
        """Test that groups of the default space also match on their page name."""
        rule = DynamicRoleConfiguration(name="r", role_prefix="team-", group_prefix="Team")
        
        assert rule.matches_group(group_ref("TeamBlue"), "XWiki")
        assert not rule.matches_group(group_ref("TeamBlue", space="Other"), "XWiki")
    
    def test_invalid_regex_raises(self):
        """Test that an invalid role regex is rejected at construction."""
        with pytest.raises(re.error):
            DynamicRoleConfiguration(name="r", role_regex="(", group_prefix="G")
