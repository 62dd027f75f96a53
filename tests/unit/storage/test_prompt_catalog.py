"""
Unit tests for the prompt catalog: resolution, partial updates, ownership
checks and duplicate rejection.
"""

import logging

import pytest

from email_brain.engine import EmailBrainEngine
from email_brain.errors import NotFound, PromptConflict
from email_brain.models import PromptPurpose, PromptTemplate
from email_brain.storage.prompts import PromptCatalog


@pytest.fixture
def catalog(dataset):
    return PromptCatalog(dataset.prompts)


class TestResolve:

    def test_resolve_maps_purpose_to_content(self, catalog):
        resolved = catalog.resolve("user-1")

        assert set(resolved) == set(PromptPurpose)
        assert resolved[PromptPurpose.AUTO_REPLY] == "Draft a short polite reply."

    def test_resolve_leaves_out_missing_purposes(self, catalog):
        resolved = catalog.resolve("user-2")

        assert list(resolved) == [PromptPurpose.CATEGORIZATION]

    def test_resolve_unknown_user_is_empty(self, catalog):
        assert catalog.resolve("nobody") == {}

    def test_list_for_returns_only_owned_templates(self, catalog):
        assert [t.id for t in catalog.list_for("user-1")] == ["prompt-1", "prompt-2", "prompt-3"]
        assert [t.id for t in catalog.list_for("user-2")] == ["prompt-4"]


class TestUpdate:

    def test_partial_update_changes_only_given_fields(self, catalog):
        updated = catalog.update("prompt-3", "user-1", content="Reply in one sentence.")

        assert updated.content == "Reply in one sentence."
        assert updated.name == "Auto reply"
        assert catalog.resolve("user-1")[PromptPurpose.AUTO_REPLY] == "Reply in one sentence."

    def test_update_name_only(self, catalog):
        catalog.update("prompt-1", "user-1", name="Triage")

        template = catalog.list_for("user-1")[0]
        assert template.name == "Triage"
        assert template.content == "Categorize this email as Important, Newsletter or Spam."

    def test_update_unknown_prompt_raises_not_found(self, catalog):
        with pytest.raises(NotFound):
            catalog.update("prompt-99", "user-1", name="x")

    def test_update_other_users_prompt_raises_not_found(self, catalog):
        with pytest.raises(NotFound):
            catalog.update("prompt-4", "user-1", content="hijacked")

        assert catalog.resolve("user-2")[PromptPurpose.CATEGORIZATION] == "Categorize this email."

    def test_returned_template_is_a_copy(self, catalog):
        updated = catalog.update("prompt-1", "user-1", name="Triage")
        updated.content = "mutated"

        assert catalog.resolve("user-1")[PromptPurpose.CATEGORIZATION] != "mutated"

    def test_dataset_templates_are_not_mutated(self, dataset, catalog):
        catalog.update("prompt-1", "user-1", content="new")

        assert dataset.prompts[0].content == "Categorize this email as Important, Newsletter or Spam."


class TestRegister:

    def test_duplicate_purpose_for_user_is_rejected(self, catalog):
        with pytest.raises(PromptConflict):
            catalog.register(
                PromptTemplate("prompt-5", "user-1", PromptPurpose.AUTO_REPLY, "Second reply", "Another")
            )

    def test_duplicate_id_is_rejected(self, catalog):
        with pytest.raises(PromptConflict):
            catalog.register(
                PromptTemplate("prompt-1", "user-2", PromptPurpose.AUTO_REPLY, "Reply", "Draft")
            )

    def test_constructor_skips_duplicate_purpose_keeping_first(self, caplog):
        templates = [
            PromptTemplate("a", "user-1", PromptPurpose.CATEGORIZATION, "One", "first"),
            PromptTemplate("b", "user-1", PromptPurpose.CATEGORIZATION, "Two", "second"),
        ]

        with caplog.at_level(logging.WARNING, logger="email_brain.storage.prompts"):
            catalog = PromptCatalog(templates)

        assert catalog.resolve("user-1") == {PromptPurpose.CATEGORIZATION: "first"}
        assert [t.id for t in catalog.list_for("user-1")] == ["a"]
        assert "Skipping dataset prompt b" in caplog.text

    def test_constructor_skips_duplicate_id(self):
        templates = [
            PromptTemplate("a", "user-1", PromptPurpose.CATEGORIZATION, "One", "first"),
            PromptTemplate("a", "user-2", PromptPurpose.AUTO_REPLY, "Two", "second"),
        ]

        catalog = PromptCatalog(templates)

        assert catalog.list_for("user-2") == []

    def test_reset_after_skipped_duplicates(self):
        catalog = PromptCatalog([
            PromptTemplate("a", "user-1", PromptPurpose.CATEGORIZATION, "One", "first"),
            PromptTemplate("b", "user-1", PromptPurpose.CATEGORIZATION, "Two", "second"),
        ])

        catalog.reset()

        assert catalog.resolve("user-1") == {PromptPurpose.CATEGORIZATION: "first"}

    def test_engine_starts_with_duplicate_dataset_prompts(self, dataset, generator):
        dataset.prompts.append(
            PromptTemplate("prompt-5", "user-1", PromptPurpose.CATEGORIZATION, "Duplicate", "ignored")
        )

        engine = EmailBrainEngine(dataset, generator)
        user, token = engine.authenticate("sam@example.com", "letmein")

        assert user.id == "user-2"
        assert engine.prompts.resolve("user-1")[PromptPurpose.CATEGORIZATION] == (
            "Categorize this email as Important, Newsletter or Spam."
        )

    def test_new_purpose_registration_resolves(self, catalog):
        catalog.register(PromptTemplate("prompt-5", "user-2", PromptPurpose.AUTO_REPLY, "Reply", "Be brief."))

        assert catalog.resolve("user-2")[PromptPurpose.AUTO_REPLY] == "Be brief."


class TestReset:

    def test_reset_discards_edits_and_registrations(self, catalog):
        catalog.update("prompt-1", "user-1", content="edited")
        catalog.register(PromptTemplate("prompt-5", "user-2", PromptPurpose.AUTO_REPLY, "Reply", "Be brief."))

        catalog.reset()

        assert catalog.resolve("user-1")[PromptPurpose.CATEGORIZATION] == (
            "Categorize this email as Important, Newsletter or Spam."
        )
        assert PromptPurpose.AUTO_REPLY not in catalog.resolve("user-2")
