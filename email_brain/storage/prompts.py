"""
Prompt Catalog

Per-user, per-purpose instruction templates consumed by the enrichment
pipeline. Templates can be renamed and rewritten by their owner.

Each user holds at most one template per purpose: a second registration
for the same (user, purpose) pair is rejected instead of silently
shadowing the first one. Duplicates in the initial template set are
skipped with a warning so a bad dataset cannot prevent startup.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from email_brain.errors import NotFound, PromptConflict
from email_brain.models import PromptPurpose, PromptTemplate

logger = logging.getLogger(__name__)


class PromptCatalog:
    """Editable registry of prompt templates."""

    def __init__(self, templates: Iterable[PromptTemplate] = ()):
        self._initial: List[PromptTemplate] = []
        self._templates: Dict[str, PromptTemplate] = {}
        self._by_purpose: Dict[Tuple[str, PromptPurpose], str] = {}

        # Loaded templates come from an external dataset: the first template
        # for an id or (user, purpose) pair wins, later ones are skipped
        for template in templates:
            try:
                self.register(template)
            except PromptConflict as e:
                logger.warning(f"Skipping dataset prompt {template.id}: {e.message}")
        self._initial = [replace(t) for t in self._templates.values()]

    def register(self, template: PromptTemplate) -> None:
        """
        Add ``template`` to the catalog.

        Raises:
            PromptConflict: If the id is taken or the owner already has a
                template for this purpose
        """
        if template.id in self._templates:
            raise PromptConflict(
                f"Prompt {template.id} is already registered",
                details={"prompt_id": template.id},
            )
        key = (template.user_id, template.purpose)
        if key in self._by_purpose:
            raise PromptConflict(
                f"User {template.user_id} already has a {template.purpose.value} prompt",
                details={"prompt_id": self._by_purpose[key], "purpose": template.purpose.value},
            )

        self._templates[template.id] = replace(template)
        self._by_purpose[key] = template.id
        logger.debug(f"Registered {template.purpose.value} prompt {template.id} for user {template.user_id}")

    def list_for(self, user_id: str) -> List[PromptTemplate]:
        return [replace(t) for t in self._templates.values() if t.user_id == user_id]

    def resolve(self, user_id: str) -> Dict[PromptPurpose, str]:
        """
        Map each purpose the user has a template for to its content.

        Purposes without a template are left out; substituting a default
        instruction is the pipeline's job.
        """
        return {
            purpose: self._templates[template_id].content
            for (owner, purpose), template_id in self._by_purpose.items()
            if owner == user_id
        }

    def update(
        self,
        template_id: str,
        user_id: str,
        name: Optional[str] = None,
        content: Optional[str] = None
    ) -> PromptTemplate:
        """
        Partially update a template owned by ``user_id``.

        Only the fields passed as non-None change.

        Raises:
            NotFound: If no template with that id belongs to the user
        """
        template = self._templates.get(template_id)
        if template is None or template.user_id != user_id:
            raise NotFound("Prompt not found", details={"prompt_id": template_id})

        if name is not None:
            template.name = name
        if content is not None:
            template.content = content

        logger.info(f"Prompt {template_id} updated by user {user_id}")
        return replace(template)

    def reset(self) -> None:
        """Discard all edits and registrations made after construction."""
        initial = [replace(t) for t in self._initial]
        self._templates.clear()
        self._by_purpose.clear()
        for template in initial:
            self.register(template)
