"""
Enrichment Pipeline

Implements the three-stage email annotation pipeline:
1. Categorization (free-text label from the model)
2. Action-item extraction (JSON payload parsed from the model output)
3. Reply drafting (free-text draft from the model)

Design Considerations:
- Stages run sequentially and hand an immutable PipelineState forward
- Each stage is exactly one model call; those calls are the only
  suspension and failure points
- A ModelFailure in any stage aborts the run before the overlay is touched
- On success the three results are written in a single overlay update
- Runs on the same email are serialized through the overlay store's
  per-email lock
"""

import logging
import time
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from email_brain.config.engine_config import ENGINE_CONFIG
from email_brain.enrichment.action_items import extract_action_items
from email_brain.errors import ModelFailure
from email_brain.integrations.base import TextGenerator
from email_brain.models import ActionItem, AnnotationResult, Email, PromptPurpose
from email_brain.storage.overlays import EmailOverlayStore
from email_brain.storage.prompts import PromptCatalog

logger = logging.getLogger(__name__)


def render_email(email: Email) -> str:
    """Normalized text rendering of an email appended to every stage prompt."""
    return f"From: {email.sender} <{email.sender_email}>\nSubject: {email.subject}\n\n{email.body}"


@dataclass(frozen=True)
class PipelineState:
    """Result-so-far passed from stage to stage."""
    email_id: str
    email_text: str
    instructions: Mapping[PromptPurpose, str]
    category: Optional[str] = None
    action_items: Optional[Tuple[ActionItem, ...]] = None
    draft_reply: Optional[str] = None

    def to_result(self) -> AnnotationResult:
        return AnnotationResult(
            category=self.category or "",
            action_items=self.action_items or (),
            draft_reply=self.draft_reply or "",
        )


class EnrichmentPipeline:
    """
    Annotates one email at a time with category, action items and a draft reply.

    Prompt for every stage is ``<instruction>\\n\\n<rendered email>``, where the
    instruction is the owner's template for that purpose or a built-in fallback.
    """

    def __init__(
        self,
        generator: TextGenerator,
        prompts: PromptCatalog,
        overlays: EmailOverlayStore,
        fallback_instructions: Optional[Dict[str, str]] = None
    ):
        self.generator = generator
        self.prompts = prompts
        self.overlays = overlays
        self.fallback_instructions = (
            fallback_instructions or ENGINE_CONFIG["enrichment"]["fallback_instructions"]
        )

    async def process(self, email: Email) -> AnnotationResult:
        """
        Run all three stages on ``email`` and store the annotation.

        Args:
            email: Immutable base record to annotate

        Returns:
            The annotation written to the overlay store

        Raises:
            ModelFailure: If any stage's model call fails; the overlay is
                left exactly as it was
        """
        async with self.overlays.lock_for(email.id):
            start_time = time.time()
            logger.info(f"Starting enrichment pipeline for email {email.id}")

            state = PipelineState(
                email_id=email.id,
                email_text=render_email(email),
                instructions=self._resolve_instructions(email.user_id),
            )

            try:
                state = await self.categorize(state)
                state = await self.extract_actions(state)
                state = await self.draft_reply(state)
            except ModelFailure as e:
                logger.error(f"Enrichment pipeline aborted for email {email.id}: {e.message}")
                raise

            result = state.to_result()
            self.overlays.apply_annotation(email.id, result)

            logger.info(
                f"Completed enrichment pipeline for email {email.id} "
                f"in {time.time() - start_time:.3f} seconds"
            )
            return result

    async def categorize(self, state: PipelineState) -> PipelineState:
        """Stage 1: the trimmed model output becomes the category label as-is."""
        output = await self._call_stage(state, PromptPurpose.CATEGORIZATION)
        return replace(state, category=output.strip())

    async def extract_actions(self, state: PipelineState) -> PipelineState:
        """Stage 2: malformed output degrades to no action items."""
        output = await self._call_stage(state, PromptPurpose.ACTION_EXTRACTION)
        return replace(state, action_items=tuple(extract_action_items(output.strip())))

    async def draft_reply(self, state: PipelineState) -> PipelineState:
        """Stage 3: the trimmed model output is the draft."""
        output = await self._call_stage(state, PromptPurpose.AUTO_REPLY)
        return replace(state, draft_reply=output.strip())

    def build_prompt(self, state: PipelineState, purpose: PromptPurpose) -> str:
        return f"{state.instructions[purpose]}\n\n{state.email_text}"

    def _resolve_instructions(self, user_id: str) -> Mapping[PromptPurpose, str]:
        templates = self.prompts.resolve(user_id)
        instructions = {}
        for purpose in PromptPurpose:
            content = templates.get(purpose)
            if content and content.strip():
                instructions[purpose] = content
            else:
                logger.debug(f"No {purpose.value} prompt for user {user_id}, using fallback")
                instructions[purpose] = self.fallback_instructions[purpose.value]
        return MappingProxyType(instructions)

    async def _call_stage(self, state: PipelineState, purpose: PromptPurpose) -> str:
        prompt = self.build_prompt(state, purpose)
        logger.debug(f"[{state.email_id}] {purpose.value} prompt length: {len(prompt)}")
        return await self.generator.generate(prompt)
