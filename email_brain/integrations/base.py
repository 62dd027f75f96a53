from typing import Dict, List


class TextGenerator:
    """
    Contract for the external text-generation capability.

    Implementations turn a prompt (or a dialogue) into response text. Every
    failure, including timeouts, must surface as ``ModelFailure`` so callers
    can abort without committing partial state. No retries are expected.
    """

    async def generate(self, prompt: str, **options) -> str:
        """
        Produce a single response for ``prompt``.

        Raises:
            ModelFailure: If the underlying model call fails or times out
        """
        raise NotImplementedError("Must implement generate")

    async def converse(self, prior_turns: List[Dict[str, str]], new_turn: str, **options) -> str:
        """
        Continue a dialogue.

        Args:
            prior_turns: Earlier turns as ``{"role": "user"|"assistant", "content": str}``
            new_turn: Content of the new user turn

        Raises:
            ModelFailure: If the underlying model call fails or times out
        """
        raise NotImplementedError("Must implement converse")
