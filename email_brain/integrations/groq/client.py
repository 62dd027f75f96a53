from groq import Groq
from typing import Dict, List, Optional
from datetime import datetime
import asyncio
import os
from dotenv import load_dotenv
import logging

from email_brain.config.engine_config import ENGINE_CONFIG
from email_brain.errors import ModelFailure
from email_brain.integrations.base import TextGenerator

logger = logging.getLogger(__name__)


class GroqTextGenerator(TextGenerator):
    """Groq chat-completions backend with per-call timeout and in-memory metrics."""

    def __init__(self,
                 api_key: Optional[str] = None,
                 model: Optional[str] = None,
                 temperature: Optional[float] = None,
                 timeout: Optional[float] = None):
        """Initialize from explicit arguments, falling back to environment and engine config."""
        load_dotenv(override=False)
        model_config = ENGINE_CONFIG["text_generation"]["model"]

        self.api_key = api_key or os.getenv('GROQ_API_KEY')
        self.model = model or model_config["name"]
        self.temperature = temperature if temperature is not None else model_config["temperature"]
        self.max_tokens = model_config["max_tokens"]
        self.timeout = timeout or ENGINE_CONFIG["text_generation"]["timeout"]
        self._client: Optional[Groq] = None

        if not self.api_key:
            logger.warning("GROQ_API_KEY not found; model calls will fail until it is configured")

        self.metrics = {
            'requests': 0,
            'errors': 0,
            'performance': {
                'avg_response_time': 0.0,
                'total_requests': 0,
                'success_rate': 100.0
            }
        }

    @property
    def client(self) -> Groq:
        if self._client is None:
            if not self.api_key:
                raise ModelFailure("GROQ_API_KEY is not configured")
            self._client = Groq(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str, **options) -> str:
        return await self._complete([{"role": "user", "content": prompt}], **options)

    async def converse(self, prior_turns: List[Dict[str, str]], new_turn: str, **options) -> str:
        messages = [{"role": turn["role"], "content": turn["content"]} for turn in prior_turns]
        messages.append({"role": "user", "content": new_turn})
        return await self._complete(messages, **options)

    async def _complete(self, messages: List[Dict[str, str]], **options) -> str:
        """Run one completion, mapping timeouts and SDK errors to ModelFailure."""
        start_time = datetime.now()
        params = {
            'model': self.model,
            'messages': messages,
            'temperature': options.get('temperature', self.temperature),
            'max_completion_tokens': options.get('max_tokens', self.max_tokens),
        }
        logger.debug(f"Sending {len(messages)} messages to {self.model}")

        try:
            client = self.client
            response = await asyncio.wait_for(
                asyncio.to_thread(client.chat.completions.create, **params),
                timeout=self.timeout
            )
            content = response.choices[0].message.content or ""
        except ModelFailure as e:
            self.record_error(e.message)
            raise
        except asyncio.TimeoutError:
            self.record_error("timeout")
            logger.error(f"Model call timed out after {self.timeout}s")
            raise ModelFailure(f"Model call timed out after {self.timeout} seconds")
        except Exception as e:
            self.record_error(str(e))
            logger.error(f"Model call failed: {e}")
            raise ModelFailure(str(e)) from e

        self.record_success(start_time)
        return content

    def record_success(self, start_time: datetime):
        """Record successful request metrics."""
        duration = (datetime.now() - start_time).total_seconds()
        self.metrics['requests'] += 1
        self._update_performance(duration)

    def record_error(self, error_message: str):
        """Record error metrics."""
        self.metrics['requests'] += 1
        self.metrics['errors'] += 1
        logger.debug(f"Recorded model error: {error_message}")
        self._update_performance(None)

    def _update_performance(self, duration: Optional[float]):
        performance = self.metrics['performance']
        total_reqs = self.metrics['requests']
        successes = total_reqs - self.metrics['errors']
        if duration is not None and successes > 0:
            performance['avg_response_time'] = (
                (performance['avg_response_time'] * (successes - 1) + duration) / successes
            )
        performance['total_requests'] = total_reqs
        performance['success_rate'] = successes / total_reqs * 100

    def get_performance_metrics(self) -> Dict:
        """Get current performance metrics."""
        return dict(self.metrics['performance'])
