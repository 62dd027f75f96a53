"""
Action-item extraction from free-text model output.

The action-extraction stage asks the model for a JSON object with a
``tasks`` array, but models wrap that object in prose, code fences or
apologies. This module pulls the object out and normalizes it. It never
raises: any malformed output becomes an empty list.
"""

import json
import logging
import re
from typing import Any, List, Optional

from email_brain.errors import MalformedModelOutput
from email_brain.models import ActionItem

logger = logging.getLogger(__name__)

# Greedy: spans from the first "{" to the last "}" across lines
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def _parse_payload(text: str) -> List[Any]:
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        raise MalformedModelOutput("No JSON object found in model output")

    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise MalformedModelOutput(f"Invalid JSON in model output: {e.msg}")

    if not isinstance(payload, dict):
        raise MalformedModelOutput("Model output JSON is not an object")

    tasks = payload.get("tasks")
    if tasks is None:
        raise MalformedModelOutput("Model output JSON has no 'tasks' field")
    if not isinstance(tasks, list):
        raise MalformedModelOutput("'tasks' field is not a list")
    return tasks


def _to_action_item(entry: Any) -> Optional[ActionItem]:
    if isinstance(entry, str):
        return ActionItem(task=entry.strip()) if entry.strip() else None

    if isinstance(entry, dict):
        task = entry.get("task")
        if not isinstance(task, str) or not task.strip():
            return None
        deadline = entry.get("deadline")
        return ActionItem(
            task=task.strip(),
            deadline=deadline if isinstance(deadline, str) else None
        )

    return None


def extract_action_items(text: str) -> List[ActionItem]:
    """
    Parse the action items out of a model response.

    Args:
        text: Raw model output, expected to contain one JSON object with a
            ``tasks`` array of ``{"task": ..., "deadline": ...}`` entries

    Returns:
        Extracted items in the order given; empty when the output is
        malformed. Entries without a usable task are skipped.
    """
    try:
        entries = _parse_payload(text)
    except MalformedModelOutput as e:
        logger.warning(f"Failed to parse action items: {e.message}")
        return []

    items = []
    for entry in entries:
        item = _to_action_item(entry)
        if item is None:
            logger.debug(f"Skipping unusable action item entry: {entry!r}")
            continue
        items.append(item)
    return items
