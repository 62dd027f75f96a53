"""
Dataset Provider

Loads the immutable users, emails and prompt templates the engine serves
from a JSON document with top-level ``users``, ``emails`` and ``prompts``
arrays. The loaded collections are read-only to the engine; prompt edits
are tracked by the PromptCatalog on copies.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Union
from zoneinfo import ZoneInfo

from email_brain.models import Dataset, Email, PromptPurpose, PromptTemplate, User

logger = logging.getLogger(__name__)


def _parse_timestamp(value: str) -> datetime:
    # fromisoformat rejects a trailing "Z" on older interpreters
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    # Naive timestamps are taken as UTC so all received_at values compare
    if not parsed.tzinfo:
        parsed = parsed.replace(tzinfo=ZoneInfo("UTC"))
    return parsed


def _user_from_record(record: Dict[str, Any]) -> User:
    return User(
        id=str(record["id"]),
        email=record["email"],
        name=record.get("name", ""),
        password=record.get("password", ""),
    )


def _email_from_record(record: Dict[str, Any]) -> Email:
    return Email(
        id=str(record["id"]),
        user_id=str(record["user_id"]),
        sender=record.get("sender", ""),
        sender_email=record.get("sender_email", ""),
        subject=record.get("subject", ""),
        body=record.get("body", ""),
        received_at=_parse_timestamp(record["received_at"]),
        is_read=bool(record.get("is_read", False)),
    )


def _prompt_from_record(record: Dict[str, Any]) -> PromptTemplate:
    purpose = record.get("purpose") or record.get("prompt_type")
    return PromptTemplate(
        id=str(record["id"]),
        user_id=str(record["user_id"]),
        purpose=PromptPurpose(purpose),
        name=record.get("name", ""),
        content=record.get("content", ""),
    )


def dataset_from_dict(data: Dict[str, Any]) -> Dataset:
    """
    Build a Dataset from an already decoded JSON document.

    Raises:
        KeyError: If a record lacks a required identifier field
        ValueError: If a timestamp or prompt type cannot be parsed
    """
    return Dataset(
        users=[_user_from_record(r) for r in data.get("users", [])],
        emails=[_email_from_record(r) for r in data.get("emails", [])],
        prompts=[_prompt_from_record(r) for r in data.get("prompts", [])],
    )


def load_dataset(path: Union[str, Path]) -> Dataset:
    """
    Load the dataset JSON file at ``path``.

    A missing file yields an empty dataset so the API can still start.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Dataset file {path} not found, starting with an empty mailbox")
        return Dataset()

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    dataset = dataset_from_dict(data)
    logger.info(
        f"Loaded dataset from {path}: {len(dataset.users)} users, "
        f"{len(dataset.emails)} emails, {len(dataset.prompts)} prompts"
    )
    return dataset
