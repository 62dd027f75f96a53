"""
Shared data models for the enrichment and context engine.

Base records (users, emails) are immutable and owned by the dataset.
Overlays, prompt templates and chat messages are the mutable state this
package manages.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PromptPurpose(str, Enum):
    """Pipeline stage a prompt template is written for."""
    CATEGORIZATION = "categorization"
    ACTION_EXTRACTION = "action_extraction"
    AUTO_REPLY = "auto_reply"


class ChatRole(str, Enum):
    """Author of a stored chat message."""
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class User:
    """Mailbox owner. The password is opaque and only compared at login."""
    id: str
    email: str
    name: str
    password: str

    def public_profile(self) -> Dict[str, str]:
        return {"id": self.id, "email": self.email, "name": self.name}


@dataclass(frozen=True)
class Email:
    """Immutable base email record."""
    id: str
    user_id: str
    sender: str
    sender_email: str
    subject: str
    body: str
    received_at: datetime
    is_read: bool = False


@dataclass(frozen=True)
class ActionItem:
    task: str
    deadline: Optional[str] = None


@dataclass
class EmailOverlay:
    """
    Mutable derived state attached to a single email.

    Created lazily on the first mark-read or annotation. Action items are
    kept as a tuple so snapshots handed out cannot be mutated in place.
    """
    is_read: bool = False
    category: Optional[str] = None
    action_items: Tuple[ActionItem, ...] = ()
    draft_reply: Optional[str] = None


@dataclass(frozen=True)
class AnnotationResult:
    """Outcome of one full enrichment pipeline run."""
    category: str
    action_items: Tuple[ActionItem, ...]
    draft_reply: str


@dataclass(frozen=True)
class MergedEmail:
    """
    Externally visible combination of a base email and its overlay.

    This is the only email representation returned to callers.
    """
    id: str
    user_id: str
    sender: str
    sender_email: str
    subject: str
    body: str
    received_at: datetime
    is_read: bool
    category: Optional[str] = None
    action_items: Tuple[ActionItem, ...] = ()
    draft_reply: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["action_items"] = [asdict(item) for item in self.action_items]
        return data


@dataclass
class PromptTemplate:
    """Per-user instruction template for one pipeline stage."""
    id: str
    user_id: str
    purpose: PromptPurpose
    name: str
    content: str


@dataclass(frozen=True)
class ChatMessage:
    role: ChatRole
    content: str


@dataclass
class Dataset:
    """Collections supplied at process start by the dataset provider."""
    users: List[User] = field(default_factory=list)
    emails: List[Email] = field(default_factory=list)
    prompts: List[PromptTemplate] = field(default_factory=list)

    def find_user_by_id(self, user_id: str) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def emails_for(self, user_id: str) -> List[Email]:
        return [e for e in self.emails if e.user_id == user_id]
