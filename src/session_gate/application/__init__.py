"""Application layer."""

from session_gate.application.auto_accept import accept_key, resolve_auto_accept
from session_gate.application.composer import compute_blocked_state
from session_gate.application.models import (
    BlockedState,
    PermissionReply,
    PermissionRequest,
    QuestionRequest,
    Session,
)
from session_gate.application.request_tree import resolve_blocking_request
from session_gate.application.session_tree import downward, upward

__all__ = [
    "BlockedState",
    "PermissionReply",
    "PermissionRequest",
    "QuestionRequest",
    "Session",
    "accept_key",
    "compute_blocked_state",
    "downward",
    "resolve_auto_accept",
    "resolve_blocking_request",
    "upward",
]
