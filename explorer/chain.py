"""
Exploration chain state machine.

The chain is the linear history of explorations the user has made, root first.
All transitions are pure functions returning a new ExplorationState; the
owning controller swaps its reference. Branching happens only by navigating
back and appending, which discards the old suffix for good.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from explorer.models import ExplorationNode
from explorer.status import TaskState, TaskStatus, begin, advance, idle


@dataclass(frozen=True)
class ExplorationState:
    """Serializable exploration state owned by a single controller."""
    nodes: Tuple[ExplorationNode, ...] = ()
    pending_frame: Optional[str] = None  # captured but not yet submitted
    task: TaskState = TaskState()
    next_token: int = 1

    @property
    def depth(self) -> int:
        return len(self.nodes)

    @property
    def current(self) -> Optional[ExplorationNode]:
        """The displayed node, or None at the root."""
        return self.nodes[-1] if self.nodes else None

    def to_dict(self) -> dict:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "pendingFrame": self.pending_frame,
            "task": self.task.to_dict(),
            "nextToken": self.next_token,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExplorationState":
        return cls(
            nodes=tuple(ExplorationNode.from_dict(n) for n in data.get("nodes", [])),
            pending_frame=data.get("pendingFrame"),
            task=TaskState.from_dict(data["task"]) if data.get("task") else TaskState(),
            next_token=data.get("nextToken", 1),
        )


def append(state: ExplorationState, node: ExplorationNode) -> ExplorationState:
    """Push ``node``; it becomes the current node."""
    return replace(state, nodes=state.nodes + (node,), pending_frame=None, task=idle())


def navigate_to(state: ExplorationState, index: int) -> ExplorationState:
    """
    Truncate the chain to ``nodes[0..index]`` inclusive.

    Args:
        state: Current state
        index: Position of the node to return to

    Returns:
        New state whose current node is the one at ``index``

    Raises:
        IndexError: If ``index`` does not address an existing node
    """
    if not 0 <= index < len(state.nodes):
        raise IndexError(f"Cannot navigate to node {index} of a chain of length {len(state.nodes)}")
    return replace(state, nodes=state.nodes[:index + 1], pending_frame=None, task=idle())


def reset(state: ExplorationState) -> ExplorationState:
    """Return to the root, discarding every node."""
    return replace(state, nodes=(), pending_frame=None, task=idle())


def set_pending_frame(state: ExplorationState, frame: Optional[str]) -> ExplorationState:
    """Hold a captured frame until the user submits a prompt for it."""
    return replace(state, pending_frame=frame)


def begin_request(state: ExplorationState) -> Tuple[ExplorationState, int]:
    """
    Mark a new exploration request as in flight.

    Returns:
        The new state and the token that the request's result must present
    """
    token = state.next_token
    new_state = replace(
        state,
        task=begin(token, TaskStatus.GENERATING, "Generating exploration video..."),
        next_token=token + 1,
    )
    return new_state, token


def mark_polling(state: ExplorationState, token: int) -> ExplorationState:
    return replace(state, task=advance(state.task, token, TaskStatus.POLLING, "Waiting for the video..."))


def complete_request(state: ExplorationState, token: int, node: ExplorationNode) -> ExplorationState:
    """Append ``node`` if ``token`` is the active request; otherwise discard it."""
    if not is_active(state, token):
        return state
    new_state = append(state, node)
    return replace(new_state, task=TaskState(TaskStatus.DONE, "Exploration ready!", None))


def fail_request(state: ExplorationState, token: int, message: str) -> ExplorationState:
    """Record a failure for the active request; keep the pending frame for a retry."""
    if not is_active(state, token):
        return state
    return replace(state, task=advance(state.task, token, TaskStatus.ERROR, message))


def is_active(state: ExplorationState, token: int) -> bool:
    return state.task.token is not None and state.task.token == token
