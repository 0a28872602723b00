"""Session builders: due queues, new-card admission and load balancing."""

from srs_core.session_builders.admission import admit_new_cards, new_review_state
from srs_core.session_builders.due_queue import (
    build_due_queue,
    count_due,
    get_difficult_today,
    get_starred,
    is_due,
)
from srs_core.session_builders.load_balancer import balance_load
from srs_core.session_builders.pool_utils import shuffle_session

__all__ = [
    "admit_new_cards",
    "new_review_state",
    "build_due_queue",
    "count_due",
    "get_difficult_today",
    "get_starred",
    "is_due",
    "balance_load",
    "shuffle_session",
]
