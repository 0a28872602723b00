"""
Vocabulary spaced-repetition engine.

Subpackages:
- fsrs: memory model, scheduler, legacy migration, persistence
- session_builders: due queues, new-card admission, load balancing
- analytics: review statistics and workload forecasts
"""

__version__ = "1.0.0"
