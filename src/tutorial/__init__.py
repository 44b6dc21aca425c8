"""
Walkthrough

Narrated tour of the relation, entity and repository layers.
"""

from tutorial.config import IntroConfig
from tutorial.walkthrough import run_walkthrough

__all__ = [
    "IntroConfig",
    "run_walkthrough",
]
