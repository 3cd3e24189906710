"""Voting on balance options."""

from .models import VOTES_TABLES_CQL, Vote, create_vote


__all__ = ["VOTES_TABLES_CQL", "Vote", "create_vote"]
