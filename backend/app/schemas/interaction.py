"""Pydantic schemas for vote requests and ledger results."""

from pydantic import BaseModel


class VoteRequest(BaseModel):
    interaction_type: str  # "upvote" | "downvote", checked by the ledger


class VoteResult(BaseModel):
    upvotes: int
    downvotes: int
    user_interaction: str = ""
