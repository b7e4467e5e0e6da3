"""Data access package."""
from app.dao.approval_dao import (
    ApprovalDAO,
    JsonFileApprovalDAO,
    RedisApprovalDAO,
    REVIEW_APPROVALS_KEY_V1,
)

__all__ = [
    "ApprovalDAO",
    "JsonFileApprovalDAO",
    "RedisApprovalDAO",
    "REVIEW_APPROVALS_KEY_V1",
]
