"""Data Access Objects for the review approval map (review id -> bool)."""
import json
import logging
from pathlib import Path
from typing import Protocol

import redis

logger = logging.getLogger(__name__)

REVIEW_APPROVALS_KEY_V1 = "review_approvals_v1"


class ApprovalDAO(Protocol):
    """Approval store contract: read the whole map, write one entry."""

    def get(self) -> dict[int, bool]:
        ...

    def set(self, review_id: int, display_on_website: bool) -> None:
        ...


def _parse_approvals(raw: dict) -> dict[int, bool]:
    """Keep entries with an integer-like key and a boolean value."""
    approvals: dict[int, bool] = {}
    for key, value in raw.items():
        try:
            review_id = int(key)
        except (TypeError, ValueError):
            logger.warning(f"[ApprovalDAO] Ignoring approval with non-integer id: {key!r}")
            continue
        if isinstance(value, bool):
            approvals[review_id] = value
    return approvals


class JsonFileApprovalDAO:
    """Approval map stored as a JSON object {"<id>": true|false} on disk."""

    def __init__(self, path: Path):
        """Initialize JsonFileApprovalDAO.

        Args:
            path: Location of the approvals JSON file
        """
        self.path = Path(path)

    def get(self) -> dict[int, bool]:
        """Read all approvals. A missing or invalid file reads as {}."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"[JsonFileApprovalDAO] Could not read {self.path}: {e}")
            return {}

        if not isinstance(raw, dict):
            logger.warning(f"[JsonFileApprovalDAO] {self.path} does not hold a JSON object")
            return {}
        return _parse_approvals(raw)

    def set(self, review_id: int, display_on_website: bool) -> None:
        """Persist one approval.

        Raises:
            OSError: If the file cannot be written
        """
        approvals = self.get()
        approvals[review_id] = display_on_website

        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump({str(k): v for k, v in approvals.items()}, f, indent=2)
        tmp_path.replace(self.path)

        logger.info(
            f"[JsonFileApprovalDAO] Review {review_id} displayOnWebsite={display_on_website}"
        )


class RedisApprovalDAO:
    """Approval map stored in a Redis hash ("1" shown, "0" hidden)."""

    def __init__(self, client: redis.Redis, key: str = REVIEW_APPROVALS_KEY_V1):
        """Initialize RedisApprovalDAO.

        Args:
            client: Redis client created with decode_responses=True
            key: Hash key holding the approvals
        """
        self.client = client
        self.key = key

    def get(self) -> dict[int, bool]:
        """Read all approvals. Redis failures read as {}."""
        try:
            raw = self.client.hgetall(self.key)
        except redis.RedisError as e:
            logger.error(f"[RedisApprovalDAO] Failed to read approvals: {e}")
            return {}
        return _parse_approvals({k: v == "1" for k, v in raw.items()})

    def set(self, review_id: int, display_on_website: bool) -> None:
        """Persist one approval.

        Raises:
            redis.RedisError: If the write fails
        """
        self.client.hset(self.key, str(review_id), "1" if display_on_website else "0")
        logger.info(
            f"[RedisApprovalDAO] Review {review_id} displayOnWebsite={display_on_website}"
        )
