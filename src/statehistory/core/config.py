"""Configuration for history engine instances."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class HistoryConfig(BaseModel):
    """
    Tunable behavior of a History instance.

    Attributes:
        limit: Maximum number of undoable change-sets kept. The oldest entries
            are dropped once the limit is exceeded. None keeps everything.
    """

    limit: Optional[int] = Field(default=None, ge=1)

    model_config = {"extra": "forbid", "frozen": True}


__all__ = ["HistoryConfig"]
