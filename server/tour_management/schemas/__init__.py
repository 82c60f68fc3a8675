"""Pydantic schemas for request/response validation."""

from .common import *  # noqa: F403
from .patch import *  # noqa: F403
from .show import *  # noqa: F403
from .tour import *  # noqa: F403
