"""Environment-variable-based configuration for the workout encoders."""

from __future__ import annotations

import os

WORKOUT_PROVIDER: str = os.environ.get("WORKOUT_PROVIDER", "Enduzo")
DEFAULT_WORKOUT_NAME: str = os.environ.get("DEFAULT_WORKOUT_NAME", "Enduzo Workout")
DEFAULT_WORKOUT_DESCRIPTION: str = os.environ.get(
    "DEFAULT_WORKOUT_DESCRIPTION", "Created with Enduzo"
)
FIT_SERIAL_NUMBER: int = int(os.environ.get("FIT_SERIAL_NUMBER", "12345"))
FIT_PRODUCT_ID: int = int(os.environ.get("FIT_PRODUCT_ID", "1"))
DEFAULT_POOL_LENGTH_M: int = int(os.environ.get("DEFAULT_POOL_LENGTH_M", "25"))
