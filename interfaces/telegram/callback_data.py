from __future__ import annotations

from application.outcomes import RESET_PAYLOAD

CALLBACK_ACTIONS = (RESET_PAYLOAD,)


def parse_callback(data: str) -> str:
    """
    Validate the payload of an inline button press.

    Format: reset
    """

    if data not in CALLBACK_ACTIONS:
        raise ValueError(f"Invalid callback data: {data}")
    return data
