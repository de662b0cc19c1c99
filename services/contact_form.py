import logging
from typing import Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

FIELDS = ("name", "email", "subject", "message")


class ContactForm:
    """Public contact form state, submitted to the ``/contact`` endpoint."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"

    def __init__(self, http, base_url: str = ""):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.data: Dict[str, str] = {name: "" for name in FIELDS}
        self.status = self.IDLE
        self.error: Optional[str] = None
        self.message_id: Optional[str] = None

    def update(self, **fields: str) -> None:
        for name, value in fields.items():
            if name not in self.data:
                raise KeyError(f"Unknown contact form field: {name}")
            self.data[name] = value

    def missing_fields(self) -> List[str]:
        return [name for name in FIELDS if not self.data[name]]

    def reset(self) -> None:
        self.data = {name: "" for name in FIELDS}

    def submit(self) -> bool:
        self.status = self.IDLE
        self.error = None
        self.message_id = None

        if self.missing_fields():
            self.status = self.ERROR
            self.error = "All fields are required"
            return False

        self.status = self.SUBMITTING
        try:
            response = self.http.post(f"{self.base_url}/contact", json=dict(self.data))
            payload = response.json()
        except requests.RequestException as exc:
            logger.error("Error sending message: %s", exc)
            self.status = self.ERROR
            self.error = "Failed to send message"
            return False

        if response.status_code != 201:
            self.status = self.ERROR
            self.error = payload.get("error", "Failed to send message")
            return False

        self.status = self.SUCCESS
        self.message_id = payload["messageId"]
        self.reset()
        return True
