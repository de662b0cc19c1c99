"""Admin dashboard client: polls the admin messages API and holds view state.

The dashboard is driven through an HTTP session object exposing
``get/put/delete`` (a ``requests.Session``, or FastAPI's ``TestClient``).
Polling is delegated to a scheduler with ``start(interval, callback)`` and
``stop()``; the default one runs a daemon thread.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"
ERROR = "error"

SESSION_EXPIRED = "Session expired - please log in"
FETCH_FAILED = "Failed to fetch messages"


@dataclass(frozen=True)
class PaginationState:
    page: int = 1
    limit: int = 10
    total_count: int = 0
    total_pages: int = 0

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "PaginationState":
        return cls(
            page=payload["page"],
            limit=payload["limit"],
            total_count=payload["totalCount"],
            total_pages=payload["totalPages"],
        )


@dataclass
class MessageItem:
    id: str
    name: str
    email: str
    subject: str
    message: str
    created_at: str
    read: bool = False
    replied: bool = False

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "MessageItem":
        return cls(
            id=payload["id"],
            name=payload["name"],
            email=payload["email"],
            subject=payload["subject"],
            message=payload["message"],
            created_at=payload["createdAt"],
            read=payload["read"],
            replied=payload["replied"],
        )


class IntervalTimer:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread until stopped."""

    def __init__(self):
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self, interval: float, callback: Callable[[], None]) -> None:
        if self._thread is not None:
            return
        stop_event = threading.Event()

        def run():
            while not stop_event.wait(interval):
                try:
                    callback()
                except Exception:
                    logger.exception("Poll callback failed; polling continues")

        self._stop_event = stop_event
        self._thread = threading.Thread(target=run, name="admin-dashboard-poll", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 5) -> None:
        if self._thread is None:
            return
        thread = self._thread
        self._stop_event.set()
        self._thread = None
        self._stop_event = None
        # stop() may be reached from the poll thread itself (session expiry during a tick)
        if thread is not threading.current_thread():
            thread.join(timeout)


@dataclass
class DashboardState:
    status: str = LOADING
    messages: List[MessageItem] = field(default_factory=list)
    pagination: PaginationState = field(default_factory=PaginationState)
    error: Optional[str] = None
    selected: Optional[MessageItem] = None


class AdminDashboard:
    def __init__(
        self,
        http,
        token: str,
        fallback_token: Optional[str] = None,
        base_url: str = "",
        limit: int = 10,
        poll_interval: float = 10,
        scheduler=None,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.fallback_token = fallback_token
        self.poll_interval = poll_interval
        self.scheduler = scheduler or IntervalTimer()
        self.state = DashboardState(pagination=PaginationState(limit=limit))
        self.visible = True
        self.unauthorized = False
        self._polling = False

    @classmethod
    def from_settings(cls, base_url: str, token: str, settings=None) -> "AdminDashboard":
        """Dashboard over a requests.Session, falling back to the configured admin token."""
        if settings is None:
            from core.config import settings
        return cls(
            requests.Session(),
            token=token,
            fallback_token=settings.ADMIN_TOKEN,
            base_url=base_url,
            limit=settings.DEFAULT_PAGE_SIZE,
            poll_interval=settings.POLL_INTERVAL_SECONDS,
        )

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/admin/messages"

    def _headers(self, token: Optional[str] = None) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token or self.token}"}

    # --- lifecycle -----------------------------------------------------------

    def mount(self) -> None:
        self.fetch_messages(1)
        self._start_polling()

    def unmount(self) -> None:
        self._stop_polling()

    def set_visibility(self, visible: bool) -> None:
        """Hidden pages stop polling; becoming visible resumes with an immediate fetch."""
        self.visible = visible
        if not visible:
            self._stop_polling()
            return
        if self.unauthorized:
            return
        self.fetch_messages(self.state.pagination.page)
        self._start_polling()

    def login(self, token: str) -> None:
        """Install a fresh credential after a session expiry and resume polling."""
        self.token = token
        self.unauthorized = False
        self.fetch_messages(self.state.pagination.page)
        if self.visible:
            self._start_polling()

    def tick(self) -> None:
        if self.visible and not self.unauthorized:
            self.fetch_messages(self.state.pagination.page)

    def _start_polling(self) -> None:
        if self._polling or self.unauthorized:
            return
        self.scheduler.start(self.poll_interval, self.tick)
        self._polling = True

    def _stop_polling(self) -> None:
        if not self._polling:
            return
        self.scheduler.stop()
        self._polling = False

    @property
    def polling(self) -> bool:
        return self._polling

    # --- reads ---------------------------------------------------------------

    def _get_page(self, page: int, token: Optional[str] = None):
        return self.http.get(
            self.messages_url,
            params={"page": page, "limit": self.state.pagination.limit},
            headers=self._headers(token),
        )

    def fetch_messages(self, page: int = 1) -> None:
        self.state.status = LOADING
        try:
            response = self._get_page(page)

            if response.status_code == 401:
                if self.fallback_token is None:
                    self._expire_session()
                    return
                self.token = self.fallback_token
                response = self._get_page(page, self.token)
                if response.status_code != 200:
                    self._expire_session()
                    return

            if response.status_code != 200:
                self._fail(FETCH_FAILED)
                return

            self._apply_page(response.json())
        except requests.RequestException as exc:
            logger.warning("Fetching messages failed: %s", exc)
            self._fail(FETCH_FAILED)
        except Exception:
            # Non-requests transports (httpx via TestClient) or a malformed payload
            logger.exception("Fetching messages failed")
            self._fail(FETCH_FAILED)

    def _apply_page(self, payload: Dict[str, Any]) -> None:
        self.state.messages = [MessageItem.from_payload(m) for m in payload["messages"]]
        pagination = PaginationState.from_payload(payload["pagination"])
        if pagination != self.state.pagination:
            self.state.pagination = pagination
        self.state.error = None
        self.state.status = READY

    def _fail(self, error: str) -> None:
        self.state.error = error
        self.state.status = ERROR

    def _expire_session(self) -> None:
        logger.warning("Admin session rejected after fallback retry; polling stopped")
        self.unauthorized = True
        self._fail(SESSION_EXPIRED)
        self._stop_polling()

    def next_page(self) -> None:
        pagination = self.state.pagination
        if pagination.page < pagination.total_pages:
            self.fetch_messages(pagination.page + 1)

    def previous_page(self) -> None:
        if self.state.pagination.page > 1:
            self.fetch_messages(self.state.pagination.page - 1)

    def select(self, message_id: Optional[str]) -> None:
        self.state.selected = self._find(message_id)

    def _find(self, message_id: Optional[str]) -> Optional[MessageItem]:
        for message in self.state.messages:
            if message.id == message_id:
                return message
        return None

    @property
    def unread_count(self) -> int:
        return sum(1 for m in self.state.messages if not m.read)

    # --- mutations -----------------------------------------------------------

    def _update_flags(self, message_id: str, **flags: bool) -> bool:
        try:
            response = self.http.put(
                self.messages_url,
                json={"messageId": message_id, **flags},
                headers=self._headers(),
            )
        except requests.RequestException as exc:
            logger.error("Error updating message %s: %s", message_id, exc)
            return False
        if response.status_code != 200:
            return False

        for message in self.state.messages:
            if message.id == message_id:
                for name, value in flags.items():
                    setattr(message, name, value)
        return True

    def mark_as_read(self, message_id: str, read: bool = True) -> bool:
        return self._update_flags(message_id, read=read)

    def mark_as_replied(self, message_id: str, replied: bool = True) -> bool:
        return self._update_flags(message_id, replied=replied)

    def delete_message(self, message_id: str) -> bool:
        try:
            response = self.http.delete(
                self.messages_url,
                params={"id": message_id},
                headers=self._headers(),
            )
        except requests.RequestException as exc:
            logger.error("Error deleting message %s: %s", message_id, exc)
            return False
        if response.status_code != 200:
            return False

        self.state.messages = [m for m in self.state.messages if m.id != message_id]
        pagination = self.state.pagination
        self.state.pagination = replace(pagination, total_count=max(pagination.total_count - 1, 0))
        if self.state.selected is not None and self.state.selected.id == message_id:
            self.state.selected = None
        return True
