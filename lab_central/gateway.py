# gateway.py
import asyncio
import logging
import re
from typing import Callable, List, Optional
from urllib.parse import quote

from lab_central.config import BANNER_TIMEOUT_SECONDS, DELIVERY_DELAY_SECONDS
from lab_central.data_models import Banner, NotificationRecord, NotificationStatus
from lab_central.store import LabStore
from lab_central.utils import new_id, utcnow

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def whatsapp_link(to: str, message: str) -> str:
    """Deep link that opens a WhatsApp chat with ``message`` pre-filled."""
    digits = re.sub(r"[^0-9]", "", to)
    return f"https://wa.me/{digits}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def simulated_transport(record: NotificationRecord) -> None:
    logger.info("[WHATSAPP] To: %s | %s", record.to, record.message)


class TimerScheduler:
    """One-shot delayed callbacks on the running event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self._timers: List[asyncio.TimerHandle] = []

    def schedule(self, seconds: float, func: Callable, *args) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        # forget timers that already fired
        self._timers = [t for t in self._timers if not t.cancelled() and t.when() > loop.time()]
        timer = loop.call_later(seconds, func, *args)
        self._timers.append(timer)
        return timer

    def cancel_all(self) -> None:
        for timer in self._timers:
            timer.cancel()
        self._timers.clear()


class NotificationGateway:
    """Queues, "sends" and logs outbound WhatsApp messages.

    Nothing leaves the process: after the delivery delay a QUEUED record
    moves to SENDING, ``transport`` is called, and the record moves to
    DELIVERED, or to FAILED if it raises. The log lives in the store, newest
    first. The banner mirrors the latest SENDING notification until
    ``banner_timeout`` seconds after it settles.
    """

    def __init__(
        self,
        store: LabStore,
        scheduler=None,
        clock: Callable = utcnow,
        transport: Callable[[NotificationRecord], None] = simulated_transport,
        delivery_delay: float = DELIVERY_DELAY_SECONDS,
        banner_timeout: float = BANNER_TIMEOUT_SECONDS,
    ):
        self.store = store
        self.scheduler = scheduler or TimerScheduler()
        self.clock = clock
        self.transport = transport
        self.delivery_delay = delivery_delay
        self.banner_timeout = banner_timeout
        self._banner: Optional[Banner] = None

    def send(
        self,
        to: str,
        message: str,
        entry_status: NotificationStatus = NotificationStatus.SENDING,
        id_prefix: str = "wa-alert-",
    ) -> NotificationRecord:
        if entry_status not in (NotificationStatus.QUEUED, NotificationStatus.SENDING):
            raise ValueError(f"Notifications cannot start in {entry_status.value}")

        record = NotificationRecord(
            id=new_id(id_prefix),
            to=to,
            message=message,
            timestamp=self.clock(),
            status=entry_status,
            link=whatsapp_link(to, message),
        )
        # Nothing is stored unless delivery could be scheduled.
        self.scheduler.schedule(self.delivery_delay, self._deliver, record.id)
        self.store.add_notification(record)
        if entry_status == NotificationStatus.SENDING:
            # Queued entries stay in the log only.
            self._banner = Banner(
                notification_id=record.id,
                to=to,
                message=message,
                status=entry_status,
                link=record.link,
            )
        logger.info("Notification %s to %s is %s", record.id, to, entry_status.value)
        return record

    def _deliver(self, notification_id: str) -> None:
        record = self.store.get_notification(notification_id)
        if record is None:
            logger.warning("Notification %s vanished before delivery", notification_id)
            return
        if record.status == NotificationStatus.QUEUED:
            record = self.store.update_notification_status(notification_id, NotificationStatus.SENDING)
        try:
            self.transport(record)
        except Exception:
            logger.exception("Delivery of notification %s failed", notification_id)
            status = NotificationStatus.FAILED
        else:
            status = NotificationStatus.DELIVERED

        self.store.update_notification_status(notification_id, status)
        if self._banner is not None and self._banner.notification_id == notification_id:
            self._banner.status = status
        self.scheduler.schedule(self.banner_timeout, self._clear_banner, notification_id)

    def _clear_banner(self, notification_id: str) -> None:
        # A newer notification owns the banner now.
        if self._banner is not None and self._banner.notification_id == notification_id:
            self._banner = None

    def banner(self) -> Optional[Banner]:
        return self._banner

    def logs(self) -> List[NotificationRecord]:
        return self.store.list_notifications()

    def shutdown(self) -> None:
        self.scheduler.cancel_all()
