# system.py
import asyncio
import contextlib
import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from fastapi.encoders import jsonable_encoder

from lab_central.agents import LabAssistantAgent
from lab_central.availability import resolve_availability
from lab_central.catalog import build_initial_equipment
from lab_central.config import TICK_SECONDS
from lab_central.data_models import Equipment
from lab_central.gateway import NotificationGateway, simulated_transport
from lab_central.lifecycle import BookingLifecycleManager
from lab_central.notifier import OverdueNotifier
from lab_central.store import LabStore
from lab_central.utils import utcnow

if TYPE_CHECKING:
    from lab_central.main import ConnectionManager

logger = logging.getLogger(__name__)


class LabCentralSystem:
    """Main system wiring the booking engine together.

    Owns the store and every component that reads or mutates it, and runs
    the periodic tick that re-derives equipment availability and raises
    overdue alerts.
    """

    def __init__(
        self,
        store: Optional[LabStore] = None,
        scheduler=None,
        clock: Callable = utcnow,
        manager: Optional["ConnectionManager"] = None,
        assistant: Optional[LabAssistantAgent] = None,
        transport: Callable = simulated_transport,
        tick_seconds: float = TICK_SECONDS,
    ):
        self.store = store or LabStore(seed=build_initial_equipment())
        self.clock = clock
        self.manager = manager
        self.tick_seconds = tick_seconds
        self.gateway = NotificationGateway(self.store, scheduler=scheduler, clock=clock, transport=transport)
        self.notifier = OverdueNotifier(self.store, self.gateway)
        self.lifecycle = BookingLifecycleManager(self.store, self.gateway, clock=clock)
        self.assistant = assistant or LabAssistantAgent()
        self._task: Optional[asyncio.Task] = None

    # Periodic engine

    def refresh_availability(self, now) -> List[Equipment]:
        """Persist recomputed statuses; returns the items whose status changed."""
        current = self.store.list_equipment()
        resolved = resolve_availability(current, self.store.list_bookings(), now)
        changed = []
        for before, after in zip(current, resolved):
            if before.status != after.status:
                self.store.set_equipment_status(after.id, after.status)
                changed.append(after)
        return changed

    def tick(self) -> Dict[str, Any]:
        now = self.clock()
        changed = self.refresh_availability(now)
        alerts = self.notifier.tick(now)
        if changed or alerts:
            logger.info("Tick: %d status change(s), %d overdue alert(s)", len(changed), len(alerts))
        return {"equipment": changed, "alerts": alerts}

    async def _tick_loop(self):
        while True:
            await asyncio.sleep(self.tick_seconds)
            try:
                result = self.tick()
                await self.broadcast_tick(result)
            except Exception:
                logger.exception("Availability tick failed")

    def start(self) -> None:
        """Start the periodic tick on the running event loop."""
        if self._task is None or self._task.done():
            self._task = asyncio.get_running_loop().create_task(self._tick_loop())
            logger.info("Booking engine ticking every %.1fs", self.tick_seconds)

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self.gateway.shutdown()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    # Broadcasting

    async def broadcast_tick(self, result: Dict[str, Any]):
        """Pushes fresh inventory and notification state to every connected client."""
        if self.manager is None:
            return
        if result["equipment"]:
            await self.manager.broadcast(json.dumps(
                {"type": "equipment_update", "data": jsonable_encoder(self.store.list_equipment())}
            ))
        if result["alerts"]:
            await self.manager.broadcast(json.dumps(
                {"type": "notifications_update", "data": jsonable_encoder(self.gateway.logs())}
            ))

    # Inventory browsing

    def list_equipment(self, search: str = "", category: str = "All") -> List[Equipment]:
        term = search.lower()
        return [
            item for item in self.store.list_equipment()
            if (term in item.name.lower() or term in item.description.lower())
            and (category == "All" or item.category == category)
        ]

    def categories(self) -> List[str]:
        seen = []
        for item in self.store.list_equipment():
            if item.category not in seen:
                seen.append(item.category)
        return ["All"] + seen

    # Assistant

    async def ask_assistant(self, prompt: str) -> str:
        return await self.assistant.ask(prompt, self.store.list_equipment())
