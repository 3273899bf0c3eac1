# main.py
import json
import logging
from datetime import datetime
from typing import List, Optional

import fastapi
from fastapi import Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import Response
from pydantic import BaseModel

from lab_central.auth import LoginRequest, Token, User, create_access_token, decode_token, get_current_user, login_as
from lab_central.catalog import ENGINEERING_DEPARTMENTS
from lab_central.data_models import Booking, BookingStatus, Requester
from lab_central.exceptions import (
    BookingNotFoundError,
    BookingStateError,
    BookingValidationError,
    EquipmentNotFoundError,
)
from lab_central.fines import booking_fine
from lab_central.reports import render_csv, report_filename, utilization_chart
from lab_central.system import LabCentralSystem

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# FastAPI Setup
app = fastapi.FastAPI(title="LabCentral - Research Equipment Booking API")


# Booking Models
class BookingCreate(BaseModel):
    equipment_id: str
    contact: str
    purpose: str = ""
    start_time: datetime
    end_time: datetime
    faculty_name: Optional[str] = None
    department: Optional[str] = None


class BookingDecision(BaseModel):
    decision: BookingStatus


class AssistantQuery(BaseModel):
    prompt: str


class ConnectionManager:
    def __init__(self):
        self.active_connections: List[fastapi.WebSocket] = []

    async def connect(self, websocket: fastapi.WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: fastapi.WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: str):
        for connection in list(self.active_connections):
            try:
                await connection.send_text(message)
            except Exception:
                logger.warning("Dropping websocket that failed to receive a broadcast", exc_info=True)
                self.disconnect(connection)


manager = ConnectionManager()
system = LabCentralSystem(manager=manager)


def booking_payload(booking: Booking) -> dict:
    fine = booking_fine(booking, system.clock())
    payload = jsonable_encoder(booking)
    payload.update({"short_id": booking.short_id, "fine": fine, "overdue": fine > 0})
    return payload


# Auth
@app.post("/api/login", response_model=Token)
async def login(request: LoginRequest):
    """Role picker: issues a token for whichever role was chosen."""
    user = login_as(request)
    logger.info("%s signed in as %s", user.name, user.role.value)
    return {"access_token": create_access_token(user), "token_type": "bearer", "user": user}


@app.get("/api/users/me", response_model=User)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


# Inventory
@app.get("/api/equipment")
async def list_equipment(search: str = "", category: str = "All"):
    return jsonable_encoder(system.list_equipment(search=search, category=category))


@app.get("/api/equipment/categories")
async def list_categories():
    return system.categories()


@app.get("/api/equipment/{equipment_id}")
async def get_equipment(equipment_id: str):
    item = system.store.get_equipment(equipment_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Equipment not found")
    return jsonable_encoder(item)


@app.get("/api/departments")
async def list_departments():
    return ENGINEERING_DEPARTMENTS


# Bookings
@app.get("/api/bookings")
async def list_bookings(mine: bool = False, current_user: User = Depends(get_current_user)):
    user_id = current_user.id if mine else None
    return [booking_payload(b) for b in system.lifecycle.list_bookings(user_id=user_id)]


@app.post("/api/bookings", status_code=status.HTTP_201_CREATED)
async def create_booking(request: BookingCreate, current_user: User = Depends(get_current_user)):
    requester = Requester(
        user_id=current_user.id,
        name=request.faculty_name or current_user.name,
        department=request.department or current_user.department,
    )
    try:
        booking = system.lifecycle.create_booking(
            equipment_id=request.equipment_id,
            requester=requester,
            start_time=request.start_time,
            end_time=request.end_time,
            purpose=request.purpose,
            contact=request.contact,
        )
    except EquipmentNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return booking_payload(booking)


@app.post("/api/bookings/{booking_id}/decision")
async def decide_booking(booking_id: str, request: BookingDecision, current_user: User = Depends(get_current_user)):
    try:
        booking = system.lifecycle.decide(booking_id, request.decision)
    except BookingNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except BookingValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except BookingStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    logger.info("%s (%s) marked booking %s %s", current_user.name, current_user.role.value, booking_id, request.decision.value)
    return booking_payload(booking)


# Notifications
@app.get("/api/notifications")
async def list_notifications():
    return jsonable_encoder(system.gateway.logs())


@app.get("/api/notifications/banner")
async def current_banner():
    return jsonable_encoder(system.gateway.banner())


# Analytics & reports
@app.get("/api/analytics/utilization")
async def utilization():
    return utilization_chart(system.store.list_equipment())


@app.get("/api/reports/bookings")
async def download_report():
    now = system.clock()
    content = render_csv(system.store.list_bookings(), system.store.list_equipment(), now)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(now)}"'},
    )


# Assistant
@app.post("/api/assistant")
async def ask_assistant(query: AssistantQuery):
    if not query.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt must not be empty.")
    return {"response": await system.ask_assistant(query.prompt)}


@app.websocket("/ws")
async def websocket_endpoint(websocket: fastapi.WebSocket, token: str = Query(None)):
    """
    Pushes live equipment and notification updates to the dashboard.
    """
    try:
        current_user = decode_token(token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket)
    await websocket.send_text(json.dumps({
        "type": "auth_success",
        "data": {"name": current_user.name, "role": current_user.role.value},
    }))
    await websocket.send_text(json.dumps({"type": "equipment_update", "data": jsonable_encoder(system.store.list_equipment())}))

    try:
        while True:
            try:
                message = json.loads(await websocket.receive_text())
            except json.JSONDecodeError:
                await websocket.send_text(json.dumps({"type": "error", "data": "Invalid JSON message."}))
                continue
            if not isinstance(message, dict):
                continue
            if message.get("type") == "get_notifications":
                await websocket.send_text(json.dumps({"type": "notifications_update", "data": jsonable_encoder(system.gateway.logs())}))
            elif message.get("type") == "get_banner":
                await websocket.send_text(json.dumps({"type": "banner_update", "data": jsonable_encoder(system.gateway.banner())}))
    except fastapi.WebSocketDisconnect:
        logger.info("Websocket for %s closed", current_user.name)
    finally:
        manager.disconnect(websocket)


@app.on_event("startup")
async def startup():
    system.start()


@app.on_event("shutdown")
async def shutdown():
    await system.stop()
