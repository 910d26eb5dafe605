from typing import Any, Callable, Dict

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from tickcpu import session
from tickcpu.serializers import safe_int

router = APIRouter()


def _init(msg: Dict[str, Any]) -> None:
    session.init_session({k: v for k, v in msg.items() if k != "type"})


# Message type -> session operation; the reply is always a fresh state frame
HANDLERS: Dict[str, Callable[[Dict[str, Any]], Any]] = {
    "init": _init,
    "tick": lambda msg: session.tick_session(),
    "run": lambda msg: session.run_session(safe_int(msg.get("steps"), 1)),
    "add_process": lambda msg: session.add_process(msg.get("process") or {}),
    "config": session.set_config,
    "reset": lambda msg: session.reset_session(),
    "set_speed": lambda msg: session.set_speed(safe_int(msg.get("tick_ms"), 200)),
}


async def _send_state(ws: WebSocket) -> None:
    await ws.send_json({"type": "state", "data": session.get_state()})


async def _send_error(ws: WebSocket, detail: str) -> None:
    await ws.send_json({"type": "error", "detail": detail})


@router.websocket("/ws/state")
async def ws_state(websocket: WebSocket) -> None:
    await websocket.accept()
    await _send_state(websocket)

    try:
        while True:
            msg = await websocket.receive_json()
            if not isinstance(msg, dict):
                await _send_error(websocket, "message must be a JSON object")
            else:
                handler = HANDLERS.get(str(msg.get("type", "")).lower())
                if handler is not None:
                    try:
                        handler(msg)
                    except (TypeError, ValueError) as exc:
                        await _send_error(websocket, str(exc))
            await _send_state(websocket)
    except WebSocketDisconnect:
        return
