import logging
import time
from threading import Lock
from typing import Dict, Tuple

from fastapi import HTTPException, Request

from camper_api.config import MERIT_READ_LIMIT, MERIT_ASSIGN_LIMIT, RATE_LIMIT_WINDOW_SECONDS

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Límite de peticiones por cliente en ventanas fijas.

    Se usa como dependencia de FastAPI; al superar el límite responde 429.
    """

    def __init__(self, max_requests: int, window_seconds: int, message: str, clock=time.monotonic):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.message = message
        self._clock = clock
        # cliente -> (inicio de la ventana, peticiones en la ventana)
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()
        self._lock = Lock()

    def hit(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(now)
            start, count = self._windows.get(key, (now, 0))
            if now - start >= self.window_seconds:
                start, count = now, 0
            count += 1
            self._windows[key] = (start, count)
            return count <= self.max_requests

    def _sweep(self, now: float):
        # Las ventanas caducadas se descartan, si no el mapa crece con cada cliente nuevo
        expired = [key for key, (start, _) in self._windows.items() if now - start >= self.window_seconds]
        for key in expired:
            del self._windows[key]
        self._last_sweep = now

    def active_clients(self) -> int:
        with self._lock:
            return len(self._windows)

    def reset(self):
        with self._lock:
            self._windows.clear()

    def __call__(self, request: Request):
        key = request.client.host if request.client else "anonymous"
        if not self.hit(key):
            logger.warning("Límite de peticiones superado para %s en %s", key, request.url.path)
            raise HTTPException(status_code=429, detail=self.message)


get_merits_by_camper_limiter = RateLimiter(
    MERIT_READ_LIMIT,
    RATE_LIMIT_WINDOW_SECONDS,
    "Demasiadas consultas de méritos, inténtalo más tarde",
)

assign_merit_to_camper_limiter = RateLimiter(
    MERIT_ASSIGN_LIMIT,
    RATE_LIMIT_WINDOW_SECONDS,
    "Demasiadas asignaciones de méritos, inténtalo más tarde",
)
