# Overview: Barcode/QR scan loop over an abstract frame source, feeding matched products to a cart.

"""
Scanner

The camera and the barcode decoder are external collaborators:

- FrameSource: start() / read_frame() / stop(); read_frame() returns None
  while no frame is ready.
- decoder: callable(frame) -> decoded text or None.

ScanSession.tick() handles one frame. After any successful decode the
session pauses for `cooldown` seconds so a code held in front of the
camera is added once. close() stops the source and ends the loop; it is
safe to call more than once.
"""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

from ..models import Product
from .cart_service import Cart, CartError


logger = logging.getLogger(__name__)

DEFAULT_COOLDOWN_SECONDS = 1.5

MSG_CAMERA_UNAVAILABLE = "Could not access camera."
MSG_NOT_FOUND = "Product not found!"


class ScanError(Exception):
    """Raised by frame sources that cannot start (e.g. camera permission denied)."""


class FrameSource(ABC):
    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def read_frame(self) -> Any | None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...


@dataclass(frozen=True)
class ScanEvent:
    code: str
    message: str
    type: str  # "success" | "error"
    product: Product | None = None


class ScanSession:
    def __init__(
        self,
        source: FrameSource,
        decoder: Callable[[Any], str | None],
        lookup: Callable[[str], Product | None],
        on_product: Callable[[Product], Any],
        *,
        cooldown: float = DEFAULT_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._decoder = decoder
        self._lookup = lookup
        self._on_product = on_product
        self._cooldown = cooldown
        self._clock = clock

        self.is_scanning = False
        self.closed = False
        self.paused_until: float | None = None
        self.last_event: ScanEvent | None = None
        self.error: str | None = None

    def __enter__(self) -> "ScanSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def is_paused(self) -> bool:
        return self.paused_until is not None and self._clock() < self.paused_until

    def start(self) -> bool:
        if self.closed:
            return False
        try:
            self._source.start()
        except (ScanError, OSError) as exc:
            logger.warning("Camera access error: %s", exc)
            self.error = MSG_CAMERA_UNAVAILABLE
            self.is_scanning = False
            return False
        self.error = None
        self.is_scanning = True
        return True

    def _handle_code(self, code: str) -> ScanEvent:
        product = self._lookup(code)
        if product is None:
            event = ScanEvent(code=code, message=MSG_NOT_FOUND, type="error")
        else:
            try:
                self._on_product(product)
            except CartError as exc:
                event = ScanEvent(code=code, message=str(exc), type="error", product=product)
            else:
                event = ScanEvent(code=code, message=f"Added: {product.name}", type="success", product=product)
        self.last_event = event
        return event

    def tick(self) -> ScanEvent | None:
        """Process one frame. Returns the event produced by a decode, if any."""
        if not self.is_scanning:
            return None

        if self.paused_until is not None:
            if self._clock() < self.paused_until:
                return None
            self.paused_until = None
            self.last_event = None

        frame = self._source.read_frame()
        if frame is None:
            return None

        code = self._decoder(frame)
        if not code:
            return None

        self.paused_until = self._clock() + self._cooldown
        return self._handle_code(code)

    def submit_code(self, code: str) -> ScanEvent | None:
        """Manual id entry; shares the lookup path but not the cooldown."""
        trimmed = (code or "").strip()
        if not trimmed:
            return None
        return self._handle_code(trimmed)

    def run(
        self,
        *,
        max_frames: int | None = None,
        frame_interval: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> list[ScanEvent]:
        """Tick until closed (or max_frames ticks); returns the events seen."""
        events = []
        frames = 0
        while self.is_scanning and (max_frames is None or frames < max_frames):
            event = self.tick()
            if event is not None:
                events.append(event)
            frames += 1
            if frame_interval:
                sleep(frame_interval)
        return events

    def close(self) -> None:
        if self.is_scanning:
            self._source.stop()
        self.is_scanning = False
        self.closed = True


def cart_scan_session(
    cart: Cart,
    products: Callable[[], list[Product]],
    source: FrameSource,
    decoder: Callable[[Any], str | None],
    **kwargs,
) -> ScanSession:
    """Scan session that adds one unit of each matched product to `cart`."""
    def lookup(code: str) -> Product | None:
        for p in products():
            if p.id == code:
                return p
        return None

    return ScanSession(source, decoder, lookup, lambda product: cart.add(product, 1), **kwargs)
