"""
Scan session tests with a scripted frame source and a fake clock.
"""

import pytest

from shopdesk.models import Product
from shopdesk.services.cart_service import Cart
from shopdesk.services.scanner_service import (
    MSG_CAMERA_UNAVAILABLE,
    FrameSource,
    ScanError,
    ScanSession,
    cart_scan_session,
)


class ScriptedSource(FrameSource):
    """Hands out queued frames; None once the queue is empty."""

    def __init__(self, frames=(), fail_with=None):
        self.frames = list(frames)
        self.fail_with = fail_with
        self.started = 0
        self.stopped = 0

    def start(self):
        if self.fail_with:
            raise self.fail_with
        self.started += 1

    def read_frame(self):
        return self.frames.pop(0) if self.frames else None

    def stop(self):
        self.stopped += 1


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def decode(frame):
    return frame


PRODUCTS = [
    Product(id="P001", name="Notebook", category="Stationery", purchase_price=5.0,
            selling_price=10.0, quantity=2, date_added="2026-10-01"),
]


@pytest.fixture
def clock():
    return FakeClock()


class TestScanSession:
    def test_scan_adds_product_then_pauses(self, clock):
        cart = Cart()
        source = ScriptedSource(["P001", "P001", "P001"])
        session = cart_scan_session(cart, lambda: PRODUCTS, source, decode, clock=clock)
        assert session.start()

        event = session.tick()
        assert event.type == "success"
        assert event.message == "Added: Notebook"
        assert cart.items[0].cart_quantity == 1

        # held in front of the camera during the cooldown: ignored
        clock.now += 1.0
        assert session.tick() is None
        assert session.is_paused

        clock.now += 0.6
        assert session.tick().type == "success"
        assert cart.items[0].cart_quantity == 2

    def test_unknown_code(self, clock):
        session = ScanSession(ScriptedSource(["X999"]), decode, lambda code: None, lambda p: None, clock=clock)
        session.start()

        event = session.tick()
        assert event.type == "error"
        assert event.message == "Product not found!"
        assert session.last_event == event

    def test_stock_limit_becomes_error_event(self, clock):
        cart = Cart()
        session = cart_scan_session(cart, lambda: PRODUCTS, ScriptedSource(), decode, clock=clock)
        session.start()

        assert session.submit_code("P001").type == "success"
        assert session.submit_code("P001").type == "success"
        event = session.submit_code(" P001 ")
        assert event.type == "error"
        assert cart.items[0].cart_quantity == 2

    def test_blank_manual_code_is_ignored(self, clock):
        session = cart_scan_session(Cart(), lambda: PRODUCTS, ScriptedSource(), decode, clock=clock)
        assert session.submit_code("   ") is None

    def test_frames_without_codes(self, clock):
        session = ScanSession(ScriptedSource([None, ""]), decode, lambda code: None, lambda p: None, clock=clock)
        session.start()
        assert session.run(max_frames=3) == []

    @pytest.mark.parametrize("failure", [ScanError("permission denied"), OSError("no device")])
    def test_camera_failure(self, failure, clock):
        source = ScriptedSource(fail_with=failure)
        session = ScanSession(source, decode, lambda code: None, lambda p: None, clock=clock)

        assert session.start() is False
        assert session.error == MSG_CAMERA_UNAVAILABLE
        assert session.tick() is None

        session.close()
        assert source.stopped == 0

    def test_close_stops_source_once(self, clock):
        source = ScriptedSource(["P001"])
        with cart_scan_session(Cart(), lambda: PRODUCTS, source, decode, clock=clock) as session:
            assert session.is_scanning

        assert source.stopped == 1
        session.close()
        assert source.stopped == 1
        assert session.start() is False

    def test_run_collects_events(self, clock):
        source = ScriptedSource(["P001", None, None])
        session = cart_scan_session(Cart(), lambda: PRODUCTS, source, decode, clock=clock)
        session.start()

        slept = []
        events = session.run(max_frames=3, frame_interval=0.1, sleep=slept.append)
        assert [e.code for e in events] == ["P001"]
        assert slept == [0.1, 0.1, 0.1]

    def test_shop_session_uses_live_products_and_configured_cooldown(self, stocked_shop, clock):
        stocked_shop.scan_cooldown = 3.0
        cart = Cart()
        session = stocked_shop.scan_session(cart, ScriptedSource(["P002", "P002"]), decode, clock=clock)
        session.start()

        assert session.tick().product.name == "Pen"
        clock.now += 2.0
        assert session.tick() is None
        clock.now += 1.5
        assert session.tick().type == "success"
        assert cart.items[0].cart_quantity == 2
