"""
Tests for fspycam.viewport.
"""

from fspycam.types import ViewportSize
from fspycam.viewport import ResizeSubscription, Viewport, WidgetViewport


class TestViewport:
    def test_initial_size(self):
        viewport = Viewport(800, 600)
        assert viewport.size() == ViewportSize(800, 600)

    def test_resize_updates_and_notifies(self):
        viewport = Viewport(800, 600)
        received = []
        viewport.resized.connect(lambda w, h: received.append((w, h)))

        viewport.resize(1024, 768)

        assert viewport.size() == ViewportSize(1024, 768)
        assert received == [(1024, 768)]


class TestResizeSubscription:
    def test_subscribe_and_close(self):
        viewport = Viewport()
        received = []
        subscription = viewport.subscribe(lambda w, h: received.append((w, h)))
        assert isinstance(subscription, ResizeSubscription)
        assert subscription.active

        viewport.resize(100, 50)
        subscription.close()
        viewport.resize(200, 50)

        assert received == [(100, 50)]
        assert not subscription.active

    def test_close_twice(self):
        viewport = Viewport()
        subscription = viewport.subscribe(lambda w, h: None)
        subscription.close()
        # Should not raise
        subscription.close()

    def test_context_manager(self):
        viewport = Viewport()
        received = []
        with viewport.subscribe(lambda w, h: received.append(w)):
            viewport.resize(10, 10)
        viewport.resize(20, 10)
        assert received == [10]


class TestWidgetViewport:
    def test_follows_widget(self, qapp):
        from PySide6.QtWidgets import QWidget

        widget = QWidget()
        widget.resize(640, 480)
        viewport = WidgetViewport(widget)
        assert viewport.size() == ViewportSize(640, 480)

        received = []
        viewport.resized.connect(lambda w, h: received.append((w, h)))

        widget.show()
        widget.resize(900, 300)
        qapp.processEvents()

        assert viewport.size() == ViewportSize(widget.width(), widget.height())
        assert received[-1] == (widget.width(), widget.height())
        widget.close()
