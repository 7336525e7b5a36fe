from datetime import datetime, timedelta
import logging
import sys
import threading
from typing import List, Optional, Tuple

from PyQt5.QtCore import Qt, QPoint, QRectF, QTimer, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QPixmap
from PyQt5.QtWidgets import QApplication, QMainWindow

from PIL import Image

from ..astro import get_information, illumination_to_phase
from ..catalog import TextureCatalog
from ..paths import TEXT_FONT_SIZE, UPDATE_INTERVAL_MS
from ..render.draw import draw
from ..types import MoonInformation
from ..utils.qt import pil2qpixmap


logger = logging.getLogger(__name__)

TEXT_COLOR = QColor(180, 180, 180)
TEXT_MARGIN = 10
TEXT_LINE_HEIGHT = TEXT_FONT_SIZE + 8


def format_information(info: MoonInformation) -> List[str]:
    """Overlay lines describing info."""

    def hhmm(dt: Optional[datetime]) -> str:
        return dt.astimezone().strftime("%H:%M") if dt is not None else "--:--"

    return [
        f"{info.phase.value.title()} {abs(info.illumination) * 100:.0f}%",
        f"Rise {hhmm(info.moonrise)}  Set {hhmm(info.moonset)}",
        f"Az {info.direction:.1f}\N{DEGREE SIGN}  Alt {info.elevation:.1f}\N{DEGREE SIGN}",
    ]


class MoonWindow(QMainWindow):
    """Frameless window showing the moon as it is now at one location."""

    data_updated = pyqtSignal(object, object)

    def __init__(
        self,
        catalog: TextureCatalog,
        location: Tuple[float, float],
        size: int,
        shadow: float,
        delta_t: timedelta,
    ):
        super().__init__()
        self.catalog = catalog
        self.location = location
        self.moon_size = size
        self.shadow = shadow
        self.delta_t = delta_t

        self.info: Optional[MoonInformation] = None
        self.pixmap: Optional[QPixmap] = None

        self.setAttribute(Qt.WA_TranslucentBackground)
        self.setWindowFlags(Qt.FramelessWindowHint)
        self.setWindowTitle("Moon Phase")
        side = size + 2 * TEXT_MARGIN
        self.setGeometry(100, 100, side, side + 3 * TEXT_LINE_HEIGHT)
        self.text_font = QFont("Arial", TEXT_FONT_SIZE)

        self.data_updated.connect(self.on_data_updated)
        self.update_timer = QTimer(self)
        self.update_timer.timeout.connect(self.start_background_update)
        self.update_timer.start(UPDATE_INTERVAL_MS)
        self.start_background_update()

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.LeftButton:
            self._drag_active = True
            self._drag_pos = event.globalPos() - self.frameGeometry().topLeft()
            event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        if getattr(self, "_drag_active", False) and event.buttons() & Qt.LeftButton:
            self.move(event.globalPos() - self._drag_pos)
            event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._drag_active = False
        event.accept()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setCompositionMode(QPainter.CompositionMode_Clear)
        painter.fillRect(self.rect(), Qt.transparent)
        painter.setCompositionMode(QPainter.CompositionMode_SourceOver)

        painter.setPen(TEXT_COLOR)
        painter.setFont(self.text_font)
        if self.pixmap is None or self.info is None:
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Loading moon data...")
            return

        x = (self.width() - self.moon_size) / 2
        target = QRectF(x, TEXT_MARGIN, self.moon_size, self.moon_size)
        painter.drawPixmap(target, self.pixmap, QRectF(0, 0, self.pixmap.width(), self.pixmap.height()))

        y = TEXT_MARGIN * 2 + self.moon_size + TEXT_FONT_SIZE
        for line in format_information(self.info):
            painter.drawText(QPoint(TEXT_MARGIN, y), line)
            y += TEXT_LINE_HEIGHT

    def on_data_updated(self, info: MoonInformation, image: Image.Image):
        self.info = info
        self.pixmap = pil2qpixmap(image)
        self.update()

    def update_moon_in_background(self):
        try:
            now = datetime.now().astimezone() + self.delta_t
            lat, lon = self.location
            info = get_information(now, lat, lon)
            image = draw(self.moon_size, illumination_to_phase(info), self.shadow, self.catalog)
            if image is None:
                logger.error("No moon texture available")
                return
            self.data_updated.emit(info, image)
        except Exception:
            logger.exception("Error in background update thread")

    def start_background_update(self):
        logger.info("Updating moon data...")
        thread = threading.Thread(target=self.update_moon_in_background)
        thread.daemon = True
        thread.start()

    def keyPressEvent(self, event: QKeyEvent):
        if event and event.key() == Qt.Key.Key_F11:
            if self.isFullScreen():
                self.showNormal()
            else:
                self.showFullScreen()
        elif event and event.key() == Qt.Key.Key_Escape:
            if self.isFullScreen():
                self.showNormal()
        elif event and event.key() == Qt.Key.Key_Q:
            QApplication.quit()
        else:
            super().keyPressEvent(event)


def run_viewer(catalog: TextureCatalog, location: Tuple[float, float], size: int, shadow: float, delta_t: timedelta) -> int:
    app = QApplication.instance() or QApplication(sys.argv)
    window = MoonWindow(catalog, location, size, shadow, delta_t)
    window.show()
    return app.exec()
