from __future__ import annotations

import numpy as np
from PIL import Image
from PyQt5.QtGui import QImage, QPixmap


def pil2qimage(img: Image.Image) -> QImage:
    """Convert a PIL Image to a PyQt5 QImage (RGBA) that owns its pixels."""
    arr = np.ascontiguousarray(np.array(img.convert("RGBA")))
    h, w, ch = arr.shape
    data = arr.tobytes()
    qimg = QImage(data, w, h, ch * w, QImage.Format.Format_RGBA8888)
    return qimg.copy()


def pil2qpixmap(img: Image.Image) -> QPixmap:
    return QPixmap.fromImage(pil2qimage(img))
