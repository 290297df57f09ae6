import numpy as np
from PyQt6.QtGui import QImage, QPixmap

from tokenartisan.raster.raster import Raster


def convert_raster_to_qimage(raster: Raster) -> QImage:
    qimage = QImage(raster.pixels.tobytes(), raster.width, raster.height, raster.width * 4, QImage.Format.Format_RGBA8888)

    # detach from the temporary bytes buffer
    return qimage.copy()


def convert_qimage_to_raster(qimage: QImage) -> Raster:
    qimage = qimage.convertToFormat(QImage.Format.Format_RGBA8888)

    width = qimage.width()
    height = qimage.height()

    buffer = qimage.bits().asstring(qimage.sizeInBytes())
    rows = np.frombuffer(buffer, np.uint8).reshape((height, qimage.bytesPerLine()))
    pixels = rows[:, : width * 4].reshape((height, width, 4)).copy()

    return Raster(width, height, pixels)


def convert_raster_to_pixmap(raster: Raster) -> QPixmap:
    return QPixmap.fromImage(convert_raster_to_qimage(raster))


def convert_pixmap_to_raster(pixmap: QPixmap) -> Raster:
    return convert_qimage_to_raster(pixmap.toImage())
