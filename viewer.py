# NOTE: The window viewer needs PyQt5.
#
# Installation (in terminal):
#   pip install PyQt5
import logging
import sys

from PyQt5.QtWidgets import (
    QApplication, QWidget, QVBoxLayout, QPushButton, QLabel,
    QFileDialog, QTextEdit, QHBoxLayout
)
from PyQt5.QtGui import QPixmap, QImage, qRgb
from PyQt5.QtCore import Qt

from bmp_errors import BitmapError
from bmp_file import open_buffer
from bmp_parser import decode
from bmp_sampler import rows

logger = logging.getLogger(__name__)


def to_qimage(image):
    g = image.geometry
    qimage = QImage(g.width, g.height, QImage.Format_RGB32)
    for y, row in enumerate(rows(image)):
        for x, (r, gr, b) in enumerate(row):
            qimage.setPixel(x, y, qRgb(r, gr, b))
    return qimage


class BMPViewer(QWidget):
    def __init__(self, config=None):
        super().__init__()
        self.setWindowTitle("BMP Viewer")
        self.resize(700, 500)

        self.config = config
        self.current_image = None

        layout = QVBoxLayout()

        top_layout = QHBoxLayout()

        # Button to open BMP file
        self.open_button = QPushButton("Open BMP File")
        self.open_button.setFixedSize(150, 50)
        self.open_button.clicked.connect(self.open_file)
        top_layout.addWidget(self.open_button)
        top_layout.addStretch()

        layout.addLayout(top_layout)

        # Label to display the image
        self.image_label = QLabel("No Image Loaded")
        self.image_label.setStyleSheet("border: 1px solid black; background: white;")
        self.image_label.setAlignment(Qt.AlignCenter)
        self.image_label.setFixedSize(700, 400)
        layout.addWidget(self.image_label)

        # Text box to display BMP metadata
        self.metadata_box = QTextEdit("No Metadata Loaded")
        self.metadata_box.setMinimumHeight(150)
        self.metadata_box.setReadOnly(True)
        layout.addWidget(self.metadata_box)

        self.setLayout(layout)

    # Open BMP file through a dialog
    def open_file(self):
        filepath, _ = QFileDialog.getOpenFileName(self, "Open BMP File", "", "BMP Files (*.bmp)")
        if not filepath:
            return
        self.load(filepath)

    def load(self, filepath):
        """Decode ``filepath`` into the window. Returns False on failure."""
        try:
            with open_buffer(filepath) as data, decode(data, self.config) as image:
                qimage = to_qimage(image)
                metadata = image.metadata
        except BitmapError as e:
            logger.error("Failed to load %s: %s", filepath, e)
            self.current_image = None
            self.image_label.setText("No Image Loaded")
            self.metadata_box.setText(f"bitmap error: {filepath}: {e}")
            return False

        self.setWindowTitle(f"BMP Viewer - {filepath}")
        self.metadata_box.setText("".join(f"{k}: {v}\n" for k, v in metadata.items()))
        self.current_image = qimage
        self.update_image()
        return True

    # Fit the image into the label without smoothing the pixels
    def update_image(self):
        if self.current_image is None or self.current_image.isNull():
            return
        pixmap = QPixmap.fromImage(self.current_image).scaled(
            self.image_label.size(), Qt.KeepAspectRatio, Qt.FastTransformation
        )
        self.image_label.setPixmap(pixmap)


def show_images(paths, config=None):
    """Open one viewer window per path and run the Qt event loop.

    Returns the number of paths that failed to load.
    """
    app = QApplication.instance() or QApplication(sys.argv)
    viewers = []
    failed = 0
    for path in paths or [None]:
        viewer = BMPViewer(config)
        if path is not None and not viewer.load(path):
            failed += 1
        viewer.show()
        viewers.append(viewer)
    app.exec_()
    return failed
