"""
Organism Viewer
Live 3D view of a token's organism

Raster QWidget renderer: the scene's particle buffers are transformed by
the per-frame animation state, orbited by the camera, perspective
projected and drawn with additive composition. The small blocker sphere
at the body's center hides the particles behind it. A QTimer drives the
frame tick; dropped frames only cost smoothness.
"""

import logging
import math
import sys
from datetime import datetime
from typing import List, Optional, Tuple

import numpy as np
from PyQt5.QtCore import QObject, Qt, QPointF, QTimer, pyqtSignal
from PyQt5.QtGui import QColor, QPainter, QPen, QPolygonF
from PyQt5.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from .animation import FrameClock
from .config import VIEWER_CONFIG
from .geometry import rotate_x, rotate_y, rotate_z
from .logger import logger
from .models import FrameState, OrganismScene, ParticleCloud
from .organism import scene_for_token

COLOR_LEVELS = 15
SPIN_MAX = 2 ** 31 - 1


# =============================================================================
# Log bridge
# =============================================================================

class LogSignalEmitter(QObject):
    """Qt signal emitter for thread-safe log updates."""
    log_message = pyqtSignal(str, int, str)  # message, level, timestamp


class QtSignalHandler(logging.Handler):
    """
    Logging handler that re-emits records as a Qt signal.
    Safe from any thread; queued delivery lands on the GUI thread.
    """

    def __init__(self, emitter: LogSignalEmitter, level: int = logging.INFO):
        super().__init__(level)
        self.emitter = emitter
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord):
        try:
            msg = self.format(record)
            timestamp = datetime.now().strftime("%H:%M:%S")
            self.emitter.log_message.emit(msg, record.levelno, timestamp)
        except Exception:
            self.handleError(record)


# =============================================================================
# Projection
# =============================================================================

def _hex_to_qcolor(hex_str):
    """Convert hex color string to QColor."""
    hex_str = hex_str.lstrip('#')
    return QColor(int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def transform_points(points: np.ndarray, frame: FrameState,
                     yaw: float = 0.0, pitch: float = 0.0) -> np.ndarray:
    """Organism root transform for this frame, then the camera orbit."""
    p = np.asarray(points, dtype=np.float64) * frame.scale
    p = rotate_z(p, frame.rotation_z)
    p = rotate_y(p, frame.rotation_y)
    p = p + np.array([0.0, frame.float_offset, 0.0])
    p = rotate_y(p, yaw)
    return rotate_x(p, pitch)


def project_points(points: np.ndarray, width: int, height: int,
                   distance: float = VIEWER_CONFIG.camera_distance,
                   fov_deg: float = VIEWER_CONFIG.fov_deg,
                   near: float = 0.1) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Perspective projection, camera at (0, 0, distance) looking down -z.

    Returns:
        (screen_xy (N, 2), depth (N,), visible mask (N,))
    """
    p = np.asarray(points, dtype=np.float64)
    depth = distance - p[:, 2]
    visible = depth > near
    safe = np.where(visible, depth, 1.0)
    focal = (height / 2.0) / math.tan(math.radians(fov_deg) / 2.0)
    screen = np.stack([
        width / 2.0 + p[:, 0] * focal / safe,
        height / 2.0 - p[:, 1] * focal / safe,
    ], axis=1)
    return screen, depth, visible


def color_groups(cloud: ParticleCloud) -> List[Tuple[QColor, np.ndarray]]:
    """
    Bucket a cloud's particles by quantized color.

    Uniform clouds give one group; gradient clouds a handful, so each frame
    draws a few point batches instead of one call per particle.
    """
    if cloud.colors is None:
        return [(_hex_to_qcolor(cloud.color), np.arange(cloud.count))]
    keys = np.round(cloud.colors * COLOR_LEVELS).astype(np.int32)
    uniq, inverse = np.unique(keys, axis=0, return_inverse=True)
    inverse = inverse.reshape(-1)
    groups = []
    for i, key in enumerate(uniq):
        r, g, b = (int(round(c * 255 / COLOR_LEVELS)) for c in key)
        groups.append((QColor(r, g, b), np.nonzero(inverse == i)[0]))
    return groups


def hidden_by_blocker(points: np.ndarray, center, radius: float,
                      distance: float = VIEWER_CONFIG.camera_distance) -> np.ndarray:
    """
    Mask of camera-space points whose line of sight crosses the blocker.

    Camera at (0, 0, distance). A point is hidden when the segment from the
    camera to it passes within `radius` of the blocker center, which also
    covers points inside the blocker.
    """
    p = np.asarray(points, dtype=np.float64)
    cam = np.array([0.0, 0.0, distance])
    d = p - cam
    c = np.asarray(center, dtype=np.float64)
    f = c - cam
    dd = np.maximum(np.einsum("ij,ij->i", d, d), 1e-12)
    t = np.clip((d @ f) / dd, 0.0, 1.0)
    closest = cam + t[:, None] * d
    return np.linalg.norm(closest - c, axis=1) < radius


def composition_mode(cloud: ParticleCloud):
    return QPainter.CompositionMode_Plus if cloud.additive else QPainter.CompositionMode_SourceOver


def points_polygon(screen: np.ndarray) -> QPolygonF:
    """
    QPolygonF filled straight from an (N, 2) float64 buffer.

    QPointF is two packed doubles, so the polygon's storage is viewed as an
    (N, 2) array and written in one assignment.
    """
    screen = np.ascontiguousarray(screen, dtype=np.float64)
    n = len(screen)
    poly = QPolygonF()
    if n == 0:
        return poly
    poly.fill(QPointF(), n)
    ptr = poly.data()
    ptr.setsize(n * 2 * 8)
    np.frombuffer(ptr, dtype=np.float64).reshape(n, 2)[:] = screen
    return poly


class OrganismView(QWidget):
    """
    Interactive particle view of one organism.

    Features:
    - Animated root transform (rotation, sway, pulse, float)
    - Drag to orbit, wheel to zoom
    - Additive blending per cloud
    - Particles behind the central blocker are hidden
    """

    def __init__(self, parent=None, token_id: int = 0):
        super().__init__(parent)
        self.scene: Optional[OrganismScene] = None
        self.clock: Optional[FrameClock] = None
        self._layers = []

        self.yaw = 0.0
        self.pitch = 0.0
        self.distance = VIEWER_CONFIG.camera_distance
        self._drag_pos = None

        self.setMinimumSize(320, 320)
        self.setStyleSheet(f"background-color: {VIEWER_CONFIG.background};")

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.update)
        self._timer.start(VIEWER_CONFIG.frame_interval_ms)

        self.set_token(token_id)

    def set_token(self, token_id: int):
        """Load the scene for a token ID."""
        self.set_scene(scene_for_token(token_id))
        logger.info(
            f"Token {token_id}: {self.scene.traits.alignment.label} / "
            f"{self.scene.traits.archetype_name}",
            component="VIEWER",
        )

    def set_scene(self, scene: OrganismScene):
        self.scene = scene
        self.clock = FrameClock(scene.animation)
        # (cloud, color groups) in draw order
        self._layers = [(scene.atmosphere, color_groups(scene.atmosphere))]
        self._layers.append((scene.body, color_groups(scene.body)))
        for appendage in scene.appendages:
            self._layers.append((appendage.cloud, color_groups(appendage.cloud)))
        self.update()

    def stop(self):
        """Stop requesting frames."""
        self._timer.stop()

    def paintEvent(self, event):
        """Draw one frame."""
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            w = self.width()
            h = self.height()
            painter.fillRect(0, 0, w, h, _hex_to_qcolor(VIEWER_CONFIG.background))
            if self.scene is None:
                return

            frame = self.clock.tick()
            focal = (h / 2.0) / math.tan(math.radians(VIEWER_CONFIG.fov_deg) / 2.0)
            blocker = (
                transform_points(np.zeros((1, 3)), frame, self.yaw, self.pitch)[0],
                self.scene.blocker_radius * frame.scale,
            )
            for cloud, groups in self._layers:
                self._draw_cloud(painter, cloud, groups, frame, w, h, focal, blocker)
        finally:
            painter.end()

    def _draw_cloud(self, painter, cloud, groups, frame, w, h, focal, blocker):
        pts = transform_points(cloud.positions, frame, self.yaw, self.pitch)
        screen, _, visible = project_points(pts, w, h, self.distance)
        center, radius = blocker
        visible &= ~hidden_by_blocker(pts, center, radius, self.distance)
        pen = QPen()
        pen.setWidthF(max(1.0, cloud.size * frame.scale * focal / self.distance))
        pen.setCapStyle(Qt.RoundCap)
        painter.setCompositionMode(composition_mode(cloud))
        painter.setOpacity(cloud.opacity)
        for color, idx in groups:
            idx = idx[visible[idx]]
            if len(idx) == 0:
                continue
            pen.setColor(color)
            painter.setPen(pen)
            painter.drawPoints(points_polygon(screen[idx]))

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._drag_pos = event.pos()

    def mouseMoveEvent(self, event):
        if self._drag_pos is None:
            return
        delta = event.pos() - self._drag_pos
        self._drag_pos = event.pos()
        self.orbit(delta.x(), delta.y())

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._drag_pos = None

    def wheelEvent(self, event):
        self.zoom(event.angleDelta().y() / 120.0)

    def orbit(self, dx: float, dy: float):
        """Orbit the camera by a mouse delta in pixels."""
        s = VIEWER_CONFIG.orbit_sensitivity
        self.yaw += dx * s
        self.pitch = max(-math.pi / 2, min(math.pi / 2, self.pitch + dy * s))
        self.update()

    def zoom(self, steps: float):
        """Zoom in (positive steps) or out (negative steps)."""
        self.distance = max(
            VIEWER_CONFIG.min_distance,
            min(VIEWER_CONFIG.max_distance, self.distance * (0.9 ** steps)),
        )
        self.update()


class ViewerWindow(QMainWindow):
    """Viewer window: organism view, token picker, trait summary, log line."""

    def __init__(self, token_id: int = 0):
        super().__init__()
        self.setWindowTitle("Virion")

        # Status line follows INFO+ records while the window is open
        self.log_emitter = LogSignalEmitter()
        self.log_emitter.log_message.connect(self._on_log_message)
        self._log_handler = QtSignalHandler(self.log_emitter)
        logger.add_handler(self._log_handler)

        self.view = OrganismView(token_id=token_id)

        self.token_spin = QSpinBox()
        self.token_spin.setRange(0, SPIN_MAX)
        self.token_spin.setValue(min(token_id, SPIN_MAX))
        if token_id > SPIN_MAX:
            logger.warning(
                f"Token {token_id} is shown but the picker stops at {SPIN_MAX}",
                component="VIEWER",
            )
        self.token_spin.valueChanged.connect(self._on_token_changed)

        self.traits_label = QLabel()

        controls = QHBoxLayout()
        controls.addWidget(QLabel("Token"))
        controls.addWidget(self.token_spin)
        controls.addWidget(self.traits_label, stretch=1)

        layout = QVBoxLayout()
        layout.addWidget(self.view, stretch=1)
        layout.addLayout(controls)

        central = QWidget()
        central.setLayout(layout)
        self.setCentralWidget(central)
        self.resize(720, 780)

        self._update_label()

    def _on_token_changed(self, value: int):
        self.view.set_token(value)
        self._update_label()

    def _on_log_message(self, message: str, level: int, timestamp: str):
        self.statusBar().showMessage(f"{timestamp} {message}")

    def _update_label(self):
        t = self.view.scene.traits
        self.traits_label.setText(
            f"hue {t.hue}  |  {t.appendage_count} spikes  |  "
            f"{t.alignment.label}  |  {t.archetype_name}"
        )

    def closeEvent(self, event):
        self.view.stop()
        logger.remove_handler(self._log_handler)
        super().closeEvent(event)


def run_viewer(token_id: int) -> int:
    """Open the viewer window and run the Qt event loop."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = ViewerWindow(token_id)
    window.show()
    return app.exec_()
