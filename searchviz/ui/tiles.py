"""Graphics items for grid tiles and graph nodes/edges."""

from typing import Optional

from PySide6.QtCore import QLineF, QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QFont, QPainter, QPen, QPolygonF
from PySide6.QtWidgets import QGraphicsEllipseItem, QGraphicsLineItem, QGraphicsRectItem

from ..domain.types import GraphEdge, GraphNode, GridCell, NodeState, SearchStep

# Color scheme for the visual node states
STATE_COLORS = {
    "unvisited": QColor(240, 240, 240),  # Light gray
    "obstacle": QColor(64, 64, 64),      # Dark gray
    "start": QColor(0, 200, 0),          # Green
    "goal": QColor(255, 215, 0),         # Gold
    "frontier": QColor(173, 216, 230),   # Light blue
    "visited": QColor(255, 182, 193),    # Light pink
    "current": QColor(255, 0, 0),        # Red
    "path": QColor(255, 255, 0),         # Yellow
}

STATE_DESCRIPTIONS = [
    ("unvisited", "Unvisited"),
    ("obstacle", "Obstacle"),
    ("start", "Start"),
    ("goal", "Goal"),
    ("frontier", "Frontier (waiting to be expanded)"),
    ("visited", "Visited (expanded)"),
    ("current", "Current node"),
    ("path", "Path to goal"),
]


def _format_cost(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:.1f}"


class GridTile(QGraphicsRectItem):
    """Graphics item representing a single grid cell."""

    def __init__(self, cell: GridCell, size: float):
        super().__init__(0, 0, size, size)
        self.cell = cell
        self.size = size
        self.state: NodeState = "unvisited"
        self.step: Optional[SearchStep] = None
        self.show_costs = False

        self.setPos(cell.col * size, cell.row * size)
        self.setAcceptHoverEvents(True)
        self.setToolTip(f"({cell.row}, {cell.col}) weight {_format_cost(cell.weight)}")

        self.update_appearance()

    def set_state(self, state: NodeState, step: Optional[SearchStep]):
        self.state = state
        self.step = step
        self.update_appearance()

    def update_appearance(self):
        """Update the tile appearance based on its visual state."""
        color = STATE_COLORS.get(self.state, STATE_COLORS["unvisited"])
        # Heavier cells are drawn darker while unvisited
        if self.state == "unvisited" and self.cell.weight > 1:
            color = color.darker(100 + int(min(self.cell.weight, 10) * 8))
        self.setBrush(QBrush(color))

        if self.state == "obstacle":
            self.setPen(QPen(Qt.black, 1))
        else:
            self.setPen(QPen(Qt.gray, 0.5))
        self.update()

    def paint(self, painter: QPainter, option, widget=None):
        """Paint the tile with costs if enabled."""
        super().paint(painter, option, widget)

        if self.show_costs and self.size > 30 and self.state not in ("obstacle", "unvisited"):
            self._paint_costs(painter)

    def _paint_costs(self, painter: QPainter):
        """Paint the g, h and f values recorded at the current step."""
        if self.step is None:
            return
        node_id = self.cell.node_id
        rect = self.rect()

        font = QFont("Arial", max(7, int(self.size / 6)))
        painter.setFont(font)
        painter.setPen(Qt.black)

        g = self.step.g_values.get(node_id)
        h = self.step.h_values.get(node_id)
        f = self.step.f_values.get(node_id)

        # g (top-left)
        if g is not None:
            g_rect = QRectF(rect.left() + 2, rect.top() + 2, rect.width() / 2, rect.height() / 3)
            painter.drawText(g_rect, Qt.AlignLeft, _format_cost(g))

        # h (top-right)
        if h is not None:
            h_rect = QRectF(rect.center().x(), rect.top() + 2, rect.width() / 2 - 2, rect.height() / 3)
            painter.drawText(h_rect, Qt.AlignRight, _format_cost(h))

        # f (bottom-center)
        if f is not None:
            f_rect = QRectF(rect.left() + rect.width() / 4, rect.bottom() - rect.height() / 3,
                            rect.width() / 2, rect.height() / 3)
            painter.drawText(f_rect, Qt.AlignCenter, _format_cost(f))

    def set_show_costs(self, show: bool):
        """Enable or disable cost display."""
        self.show_costs = show
        self.update()

    def hoverEnterEvent(self, event):
        if self.state != "obstacle":
            highlight_color = self.brush().color().lighter(120)
            self.setBrush(QBrush(highlight_color))
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event):
        self.update_appearance()
        super().hoverLeaveEvent(event)


class GraphNodeItem(QGraphicsEllipseItem):
    """Circle representing one graph node, centered on its coordinates."""

    RADIUS = 18.0

    def __init__(self, node: GraphNode):
        r = self.RADIUS
        super().__init__(-r, -r, 2 * r, 2 * r)
        self.node = node
        self.state: NodeState = "unvisited"
        self.step: Optional[SearchStep] = None
        self.show_costs = False

        self.setPos(node.x, node.y)
        self.setZValue(1)
        self.setAcceptHoverEvents(True)
        self.setToolTip(node.label or node.id)
        self.update_appearance()

    def set_state(self, state: NodeState, step: Optional[SearchStep]):
        self.state = state
        self.step = step
        self.update_appearance()

    def update_appearance(self):
        self.setBrush(QBrush(STATE_COLORS.get(self.state, STATE_COLORS["unvisited"])))
        width = 2.5 if self.state in ("start", "goal", "current") else 1.0
        self.setPen(QPen(Qt.black, width))
        self.update()

    def paint(self, painter: QPainter, option, widget=None):
        super().paint(painter, option, widget)

        painter.setPen(Qt.black)
        painter.setFont(QFont("Arial", 8))
        painter.drawText(self.rect(), Qt.AlignCenter, (self.node.label or self.node.id)[:4])

        if self.show_costs and self.step is not None:
            g = self.step.g_values.get(self.node.id)
            h = self.step.h_values.get(self.node.id)
            parts = []
            if g is not None:
                parts.append(f"g={_format_cost(g)}")
            if h is not None:
                parts.append(f"h={_format_cost(h)}")
            if parts:
                r = self.RADIUS
                painter.setFont(QFont("Arial", 7))
                painter.drawText(QRectF(-3 * r, r, 6 * r, r), Qt.AlignCenter, " ".join(parts))

    def boundingRect(self) -> QRectF:
        # Room for the cost caption below the circle
        r = self.RADIUS
        return QRectF(-3 * r, -r - 1, 6 * r, 3 * r + 2)

    def set_show_costs(self, show: bool):
        self.prepareGeometryChange()
        self.show_costs = show
        self.update()


class GraphEdgeItem(QGraphicsLineItem):
    """Line between two graph nodes with its weight at the midpoint."""

    COLOR = QColor(150, 150, 150)
    PATH_COLOR = QColor(230, 180, 0)

    def __init__(self, edge: GraphEdge, source: GraphNode, target: GraphNode, directed: bool):
        super().__init__(QLineF(QPointF(source.x, source.y), QPointF(target.x, target.y)))
        self.edge = edge
        self.directed = directed
        self.on_path = False
        self.setZValue(0)
        self.update_appearance()

    def set_on_path(self, on_path: bool):
        if on_path != self.on_path:
            self.on_path = on_path
            self.update_appearance()

    def update_appearance(self):
        if self.on_path:
            self.setPen(QPen(self.PATH_COLOR, 4))
        else:
            self.setPen(QPen(self.COLOR, 1.5))
        self.update()

    def paint(self, painter: QPainter, option, widget=None):
        super().paint(painter, option, widget)
        line = self.line()

        if self.directed and line.length() > 0:
            self._paint_arrow_head(painter, line)

        painter.setPen(Qt.darkGray)
        painter.setFont(QFont("Arial", 8))
        mid = line.center()
        painter.drawText(QRectF(mid.x() - 15, mid.y() - 15, 30, 14), Qt.AlignCenter,
                         _format_cost(self.edge.weight))

    def _paint_arrow_head(self, painter: QPainter, line: QLineF):
        # Arrow tip sits on the target circle's border
        unit = line.unitVector()
        dx, dy = unit.dx(), unit.dy()
        tip = line.p2() - QPointF(dx, dy) * GraphNodeItem.RADIUS
        size = 8.0
        left = tip - QPointF(dx, dy) * size + QPointF(-dy, dx) * (size / 2)
        right = tip - QPointF(dx, dy) * size - QPointF(-dy, dx) * (size / 2)
        painter.setBrush(QBrush(self.pen().color()))
        painter.drawPolygon(QPolygonF([tip, left, right]))

    def boundingRect(self) -> QRectF:
        return super().boundingRect().adjusted(-20, -20, 20, 20)
