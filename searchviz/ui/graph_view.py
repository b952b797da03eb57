"""Graph view for visualizing searches on node/edge problems."""

from typing import Dict, List, Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView, QInputDialog

from ..app.controller import PlaybackController
from ..domain.types import GraphProblem
from ..domain.visual_state import path_edges
from ..utils.problem_factory import (
    add_graph_edge, add_graph_node, remove_graph_node, set_graph_goal, set_graph_start,
)
from .tiles import GraphEdgeItem, GraphNodeItem


class GraphView(QGraphicsView):
    """Graphics view for displaying and editing a graph problem."""

    def __init__(self, controller: PlaybackController):
        super().__init__()

        self.controller = controller
        self.scene = QGraphicsScene()
        self.setScene(self.scene)

        self.node_items: Dict[str, GraphNodeItem] = {}
        self.edge_items: List[GraphEdgeItem] = []

        self.show_costs = False
        self.edit_mode = "addNode"  # "addNode", "addEdge", "start", "goal", "remove"
        self._edge_source: Optional[str] = None

        self.setRenderHint(QPainter.Antialiasing)

        self.controller.problem_changed.connect(self.rebuild)
        self.controller.step_changed.connect(self.refresh_states)
        self.controller.result_ready.connect(self.refresh_states)

        self.rebuild()

    def _graph(self) -> Optional[GraphProblem]:
        problem = self.controller.problem
        return problem if isinstance(problem, GraphProblem) else None

    def rebuild(self, *_):
        """Recreate node and edge items from the controller's problem."""
        self.scene.clear()
        self.node_items.clear()
        self.edge_items.clear()

        graph = self._graph()
        if graph is None:
            return

        for edge in graph.edges:
            source, target = graph.get_node(edge.source), graph.get_node(edge.target)
            if source is None or target is None:
                continue
            item = GraphEdgeItem(edge, source, target, graph.is_directed)
            self.scene.addItem(item)
            self.edge_items.append(item)

        for node in graph.nodes:
            item = GraphNodeItem(node)
            item.set_show_costs(self.show_costs)
            self.scene.addItem(item)
            self.node_items[node.id] = item

        self.refresh_states()

    def refresh_states(self, *_):
        """Recolor nodes and highlight path edges for the current step."""
        if self._graph() is None:
            return
        states = self.controller.node_states()
        step = self.controller.current_step
        for node_id, item in self.node_items.items():
            item.set_state(states[node_id], step)

        on_path = path_edges(step)
        for item in self.edge_items:
            item.set_on_path((item.edge.source, item.edge.target) in on_path)

    def set_show_costs(self, show: bool):
        self.show_costs = show
        for item in self.node_items.values():
            item.set_show_costs(show)

    def set_edit_mode(self, mode: str):
        self.edit_mode = mode
        self._edge_source = None

    def mousePressEvent(self, event):
        """Handle clicks on nodes and on empty canvas."""
        if event.button() == Qt.LeftButton and self._graph() is not None:
            scene_pos = self.mapToScene(event.position().toPoint())
            node_id = self._node_at(scene_pos)
            if node_id is None:
                self._handle_canvas_click(scene_pos.x(), scene_pos.y())
            else:
                self._handle_node_click(node_id)
        super().mousePressEvent(event)

    def _node_at(self, scene_pos) -> Optional[str]:
        for node_id, item in self.node_items.items():
            center = item.pos()
            dx, dy = scene_pos.x() - center.x(), scene_pos.y() - center.y()
            if dx * dx + dy * dy <= GraphNodeItem.RADIUS ** 2:
                return node_id
        return None

    def _handle_canvas_click(self, x: float, y: float):
        if self.edit_mode != "addNode":
            return
        self.controller.edit_problem(add_graph_node, self._next_node_id(), x, y)

    def _next_node_id(self) -> str:
        graph = self._graph()
        index = len(graph.nodes)
        while graph.get_node(f"N{index}") is not None:
            index += 1
        return f"N{index}"

    def _handle_node_click(self, node_id: str):
        if self.edit_mode == "start":
            self.controller.edit_problem(set_graph_start, node_id)
        elif self.edit_mode == "goal":
            self.controller.edit_problem(set_graph_goal, node_id)
        elif self.edit_mode == "remove":
            self.controller.edit_problem(remove_graph_node, node_id)
        elif self.edit_mode == "addEdge":
            if self._edge_source is None:
                self._edge_source = node_id
                return
            source, self._edge_source = self._edge_source, None
            if source == node_id:
                return
            weight, ok = QInputDialog.getDouble(self, "Edge Weight", "Weight:", 1.0, 1.0, 1000.0, 1)
            if ok:
                self.controller.edit_problem(add_graph_edge, source, node_id, weight)

    def wheelEvent(self, event):
        zoom_factor = 1.15
        if event.angleDelta().y() > 0:
            self.scale(zoom_factor, zoom_factor)
        else:
            self.scale(1 / zoom_factor, 1 / zoom_factor)

    def fit_in_view(self):
        if self.scene.items():
            self.fitInView(self.scene.itemsBoundingRect(), Qt.KeepAspectRatio)
