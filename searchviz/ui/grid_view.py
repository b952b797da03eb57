"""Grid view for visualizing searches on grid problems."""

from typing import Dict, Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QGraphicsScene, QGraphicsView

from ..app.controller import PlaybackController
from ..domain.types import GridProblem
from ..utils.problem_factory import set_grid_goal, set_grid_start, set_obstacle, set_weight
from .tiles import GridTile

# Weights cycled through by the weight tool
WEIGHT_CYCLE = (1.0, 2.0, 5.0, 10.0)


class GridView(QGraphicsView):
    """Graphics view for displaying and editing a grid problem."""

    def __init__(self, controller: PlaybackController):
        super().__init__()

        self.controller = controller
        self.scene = QGraphicsScene()
        self.setScene(self.scene)

        self.tiles: Dict[Tuple[int, int], GridTile] = {}

        # Settings
        self.tile_size = 32.0
        self.show_costs = False
        self.edit_mode = "obstacle"  # "obstacle", "start", "goal", "weight"
        self._drag_obstacle: Optional[bool] = None

        self.setRenderHint(QPainter.Antialiasing)

        self.controller.problem_changed.connect(self.rebuild)
        self.controller.step_changed.connect(self.refresh_states)
        self.controller.result_ready.connect(self.refresh_states)

        self.rebuild()

    def _grid(self) -> Optional[GridProblem]:
        problem = self.controller.problem
        return problem if isinstance(problem, GridProblem) else None

    def rebuild(self, *_):
        """Recreate all tiles from the controller's problem."""
        self.scene.clear()
        self.tiles.clear()

        grid = self._grid()
        if grid is None:
            return

        self.scene.setSceneRect(0, 0, grid.cols * self.tile_size, grid.rows * self.tile_size)
        for cell in grid.cells:
            tile = GridTile(cell, self.tile_size)
            tile.set_show_costs(self.show_costs)
            self.scene.addItem(tile)
            self.tiles[(cell.row, cell.col)] = tile

        self.refresh_states()

    def refresh_states(self, *_):
        """Recolor tiles for the step under the playback cursor."""
        grid = self._grid()
        if grid is None:
            return
        states = self.controller.node_states()
        step = self.controller.current_step
        for tile in self.tiles.values():
            tile.set_state(states[tile.cell.node_id], step)

    def set_show_costs(self, show: bool):
        """Enable or disable cost display on all tiles."""
        self.show_costs = show
        for tile in self.tiles.values():
            tile.set_show_costs(show)

    def set_edit_mode(self, mode: str):
        self.edit_mode = mode

    def _cell_at(self, event) -> Optional[Tuple[int, int]]:
        grid = self._grid()
        if grid is None:
            return None
        scene_pos = self.mapToScene(event.position().toPoint())
        row = int(scene_pos.y() // self.tile_size)
        col = int(scene_pos.x() // self.tile_size)
        if scene_pos.x() < 0 or scene_pos.y() < 0 or not grid.is_valid_coord(row, col):
            return None
        return row, col

    def mousePressEvent(self, event):
        """Handle mouse press events for cell editing."""
        if event.button() == Qt.LeftButton:
            coord = self._cell_at(event)
            if coord is not None:
                self._handle_cell_click(*coord)
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        """Paint or erase obstacles while dragging."""
        if event.buttons() & Qt.LeftButton and self._drag_obstacle is not None:
            coord = self._cell_at(event)
            if coord is not None:
                self.controller.edit_problem(set_obstacle, *coord, self._drag_obstacle)
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        self._drag_obstacle = None
        super().mouseReleaseEvent(event)

    def _handle_cell_click(self, row: int, col: int):
        cell = self._grid().get_cell(row, col)

        if self.edit_mode == "obstacle":
            # Toggle; dragging continues with the same action
            self._drag_obstacle = not cell.is_obstacle
            self.controller.edit_problem(set_obstacle, row, col, self._drag_obstacle)

        elif self.edit_mode == "start":
            self.controller.edit_problem(set_grid_start, row, col)

        elif self.edit_mode == "goal":
            self.controller.edit_problem(set_grid_goal, row, col)

        elif self.edit_mode == "weight" and not cell.is_obstacle:
            index = WEIGHT_CYCLE.index(cell.weight) + 1 if cell.weight in WEIGHT_CYCLE else 0
            self.controller.edit_problem(set_weight, row, col, WEIGHT_CYCLE[index % len(WEIGHT_CYCLE)])

    def wheelEvent(self, event):
        """Handle mouse wheel for zooming."""
        zoom_factor = 1.15
        if event.angleDelta().y() > 0:
            self.scale(zoom_factor, zoom_factor)
        else:
            self.scale(1 / zoom_factor, 1 / zoom_factor)

    def fit_in_view(self):
        if self.scene.items():
            self.fitInView(self.scene.itemsBoundingRect(), Qt.KeepAspectRatio)

    def reset_zoom(self):
        self.resetTransform()
