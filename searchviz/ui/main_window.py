"""Main window for the search algorithm visualizer."""

from PySide6.QtCore import Qt
from PySide6.QtGui import QColor, QKeySequence, QPalette, QShortcut
from PySide6.QtWidgets import (
    QButtonGroup, QCheckBox, QComboBox, QFileDialog, QFrame, QGroupBox, QHBoxLayout,
    QHeaderView, QLabel, QMainWindow, QPushButton, QRadioButton, QSlider, QSpinBox,
    QStackedWidget, QStatusBar, QTableWidget, QTableWidgetItem, QTextEdit, QVBoxLayout, QWidget,
)

from ..app.controller import PlaybackController
from ..app.fsm import PlaybackState
from ..domain.metrics import ComparisonReport
from ..domain.types import ALGORITHM_NAMES, AlgorithmId, GridProblem, SearchResult
from ..domain.validation import MAX_GRID_SIZE, MIN_GRID_SIZE
from ..utils.problem_factory import (
    create_empty_grid, generate_maze_grid, generate_random_graph, generate_random_grid,
    sample_graph, set_allow_diagonal, set_directed,
)
from .graph_view import GraphView
from .grid_view import GridView
from .tiles import STATE_COLORS, STATE_DESCRIPTIONS

GRID_TOOLS = [("obstacle", "Obstacles"), ("start", "Set Start"),
              ("goal", "Set Goal"), ("weight", "Cycle Weight")]
GRAPH_TOOLS = [("addNode", "Add Node"), ("addEdge", "Add Edge"), ("start", "Set Start"),
               ("goal", "Set Goal"), ("remove", "Remove Node")]

# Slider positions are tenths of the speed multiplier
SPEED_SCALE = 10


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, controller: PlaybackController):
        super().__init__()
        self.controller = controller

        self.setWindowTitle("Search Algorithm Visualizer")
        self.setMinimumSize(1100, 750)

        self._create_ui()
        self._setup_connections()
        self._setup_shortcuts()

        self._sync_problem_controls()
        self._update_button_states()
        self._update_statistics_display()

    def _create_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        main_layout.addLayout(self._create_controls())

        content_layout = QHBoxLayout()

        # Canvas: one view per problem type
        self.grid_view = GridView(self.controller)
        self.graph_view = GraphView(self.controller)
        self.view_stack = QStackedWidget()
        self.view_stack.addWidget(self.grid_view)
        self.view_stack.addWidget(self.graph_view)

        canvas_layout = QVBoxLayout()
        canvas_layout.addWidget(self.view_stack, 1)
        canvas_layout.addLayout(self._create_playback_bar())
        content_layout.addLayout(canvas_layout, 3)

        content_layout.addWidget(self._create_side_panel(), 1)
        main_layout.addLayout(content_layout, 1)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage(
            "Ready - edit the problem, pick an algorithm and press Run | "
            "Space: play/pause, Left/Right: step, R: reset, Ctrl+S/Ctrl+O: save/load"
        )

    def _create_controls(self) -> QHBoxLayout:
        layout = QHBoxLayout()

        # Algorithm selection
        algo_group = QGroupBox("Algorithm")
        algo_layout = QHBoxLayout(algo_group)
        self.algorithm_combo = QComboBox()
        for algorithm in AlgorithmId:
            self.algorithm_combo.addItem(ALGORITHM_NAMES[algorithm], algorithm)
        self.run_btn = QPushButton("Run")
        self.compare_btn = QPushButton("Compare All")
        algo_layout.addWidget(self.algorithm_combo)
        algo_layout.addWidget(self.run_btn)
        algo_layout.addWidget(self.compare_btn)

        # Problem controls
        problem_group = QGroupBox("Problem")
        problem_layout = QHBoxLayout(problem_group)

        self.problem_type_combo = QComboBox()
        self.problem_type_combo.addItems(["Grid", "Graph"])
        problem_layout.addWidget(self.problem_type_combo)

        problem_layout.addWidget(QLabel("Size:"))
        self.rows_spin = QSpinBox()
        self.rows_spin.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.rows_spin.setValue(15)
        self.cols_spin = QSpinBox()
        self.cols_spin.setRange(MIN_GRID_SIZE, MAX_GRID_SIZE)
        self.cols_spin.setValue(20)
        problem_layout.addWidget(self.rows_spin)
        problem_layout.addWidget(QLabel("×"))
        problem_layout.addWidget(self.cols_spin)

        self.generator_combo = QComboBox()
        self.generator_combo.addItems(["Empty", "Random Obstacles", "Maze"])
        self.new_problem_btn = QPushButton("New")
        self.diagonal_cb = QCheckBox("Diagonal")
        self.directed_cb = QCheckBox("Directed")
        self.save_btn = QPushButton("Save")
        self.load_btn = QPushButton("Load")

        for widget in (self.generator_combo, self.new_problem_btn, self.diagonal_cb,
                       self.directed_cb, self.save_btn, self.load_btn):
            problem_layout.addWidget(widget)

        # Edit tools
        self.tools_group = QGroupBox("Edit Tool")
        self.tools_layout = QHBoxLayout(self.tools_group)
        self.tool_button_group = QButtonGroup(self)

        self.show_costs_cb = QCheckBox("Show Costs")

        layout.addWidget(algo_group)
        layout.addWidget(problem_group)
        layout.addWidget(self.tools_group)
        layout.addWidget(self.show_costs_cb)
        layout.addStretch()
        return layout

    def _create_playback_bar(self) -> QHBoxLayout:
        layout = QHBoxLayout()

        self.reset_btn = QPushButton("⏮")
        self.step_back_btn = QPushButton("◀")
        self.play_btn = QPushButton("Play")
        self.step_forward_btn = QPushButton("▶")
        for btn in (self.reset_btn, self.step_back_btn, self.play_btn, self.step_forward_btn):
            layout.addWidget(btn)

        self.step_slider = QSlider(Qt.Horizontal)
        self.step_slider.setRange(0, 0)
        layout.addWidget(self.step_slider, 1)
        self.step_label = QLabel("Step 0 / 0")
        layout.addWidget(self.step_label)

        layout.addWidget(QLabel("Speed"))
        self.speed_slider = QSlider(Qt.Horizontal)
        self.speed_slider.setRange(int(PlaybackController.MIN_SPEED * SPEED_SCALE),
                                   int(PlaybackController.MAX_SPEED * SPEED_SCALE))
        self.speed_slider.setValue(int(self.controller.speed * SPEED_SCALE))
        self.speed_slider.setMaximumWidth(150)
        layout.addWidget(self.speed_slider)
        self.speed_label = QLabel(f"{self.controller.speed:.1f}x")
        layout.addWidget(self.speed_label)
        return layout

    def _create_side_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)

        stats_group = QGroupBox("Statistics")
        stats_layout = QVBoxLayout(stats_group)
        self.stats_display = QTextEdit()
        self.stats_display.setReadOnly(True)
        self.stats_display.setMaximumHeight(260)
        stats_layout.addWidget(self.stats_display)
        layout.addWidget(stats_group)

        comparison_group = QGroupBox("Comparison")
        comparison_layout = QVBoxLayout(comparison_group)
        self.comparison_table = QTableWidget(0, 5)
        self.comparison_table.setHorizontalHeaderLabels(
            ["Algorithm", "Cost", "Visited", "Time (ms)", "Optimal"]
        )
        self.comparison_table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
        self.comparison_table.verticalHeader().setVisible(False)
        comparison_layout.addWidget(self.comparison_table)
        layout.addWidget(comparison_group, 1)

        layout.addWidget(self._create_color_legend())
        return panel

    def _create_color_legend(self) -> QGroupBox:
        legend_group = QGroupBox("Color Legend")
        legend_layout = QVBoxLayout(legend_group)
        for state, description in STATE_DESCRIPTIONS:
            legend_layout.addWidget(self._create_legend_item(STATE_COLORS[state], description))
        return legend_group

    def _create_legend_item(self, color: QColor, description: str) -> QWidget:
        """Create a single legend item with color box and description."""
        item_widget = QWidget()
        item_layout = QHBoxLayout(item_widget)
        item_layout.setContentsMargins(2, 2, 2, 2)

        color_box = QFrame()
        color_box.setFixedSize(16, 16)
        color_box.setAutoFillBackground(True)
        palette = color_box.palette()
        palette.setColor(QPalette.Window, color)
        color_box.setPalette(palette)
        color_box.setFrameStyle(QFrame.Box | QFrame.Raised)

        item_layout.addWidget(color_box)
        item_layout.addWidget(QLabel(description))
        item_layout.addStretch()
        return item_widget

    def _setup_connections(self):
        # Algorithm controls
        self.algorithm_combo.currentIndexChanged.connect(self._on_algorithm_changed)
        self.run_btn.clicked.connect(self.controller.run)
        self.compare_btn.clicked.connect(self.controller.compare_all)

        # Playback
        self.play_btn.clicked.connect(self._on_play_clicked)
        self.step_forward_btn.clicked.connect(self.controller.step_forward)
        self.step_back_btn.clicked.connect(self.controller.step_back)
        self.reset_btn.clicked.connect(self.controller.reset)
        self.step_slider.valueChanged.connect(self._on_slider_moved)
        self.speed_slider.valueChanged.connect(self._on_speed_changed)

        # Problem controls
        self.problem_type_combo.currentIndexChanged.connect(self._on_new_problem)
        self.new_problem_btn.clicked.connect(self._on_new_problem)
        self.diagonal_cb.toggled.connect(self._on_diagonal_toggled)
        self.directed_cb.toggled.connect(self._on_directed_toggled)
        self.save_btn.clicked.connect(self._on_save_problem)
        self.load_btn.clicked.connect(self._on_load_problem)
        self.tool_button_group.idClicked.connect(self._on_tool_selected)

        self.show_costs_cb.toggled.connect(self.grid_view.set_show_costs)
        self.show_costs_cb.toggled.connect(self.graph_view.set_show_costs)

        # Controller signals
        self.controller.state_changed.connect(self._on_state_changed)
        self.controller.step_changed.connect(self._on_step_changed)
        self.controller.result_ready.connect(self._on_result_ready)
        self.controller.problem_changed.connect(self._on_problem_changed)
        self.controller.comparison_ready.connect(self._on_comparison_ready)
        self.controller.error_occurred.connect(self._on_error)

    def _setup_shortcuts(self):
        QShortcut(QKeySequence("Space"), self, self._on_play_clicked)
        QShortcut(QKeySequence("Right"), self, self.controller.step_forward)
        QShortcut(QKeySequence("Left"), self, self.controller.step_back)
        QShortcut(QKeySequence("Return"), self, self.controller.run)
        QShortcut(QKeySequence("R"), self, self.controller.reset)
        QShortcut(QKeySequence("Ctrl+S"), self, self._on_save_problem)
        QShortcut(QKeySequence("Ctrl+O"), self, self._on_load_problem)
        QShortcut(QKeySequence("Ctrl+Q"), self, self.close)

    # Handlers

    def _on_algorithm_changed(self, index: int):
        self.controller.set_algorithm(self.algorithm_combo.itemData(index))

    def _on_play_clicked(self):
        if self.controller.current_state == PlaybackState.PLAYING:
            self.controller.pause()
        else:
            self.controller.play()

    def _on_slider_moved(self, value: int):
        if value != self.controller.current_step_index:
            self.controller.seek(value)

    def _on_speed_changed(self, value: int):
        self.controller.speed = value / SPEED_SCALE
        self.speed_label.setText(f"{self.controller.speed:.1f}x")

    def _on_new_problem(self, *_):
        if self.problem_type_combo.currentText() == "Graph":
            if self.generator_combo.currentText() == "Empty":
                problem = sample_graph()
            else:
                problem = generate_random_graph(8, extra_edges=4)
            problem = set_directed(problem, self.directed_cb.isChecked())
        else:
            rows, cols = self.rows_spin.value(), self.cols_spin.value()
            generator = self.generator_combo.currentText()
            if generator == "Random Obstacles":
                problem = generate_random_grid(rows, cols)
            elif generator == "Maze":
                problem = generate_maze_grid(rows, cols)
            else:
                problem = create_empty_grid(rows, cols)
            problem = set_allow_diagonal(problem, self.diagonal_cb.isChecked())
        self.controller.set_problem(problem)

    def _on_diagonal_toggled(self, checked: bool):
        if isinstance(self.controller.problem, GridProblem):
            self.controller.edit_problem(set_allow_diagonal, checked)

    def _on_directed_toggled(self, checked: bool):
        if not isinstance(self.controller.problem, GridProblem):
            self.controller.edit_problem(set_directed, checked)

    def _on_save_problem(self):
        filepath, _ = QFileDialog.getSaveFileName(self, "Save Problem", "", "JSON files (*.json)")
        if filepath and self.controller.save_problem(filepath):
            self.status_bar.showMessage(f"Saved problem to {filepath}")

    def _on_load_problem(self):
        filepath, _ = QFileDialog.getOpenFileName(self, "Load Problem", "", "JSON files (*.json)")
        if filepath and self.controller.load_problem(filepath):
            self.status_bar.showMessage(f"Loaded problem from {filepath}")

    def _on_tool_selected(self, button_id: int):
        tools = GRID_TOOLS if isinstance(self.controller.problem, GridProblem) else GRAPH_TOOLS
        mode = tools[button_id][0]
        self.grid_view.set_edit_mode(mode)
        self.graph_view.set_edit_mode(mode)

    def _on_problem_changed(self, problem):
        self._sync_problem_controls()
        self._update_statistics_display()

    def _sync_problem_controls(self):
        """Match the canvas, tool buttons and checkboxes to the problem type."""
        is_grid = isinstance(self.controller.problem, GridProblem)
        self.view_stack.setCurrentWidget(self.grid_view if is_grid else self.graph_view)

        for widget in (self.rows_spin, self.cols_spin, self.diagonal_cb):
            widget.setEnabled(is_grid)
        self.directed_cb.setEnabled(not is_grid)

        for checkbox, value in ((self.diagonal_cb, is_grid and self.controller.problem.allow_diagonal),
                                (self.directed_cb, not is_grid and self.controller.problem.is_directed)):
            checkbox.blockSignals(True)
            checkbox.setChecked(bool(value))
            checkbox.blockSignals(False)

        tools = GRID_TOOLS if is_grid else GRAPH_TOOLS
        if len(self.tool_button_group.buttons()) != len(tools) or \
                self.tool_button_group.button(0).text() != tools[0][1]:
            self._rebuild_tool_buttons(tools)

    def _rebuild_tool_buttons(self, tools):
        for button in self.tool_button_group.buttons():
            self.tool_button_group.removeButton(button)
            self.tools_layout.removeWidget(button)
            button.deleteLater()

        for index, (mode, label) in enumerate(tools):
            radio = QRadioButton(label)
            self.tool_button_group.addButton(radio, index)
            self.tools_layout.addWidget(radio)
        self.tool_button_group.button(0).setChecked(True)
        self.grid_view.set_edit_mode(tools[0][0])
        self.graph_view.set_edit_mode(tools[0][0])

    def _on_state_changed(self, state: PlaybackState):
        self._update_button_states()
        self._update_statistics_display()

    def _on_step_changed(self, index: int):
        total = self.controller.total_steps
        self.step_slider.blockSignals(True)
        self.step_slider.setRange(0, max(0, total - 1))
        self.step_slider.setValue(index)
        self.step_slider.blockSignals(False)
        self.step_label.setText(f"Step {index + 1 if total else 0} / {total}")
        self._update_button_states()
        self._update_statistics_display()

    def _on_result_ready(self, result: SearchResult):
        if result.success:
            self.status_bar.showMessage(
                f"Path found! Cost: {result.path_cost:.2f}, "
                f"Nodes visited: {result.nodes_visited}, Steps: {result.total_steps}"
            )
        else:
            self.status_bar.showMessage(
                f"No path found. Nodes visited: {result.nodes_visited}, Steps: {result.total_steps}"
            )

    def _on_comparison_ready(self, report: ComparisonReport):
        self.comparison_table.setRowCount(len(report.metrics))
        for row, metric in enumerate(report.metrics):
            values = [
                ALGORITHM_NAMES[metric.algorithm],
                "-" if metric.path_cost is None else f"{metric.path_cost:.2f}",
                str(metric.nodes_visited),
                f"{metric.execution_time_ms:.2f}",
                "-" if metric.optimal is None else ("✓" if metric.optimal else "✗"),
            ]
            for col, value in enumerate(values):
                self.comparison_table.setItem(row, col, QTableWidgetItem(value))
        self.status_bar.showMessage(f"Compared {len(report.metrics)} algorithms")

    def _on_error(self, error_msg: str):
        self.status_bar.showMessage(f"Error: {error_msg}")

    def _update_button_states(self):
        state = self.controller.current_state
        has_result = self.controller.result is not None
        last = self.controller.total_steps - 1

        self.play_btn.setText("Pause" if state == PlaybackState.PLAYING else "Play")
        self.step_back_btn.setEnabled(has_result and self.controller.current_step_index > 0)
        self.step_forward_btn.setEnabled(not has_result or self.controller.current_step_index < last)
        self.reset_btn.setEnabled(has_result and state != PlaybackState.IDLE)
        self.step_slider.setEnabled(has_result)

    def _update_statistics_display(self):
        stats = self.controller.get_statistics()
        problem = self.controller.problem

        if isinstance(problem, GridProblem):
            obstacles = sum(1 for cell in problem.cells if cell.is_obstacle)
            problem_info = (f"• Grid: {problem.rows}×{problem.cols}, {obstacles} obstacles\n"
                            f"• Movement: {'8' if problem.allow_diagonal else '4'}-directional")
        else:
            problem_info = (f"• Graph: {len(problem.nodes)} nodes, {len(problem.edges)} edges\n"
                            f"• {'Directed' if problem.is_directed else 'Undirected'}")

        lines = [
            f"Algorithm: {ALGORITHM_NAMES[AlgorithmId(stats['algorithm'])]}",
            f"State: {stats['state_description']}",
            "",
            problem_info,
            "",
            f"• Step: {stats['current_step'] + 1 if stats['total_steps'] else 0} / {stats['total_steps']}",
            f"• Frontier: {stats['frontier_size']}",
            f"• Visited: {stats['visited_count']}",
        ]
        if "success" in stats:
            cost = stats["path_cost"]
            lines += [
                "",
                f"• Result: {'path found' if stats['success'] else 'no path'}",
                f"• Path cost: {'-' if cost is None else f'{cost:.2f}'}",
                f"• Path length: {stats['path_length'] if stats['path_length'] is not None else '-'}",
                f"• Nodes visited: {stats['nodes_visited']}",
                f"• Time: {stats['execution_time_ms']:.2f} ms",
                f"• Memory: ~{stats['memory_usage_kb']} KB",
            ]
        self.stats_display.setText("\n".join(lines))

    def closeEvent(self, event):
        """Stop playback before closing."""
        self.controller.reset()
        event.accept()
