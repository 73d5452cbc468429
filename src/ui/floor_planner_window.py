"""
Floor Planner Window - Desktop shell around the floor plan canvas
"""

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                             QToolBar, QButtonGroup, QLabel, QGroupBox,
                             QListWidget, QListWidgetItem, QMessageBox, QFileDialog,
                             QInputDialog, QAbstractItemView, QComboBox)
from PySide6.QtCore import Qt, QMimeData, QByteArray
from PySide6.QtGui import QFont, QAction, QKeySequence

from drawing import DrawingMode, FloorPlanEngine, FloorPlanHistory
from drawing.scale_manager import format_measurement, GRID_SIZES
from models import get_session, FloorPlanManager
from data.product_library import SAMPLE_PRODUCTS, PRODUCT_MIME_TYPE, encode_product_payload
from ui.floor_plan_canvas import FloorPlanCanvas
from calculations.debug_logger import debug_logger


ZOOM_STEP = 1.25


class ProductLibraryList(QListWidget):
    """Product list whose items drag a catalog JSON payload"""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setDragEnabled(True)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        for product_id, product in SAMPLE_PRODUCTS.items():
            dims = product['dimensions']
            item = QListWidgetItem(
                f"{product['name']}\n{format_measurement(dims['length'])} × {format_measurement(dims['width'])}"
            )
            item.setData(Qt.UserRole, product_id)
            self.addItem(item)

    def mimeData(self, items):
        mime = QMimeData()
        if items:
            product_id = items[0].data(Qt.UserRole)
            mime.setData(PRODUCT_MIME_TYPE, QByteArray(encode_product_payload(product_id).encode('utf-8')))
        return mime

    def mimeTypes(self):
        return [PRODUCT_MIME_TYPE]


class FloorPlannerWindow(QMainWindow):
    """Main planner window: mode toolbar, product library and canvas"""

    def __init__(self, engine=None, plan_manager=None):
        super().__init__()
        self.engine = engine or FloorPlanEngine()
        self.plan_manager = plan_manager or FloorPlanManager(get_session)
        self.history = FloorPlanHistory(self.engine.get_entities(), self.engine.config.history_limit)
        self.current_plan_id = None
        self._restoring = False
        self.mode_actions = {}

        self.setWindowTitle("Floor Planner")
        self.init_ui()
        self.engine.set_text_provider(self.ask_annotation_text)
        self.engine.entities_changed.connect(self.record_history)
        self.engine.mode_changed.connect(self.on_mode_changed)
        self.engine.selection_changed.connect(self.on_selection_changed)
        self.update_status()

    def init_ui(self):
        self.create_toolbar()

        central = QWidget()
        layout = QHBoxLayout()
        layout.addWidget(self.create_left_panel())

        self.canvas = FloorPlanCanvas(self.engine)
        self.canvas.coordinates_changed.connect(self.on_coordinates_changed)
        layout.addWidget(self.canvas, 1)

        central.setLayout(layout)
        self.setCentralWidget(central)

        self.coord_label = QLabel()
        self.scale_label = QLabel()
        self.statusBar().addWidget(self.coord_label)
        self.statusBar().addPermanentWidget(self.scale_label)

    def create_toolbar(self):
        """Create the main toolbar"""
        toolbar = QToolBar()
        toolbar.setToolButtonStyle(Qt.ToolButtonTextUnderIcon)
        self.addToolBar(toolbar)

        # Tool selection buttons
        self.tool_group = QButtonGroup(self)
        for mode, label in ((DrawingMode.SELECT, 'Select'),
                            (DrawingMode.WALL, 'Wall'),
                            (DrawingMode.ROOM, 'Room'),
                            (DrawingMode.DOOR, 'Door'),
                            (DrawingMode.TEXT, 'Text')):
            action = QAction(label, self)
            action.setCheckable(True)
            action.setChecked(mode == self.engine.mode)
            action.triggered.connect(lambda checked=False, m=mode: self.engine.set_mode(m))
            toolbar.addAction(action)
            self.tool_group.addButton(toolbar.widgetForAction(action))
            self.mode_actions[mode] = action

        toolbar.addSeparator()

        self.grid_action = QAction('Grid', self)
        self.grid_action.setCheckable(True)
        self.grid_action.setChecked(self.engine.show_grid)
        self.grid_action.toggled.connect(self.engine.toggle_grid)
        toolbar.addAction(self.grid_action)

        self.grid_combo = QComboBox()
        for name, size_mm in GRID_SIZES.items():
            self.grid_combo.addItem(f"{name.title()} ({size_mm}mm)", float(size_mm))
        self.sync_grid_combo()
        self.grid_combo.currentIndexChanged.connect(
            lambda index: self.engine.set_grid_size(self.grid_combo.itemData(index)))
        toolbar.addWidget(self.grid_combo)

        self.measure_action = QAction('Measurements', self)
        self.measure_action.setCheckable(True)
        self.measure_action.setChecked(self.engine.show_measurements)
        self.measure_action.toggled.connect(self.engine.toggle_measurements)
        toolbar.addAction(self.measure_action)

        toolbar.addSeparator()
        toolbar.addAction('Zoom In', lambda: self.zoom_by(ZOOM_STEP))
        toolbar.addAction('Zoom Out', lambda: self.zoom_by(1 / ZOOM_STEP))

        toolbar.addSeparator()
        self.undo_action = QAction('Undo', self)
        self.undo_action.setShortcut(QKeySequence.Undo)
        self.undo_action.triggered.connect(self.undo)
        toolbar.addAction(self.undo_action)

        self.redo_action = QAction('Redo', self)
        self.redo_action.setShortcut(QKeySequence.Redo)
        self.redo_action.triggered.connect(self.redo)
        toolbar.addAction(self.redo_action)

        toolbar.addSeparator()
        toolbar.addAction('Open', self.open_plan)
        toolbar.addAction('Save', self.save_plan)
        toolbar.addAction('Export PNG', self.export_png)
        toolbar.addAction('Clear', self.clear_plan)
        self.update_history_actions()

    def sync_grid_combo(self):
        index = self.grid_combo.findData(float(self.engine.grid_size_mm))
        self.grid_combo.blockSignals(True)
        self.grid_combo.setCurrentIndex(index)
        self.grid_combo.blockSignals(False)

    def create_left_panel(self):
        """Create the left panel with the mode label and product library"""
        panel = QWidget()
        panel.setMaximumWidth(260)
        layout = QVBoxLayout()

        mode_group = QGroupBox("Drawing Mode")
        mode_layout = QVBoxLayout()
        self.mode_label = QLabel()
        self.mode_label.setFont(QFont("Arial", 10, QFont.Bold))
        mode_layout.addWidget(self.mode_label)
        self.selection_label = QLabel("No selection")
        mode_layout.addWidget(self.selection_label)
        mode_group.setLayout(mode_layout)
        layout.addWidget(mode_group)

        library_group = QGroupBox("Products (drag onto plan)")
        library_layout = QVBoxLayout()
        self.product_list = ProductLibraryList()
        library_layout.addWidget(self.product_list)
        library_group.setLayout(library_layout)
        layout.addWidget(library_group)

        layout.addStretch()
        panel.setLayout(layout)
        return panel

    # ---------------------- Engine callbacks ----------------------
    def ask_annotation_text(self, point):
        text, ok = QInputDialog.getText(self, "Text Annotation", "Text:", text=self.engine.config.default_text)
        return text if ok else None

    def on_mode_changed(self, mode_value):
        action = self.mode_actions.get(DrawingMode(mode_value))
        if action is not None and not action.isChecked():
            action.setChecked(True)
        self.update_status()

    def on_selection_changed(self, selected_ids):
        if selected_ids:
            self.selection_label.setText(f"{len(selected_ids)} product(s) selected")
        else:
            self.selection_label.setText("No selection")

    def on_coordinates_changed(self, x, y):
        scale = self.engine.scale
        if scale > 0:
            self.coord_label.setText(f"X: {format_measurement(x / scale)}  Y: {format_measurement(y / scale)}")

    def update_status(self):
        self.mode_label.setText(f"Current Tool: {self.engine.mode.value.title()}")
        self.scale_label.setText(f"Zoom {self.engine.zoom * 100:.0f}%  {self.engine.scale_manager.scale_string}")

    def zoom_by(self, factor):
        self.engine.set_zoom(self.engine.zoom * factor)
        self.update_status()

    # ---------------------- History ----------------------
    def record_history(self):
        if self._restoring:
            return
        self.history.save_state(self.engine.get_entities())
        self.update_history_actions()

    def restore(self, snapshot):
        if snapshot is None:
            return
        self._restoring = True
        try:
            self.engine.load_entities(snapshot)
        finally:
            self._restoring = False
        self.update_history_actions()

    def undo(self):
        self.restore(self.history.undo())

    def redo(self):
        self.restore(self.history.redo())

    def update_history_actions(self):
        self.undo_action.setEnabled(self.history.can_undo)
        self.redo_action.setEnabled(self.history.can_redo)

    # ---------------------- Plans ----------------------
    def save_plan(self):
        name, ok = QInputDialog.getText(self, "Save Plan", "Plan name:", text="Floor Plan")
        if not ok or not name:
            return
        try:
            self.current_plan_id = self.plan_manager.save_plan(
                name,
                self.engine.get_entities(),
                scale=self.engine.scale,
                grid_size_mm=self.engine.grid_size_mm,
                plan_id=self.current_plan_id,
            )
            self.statusBar().showMessage(f"Saved '{name}'", 3000)
        except Exception as e:
            debug_logger.error('FloorPlannerWindow', "Save failed", e)
            QMessageBox.critical(self, "Error", f"Failed to save plan:\n{str(e)}")

    def open_plan(self):
        plans = self.plan_manager.list_plans()
        if not plans:
            QMessageBox.information(self, "Open Plan", "No saved plans.")
            return
        labels = [f"{p['id']}: {p['name']}" for p in plans]
        choice, ok = QInputDialog.getItem(self, "Open Plan", "Plan:", labels, 0, False)
        if not ok:
            return
        plan = self.plan_manager.load_plan(plans[labels.index(choice)]['id'])
        if plan is None:
            return
        # Stored coordinates belong to the saved scale
        self.engine.set_zoom(1.0)
        self.engine.set_scale(plan['scale'])
        self.engine.set_grid_size(plan['grid_size_mm'])
        self.sync_grid_combo()
        self.engine.load_entities(plan['entities'])
        self.current_plan_id = plan['id']
        self.update_status()

    def clear_plan(self):
        reply = QMessageBox.question(self, "Clear Plan", "Remove every element from the plan?",
                                     QMessageBox.Yes | QMessageBox.No)
        if reply == QMessageBox.Yes:
            self.engine.clear_all()

    def export_png(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export PNG", "floor_plan.png", "PNG Images (*.png)")
        if not path:
            return
        if not self.canvas.grab().save(path, "PNG"):
            QMessageBox.warning(self, "Export", f"Could not write {path}")
