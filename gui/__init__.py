# ================================
# file: gui/__init__.py
# ================================
from gui.visualizer import Visualizer, select_backend

__all__ = ["Visualizer", "select_backend"]
