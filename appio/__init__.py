# ================================
# file: appio/__init__.py
# ================================
from appio.logger import DataLogger, load_json

__all__ = ["DataLogger", "load_json"]
