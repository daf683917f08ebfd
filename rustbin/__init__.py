"""rustbin - Cargo 原生库预编译产物命名与解析"""

__version__ = "0.1.0"
