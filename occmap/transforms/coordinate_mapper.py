"""
坐标换算模块：世界坐标 ↔ 栅格坐标 ↔ 线性索引

约定：
- 栅格 (cx, cy) 的世界坐标指其左下角，地图以 config.origin 为中心
- 线性索引按行优先：index = cy * cells_x + cx
- 所有越界判断都经过 cell_to_index / index_to_cell，越界返回 None
"""
from typing import Optional, Tuple

from occmap.common.types import GridConfig


def grid_dimensions(config: GridConfig) -> Tuple[int, int]:
    """返回栅格行列数 (cells_x, cells_y)"""
    return config.cells_x, config.cells_y


def cell_to_world(cx: int, cy: int, config: GridConfig) -> Tuple[float, float]:
    """
    栅格坐标 → 世界坐标（栅格左下角）

    :param cx: 栅格 x 索引
    :param cy: 栅格 y 索引
    :param config: 地图参数
    :return: (wx, wy)
    """
    wx = (config.origin[0] - config.size_x / 2) + cx * config.resolution
    wy = (config.origin[1] - config.size_y / 2) + cy * config.resolution
    return wx, wy


def cell_center(cx: int, cy: int, config: GridConfig) -> Tuple[float, float]:
    """栅格坐标 → 栅格中心的世界坐标，占用探测以此为中心"""
    wx, wy = cell_to_world(cx, cy, config)
    half = config.resolution / 2
    return wx + half, wy + half


def world_to_cell(wx: float, wy: float, config: GridConfig) -> Tuple[int, int]:
    """
    世界坐标 → 栅格坐标

    向零截断而非四舍五入：落在 (-1, 0) 个栅格内的坐标也会映射到 0。
    结果可能越界，由调用者通过 cell_to_index 判断。

    :return: (cx, cy)
    """
    cx = int((wx - config.origin[0] + config.size_x / 2) / config.resolution)
    cy = int((wy - config.origin[1] + config.size_y / 2) / config.resolution)
    return cx, cy


def cell_to_index(cx: int, cy: int, cells_x: int, cells_y: int) -> Optional[int]:
    """
    栅格坐标 → 线性索引

    :return: 线性索引；栅格越界时返回 None
    """
    if 0 <= cx < cells_x and 0 <= cy < cells_y:
        return cy * cells_x + cx
    return None


def index_to_cell(index: int, cells_x: int, cells_y: int) -> Optional[Tuple[int, int]]:
    """
    线性索引 → 栅格坐标

    :return: (cx, cy)；索引超出 cells_x * cells_y 范围时返回 None
    """
    if index < 0:
        return None
    cy, cx = divmod(index, cells_x)
    if 0 <= cx < cells_x and 0 <= cy < cells_y:
        return cx, cy
    return None
