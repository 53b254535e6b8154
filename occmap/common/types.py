"""公共数据类型定义

这个模块定义了地图生成流程中共用的数据结构，主要用于：
1. 栅格地图参数（分辨率、原点、尺寸、起始位姿）的统一描述
2. 栅格状态编码与占用栅格地图本身
3. 世界查询（射线求交）结果在模块间的传递
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, Optional, Tuple
import math
import time

import numpy as np

from occmap.common.errors import ConfigurationError

Point3 = Tuple[float, float, float]


class CellState(IntEnum):
    """栅格状态

    数值与导航地图消息中的编码一致：
    - UNKNOWN = -1：未探索（或从起点不可达）
    - FREE = 0：空闲可通行
    - FRONTIER = 50：已入队、等待扩展（仅在生成过程中出现）
    - OCCUPIED = 100：被障碍物占据
    """
    UNKNOWN = -1
    FREE = 0
    FRONTIER = 50
    OCCUPIED = 100


@dataclass(frozen=True)
class GridConfig:
    """栅格地图生成参数（生成前一次性给定，不可变）

    主要用于：
    1. coordinate_mapper 中世界坐标 ↔ 栅格坐标 ↔ 线性索引的换算
    2. grid_builder 分配栅格缓冲区并记录地图元数据
    3. wavefront 确定泛洪的种子栅格

    使用示例：
    ```python
    config = GridConfig(
        resolution=0.1,          # 每个栅格 0.1 米
        origin=(0.0, 0.0, 0.3),  # 地图中心，z 为射线切片高度
        size_x=10.0,             # 地图宽 10 米
        size_y=10.0,             # 地图高 10 米
        start_x=0.0,             # 机器人初始位置（保证空闲）
        start_y=0.0,
    )
    ```
    """
    resolution: float = 0.1
    origin: Point3 = (0.0, 0.0, 0.0)
    size_x: float = 10.0
    size_y: float = 10.0
    start_x: float = 0.0
    start_y: float = 0.0

    def __post_init__(self):
        try:
            origin = tuple(float(v) for v in self.origin)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"地图原点格式错误: {e}")
        if len(origin) != 3:
            raise ConfigurationError(f"地图原点必须为 [x, y, z]，实际为 {self.origin}")
        object.__setattr__(self, 'origin', origin)
        values = (self.resolution, self.size_x, self.size_y, self.start_x, self.start_y) + origin
        if not all(math.isfinite(v) for v in values):
            raise ConfigurationError(f"地图参数必须是有限值，实际为 {self}")
        if not self.resolution > 0:
            raise ConfigurationError(f"分辨率必须大于 0，实际为 {self.resolution}")
        if not (self.size_x > 0 and self.size_y > 0):
            raise ConfigurationError(f"地图尺寸必须大于 0，实际为 ({self.size_x}, {self.size_y})")
        spans = (self.size_x, self.size_y,
                 self.start_x - origin[0] + self.size_x / 2, self.start_y - origin[1] + self.size_y / 2)
        if not all(math.isfinite(v / self.resolution) for v in spans):
            raise ConfigurationError(f"分辨率 {self.resolution} 过小，地图参数换算为栅格坐标时溢出")
        if self.cells_x == 0 or self.cells_y == 0:
            raise ConfigurationError("地图尺寸小于一个栅格")

    @property
    def cells_x(self) -> int:
        # 真除法后截断，10.0 / 0.1 得到 100 而不是 99
        return int(self.size_x / self.resolution)

    @property
    def cells_y(self) -> int:
        return int(self.size_y / self.resolution)

    @property
    def slice_z(self) -> float:
        """射线求交所在的水平切片高度，取原点 z"""
        return self.origin[2]


@dataclass
class RayHit:
    """一次射线求交的结果：entity 为空字符串表示线段上没有碰撞几何体"""
    distance: float
    entity: str = ""

    @property
    def hit(self) -> bool:
        return bool(self.entity)


@dataclass
class OccupancyGrid:
    """占用栅格地图

    data 为 (cells_y, cells_x) 的 int8 数组，按行优先存储 CellState 编码；
    线性索引 index = cy * cells_x + cx 与 data.flat 一一对应。
    """
    data: np.ndarray
    config: GridConfig
    frame_id: str = "odom"
    stamp: float = field(default_factory=time.time)

    @property
    def width(self) -> int:
        return self.config.cells_x

    @property
    def height(self) -> int:
        return self.config.cells_y

    @property
    def resolution(self) -> float:
        return self.config.resolution

    @property
    def map_origin(self) -> Point3:
        """地图 (0, 0) 栅格左下角的世界坐标"""
        ox, oy, oz = self.config.origin
        return (ox - self.config.size_x / 2, oy - self.config.size_y / 2, oz)

    def state_at(self, cx: int, cy: int) -> CellState:
        return CellState(int(self.data[cy, cx]))

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self.data == state))

    def counts(self) -> Dict[str, int]:
        """各状态的栅格数量"""
        return {state.name.lower(): self.count(state) for state in CellState}

    def to_message(self, stamp: Optional[float] = None) -> dict:
        """转换为发布用的消息字典（header / info / data）"""
        ox, oy, oz = self.map_origin
        return {
            'header': {
                'frame_id': self.frame_id,
                'stamp': self.stamp if stamp is None else stamp,
            },
            'info': {
                'map_load_time': 0.0,
                'resolution': self.resolution,
                'width': self.width,
                'height': self.height,
                'origin': {
                    'position': {'x': ox, 'y': oy, 'z': oz},
                    'orientation': {'x': 0.0, 'y': 0.0, 'z': 0.0, 'w': 1.0},
                },
            },
            'data': [int(v) for v in self.data.ravel()],
        }
