"""
单元占用探测：仅用点到点射线求交判断一个栅格是否与障碍物相交

算法原理：

【嵌套方框】
• 以栅格中心为中心，边长 side = cell_length * step / steps，step = 1..steps
• 从小到大依次检测，较小的方框用来捕获完全落在栅格内部的小物体

【射线布置】
• perimeter（默认）：方框的四条边，每层 4 条射线，同心方框覆盖栅格内部
• diagonal：方框的两条对角线（"X" 形），每层 2 条射线；各层对角线共线，内部小物体可能漏检

【判定】
• 任意一条射线命中实体（名称非空）即判定为占用，立即返回
• 全部射线未命中则判定为空闲
• 射线位于固定高度切片 z 上，由地图原点 z 给出
"""
from typing import Iterator, Tuple

from occmap.common.errors import ConfigurationError
from occmap.common.types import Point3
from occmap.world.base import WorldQuery

PROBE_PATTERNS = ("diagonal", "perimeter")

Segment = Tuple[Point3, Point3]


class CellOccupancyProbe:
    def __init__(self, world: WorldQuery, steps: int = 10, pattern: str = "perimeter"):
        """
        :param world: 世界查询接口，提供 intersect(a, b)
        :param steps: 嵌套方框层数
        :param pattern: 射线布置方式，"perimeter"（默认）或 "diagonal"
        """
        if steps < 1:
            raise ConfigurationError(f"steps 必须 ≥ 1，实际为 {steps}")
        if pattern not in PROBE_PATTERNS:
            raise ConfigurationError(f"未知的探测方式: {pattern}")
        self.world = world
        self.steps = steps
        self.pattern = pattern
        self.query_count = 0

    @property
    def rays_per_cell(self) -> int:
        return self.steps * (2 if self.pattern == "diagonal" else 4)

    def rays(self, center: Point3, cell_length: float) -> Iterator[Segment]:
        """按从小到大的顺序生成一个栅格的全部探测线段"""
        cx, cy, cz = center
        for step in range(1, self.steps + 1):
            half = cell_length * step / self.steps / 2
            if self.pattern == "diagonal":
                yield (cx - half, cy - half, cz), (cx + half, cy + half, cz)
                yield (cx - half, cy + half, cz), (cx + half, cy - half, cz)
            else:
                # 起点 (i, -i)，终点 (j, j)，i, j ∈ {-1, 1}，恰好是方框的四条边
                for i in (-1, 1):
                    start = (cx + i * half, cy - i * half, cz)
                    for j in (-1, 1):
                        yield start, (cx + j * half, cy + j * half, cz)

    def is_occupied(self, center: Point3, cell_length: float) -> bool:
        """
        判断以 center 为中心、边长 cell_length 的栅格是否被占用

        :param center: 栅格中心 [x, y, z]
        :param cell_length: 栅格边长（米）
        :return: True 表示占用
        """
        for point_a, point_b in self.rays(center, cell_length):
            self.query_count += 1
            if self.world.intersect(point_a, point_b).hit:
                return True
        return False
