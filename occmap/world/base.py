"""
世界查询接口：地图生成只依赖“线段 A→B 是否碰到几何体”这一能力
"""
from abc import ABC

from occmap.common.types import Point3, RayHit


class WorldQuery(ABC):
    """
    只读的世界查询能力，显式传入 CellOccupancyProbe。

    实现要求：
    - 同步返回，线段上没有碰撞几何体时 entity 为空字符串
    - 能够被高频调用（每次生成约 20 × cells_x × cells_y 次）
    - 无法回答时抛出 QueryFailure
    """

    def intersect(self, point_a: Point3, point_b: Point3) -> RayHit:
        raise NotImplementedError
