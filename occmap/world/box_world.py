"""
内存中的长方体世界：由若干命名的轴对齐三维长方体构成的碰撞几何

用途：
- 命令行工具从 JSON 世界文件加载场景，离线生成地图
- 测试中构造确定的障碍物布局
"""
import json
from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np

from occmap.common.errors import ConfigurationError, QueryFailure
from occmap.common.types import Point3, RayHit
from occmap.world.base import WorldQuery


@dataclass(frozen=True)
class Box:
    """轴对齐长方体：min_corner / max_corner 为 [x, y, z]"""
    name: str
    min_corner: Point3
    max_corner: Point3

    @classmethod
    def from_center(cls, name: str, center: Sequence[float], size: Sequence[float]) -> "Box":
        c = np.asarray(center, dtype=float)
        half = np.asarray(size, dtype=float) / 2
        return cls(name, tuple((c - half).tolist()), tuple((c + half).tolist()))


class BoxWorld(WorldQuery):
    """
    长方体世界的射线求交

    算法：slab 法。线段参数化为 p(t) = a + t·(b - a), t ∈ [0, 1]，
    对每个轴求进入/离开该轴区间的 t，三轴交集非空即相交；
    返回最近一个被击中长方体的名称和距离。
    """

    def __init__(self, boxes: Iterable[Box] = ()):
        self.boxes: List[Box] = []
        self.query_count = 0
        self._mins = np.empty((0, 3))
        self._maxs = np.empty((0, 3))
        for box in boxes:
            self.add_box(box)

    def add_box(self, box: Box):
        mins = np.minimum(box.min_corner, box.max_corner)
        maxs = np.maximum(box.min_corner, box.max_corner)
        self.boxes.append(box)
        self._mins = np.vstack([self._mins, mins])
        self._maxs = np.vstack([self._maxs, maxs])

    def intersect(self, point_a: Point3, point_b: Point3) -> RayHit:
        self.query_count += 1
        a = np.asarray(point_a, dtype=float)
        b = np.asarray(point_b, dtype=float)
        if a.shape != (3,) or b.shape != (3,) or not (np.all(np.isfinite(a)) and np.all(np.isfinite(b))):
            raise QueryFailure(f"非法射线端点: {point_a} -> {point_b}")

        d = b - a
        length = float(np.linalg.norm(d))
        if not self.boxes:
            return RayHit(distance=length)

        parallel = d == 0
        d_safe = np.where(parallel, 1.0, d)
        t1 = (self._mins - a) / d_safe
        t2 = (self._maxs - a) / d_safe
        # 与某轴平行时，只要起点落在该轴区间内就不构成约束
        inside = (a >= self._mins) & (a <= self._maxs)
        t_near = np.where(parallel, np.where(inside, -np.inf, np.inf), np.minimum(t1, t2))
        t_far = np.where(parallel, np.where(inside, np.inf, -np.inf), np.maximum(t1, t2))

        enter = np.maximum(t_near.max(axis=1), 0.0)
        leave = np.minimum(t_far.min(axis=1), 1.0)
        hits = np.flatnonzero(enter <= leave)
        if hits.size == 0:
            return RayHit(distance=length)

        nearest = hits[np.argmin(enter[hits])]
        return RayHit(distance=float(enter[nearest]) * length, entity=self.boxes[nearest].name)

    @classmethod
    def from_dict(cls, world_cfg: dict) -> "BoxWorld":
        """
        从字典构造世界

        每个长方体可用 center/size 或 min/max 描述：
        ```json
        {"boxes": [
            {"name": "wall_north", "center": [0, 4.5, 0.5], "size": [10, 0.2, 1]},
            {"name": "table", "min": [1, 1, 0], "max": [2, 1.5, 0.8]}
        ]}
        ```
        """
        world = cls()
        for i, entry in enumerate(world_cfg.get("boxes", [])):
            name = entry.get("name") or f"box_{i}"
            try:
                if "center" in entry:
                    box = Box.from_center(name, entry["center"], entry["size"])
                else:
                    box = Box(name, tuple(map(float, entry["min"])), tuple(map(float, entry["max"])))
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"长方体 {name} 描述错误: {e}")
            if len(box.min_corner) != 3 or len(box.max_corner) != 3:
                raise ConfigurationError(f"长方体 {name} 必须是三维的")
            world.add_box(box)
        return world


def load_world(path) -> BoxWorld:
    """从 JSON 世界文件加载长方体世界"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            world_cfg = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"世界文件加载失败: {e}")
    return BoxWorld.from_dict(world_cfg)
