import pytest
import numpy as np
from collections import Counter
from occmap.common.types import GridConfig
from occmap.mapping.cell_probe import CellOccupancyProbe
from occmap.world.box_world import Box, BoxWorld


def cell_box(name, cx, cy, resolution=1.0, half_size=5.0, margin=0.05, z=(-1.0, 1.0)):
    """创建覆盖栅格 (cx, cy) 的长方体（四周留 margin，避免与邻居探测射线擦边）"""
    x0 = -half_size + cx * resolution
    y0 = -half_size + cy * resolution
    return Box(name,
               (x0 + margin, y0 + margin, z[0]),
               (x0 + resolution - margin, y0 + resolution - margin, z[1]))


class RecordingProbe(CellOccupancyProbe):
    """记录每个栅格中心被探测次数的探测器"""

    def __init__(self, world, steps=10, pattern="perimeter"):
        super().__init__(world, steps=steps, pattern=pattern)
        self.calls = Counter()

    def is_occupied(self, center, cell_length):
        self.calls[(round(center[0], 6), round(center[1], 6))] += 1
        return super().is_occupied(center, cell_length)


@pytest.fixture
def grid_config():
    """Return a 10x10 m map at 1.0 m resolution, centred on the origin"""
    return GridConfig(resolution=1.0, origin=(0.0, 0.0, 0.0), size_x=10.0, size_y=10.0,
                      start_x=0.0, start_y=0.0)

@pytest.fixture
def empty_world():
    """Return a world without any collision geometry"""
    return BoxWorld()

@pytest.fixture
def pocket_world():
    """Return a world with a closed ring of boxes around cell (7, 7)"""
    boxes = [cell_box(f"ring_{cx}_{cy}", cx, cy)
             for cx in range(6, 9) for cy in range(6, 9) if (cx, cy) != (7, 7)]
    return BoxWorld(boxes)

@pytest.fixture
def cluttered_world():
    """Return a world with a wall, a pocket and a few scattered obstacles"""
    boxes = [Box("wall", (-2.95, -5.0, -1.0), (-2.05, 2.0, 1.0))]
    boxes += [cell_box(f"ring_{cx}_{cy}", cx, cy)
              for cx in range(6, 9) for cy in range(6, 9) if (cx, cy) != (7, 7)]
    boxes.append(Box("crate", (1.2, -3.8, -0.5), (1.6, -3.2, 0.5)))
    boxes.append(Box("post", (-0.4, 3.6, -1.0), (-0.2, 3.8, 1.0)))
    return BoxWorld(boxes)

@pytest.fixture
def recording_probe_factory():
    """Return a RecordingProbe constructor"""
    return RecordingProbe

@pytest.fixture
def rng():
    """Return a seeded random generator"""
    return np.random.default_rng(42)
