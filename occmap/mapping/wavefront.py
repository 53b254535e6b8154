"""
波前扩展：从已知空闲的起始栅格出发做广度优先泛洪，对每个可达栅格恰好分类一次

状态转移（每个栅格最多离开 UNKNOWN 一次）：
  UNKNOWN → FRONTIER（入队）→ FREE（出队扩展）
  UNKNOWN → OCCUPIED（探测命中，终态，不入队）
从起点不可达的栅格保持 UNKNOWN。
"""
from collections import deque
from dataclasses import dataclass
import logging
import time
from typing import Callable, Optional, Sequence, Tuple

from occmap.common.errors import ConfigurationError
from occmap.common.types import CellState, OccupancyGrid
from occmap.mapping.cell_probe import CellOccupancyProbe
from occmap.transforms.coordinate_mapper import (
    cell_center, cell_to_index, index_to_cell, world_to_cell
)

logger = logging.getLogger(__name__)

# 8 邻域偏移 (dx, dy)，按 {-1,0,1}×{-1,0,1} 行优先排列，去掉 (0, 0)
MOORE_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)


@dataclass
class WavefrontStats:
    """一次波前扩展的统计信息"""
    start_cell: Tuple[int, int]
    expanded: int = 0
    probed: int = 0
    free: int = 0
    occupied: int = 0
    unknown: int = 0
    queries: int = 0
    elapsed: float = 0.0


class WavefrontClassifier:
    def __init__(self, probe: CellOccupancyProbe,
                 neighbor_offsets: Sequence[Tuple[int, int]] = MOORE_OFFSETS,
                 progress: Optional[Callable[[WavefrontStats, int], None]] = None,
                 progress_interval: int = 1000):
        """
        :param probe: 单元占用探测器
        :param neighbor_offsets: 邻域偏移及访问顺序，最终分类结果与顺序无关
        :param progress: 进度回调 progress(stats, queue_length)，每扩展 progress_interval 个栅格调用一次
        """
        self.probe = probe
        self.neighbor_offsets = tuple(neighbor_offsets)
        self.progress = progress
        self.progress_interval = max(1, progress_interval)

    def classify(self, grid: OccupancyGrid) -> WavefrontStats:
        """
        在 grid 上执行波前扩展，原地写入分类结果

        :param grid: 由 GridBuilder 分配的全 UNKNOWN 栅格
        :return: 统计信息
        :raises ConfigurationError: 起始位姿落在地图范围之外
        """
        config = grid.config
        cells_x, cells_y = config.cells_x, config.cells_y
        cells = grid.data.reshape(-1)
        t0 = time.time()
        queries_before = self.probe.query_count

        start_cell = world_to_cell(config.start_x, config.start_y, config)
        start_index = cell_to_index(start_cell[0], start_cell[1], cells_x, cells_y)
        if start_index is None:
            logger.error("initial robot pos is outside map, could not create map "
                         f"(start=({config.start_x}, {config.start_y}), cell={start_cell})")
            raise ConfigurationError(
                f"起始位姿 ({config.start_x}, {config.start_y}) 对应栅格 {start_cell} "
                f"超出地图范围 {cells_x}×{cells_y}")

        stats = WavefrontStats(start_cell=start_cell)
        logger.info(f"Starting wavefront expansion for mapping from cell {start_cell}")

        wavefront = deque([start_index])
        while wavefront:
            index = wavefront.popleft()
            cx, cy = index_to_cell(index, cells_x, cells_y)
            cells[index] = CellState.FREE
            stats.expanded += 1

            for dx, dy in self.neighbor_offsets:
                nx, ny = cx + dx, cy + dy
                child_index = cell_to_index(nx, ny, cells_x, cells_y)
                if child_index is None:
                    continue
                # 只处理未知栅格，FRONTIER 标记保证每个栅格只入队一次
                if cells[child_index] != CellState.UNKNOWN:
                    continue
                wx, wy = cell_center(nx, ny, config)
                stats.probed += 1
                if self.probe.is_occupied((wx, wy, config.slice_z), config.resolution):
                    cells[child_index] = CellState.OCCUPIED
                else:
                    cells[child_index] = CellState.FRONTIER
                    wavefront.append(child_index)

            if self.progress is not None and stats.expanded % self.progress_interval == 0:
                self.progress(stats, len(wavefront))
            if stats.expanded % self.progress_interval == 0:
                logger.debug(f"wavefront: expanded={stats.expanded}, queue={len(wavefront)}")

        stats.free = grid.count(CellState.FREE)
        stats.occupied = grid.count(CellState.OCCUPIED)
        stats.unknown = grid.count(CellState.UNKNOWN)
        stats.queries = self.probe.query_count - queries_before
        stats.elapsed = time.time() - t0
        return stats
