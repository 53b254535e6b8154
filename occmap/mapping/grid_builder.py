"""
栅格地图装配：分配全未知缓冲区，记录分辨率/原点/尺寸等元数据，生成结束后冻结交付
"""
import time
from typing import Optional

import numpy as np

from occmap.common.errors import MapGenerationError
from occmap.common.types import CellState, GridConfig, OccupancyGrid


class GridBuilder:
    def __init__(self, frame_id: str = "odom"):
        self.frame_id = frame_id

    def allocate(self, config: GridConfig, stamp: Optional[float] = None) -> OccupancyGrid:
        """
        分配 (cells_y, cells_x) 的栅格，所有栅格初始为 UNKNOWN

        :param config: 地图参数
        :param stamp: 生成时间戳，默认当前时间
        """
        data = np.full((config.cells_y, config.cells_x), CellState.UNKNOWN, dtype=np.int8)
        return OccupancyGrid(
            data=data,
            config=config,
            frame_id=self.frame_id,
            stamp=time.time() if stamp is None else stamp,
        )

    def finalize(self, grid: OccupancyGrid) -> OccupancyGrid:
        """
        检查生成结果并冻结缓冲区，之后只读交付给发布端

        :raises MapGenerationError: 仍有 FRONTIER 栅格（波前扩展未完成）
        """
        pending = grid.count(CellState.FRONTIER)
        if pending:
            raise MapGenerationError(f"仍有 {pending} 个栅格处于 FRONTIER 状态")
        grid.data.setflags(write=False)
        return grid
