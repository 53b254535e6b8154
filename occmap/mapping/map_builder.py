"""
地图生成主流程：整合栅格分配、波前扩展和单元占用探测
"""
from dataclasses import dataclass
import logging
from typing import Optional, Sequence, Tuple

from occmap.common.config import grid_config_from_dict, load_config
from occmap.common.errors import MapGenerationError
from occmap.common.types import GridConfig, OccupancyGrid
from occmap.mapping.cell_probe import CellOccupancyProbe
from occmap.mapping.grid_builder import GridBuilder
from occmap.mapping.wavefront import MOORE_OFFSETS, WavefrontClassifier, WavefrontStats
from occmap.world.base import WorldQuery

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """一次地图生成的结果：成功时 grid 非空，失败时 error 非空"""
    grid: Optional[OccupancyGrid] = None
    error: Optional[MapGenerationError] = None
    stats: Optional[WavefrontStats] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.grid is not None


def build_map(world: WorldQuery, config: GridConfig, frame_id: str = "odom",
              probe_steps: int = 10, probe_pattern: str = "perimeter",
              neighbor_offsets: Sequence[Tuple[int, int]] = MOORE_OFFSETS,
              stamp: Optional[float] = None) -> GenerationResult:
    """
    地图构建主流程

    处理流水线：
    1. GridBuilder 分配全未知栅格
    2. WavefrontClassifier 从起始栅格泛洪，逐个探测新发现的邻居
    3. GridBuilder 检查并冻结结果

    起始位姿越界或世界查询失败时不产生地图，错误通过 result.error 返回。

    :param world: 世界查询接口
    :param config: 地图参数
    :param frame_id: 地图坐标系名称
    :param probe_steps: 嵌套探测方框层数
    :param probe_pattern: 射线布置方式
    :param neighbor_offsets: 邻域访问顺序
    :param stamp: 地图时间戳
    :return: GenerationResult
    """
    builder = GridBuilder(frame_id=frame_id)
    grid = builder.allocate(config, stamp=stamp)
    try:
        probe = CellOccupancyProbe(world, steps=probe_steps, pattern=probe_pattern)
        classifier = WavefrontClassifier(probe, neighbor_offsets=neighbor_offsets)
        stats = classifier.classify(grid)
        grid = builder.finalize(grid)
    except MapGenerationError as e:
        logger.error(f"地图生成失败: {e}")
        return GenerationResult(error=e)

    logger.info(f"Occupancy Map generation completed: {grid.width}x{grid.height}, "
                f"free={stats.free}, occupied={stats.occupied}, unknown={stats.unknown}, "
                f"queries={stats.queries}, {stats.elapsed:.2f}s")
    return GenerationResult(grid=grid, stats=stats)


def build_map_from_config(world: WorldQuery, cfg: Optional[dict] = None) -> GenerationResult:
    """按 load_config 返回的配置字典生成地图，cfg 为 None 时使用默认配置"""
    if cfg is None:
        cfg = load_config()
    probe_cfg = cfg.get("probe", {})
    try:
        config = grid_config_from_dict(cfg)
    except MapGenerationError as e:
        logger.error(f"地图参数错误: {e}")
        return GenerationResult(error=e)
    return build_map(
        world,
        config,
        frame_id=cfg.get("map", {}).get("frame_id", "odom"),
        probe_steps=probe_cfg.get("steps", 10),
        probe_pattern=probe_cfg.get("pattern", "perimeter"),
    )
