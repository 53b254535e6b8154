"""
统一接口 - 从三维仿真世界生成二维占用栅格地图
"""
from occmap.common.config import DEFAULT_CONFIG, load_config, grid_config_from_dict
from occmap.common.errors import ConfigurationError, MapGenerationError, MapServiceBusy, QueryFailure
from occmap.common.types import CellState, GridConfig, OccupancyGrid, RayHit
from occmap.host.map_service import JsonFileSink, MapPublisher, MapService
from occmap.mapping.map_builder import GenerationResult, build_map, build_map_from_config
from occmap.world.base import WorldQuery
from occmap.world.box_world import Box, BoxWorld, load_world

__version__ = "0.1.0"


def create_default_service(world: WorldQuery) -> MapService:
    """
    创建使用默认配置的地图服务

    Args:
        world: 世界查询接口

    Returns:
        配置好的 MapService
    """
    return MapService(world, load_config())
