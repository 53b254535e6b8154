"""
配置加载：默认参数 + JSON 配置文件覆盖
"""
import copy
import json

from occmap.common.errors import ConfigurationError
from occmap.common.types import GridConfig

# 默认配置，可通过 --config 指定 JSON 文件覆盖
DEFAULT_CONFIG = {
    "map": {
        "map_resolution": 0.1,       # 栅格分辨率 (米/格)
        "map_origin": [0.0, 0.0, 0.0],  # 地图中心，z 为射线切片高度
        "init_robot_x": 0.0,         # 机器人初始位置，泛洪种子
        "init_robot_y": 0.0,
        "map_size_x": 10.0,          # 地图尺寸 (米)
        "map_size_y": 10.0,
        "frame_id": "odom"
    },
    "probe": {
        "steps": 10,                 # 嵌套探测方框的层数
        "pattern": "perimeter"       # "perimeter" 或 "diagonal"
    },
    "publish": {
        "topic": "map2d",
        "output": None               # 地图 JSON 输出路径，None 表示不写文件
    },
    "logging": {"level": "INFO"}
}


def merge_config(base: dict, override: dict) -> dict:
    """递归合并配置字典，override 中的值优先"""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=None) -> dict:
    """
    读取 JSON 配置文件并与默认配置合并

    :param path: 配置文件路径，为 None 时直接返回默认配置的副本
    :return: 合并后的配置字典
    :raises ConfigurationError: 文件不存在或不是合法 JSON
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            user_cfg = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"配置加载失败: {e}")
    if not isinstance(user_cfg, dict):
        raise ConfigurationError("配置文件顶层必须是 JSON 对象")
    return merge_config(DEFAULT_CONFIG, user_cfg)


def grid_config_from_dict(cfg: dict) -> GridConfig:
    """
    从配置字典的 "map" 段构造 GridConfig

    :param cfg: load_config 返回的完整配置
    :return: 不可变的 GridConfig
    """
    map_cfg = merge_config(DEFAULT_CONFIG["map"], cfg.get("map", {}))
    try:
        return GridConfig(
            resolution=float(map_cfg["map_resolution"]),
            origin=tuple(map_cfg["map_origin"]),
            size_x=float(map_cfg["map_size_x"]),
            size_y=float(map_cfg["map_size_y"]),
            start_x=float(map_cfg["init_robot_x"]),
            start_y=float(map_cfg["init_robot_y"]),
        )
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigurationError(f"地图参数错误: {e}")
