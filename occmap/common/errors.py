"""地图生成相关的异常类型"""


class MapGenerationError(Exception):
    """地图生成失败的基类"""
    pass


class ConfigurationError(MapGenerationError):
    """配置错误：参数非法，或起始位姿落在地图范围之外（不重试，直接中止）"""
    pass


class QueryFailure(MapGenerationError):
    """世界查询（射线求交）无法给出结果"""
    pass


class MapServiceBusy(MapGenerationError):
    """已有一次地图生成正在进行，新的请求被拒绝"""
    pass
