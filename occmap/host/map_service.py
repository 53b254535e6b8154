"""
地图服务：触发接口 + 发布接口

- MapService.generate_map()：无参数触发，同步完成一次完整的地图生成，成功后发布
- MapPublisher：锁存式发布，保留最近一张地图，新订阅者立即收到
同一时间只允许一次生成在进行，重叠的请求直接拒绝。
"""
import json
import logging
import threading
from typing import Callable, List, Optional

from occmap.common.config import load_config
from occmap.common.errors import MapServiceBusy
from occmap.common.types import OccupancyGrid
from occmap.mapping.map_builder import GenerationResult, build_map_from_config
from occmap.world.base import WorldQuery

logger = logging.getLogger(__name__)

Subscriber = Callable[[OccupancyGrid], None]


class MapPublisher:
    """锁存式地图发布器（fire-and-forget，订阅者异常只记录不传播）"""

    def __init__(self, topic: str = "map2d", latch: bool = True):
        self.topic = topic
        self.latch = latch
        self._lock = threading.Lock()
        self._subscribers: List[Subscriber] = []
        self._latest: Optional[OccupancyGrid] = None

    def subscribe(self, callback: Subscriber):
        with self._lock:
            self._subscribers.append(callback)
            latest = self._latest if self.latch else None
        if latest is not None:
            self._deliver(callback, latest)

    def unsubscribe(self, callback: Subscriber):
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def publish(self, grid: OccupancyGrid):
        with self._lock:
            self._latest = grid
            subscribers = list(self._subscribers)
        for callback in subscribers:
            self._deliver(callback, grid)

    def latest(self) -> Optional[OccupancyGrid]:
        with self._lock:
            return self._latest

    def has_map(self) -> bool:
        return self.latest() is not None

    def _deliver(self, callback: Subscriber, grid: OccupancyGrid):
        try:
            callback(grid)
        except Exception as e:
            logger.error(f"[{self.topic}] 订阅者处理地图失败: {e}", exc_info=True)


class JsonFileSink:
    """订阅者：把收到的地图消息写成 JSON 文件"""

    def __init__(self, path):
        self.path = path
        self.written = 0

    def __call__(self, grid: OccupancyGrid):
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(grid.to_message(), f)
        self.written += 1
        logger.info(f"地图已写入 {self.path}")


class MapService:
    def __init__(self, world: WorldQuery, cfg: Optional[dict] = None,
                 publisher: Optional[MapPublisher] = None):
        """
        :param world: 世界查询接口
        :param cfg: 完整配置字典（见 occmap.common.config.DEFAULT_CONFIG），为 None 时使用默认配置的副本
        :param publisher: 发布器，默认按配置中的 topic 新建
        """
        self.world = world
        self.cfg = cfg if cfg is not None else load_config()
        topic = self.cfg.get("publish", {}).get("topic", "map2d")
        self.publisher = publisher if publisher is not None else MapPublisher(topic)
        self._running = threading.Lock()

    def generate_map(self) -> GenerationResult:
        """
        触发一次地图生成

        :return: GenerationResult；已有生成在进行时返回 MapServiceBusy 错误
        """
        if not self._running.acquire(blocking=False):
            logger.warning("地图生成正在进行，拒绝新的请求")
            return GenerationResult(error=MapServiceBusy("已有地图生成请求在处理中"))
        try:
            result = build_map_from_config(self.world, self.cfg)
        finally:
            self._running.release()

        if result.ok:
            self.publisher.publish(result.grid)
        return result

    def is_busy(self) -> bool:
        return self._running.locked()
