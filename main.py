"""
命令行入口: 从世界文件生成二维占用栅格地图
功能：
  - 世界加载 → 触发生成 → 发布（写 JSON）→ 可选绘图
  - 配置加载、参数管理、日志与异常处理
"""
import argparse
import logging
import sys

from occmap.common.config import load_config
from occmap.common.errors import MapGenerationError
from occmap.host.map_service import JsonFileSink, MapService
from occmap.world.box_world import load_world


def setup_logger(level=logging.INFO):
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=level
    )
    return logging.getLogger("occmap")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="从三维世界生成二维占用栅格地图")
    parser.add_argument('--world', required=True, help='JSON 世界文件路径')
    parser.add_argument('--config', help='JSON 配置文件路径')
    parser.add_argument('--output', help='地图 JSON 输出路径（覆盖配置中的 publish.output）')
    parser.add_argument('--plot', help='地图图片输出路径（PNG）')
    parser.add_argument('--log-level', help='日志级别，如 DEBUG / INFO')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        cfg = load_config(args.config)
    except MapGenerationError as e:
        print(f"配置加载失败: {e}")
        return 1

    level_name = (args.log_level or cfg["logging"]["level"]).upper()
    logger = setup_logger(getattr(logging, level_name, logging.INFO))
    logger.info("启动地图生成")

    try:
        world = load_world(args.world)
    except MapGenerationError as e:
        logger.error(f"世界加载失败: {e}")
        return 1
    logger.info(f"已加载世界 {args.world}，共 {len(world.boxes)} 个长方体")

    service = MapService(world, cfg)
    output = args.output or cfg["publish"].get("output")
    if output:
        service.publisher.subscribe(JsonFileSink(output))

    result = service.generate_map()
    if not result.ok:
        logger.error(f"地图生成失败: {result.error}")
        return 1

    grid = result.grid
    if args.plot:
        from occmap.mapping.visualize import plot_occupancy_grid
        plot_occupancy_grid(grid, path=args.plot)
        logger.info(f"地图图片已保存到 {args.plot}")

    counts = grid.counts()
    print(f"map {grid.width}x{grid.height} @ {grid.resolution} m: "
          f"free={counts['free']} occupied={counts['occupied']} unknown={counts['unknown']}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
