"""
占用栅格可视化：UNKNOWN 灰色、FREE 白色、OCCUPIED 黑色，坐标轴为世界坐标
"""
import matplotlib.pyplot as plt
from matplotlib.colors import BoundaryNorm, ListedColormap
import numpy as np

from occmap.common.types import CellState, OccupancyGrid

_CMAP = ListedColormap(['#9e9e9e', 'white', '#4fc3f7', 'black'])
_NORM = BoundaryNorm([-1.5, -0.5, 25, 75, 101], _CMAP.N)


def plot_occupancy_grid(grid: OccupancyGrid, ax=None, path=None, show_start: bool = True):
    """
    绘制占用栅格地图

    :param grid: 生成好的占用栅格
    :param ax: 可选的 matplotlib Axes，为 None 时新建图窗
    :param path: 保存路径，为 None 时不保存
    :param show_start: 是否标出起始位姿
    :return: 使用的 Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))
    ox, oy, _ = grid.map_origin
    extent = [ox, ox + grid.width * grid.resolution, oy, oy + grid.height * grid.resolution]
    # data 第 0 行对应 cy = 0，即地图最下方
    ax.imshow(np.asarray(grid.data), cmap=_CMAP, norm=_NORM, origin='lower',
              extent=extent, interpolation='nearest')
    if show_start:
        ax.plot(grid.config.start_x, grid.config.start_y, 'r*', markersize=12, label='start')
        ax.legend(loc='upper right')

    counts = grid.counts()
    ax.set_title(f"{grid.width}×{grid.height} @ {grid.resolution} m  "
                 f"free={counts['free']} occupied={counts['occupied']} unknown={counts['unknown']}")
    ax.set_xlabel('x (m)')
    ax.set_ylabel('y (m)')
    ax.set_aspect('equal')

    if path is not None:
        ax.figure.savefig(path, dpi=150, bbox_inches='tight')
    return ax


def occupancy_image(grid: OccupancyGrid) -> np.ndarray:
    """转换为 uint8 灰度图（FREE=254, OCCUPIED=0, UNKNOWN=205），行序自上而下"""
    image = np.full(grid.data.shape, 205, dtype=np.uint8)
    image[grid.data == CellState.FREE] = 254
    image[grid.data == CellState.OCCUPIED] = 0
    return np.flipud(image)
