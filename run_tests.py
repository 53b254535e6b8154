#!/usr/bin/env python3
"""
占用栅格地图生成 - 测试入口

按测试套件、标记或验收场景挑选 pytest 用例，一次调用 pytest 运行：

    python run_tests.py                     # 全部测试（跳过 slow）
    python run_tests.py --all               # 全部测试 + 覆盖率 + HTML/JSON 报告
    python run_tests.py -m unit             # 只跑单元测试
    python run_tests.py --suite wavefront   # 只跑 tests/test_wavefront.py
    python run_tests.py --scenario C D      # 只跑验收场景 C、D
    python run_tests.py --list              # 列出可用套件与场景

报告：reports/test-report.html、reports/test-results.json、htmlcov/index.html
"""

import argparse
import subprocess
import sys
import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
TESTS_DIR = PROJECT_ROOT / "tests"
REPORTS_DIR = PROJECT_ROOT / "reports"

MARKERS = ("unit", "integration", "performance")

# 验收场景 → pytest -k 表达式
SCENARIOS = {
    "A": "test_empty_world_all_free",
    "B": "test_single_obstacle_cell or test_enclosed_pocket_stays_unknown",
    "C": "start_outside",
    "D": "thin_wall",
}


def discover_suites():
    """tests/test_<name>.py → {name: path}"""
    return {path.stem[len("test_"):]: path for path in sorted(TESTS_DIR.glob("test_*.py"))}


def build_command(args, suites):
    """根据命令行参数拼出 pytest 命令"""
    cmd = [sys.executable, "-m", "pytest", "-v" if args.verbose else "-q"]

    if args.suite:
        cmd += [str(suites[name].relative_to(PROJECT_ROOT)) for name in args.suite]
    else:
        cmd.append(str(TESTS_DIR.relative_to(PROJECT_ROOT)))

    marker_expr = " or ".join(args.marker) if args.marker else ""
    if not (args.slow or args.all):
        marker_expr = f"({marker_expr}) and not slow" if marker_expr else "not slow"
    if marker_expr:
        cmd += ["-m", marker_expr]

    if args.scenario:
        cmd += ["-k", " or ".join(f"({SCENARIOS[s]})" for s in args.scenario)]

    if args.jobs:
        cmd += ["-n", str(args.jobs)]

    if args.coverage or args.all:
        cmd += ["--cov=occmap", "--cov-report=term-missing", "--cov-report=html:htmlcov"]

    if args.all:
        REPORTS_DIR.mkdir(exist_ok=True)
        cmd += [
            f"--html={REPORTS_DIR / 'test-report.html'}",
            "--self-contained-html",
            "--json-report",
            f"--json-report-file={REPORTS_DIR / 'test-results.json'}",
        ]
    return cmd


def print_catalogue(suites):
    print("📦 测试套件 (--suite):")
    for name, path in suites.items():
        print(f"  {name:<20} {path.relative_to(PROJECT_ROOT)}")
    print("\n🎯 验收场景 (--scenario):")
    for name, expr in SCENARIOS.items():
        print(f"  {name}  -k \"{expr}\"")


def parse_args(argv, suites):
    parser = argparse.ArgumentParser(
        description="🗺️ 占用栅格地图生成测试工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="等价的 pytest 命令会在运行前打印出来，可直接复制调试",
    )
    parser.add_argument('--all', action='store_true', help='全部测试（含 slow）+ 覆盖率 + 报告')
    parser.add_argument('-m', '--marker', nargs='+', choices=MARKERS, help='按标记筛选，可多选')
    parser.add_argument('--suite', nargs='+', choices=sorted(suites), help='只运行指定的测试文件')
    parser.add_argument('--scenario', nargs='+', choices=sorted(SCENARIOS), type=str.upper,
                        help='只运行指定的验收场景')
    parser.add_argument('--slow', action='store_true', help='包含 slow 标记的测试（默认跳过）')
    parser.add_argument('--coverage', action='store_true', help='生成覆盖率报告')
    parser.add_argument('-j', '--jobs', type=int, help='pytest-xdist 并行进程数')
    parser.add_argument('-v', '--verbose', action='store_true', help='详细输出')
    parser.add_argument('--list', action='store_true', help='列出测试套件与验收场景后退出')
    return parser.parse_args(argv)


def main(argv=None):
    suites = discover_suites()
    args = parse_args(argv, suites)

    if not suites:
        print(f"❌ {TESTS_DIR} 下没有 test_*.py")
        return 1
    if args.list:
        print_catalogue(suites)
        return 0

    cmd = build_command(args, suites)
    print(f"📁 工作目录: {PROJECT_ROOT}")
    print(f"▶️  {' '.join(cmd)}")

    start = time.time()
    returncode = subprocess.run(cmd, cwd=PROJECT_ROOT).returncode
    duration = time.time() - start

    if returncode == 0:
        print(f"\n✅ 测试通过 (耗时 {duration:.1f}s)")
        if args.coverage or args.all:
            print("📋 覆盖率报告: htmlcov/index.html")
        if args.all:
            print(f"📄 报告目录: {REPORTS_DIR}")
    else:
        print(f"\n❌ 测试失败 (退出码 {returncode}, 耗时 {duration:.1f}s)")
    return returncode


if __name__ == "__main__":
    sys.exit(main())
