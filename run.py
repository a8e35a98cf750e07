"""
MetroFlow 服务入口
运行: python run.py
访问: http://localhost:8000/docs
"""
import os
import sys
from pathlib import Path

import uvicorn
from dotenv import load_dotenv


def check_data():
    """线路数据文件检查"""
    lines_path = Path(os.getenv("LINES_PATH", "data/lines.json"))
    if not lines_path.exists():
        print(f"[WARN]  线路数据文件不存在: {lines_path}")
        print("热力图与客流接口将不可用。")
        print()


def main():
    """主函数"""
    load_dotenv()

    print("=" * 60)
    print("MetroFlow - 深圳地铁实时客流模拟")
    print("=" * 60)
    print()

    check_data()

    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    reload = os.getenv("RELOAD", "False").lower() == "true"

    print(f"[*] 服务地址: http://{host}:{port}")
    print(f"[*] 项目目录: {Path.cwd()}")
    print(f"[*] 自动重启: {'启用' if reload else '关闭'}")
    print()
    print("按 Ctrl+C 停止服务。")
    print("=" * 60)
    print()

    try:
        uvicorn.run(
            "api.app:app",
            host=host,
            port=port,
            reload=reload,
            reload_dirs=["api", "src"],
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
        )
    except KeyboardInterrupt:
        print("\n\n[*] 服务已停止。")
    except Exception as e:
        print(f"\n[ERROR] 服务运行出错: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
