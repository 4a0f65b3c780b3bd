"""
HOA Complaints Server Runner
============================
Run this directly: python run_server.py
Host, port and storage backend come from the environment / .env file.
"""
import uvicorn

from hoa_complaints.core.config import get_settings


def main():
    settings = get_settings()

    print()
    print("=" * 60)
    print(f"  {settings.app_name.upper()} SERVER v{settings.app_version}")
    print("=" * 60)
    print()
    print(f"  Storage:   {settings.storage_backend}")
    print(f"  API Docs:  http://localhost:{settings.port}/docs")
    print()
    print("  Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "hoa_complaints.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        workers=1,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
