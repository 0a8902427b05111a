import uvicorn

from corsware.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "corsware.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
