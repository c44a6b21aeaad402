import asyncio
import uvicorn

from shared.core.config import settings


async def start_servers():
    # Auth service
    config1 = uvicorn.Config(
        "auth_service.app.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server1 = uvicorn.Server(config1)

    # Marketplace service (products, orders, group orders)
    config2 = uvicorn.Config(
        "marketplace_service.app.main:app",
        host="0.0.0.0",
        port=8002,
        reload=True,
        log_level=settings.LOG_LEVEL.lower(),
    )
    server2 = uvicorn.Server(config2)

    # Run both servers concurrently
    await asyncio.gather(
        server1.serve(),
        server2.serve(),
    )

if __name__ == "__main__":
    try:
        asyncio.run(start_servers())
    except KeyboardInterrupt:
        print("\nShutting down servers...")
