import asyncio
import logging

from aiohttp import web

from config import PORT
from api import create_app

logger = logging.getLogger(__name__)


async def main():
    app = create_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, '0.0.0.0', port=PORT)
    await site.start()
    logger.info(f"✅ API phòng khám đã khởi động tại cổng {PORT}.")
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()

def run():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Đã dừng API.")

if __name__ == "__main__":
    run()
