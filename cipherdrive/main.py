import uvicorn

from cipherdrive.configs.settings import settings
from cipherdrive.configs.setup import create_app

app = create_app()


if __name__ == "__main__":
    uvicorn.run("cipherdrive.main:app", host=settings.app_host, port=settings.app_port, reload=settings.APP_DEBUG)
