import uvicorn

from devmate.main import app
from devmate.utils.config import settings

if __name__ == '__main__':
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
