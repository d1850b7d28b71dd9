import uvicorn

from clinic.config import settings
from init_app import init_app

if __name__ == "__main__":
    init_app()

    if settings.STORE_BACKEND == "database":
        uvicorn.run("clinic.main:app", log_level="debug", reload=True)
    else:
        # the in-memory store only lives in this process, so no reloader
        from clinic.main import app

        uvicorn.run(app, log_level="debug")
