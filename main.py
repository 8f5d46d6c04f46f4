import uvicorn

from api.app import app
from api.config import HOST, PORT


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT, log_level="info")
