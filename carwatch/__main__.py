# carwatch/__main__.py
import uvicorn

from .config import HOST, PORT


def main():
    uvicorn.run("carwatch.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
