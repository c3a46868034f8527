import uvicorn

from kosmos_notifications.core.config import DEBUG, HOST, LOG_LEVEL, PORT


def main():
    uvicorn.run(
        "kosmos_notifications.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
        log_level=LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
