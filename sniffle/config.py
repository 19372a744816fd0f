import os


class Config:
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024  # 5 MiB multipart limit
    API_BASE_PATH = ""
    PORT = 5000
    LOG_LEVEL = "INFO"

    # CORS
    CORS_METHODS = ["POST", "GET", "OPTIONS", "PUT", "DELETE"]
    CORS_HEADERS = [
        "Accept",
        "Content-Type",
        "Content-Length",
        "Authorization",
        "X-CSRF-Token",
        "Accept-Encoding",
    ]

    @staticmethod
    def init_app(app):
        os.makedirs(app.instance_path, exist_ok=True)

        if not os.getenv("DATABASE_URL"):
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'app.db')}"
        else:
            app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL")

        app.config["RECEIPT_DIRECTORY"] = os.getenv(
            "RECEIPT_DIRECTORY", os.path.join(app.instance_path, "uploads")
        )
        app.config["API_BASE_PATH"] = os.getenv("API_BASE_PATH", Config.API_BASE_PATH).rstrip("/")
        app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", Config.LOG_LEVEL).upper()

        port = os.getenv("PORT")
        if port:
            try:
                app.config["PORT"] = int(port)
            except ValueError:
                app.logger.warning("ignoring non-numeric PORT=%r, using %d", port, Config.PORT)
