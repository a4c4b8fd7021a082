import logging
import logging.handlers
import logging_loki
import queue
import os

from . import config


class LoggerManager:
    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(LoggerManager, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        if LoggerManager._initialized:
            return
        LoggerManager._initialized = True

        self.log_queue = queue.Queue(200)

        self.queue_handler = logging.handlers.QueueHandler(self.log_queue)

        self.log_format = '%(asctime)s - %(name)-20s - WORKER %(process)-3s - %(module)-25s - %(levelname)-7s - %(message)s'
        formatter = logging.Formatter(self.log_format)

        self.stream_handler = logging.StreamHandler()
        self.stream_handler.setFormatter(formatter)
        self.stream_handler.setLevel(logging.DEBUG if config.DEBUG == "1" else logging.INFO)

        listener_handlers = [self.stream_handler]

        # Datei nur schreiben, wenn ein Pfad konfiguriert ist
        if config.LOG_FILE:
            self.file_handler = logging.handlers.TimedRotatingFileHandler(
                filename=config.LOG_FILE,
                when="midnight",
                backupCount=10,
                encoding="utf-8",
                delay=True,
            )
            self.file_handler.setFormatter(formatter)
            listener_handlers.append(self.file_handler)

        self.listener = logging.handlers.QueueListener(
            self.log_queue, *listener_handlers, respect_handler_level=True
        )
        self.listener.start()

        self.handlers = [self.queue_handler]

        if config.DEBUG == "1":
            loki_handler = logging_loki.LokiHandler(
                url=config.LOKI_URL,
                tags={"application": "mongo_url_query", "worker": self.get_pid_of_process()},
                auth=(config.LOKI_USER, config.LOKI_PASSWORD),
                version="1",
            )
            self.handlers.append(loki_handler)

    def get_logger(self, name: str = "UrlQuery"):
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)

        # Handler nur einmal hinzufügen
        for handler in self.handlers:
            if handler not in logger.handlers:
                logger.addHandler(handler)

        return logger

    def stop_listener(self):
        self.listener.stop()

    def get_pid_of_process(self) -> int:
        return os.getpid()
