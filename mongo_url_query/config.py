import os

# Umgebungsvariablen abrufen
MAX_LIMIT = int(os.getenv("URL_QUERY_MAX_LIMIT", "250"))
DEFAULT_SORT_FIELD = os.getenv("URL_QUERY_SORT_FIELD", "updatedAt")
DEFAULT_SORT_DIR = os.getenv("URL_QUERY_SORT_DIR", "desc")
TENANT_FIELD = os.getenv("URL_QUERY_TENANT_FIELD", "shopDomain")
SOURCE_FIELD = os.getenv("URL_QUERY_SOURCE_FIELD", "_sourceType")

DEBUG = os.getenv("DEBUG", "0")
LOG_FILE = os.getenv("LOG_FILE")
LOKI_URL = os.getenv("LOKI_URL", "http://loki:3100/loki/api/v1/push")
LOKI_USER = os.getenv("LOKI_USER", "username")
LOKI_PASSWORD = os.getenv("LOKI_PASSWORD", "password")
