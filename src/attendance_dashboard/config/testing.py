import os

SECRET_KEY = "test-secret"

API_BASE_URL = os.getenv("API_BASE_URL", "http://testserver/api")
API_TIMEOUT = 1.0

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"
