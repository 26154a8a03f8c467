# gunicorn.conf.py
import os

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))  # schaalbaar via env
threads = int(os.getenv("WEB_THREADS", "4"))      # idem
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "lms_media.main:app"
preload_app = False
# part-uploads lopen buiten de server om; requests zijn kort
timeout = 30
graceful_timeout = 30
keepalive = 5
max_requests = 1000
max_requests_jitter = 100
accesslog = "-"
errorlog = "-"
loglevel = "info"
