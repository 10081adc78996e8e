import multiprocessing
import os

# App factory; create_app() refuses to start without OPENAI_API_KEY
wsgi_app = "app:create_app()"

# Bind / workers / threads. Workers share DATA_DIR; storage writes take a file lock.
bind = os.getenv("BIND", "0.0.0.0:10000")
workers = int(os.getenv("WEB_CONCURRENCY", str(max(2, multiprocessing.cpu_count() // 2))))
threads = int(os.getenv("WEB_THREADS", "4"))

# Worker class & timeouts. Generation calls have no timeout of their own;
# this is the only bound on a slow upstream.
worker_class = "gthread"
timeout = int(os.getenv("WEB_TIMEOUT", "120"))
graceful_timeout = int(os.getenv("WEB_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("WEB_KEEPALIVE", "5"))

# Logging
loglevel = os.getenv("LOG_LEVEL", "info")
accesslog = "-"   # stdout
errorlog = "-"    # stderr
capture_output = True

# Security / proxy
forwarded_allow_ips = "*"

# Preload so a missing credential fails the master before forking
preload_app = True

def post_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)

def when_ready(server):
    server.log.info("Gunicorn is ready. Spawning workers")

def worker_abort(worker):
    worker.log.info("Worker received SIGABRT signal")
