import multiprocessing

# Gunicorn Production Configuration
# Usage: gunicorn -c gunicorn_config.py wsgi:app
#
# Session tokens live in process memory, so every worker keeps its own
# store. Run a single worker (scale with threads) unless the session
# store is moved out of process.
workers = 1
threads = multiprocessing.cpu_count() * 2 + 1
worker_class = 'gthread'

# Resilience
timeout = 120
max_requests = 1000
max_requests_jitter = 100
keepalive = 5

# Logging
accesslog = '-'       # Stdout
errorlog = '-'        # Stderr
loglevel = 'info'
capture_output = True
