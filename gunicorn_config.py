import multiprocessing

# Gunicorn Production Configuration
# Workers: (2x CPU Count) + 1; each request waits on the store, so IO-bound
workers = multiprocessing.cpu_count() * 2 + 1
threads = 2
worker_class = 'gthread'

# Store calls use the transport default timeout; keep the worker limit above it
timeout = 60
max_requests = 1000
max_requests_jitter = 100
keepalive = 5

# Logging
accesslog = '-'       # Stdout
errorlog = '-'        # Stderr
loglevel = 'info'
capture_output = True
