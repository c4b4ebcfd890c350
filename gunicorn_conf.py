import multiprocessing

# Gunicorn configuration file
# Run with: gunicorn -c gunicorn_conf.py task_tracker.main:app

bind = "0.0.0.0:8000"

# Standard formula: (2 x num_cores) + 1
# Refresh tokens live in the database, so any worker can serve any request
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "uvicorn.workers.UvicornWorker"

timeout = 120
keepalive = 5

accesslog = "-"
errorlog = "-"
loglevel = "info"

name = "task_tracker_api"
reload = False  # Set to True for development only
